"""PotGameRepository — concrete implementation of PotGameRepositoryProtocol.

Seats and status are written in the same CAS UPDATE, so the row can never
be observed full and still OPEN. The pot itself is not a column; it is
recomputed from the seats on every read.
"""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pl_common.enums import PotGameStatus
from src.pl_common.errors import ConcurrentModificationError, InternalError
from src.pl_pot.domain.models import SharedPotGame

logger = logging.getLogger(__name__)

_COLUMNS = """
    id, name, max_seats, entry_fee_cents, seats, status, winner_seat, version,
    created_at, activated_at, completed_at
"""

_GET_GAME_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM pot_games
    WHERE id = :game_id
""")

_INSERT_GAME_SQL = text(f"""
    INSERT INTO pot_games
        (id, name, max_seats, entry_fee_cents, seats, status, created_at)
    VALUES
        (:id, :name, :max_seats, :entry_fee_cents, CAST(:seats AS TEXT[]), :status, :created_at)
    RETURNING {_COLUMNS}
""")

_UPDATE_GAME_SQL = text(f"""
    UPDATE pot_games
    SET seats = CAST(:seats AS TEXT[]),
        status = :status,
        winner_seat = CAST(:winner_seat AS INTEGER),
        activated_at = CAST(:activated_at AS TIMESTAMPTZ),
        completed_at = CAST(:completed_at AS TIMESTAMPTZ),
        version = version + 1,
        updated_at = NOW()
    WHERE id = :game_id AND version = :expected_version
    RETURNING {_COLUMNS}
""")


def _row_to_game(row: object) -> SharedPotGame:
    return SharedPotGame(
        id=row.id,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        max_seats=row.max_seats,  # type: ignore[attr-defined]
        entry_fee_cents=row.entry_fee_cents,  # type: ignore[attr-defined]
        seats=tuple(row.seats),  # type: ignore[attr-defined]
        status=PotGameStatus(row.status),  # type: ignore[attr-defined]
        winner_seat=row.winner_seat,  # type: ignore[attr-defined]
        version=row.version,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        activated_at=row.activated_at,  # type: ignore[attr-defined]
        completed_at=row.completed_at,  # type: ignore[attr-defined]
    )


class PotGameRepository:
    async def get_game(self, db: AsyncSession, game_id: str) -> SharedPotGame | None:
        result = await db.execute(_GET_GAME_SQL, {"game_id": game_id})
        row = result.fetchone()
        return _row_to_game(row) if row else None

    async def insert_game(self, db: AsyncSession, game: SharedPotGame) -> SharedPotGame:
        result = await db.execute(
            _INSERT_GAME_SQL,
            {
                "id": game.id,
                "name": game.name,
                "max_seats": game.max_seats,
                "entry_fee_cents": game.entry_fee_cents,
                "seats": list(game.seats),
                "status": game.status.value,
                "created_at": game.created_at,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Pot game insert returned no rows")
        return _row_to_game(row)

    async def update_game(self, db: AsyncSession, game: SharedPotGame) -> SharedPotGame:
        result = await db.execute(
            _UPDATE_GAME_SQL,
            {
                "game_id": game.id,
                "seats": list(game.seats),
                "status": game.status.value,
                "winner_seat": game.winner_seat,
                "activated_at": game.activated_at,
                "completed_at": game.completed_at,
                "expected_version": game.version,
            },
        )
        row = result.fetchone()
        if row is None:
            logger.warning("Pot game CAS conflict: game=%s version=%d", game.id, game.version)
            raise ConcurrentModificationError("Pot game", game.id)
        return _row_to_game(row)
