"""PlayerRepository — concrete implementation of PlayerRepositoryProtocol.

Ladder writes are compare-and-swap on players.version: the UPDATE only
matches the row the caller read. Zero rows means someone else moved the
player first and the whole transition must be retried from a fresh read.
"""

import logging
from collections.abc import Sequence

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pl_common.enums import Division, MembershipTier
from src.pl_common.errors import ConcurrentModificationError
from src.pl_ladder.domain.models import HIGH_DIVISION_MIN_RATING, Player

logger = logging.getLogger(__name__)

_COLUMNS = "id, name, rating, points, streak, respect_points, membership_tier, version"

_GET_PLAYER_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM players
    WHERE id = :player_id
""")

_GET_PLAYERS_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM players
    WHERE id = ANY(CAST(:player_ids AS TEXT[]))
""")

# Division is derived from rating; ordering by id keeps the stable rank sort deterministic
_LIST_DIVISION_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM players
    WHERE (rating >= :min_rating) = :high
    ORDER BY points DESC, id ASC
""")

_UPDATE_STANDING_SQL = text(f"""
    UPDATE players
    SET points = :points,
        streak = :streak,
        version = version + 1,
        updated_at = NOW()
    WHERE id = :player_id AND version = :expected_version
    RETURNING {_COLUMNS}
""")


def _row_to_player(row: object) -> Player:
    return Player(
        id=row.id,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        rating=row.rating,  # type: ignore[attr-defined]
        points=row.points,  # type: ignore[attr-defined]
        streak=row.streak,  # type: ignore[attr-defined]
        respect_points=row.respect_points,  # type: ignore[attr-defined]
        membership_tier=MembershipTier(row.membership_tier),  # type: ignore[attr-defined]
        version=row.version,  # type: ignore[attr-defined]
    )


class PlayerRepository:
    async def get_player(self, db: AsyncSession, player_id: str) -> Player | None:
        result = await db.execute(_GET_PLAYER_SQL, {"player_id": player_id})
        row = result.fetchone()
        return _row_to_player(row) if row else None

    async def get_players(
        self, db: AsyncSession, player_ids: Sequence[str]
    ) -> list[Player]:
        if not player_ids:
            return []
        result = await db.execute(_GET_PLAYERS_SQL, {"player_ids": list(player_ids)})
        return [_row_to_player(row) for row in result.fetchall()]

    async def list_division(self, db: AsyncSession, division: Division) -> list[Player]:
        result = await db.execute(
            _LIST_DIVISION_SQL,
            {"min_rating": HIGH_DIVISION_MIN_RATING, "high": division == Division.HIGH},
        )
        return [_row_to_player(row) for row in result.fetchall()]

    async def update_standing(self, db: AsyncSession, player: Player) -> Player:
        """Write points and streak; `player.version` is the version that was read."""
        result = await db.execute(
            _UPDATE_STANDING_SQL,
            {
                "player_id": player.id,
                "points": player.points,
                "streak": player.streak,
                "expected_version": player.version,
            },
        )
        row = result.fetchone()
        if row is None:
            logger.warning("Player CAS conflict: player=%s version=%d", player.id, player.version)
            raise ConcurrentModificationError("Player", player.id)
        return _row_to_player(row)
