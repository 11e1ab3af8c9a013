"""VenueRepository — concrete implementation of VenueRepositoryProtocol.

Unlock state and hall records are written together with one CAS UPDATE;
the CHECK constraint on venues keeps the audit pair consistent with the
flag even for writes that bypass this repository.
"""

import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pl_common.errors import ConcurrentModificationError
from src.pl_venue.domain.models import Venue

logger = logging.getLogger(__name__)

_COLUMNS = """
    id, name, wins, losses, points,
    battles_unlocked, unlocked_by, unlocked_at, version
"""

_GET_VENUE_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM venues
    WHERE id = :venue_id
""")

_UPDATE_VENUE_SQL = text(f"""
    UPDATE venues
    SET wins = :wins,
        losses = :losses,
        points = :points,
        battles_unlocked = :battles_unlocked,
        unlocked_by = :unlocked_by,
        unlocked_at = :unlocked_at,
        version = version + 1,
        updated_at = NOW()
    WHERE id = :venue_id AND version = :expected_version
    RETURNING {_COLUMNS}
""")


def _row_to_venue(row: object) -> Venue:
    return Venue(
        id=row.id,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        wins=row.wins,  # type: ignore[attr-defined]
        losses=row.losses,  # type: ignore[attr-defined]
        points=row.points,  # type: ignore[attr-defined]
        battles_unlocked=row.battles_unlocked,  # type: ignore[attr-defined]
        unlocked_by=row.unlocked_by,  # type: ignore[attr-defined]
        unlocked_at=row.unlocked_at,  # type: ignore[attr-defined]
        version=row.version,  # type: ignore[attr-defined]
    )


class VenueRepository:
    async def get_venue(self, db: AsyncSession, venue_id: str) -> Venue | None:
        result = await db.execute(_GET_VENUE_SQL, {"venue_id": venue_id})
        row = result.fetchone()
        return _row_to_venue(row) if row else None

    async def update_venue(self, db: AsyncSession, venue: Venue) -> Venue:
        result = await db.execute(
            _UPDATE_VENUE_SQL,
            {
                "venue_id": venue.id,
                "wins": venue.wins,
                "losses": venue.losses,
                "points": venue.points,
                "battles_unlocked": venue.battles_unlocked,
                "unlocked_by": venue.unlocked_by,
                "unlocked_at": venue.unlocked_at,
                "expected_version": venue.version,
            },
        )
        row = result.fetchone()
        if row is None:
            logger.warning("Venue CAS conflict: venue=%s version=%d", venue.id, venue.version)
            raise ConcurrentModificationError("Venue", venue.id)
        return _row_to_venue(row)
