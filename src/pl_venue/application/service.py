"""VenueApplicationService — hall-battle unlock state.

Unlock and lock are single-row CAS updates; a lost race surfaces as
ConcurrentModificationError rather than a silently overwritten audit stamp.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.pl_common.actor import Actor
from src.pl_common.datetime_utils import utc_now
from src.pl_common.errors import VenueNotFoundError
from src.pl_venue.application.schemas import VenueResponse
from src.pl_venue.domain.access import lock_battles, unlock_battles
from src.pl_venue.domain.models import Venue
from src.pl_venue.domain.repository import VenueRepositoryProtocol
from src.pl_venue.infrastructure.persistence import VenueRepository


class VenueApplicationService:
    def __init__(self, repo: VenueRepositoryProtocol | None = None) -> None:
        self._repo: VenueRepositoryProtocol = repo or VenueRepository()

    async def _load(self, db: AsyncSession, venue_id: str) -> Venue:
        venue = await self._repo.get_venue(db, venue_id)
        if venue is None:
            raise VenueNotFoundError(venue_id)
        return venue

    async def get_venue(self, db: AsyncSession, venue_id: str) -> VenueResponse:
        return VenueResponse.from_domain(await self._load(db, venue_id))

    async def unlock(self, db: AsyncSession, venue_id: str, actor: Actor) -> VenueResponse:
        try:
            venue = await self._load(db, venue_id)
            saved = await self._repo.update_venue(db, unlock_battles(venue, actor, utc_now()))
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return VenueResponse.from_domain(saved)

    async def lock(self, db: AsyncSession, venue_id: str, actor: Actor) -> VenueResponse:
        try:
            venue = await self._load(db, venue_id)
            saved = await self._repo.update_venue(db, lock_battles(venue, actor, utc_now()))
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return VenueResponse.from_domain(saved)
