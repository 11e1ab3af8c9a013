"""Repository Protocol — dependency inversion for testability."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pl_venue.domain.models import Venue


class VenueRepositoryProtocol(Protocol):
    async def get_venue(self, db: AsyncSession, venue_id: str) -> Venue | None: ...

    async def update_venue(self, db: AsyncSession, venue: Venue) -> Venue: ...
