"""Pydantic schemas for pl_venue API responses."""

from pydantic import BaseModel

from src.pl_venue.domain.models import Venue


class VenueResponse(BaseModel):
    id: str
    name: str
    wins: int
    losses: int
    points: int
    battles_unlocked: bool
    unlocked_by: str | None
    unlocked_at: str | None

    @classmethod
    def from_domain(cls, venue: Venue) -> "VenueResponse":
        return cls(
            id=venue.id,
            name=venue.name,
            wins=venue.wins,
            losses=venue.losses,
            points=venue.points,
            battles_unlocked=venue.battles_unlocked,
            unlocked_by=venue.unlocked_by,
            unlocked_at=venue.unlocked_at.isoformat() if venue.unlocked_at else None,
        )
