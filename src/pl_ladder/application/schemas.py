"""Pydantic schemas for pl_ladder API responses."""

from pydantic import BaseModel

from src.pl_ladder.domain.models import PlayerDelta, Standing


class StandingOut(BaseModel):
    position: int
    player_id: str
    name: str
    points: int
    streak: int
    rating: int
    respect_points: int
    membership_tier: str

    @classmethod
    def from_domain(cls, row: Standing) -> "StandingOut":
        p = row.player
        return cls(
            position=row.position,
            player_id=p.id,
            name=p.name,
            points=p.points,
            streak=p.streak,
            rating=p.rating,
            respect_points=p.respect_points,
            membership_tier=p.membership_tier.value,
        )


class StandingsResponse(BaseModel):
    division: str
    standings: list[StandingOut]


class PlayerDeltaOut(BaseModel):
    player_id: str
    points_delta: int
    streak_after: int
    streak_bonus_awarded: bool
    position_before: int
    position_after: int

    @classmethod
    def from_domain(cls, delta: PlayerDelta) -> "PlayerDeltaOut":
        return cls(
            player_id=delta.player_id,
            points_delta=delta.points_delta,
            streak_after=delta.streak_after,
            streak_bonus_awarded=delta.streak_bonus_awarded,
            position_before=delta.position_before,
            position_after=delta.position_after,
        )
