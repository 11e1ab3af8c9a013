"""Domain models for pl_venue — frozen dataclasses."""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Venue:
    id: str
    name: str
    wins: int = 0
    losses: int = 0
    points: int = 0
    battles_unlocked: bool = False
    unlocked_by: str | None = None
    unlocked_at: datetime | None = None
    version: int = 0

    def __post_init__(self) -> None:
        # Audit pair is all-or-nothing and mirrors the flag
        stamped = self.unlocked_by is not None
        if stamped != (self.unlocked_at is not None) or stamped != self.battles_unlocked:
            raise ValueError(
                f"Venue {self.id}: battles_unlocked, unlocked_by and unlocked_at must agree"
            )
