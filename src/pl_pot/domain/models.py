"""Domain models for pl_pot — shared-pot side games (Kelly-pool style)."""

from dataclasses import dataclass
from datetime import datetime

from src.pl_common.enums import PotGameStatus

OPEN_SEAT = ""


@dataclass(frozen=True)
class PotRules:
    min_seats: int = 2
    max_seats: int = 15

    def __post_init__(self) -> None:
        if not (1 <= self.min_seats <= self.max_seats):
            raise ValueError("Seat bounds must satisfy 1 <= min <= max")


@dataclass(frozen=True)
class SharedPotGame:
    id: str
    max_seats: int
    entry_fee_cents: int
    # seats[i] is seat number i + 1: a player id, or OPEN_SEAT when unassigned
    seats: tuple[str, ...]
    status: PotGameStatus = PotGameStatus.OPEN
    name: str = ""
    winner_seat: int | None = None
    version: int = 0
    created_at: datetime | None = None
    activated_at: datetime | None = None
    completed_at: datetime | None = None

    def __post_init__(self) -> None:
        if len(self.seats) != self.max_seats:
            raise ValueError(f"Pot game {self.id}: expected {self.max_seats} seat markers")
        if (self.status == PotGameStatus.OPEN) == (self.current_players == self.max_seats):
            raise ValueError(f"Pot game {self.id}: status {self.status.value} disagrees with seats")

    @property
    def current_players(self) -> int:
        return sum(1 for s in self.seats if s != OPEN_SEAT)

    @property
    def pot_cents(self) -> int:
        """Never stored; always seats taken x entry fee."""
        return self.current_players * self.entry_fee_cents


@dataclass(frozen=True)
class PotPayout:
    game: SharedPotGame
    seat: int
    player_id: str
    amount_cents: int
