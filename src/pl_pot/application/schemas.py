"""Pydantic schemas for pl_pot API."""

from pydantic import BaseModel, Field

from src.pl_common.cents import cents_to_display
from src.pl_pot.domain.models import OPEN_SEAT, SharedPotGame
from src.pl_settlement.application.schemas import SettlementRecordOut


class CreatePotGameRequest(BaseModel):
    max_seats: int = Field(..., description="Seats in the game; bounds come from settings")
    entry_fee_cents: int = Field(..., gt=0)
    name: str = Field("", max_length=100)


class CompletePotGameRequest(BaseModel):
    winner_seat: int = Field(..., ge=1)


class SeatOut(BaseModel):
    number: int
    player_id: str | None


class PotGameResponse(BaseModel):
    id: str
    name: str
    status: str
    max_seats: int
    current_players: int
    entry_fee_cents: int
    entry_fee_display: str
    pot_cents: int
    pot_display: str
    seats: list[SeatOut]
    winner_seat: int | None

    @classmethod
    def from_domain(cls, game: SharedPotGame) -> "PotGameResponse":
        return cls(
            id=game.id,
            name=game.name,
            status=game.status.value,
            max_seats=game.max_seats,
            current_players=game.current_players,
            entry_fee_cents=game.entry_fee_cents,
            entry_fee_display=cents_to_display(game.entry_fee_cents),
            pot_cents=game.pot_cents,
            pot_display=cents_to_display(game.pot_cents),
            seats=[
                SeatOut(number=i + 1, player_id=None if s == OPEN_SEAT else s)
                for i, s in enumerate(game.seats)
            ],
            winner_seat=game.winner_seat,
        )


class PotPayoutResponse(BaseModel):
    game: PotGameResponse
    seat: int
    player_id: str
    settlement: SettlementRecordOut
