"""Shared-pot game accumulator.

join() fills the lowest open seat; the join that takes the last seat also
flips the game to ACTIVE in the same returned snapshot.
"""

import logging
from dataclasses import replace
from datetime import datetime

from src.pl_common.cents import validate_amount
from src.pl_common.enums import PotGameStatus
from src.pl_common.errors import GameFullError, InvalidSeatError, PotGameStateError
from src.pl_pot.domain.models import OPEN_SEAT, PotPayout, PotRules, SharedPotGame

logger = logging.getLogger(__name__)

DEFAULT_POT_RULES = PotRules()


def create_game(
    game_id: str,
    max_seats: int,
    entry_fee_cents: int,
    now: datetime,
    rules: PotRules = DEFAULT_POT_RULES,
    name: str = "",
) -> SharedPotGame:
    validate_amount(entry_fee_cents)
    if not (rules.min_seats <= max_seats <= rules.max_seats):
        raise InvalidSeatError(
            f"max_seats {max_seats} must be in [{rules.min_seats}, {rules.max_seats}]"
        )
    return SharedPotGame(
        id=game_id,
        max_seats=max_seats,
        entry_fee_cents=entry_fee_cents,
        seats=(OPEN_SEAT,) * max_seats,
        name=name,
        created_at=now,
    )


def join_game(game: SharedPotGame, player_id: str, now: datetime) -> SharedPotGame:
    if game.status != PotGameStatus.OPEN or OPEN_SEAT not in game.seats:
        raise GameFullError(game.id)
    if not player_id:
        raise InvalidSeatError("a seat needs a player id")
    if player_id in game.seats:
        raise InvalidSeatError(f"player {player_id} already holds a seat in game {game.id}")
    index = game.seats.index(OPEN_SEAT)
    seats = game.seats[:index] + (player_id,) + game.seats[index + 1:]
    if OPEN_SEAT in seats:
        return replace(game, seats=seats)
    active = replace(game, seats=seats, status=PotGameStatus.ACTIVE, activated_at=now)
    logger.info("Pot game %s is full: seats=%d pot=%d", game.id, active.max_seats, active.pot_cents)
    return active


def complete_game(game: SharedPotGame, winner_seat: int, now: datetime) -> PotPayout:
    """Close an active game; the whole pot goes to the winning seat."""
    if game.status != PotGameStatus.ACTIVE:
        raise PotGameStateError(game.id, game.status.value, "complete")
    if not (1 <= winner_seat <= game.max_seats):
        raise InvalidSeatError(f"seat {winner_seat} does not exist in game {game.id}")
    player_id = game.seats[winner_seat - 1]
    if player_id == OPEN_SEAT:
        raise InvalidSeatError(f"seat {winner_seat} in game {game.id} is empty")
    completed = replace(
        game, status=PotGameStatus.COMPLETED, winner_seat=winner_seat, completed_at=now
    )
    return PotPayout(
        game=completed,
        seat=winner_seat,
        player_id=player_id,
        amount_cents=completed.pot_cents,
    )
