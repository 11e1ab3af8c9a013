"""Domain models for pl_ladder — frozen dataclasses.

Division is never stored: it is derived from rating on every read.
"""

from dataclasses import dataclass

from src.pl_common.enums import Division, MembershipTier

HIGH_DIVISION_MIN_RATING = 600
KING_DROP_MIN = 3
KING_DROP_MAX = 7


def division_for(rating: int) -> Division:
    return Division.HIGH if rating >= HIGH_DIVISION_MIN_RATING else Division.LOW


@dataclass(frozen=True)
class Player:
    id: str
    rating: int
    points: int = 0
    streak: int = 0           # consecutive wins, 0 after any loss
    respect_points: int = 0   # written by community events only
    membership_tier: MembershipTier = MembershipTier.NONE
    name: str = ""
    version: int = 0

    @property
    def division(self) -> Division:
        return division_for(self.rating)


@dataclass(frozen=True)
class LadderPolicy:
    win_points: int = 50
    loss_points: int = 20
    streak_bonus_points: int = 25
    streak_bonus_every: int = 3
    king_drop: int = KING_DROP_MIN

    def __post_init__(self) -> None:
        if not (KING_DROP_MIN <= self.king_drop <= KING_DROP_MAX):
            raise ValueError(
                f"king_drop must be within [{KING_DROP_MIN}, {KING_DROP_MAX}], got {self.king_drop}"
            )
        if self.streak_bonus_every < 1:
            raise ValueError("streak_bonus_every must be >= 1")
        if self.win_points < 0 or self.loss_points < 0 or self.streak_bonus_points < 0:
            raise ValueError("Point values must be non-negative")


@dataclass(frozen=True)
class Standing:
    player: Player
    position: int  # 1 + number of players with strictly more points


@dataclass(frozen=True)
class PlayerDelta:
    player_id: str
    points_delta: int
    streak_after: int
    streak_bonus_awarded: bool
    position_before: int
    position_after: int


@dataclass(frozen=True)
class LadderOutcome:
    winner: PlayerDelta
    loser: PlayerDelta
    winner_after: Player
    loser_after: Player
    king_dethroned: bool = False
