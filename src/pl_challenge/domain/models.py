"""Challenge domain models — one shape for individual, team and hall matches.

challenger_id / opponent_id name the competing sides: a player id for
INDIVIDUAL, a team id for TEAM, a venue id for HALL. The *_members tuples
list the player ids fielded by each side (used for membership gating and
for the effective commission tier).
"""

from dataclasses import dataclass
from datetime import datetime

from src.pl_common.enums import CancelReason, ChallengeKind, ChallengeStatus
from src.pl_ladder.domain.models import LadderOutcome, LadderPolicy, Player
from src.pl_settlement.domain.models import SettlementResult

TEAM_SIZES = (2, 3, 5)


@dataclass(frozen=True)
class StakeRules:
    min_stake_cents: int = 1_000
    max_stake_cents: int = 1_000_000

    def __post_init__(self) -> None:
        if not (0 < self.min_stake_cents <= self.max_stake_cents):
            raise ValueError("Stake bounds must satisfy 0 < min <= max")


@dataclass(frozen=True)
class Challenge:
    id: str
    kind: ChallengeKind
    challenger_id: str
    stake_cents: int
    challenger_members: tuple[str, ...] = ()
    opponent_id: str | None = None
    opponent_members: tuple[str, ...] = ()
    status: ChallengeStatus = ChallengeStatus.OPEN
    operator_id: str | None = None
    requires_pro_membership: bool = False
    winner_id: str | None = None
    cancel_reason: CancelReason | None = None
    voided_by: str | None = None
    version: int = 0
    created_at: datetime | None = None
    accepted_at: datetime | None = None
    started_at: datetime | None = None
    completed_at: datetime | None = None
    cancelled_at: datetime | None = None

    def __post_init__(self) -> None:
        if (self.winner_id is not None) != (self.status == ChallengeStatus.COMPLETED):
            raise ValueError(f"Challenge {self.id}: winner is set iff status is COMPLETED")

    @property
    def participants(self) -> tuple[str, ...]:
        if self.opponent_id is None:
            return (self.challenger_id,)
        return (self.challenger_id, self.opponent_id)

    @property
    def members(self) -> tuple[str, ...]:
        return self.challenger_members + self.opponent_members

    @property
    def loser_id(self) -> str | None:
        if self.winner_id is None:
            return None
        return self.opponent_id if self.winner_id == self.challenger_id else self.challenger_id


@dataclass(frozen=True)
class LadderContext:
    """Division snapshot used to score an individual challenge."""

    players: tuple[Player, ...]
    policy: LadderPolicy = LadderPolicy()


@dataclass(frozen=True)
class CompletionResult:
    challenge: Challenge
    settlement: SettlementResult
    ladder: LadderOutcome | None = None


@dataclass(frozen=True)
class CancellationResult:
    challenge: Challenge
    refund_cents: int  # returned in full by the payment collaborator
