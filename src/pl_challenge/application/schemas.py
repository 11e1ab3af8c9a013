"""Pydantic schemas for pl_challenge API.

Stakes are integer cents. A team challenge may give either the total
stake or the per-player entry fee; the total is then fee x team size.
"""

from pydantic import BaseModel, Field, model_validator

from src.pl_challenge.domain.models import Challenge
from src.pl_challenge.domain.state_machine import allowed_actions
from src.pl_common.cents import cents_to_display
from src.pl_common.enums import CancelReason, ChallengeKind
from src.pl_ladder.application.schemas import PlayerDeltaOut
from src.pl_ladder.domain.models import LadderOutcome
from src.pl_settlement.application.schemas import SettlementRecordOut

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CreateChallengeRequest(BaseModel):
    kind: ChallengeKind = ChallengeKind.INDIVIDUAL
    stake_cents: int | None = Field(None, gt=0, description="Total stake in cents")
    per_player_fee_cents: int | None = Field(
        None, gt=0, description="Team challenges only: stake = fee x team size"
    )
    challenger_id: str | None = Field(
        None, description="Team or venue id; individual challenges always use the caller"
    )
    challenger_members: list[str] = Field(default_factory=list)
    opponent_id: str | None = None
    opponent_members: list[str] = Field(default_factory=list)
    operator_id: str | None = None
    requires_pro_membership: bool = False

    @model_validator(mode="after")
    def _one_stake_form(self) -> "CreateChallengeRequest":
        if (self.stake_cents is None) == (self.per_player_fee_cents is None):
            raise ValueError("Provide exactly one of stake_cents or per_player_fee_cents")
        if self.per_player_fee_cents is not None and self.kind != ChallengeKind.TEAM:
            raise ValueError("per_player_fee_cents is only valid for TEAM challenges")
        if self.opponent_members and self.opponent_id is None:
            raise ValueError("opponent_members requires opponent_id")
        return self


class AcceptChallengeRequest(BaseModel):
    side_id: str | None = Field(
        None, description="Accepting team or venue id; defaults to the caller"
    )
    members: list[str] = Field(default_factory=list)


class ReviseStakeRequest(BaseModel):
    stake_cents: int = Field(..., gt=0)


class CompleteChallengeRequest(BaseModel):
    winner_id: str = Field(..., min_length=1)


class CancelChallengeRequest(BaseModel):
    reason: CancelReason = CancelReason.WITHDRAWN


class VoidChallengeRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=500)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ChallengeResponse(BaseModel):
    id: str
    kind: str
    status: str
    challenger_id: str
    challenger_members: list[str]
    opponent_id: str | None
    opponent_members: list[str]
    stake_cents: int
    stake_display: str
    operator_id: str | None
    requires_pro_membership: bool
    winner_id: str | None
    cancel_reason: str | None
    voided_by: str | None
    allowed_actions: list[str]
    created_at: str | None
    accepted_at: str | None
    started_at: str | None
    completed_at: str | None
    cancelled_at: str | None

    @classmethod
    def from_domain(cls, c: Challenge) -> "ChallengeResponse":
        return cls(
            id=c.id,
            kind=c.kind.value,
            status=c.status.value,
            challenger_id=c.challenger_id,
            challenger_members=list(c.challenger_members),
            opponent_id=c.opponent_id,
            opponent_members=list(c.opponent_members),
            stake_cents=c.stake_cents,
            stake_display=cents_to_display(c.stake_cents),
            operator_id=c.operator_id,
            requires_pro_membership=c.requires_pro_membership,
            winner_id=c.winner_id,
            cancel_reason=c.cancel_reason.value if c.cancel_reason else None,
            voided_by=c.voided_by,
            allowed_actions=[a.value for a in allowed_actions(c.status)],
            created_at=c.created_at.isoformat() if c.created_at else None,
            accepted_at=c.accepted_at.isoformat() if c.accepted_at else None,
            started_at=c.started_at.isoformat() if c.started_at else None,
            completed_at=c.completed_at.isoformat() if c.completed_at else None,
            cancelled_at=c.cancelled_at.isoformat() if c.cancelled_at else None,
        )


class LadderOutcomeOut(BaseModel):
    winner: PlayerDeltaOut
    loser: PlayerDeltaOut
    king_dethroned: bool

    @classmethod
    def from_domain(cls, outcome: LadderOutcome) -> "LadderOutcomeOut":
        return cls(
            winner=PlayerDeltaOut.from_domain(outcome.winner),
            loser=PlayerDeltaOut.from_domain(outcome.loser),
            king_dethroned=outcome.king_dethroned,
        )


class CompletionResponse(BaseModel):
    challenge: ChallengeResponse
    settlement: SettlementRecordOut
    ladder: LadderOutcomeOut | None = None


class CancellationResponse(BaseModel):
    challenge: ChallengeResponse
    refund_cents: int
    refund_display: str
