"""Domain models for pl_settlement — frozen dataclasses."""

from dataclasses import dataclass, field
from datetime import datetime

from src.pl_common.cents import BasisPoints, validate_bps
from src.pl_common.enums import SettlementSource, SettlementStatus, Stakeholder


@dataclass(frozen=True)
class FeePolicy:
    round_up_to_dollar: bool = True
    # (stakeholder, whole percent) in priority order
    splits: tuple[tuple[Stakeholder, int], ...] = (
        (Stakeholder.PLATFORM, 50),
        (Stakeholder.OPERATOR, 30),
        (Stakeholder.BONUS_FUND, 20),
    )

    def __post_init__(self) -> None:
        if not self.splits:
            raise ValueError("At least one stakeholder split is required")
        if any(pct < 0 for _, pct in self.splits):
            raise ValueError("Split percentages must be non-negative")
        if sum(pct for _, pct in self.splits) > 100:
            raise ValueError("Split percentages must not exceed 100")


@dataclass(frozen=True)
class EscrowPolicy:
    """Volume-tiered escrow fee; the whole fee goes to the platform."""

    high_volume_threshold_cents: int = 50_000
    default_rate_bps: int = 500
    high_volume_rate_bps: int = 200

    def __post_init__(self) -> None:
        if self.high_volume_threshold_cents <= 0:
            raise ValueError("Escrow high-volume threshold must be positive")
        validate_bps(self.default_rate_bps)
        validate_bps(self.high_volume_rate_bps)


@dataclass(frozen=True)
class SettlementResult:
    original_amount_cents: int
    commission_rate_bps: BasisPoints
    raw_commission_cents: int
    rounded_commission_cents: int
    shares: dict[Stakeholder, int] = field(default_factory=dict)
    prize_pool_cents: int = 0

    @property
    def distributed_cents(self) -> int:
        return sum(self.shares.values())

    @property
    def undistributed_cents(self) -> int:
        """Floor-division remainder; belongs to the first-listed stakeholder."""
        return self.rounded_commission_cents - self.distributed_cents

    def share(self, stakeholder: Stakeholder) -> int:
        return self.shares.get(stakeholder, 0)


@dataclass(frozen=True)
class SettlementRecord:
    """Hand-off row read by the payment collaborator; the core never pays out itself."""

    id: str
    source: SettlementSource
    reference_id: str          # challenge id or pot game id
    payee_id: str              # winning side, seat winner, escrow winner, or the member paying dues
    gross_cents: int
    commission_cents: int
    platform_cents: int
    operator_cents: int
    bonus_fund_cents: int
    payout_cents: int
    commission_rate_bps: int = 0
    operator_id: str | None = None
    status: SettlementStatus = SettlementStatus.PENDING
    created_at: datetime | None = None


@dataclass(frozen=True)
class OperatorPayoutSummary:
    """Operator earnings for a half-open period [period_start, period_end)."""

    operator_id: str
    period_start: datetime
    period_end: datetime
    match_commission_cents: int = 0
    escrow_fee_cents: int = 0
    membership_dues_cents: int = 0
    record_count: int = 0

    @property
    def total_cents(self) -> int:
        return self.match_commission_cents + self.escrow_fee_cents + self.membership_dues_cents
