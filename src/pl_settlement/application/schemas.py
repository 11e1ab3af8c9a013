"""Pydantic schemas for pl_settlement API."""

from pydantic import BaseModel, Field

from src.pl_common.cents import cents_to_display
from src.pl_settlement.domain.models import (
    OperatorPayoutSummary,
    SettlementRecord,
    SettlementResult,
)


class QuoteRequest(BaseModel):
    amount_cents: int = Field(..., gt=0, description="Stake to settle, in cents")
    membership_tier: str | None = Field(
        None, description="Tier tag; defaults to the caller's tier. Unknown tags resolve to NONE"
    )


class StakeholderShareOut(BaseModel):
    stakeholder: str
    amount_cents: int
    amount_display: str


class SettlementQuoteResponse(BaseModel):
    original_amount_cents: int
    original_amount_display: str
    commission_rate_bps: int
    raw_commission_cents: int
    rounded_commission_cents: int
    rounded_commission_display: str
    undistributed_cents: int
    shares: list[StakeholderShareOut]
    prize_pool_cents: int
    prize_pool_display: str

    @classmethod
    def from_domain(cls, result: SettlementResult) -> "SettlementQuoteResponse":
        return cls(
            original_amount_cents=result.original_amount_cents,
            original_amount_display=cents_to_display(result.original_amount_cents),
            commission_rate_bps=result.commission_rate_bps,
            raw_commission_cents=result.raw_commission_cents,
            rounded_commission_cents=result.rounded_commission_cents,
            rounded_commission_display=cents_to_display(result.rounded_commission_cents),
            undistributed_cents=result.undistributed_cents,
            shares=[
                StakeholderShareOut(
                    stakeholder=stakeholder.value,
                    amount_cents=amount,
                    amount_display=cents_to_display(amount),
                )
                for stakeholder, amount in result.shares.items()
            ],
            prize_pool_cents=result.prize_pool_cents,
            prize_pool_display=cents_to_display(result.prize_pool_cents),
        )


class SettlementRecordOut(BaseModel):
    id: str
    source: str
    reference_id: str
    payee_id: str
    status: str
    commission_cents: int
    payout_cents: int
    payout_display: str

    @classmethod
    def from_domain(cls, record: SettlementRecord) -> "SettlementRecordOut":
        return cls(
            id=record.id,
            source=record.source.value,
            reference_id=record.reference_id,
            payee_id=record.payee_id,
            status=record.status.value,
            commission_cents=record.commission_cents,
            payout_cents=record.payout_cents,
            payout_display=cents_to_display(record.payout_cents),
        )


class EscrowQuoteRequest(BaseModel):
    pool_cents: int = Field(..., gt=0, description="Held side-bet pool, in cents")


class EscrowSettlementRequest(BaseModel):
    pool_id: str = Field(..., min_length=1, max_length=64)
    winner_id: str = Field(..., min_length=1, max_length=64)
    pool_cents: int = Field(..., gt=0)
    operator_id: str | None = None


class DuesSettlementRequest(BaseModel):
    billing_reference: str = Field(
        ..., min_length=1, max_length=64, description="Subscription id plus billing period"
    )
    player_id: str = Field(..., min_length=1, max_length=64)
    operator_id: str = Field(..., min_length=1, max_length=64)
    membership_tier: str


class OperatorPayoutResponse(BaseModel):
    operator_id: str
    period_start: str
    period_end: str
    match_commission_cents: int
    escrow_fee_cents: int
    membership_dues_cents: int
    total_cents: int
    total_display: str
    record_count: int

    @classmethod
    def from_domain(cls, summary: OperatorPayoutSummary) -> "OperatorPayoutResponse":
        return cls(
            operator_id=summary.operator_id,
            period_start=summary.period_start.isoformat(),
            period_end=summary.period_end.isoformat(),
            match_commission_cents=summary.match_commission_cents,
            escrow_fee_cents=summary.escrow_fee_cents,
            membership_dues_cents=summary.membership_dues_cents,
            total_cents=summary.total_cents,
            total_display=cents_to_display(summary.total_cents),
            record_count=summary.record_count,
        )
