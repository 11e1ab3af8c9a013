"""Build settlement hand-off records from domain results."""

from datetime import datetime

from src.pl_common.cents import validate_amount
from src.pl_common.enums import SettlementSource, Stakeholder
from src.pl_membership.domain.models import DuesSplit
from src.pl_settlement.domain.models import SettlementRecord, SettlementResult


def commission_record(
    record_id: str,
    challenge_id: str,
    winner_id: str,
    result: SettlementResult,
    now: datetime,
    operator_id: str | None = None,
) -> SettlementRecord:
    # Platform column includes the undistributed split remainder
    platform = result.share(Stakeholder.PLATFORM) + result.undistributed_cents
    return SettlementRecord(
        id=record_id,
        source=SettlementSource.CHALLENGE_COMMISSION,
        reference_id=challenge_id,
        payee_id=winner_id,
        gross_cents=result.original_amount_cents,
        commission_cents=result.rounded_commission_cents,
        platform_cents=platform,
        operator_cents=result.share(Stakeholder.OPERATOR),
        bonus_fund_cents=result.share(Stakeholder.BONUS_FUND),
        payout_cents=result.prize_pool_cents,
        commission_rate_bps=result.commission_rate_bps,
        operator_id=operator_id,
        created_at=now,
    )


def payout_record(
    record_id: str, game_id: str, player_id: str, amount_cents: int, now: datetime
) -> SettlementRecord:
    """Pot games take no commission: the whole pot is paid to the winning seat."""
    return SettlementRecord(
        id=record_id,
        source=SettlementSource.POT_PAYOUT,
        reference_id=game_id,
        payee_id=player_id,
        gross_cents=amount_cents,
        commission_cents=0,
        platform_cents=0,
        operator_cents=0,
        bonus_fund_cents=0,
        payout_cents=amount_cents,
        created_at=now,
    )


def escrow_record(
    record_id: str,
    pool_id: str,
    winner_id: str,
    result: SettlementResult,
    now: datetime,
    operator_id: str | None = None,
) -> SettlementRecord:
    """Escrow fees go to the platform alone; the operator column stays 0."""
    return SettlementRecord(
        id=record_id,
        source=SettlementSource.ESCROW_FEE,
        reference_id=pool_id,
        payee_id=winner_id,
        gross_cents=result.original_amount_cents,
        commission_cents=result.rounded_commission_cents,
        platform_cents=result.rounded_commission_cents,
        operator_cents=0,
        bonus_fund_cents=0,
        payout_cents=result.prize_pool_cents,
        commission_rate_bps=result.commission_rate_bps,
        operator_id=operator_id,
        created_at=now,
    )


def dues_record(
    record_id: str,
    billing_reference: str,
    player_id: str,
    operator_id: str,
    split: DuesSplit,
    now: datetime,
) -> SettlementRecord:
    """One month of membership dues: all of it is fee, nothing is paid back out."""
    validate_amount(split.gross_cents)
    return SettlementRecord(
        id=record_id,
        source=SettlementSource.MEMBERSHIP_DUES,
        reference_id=billing_reference,
        payee_id=player_id,
        gross_cents=split.gross_cents,
        commission_cents=split.gross_cents,
        platform_cents=split.platform_cents,
        operator_cents=split.operator_cents,
        bonus_fund_cents=0,
        payout_cents=0,
        operator_id=operator_id,
        created_at=now,
    )
