"""Settlement quotes, escrow and dues hand-offs, and operator payout summaries.

Quotes are pure: nothing is written. Challenge commissions and pot payouts
are persisted by the challenge and pot-game services when a match or game
completes; escrow fees and membership dues are recorded here, on behalf of
the escrow and billing collaborators.
"""

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import Settings, settings
from src.pl_common.datetime_utils import as_utc, utc_now
from src.pl_common.enums import MembershipTier, Stakeholder
from src.pl_common.errors import InvalidPeriodError
from src.pl_common.id_generator import generate_id
from src.pl_membership.domain.tiers import split_membership_dues
from src.pl_settlement.application.schemas import (
    DuesSettlementRequest,
    EscrowQuoteRequest,
    EscrowSettlementRequest,
    OperatorPayoutResponse,
    QuoteRequest,
    SettlementQuoteResponse,
    SettlementRecordOut,
)
from src.pl_settlement.domain.fee import settle, settle_escrow
from src.pl_settlement.domain.models import EscrowPolicy, FeePolicy, SettlementRecord
from src.pl_settlement.domain.payouts import summarize_operator_payout
from src.pl_settlement.domain.records import dues_record, escrow_record
from src.pl_settlement.domain.repository import SettlementRepositoryProtocol
from src.pl_settlement.infrastructure.persistence import SettlementRepository

logger = logging.getLogger(__name__)


def fee_policy_from_settings(cfg: Settings = settings) -> FeePolicy:
    return FeePolicy(
        round_up_to_dollar=cfg.COMMISSION_ROUND_UP_TO_DOLLAR,
        splits=(
            (Stakeholder.PLATFORM, cfg.COMMISSION_SPLIT_PLATFORM_PCT),
            (Stakeholder.OPERATOR, cfg.COMMISSION_SPLIT_OPERATOR_PCT),
            (Stakeholder.BONUS_FUND, cfg.COMMISSION_SPLIT_BONUS_FUND_PCT),
        ),
    )


def escrow_policy_from_settings(cfg: Settings = settings) -> EscrowPolicy:
    return EscrowPolicy(
        high_volume_threshold_cents=cfg.ESCROW_HIGH_VOLUME_THRESHOLD_CENTS,
        default_rate_bps=cfg.ESCROW_DEFAULT_RATE_BPS,
        high_volume_rate_bps=cfg.ESCROW_HIGH_VOLUME_RATE_BPS,
    )


class SettlementApplicationService:
    def __init__(
        self,
        policy: FeePolicy | None = None,
        repo: SettlementRepositoryProtocol | None = None,
        escrow_policy: EscrowPolicy | None = None,
    ) -> None:
        self._policy = policy or fee_policy_from_settings()
        self._repo: SettlementRepositoryProtocol = repo or SettlementRepository()
        self._escrow_policy = escrow_policy or escrow_policy_from_settings()

    def quote(
        self, req: QuoteRequest, actor_tier: MembershipTier
    ) -> SettlementQuoteResponse:
        tier = req.membership_tier if req.membership_tier is not None else actor_tier
        return SettlementQuoteResponse.from_domain(settle(req.amount_cents, tier, self._policy))

    def quote_escrow(self, req: EscrowQuoteRequest) -> SettlementQuoteResponse:
        return SettlementQuoteResponse.from_domain(
            settle_escrow(req.pool_cents, self._escrow_policy)
        )

    async def record_escrow(
        self, db: AsyncSession, req: EscrowSettlementRequest
    ) -> SettlementRecordOut:
        result = settle_escrow(req.pool_cents, self._escrow_policy)
        record = escrow_record(
            generate_id("stl"),
            req.pool_id,
            req.winner_id,
            result,
            utc_now(),
            operator_id=req.operator_id,
        )
        saved = await self._insert(db, record)
        logger.info(
            "Escrow settled: pool=%s winner=%s pool_cents=%d fee=%d settlement=%s",
            saved.reference_id,
            saved.payee_id,
            saved.gross_cents,
            saved.commission_cents,
            saved.id,
        )
        return SettlementRecordOut.from_domain(saved)

    async def record_dues(
        self, db: AsyncSession, req: DuesSettlementRequest
    ) -> SettlementRecordOut:
        record = dues_record(
            generate_id("stl"),
            req.billing_reference,
            req.player_id,
            req.operator_id,
            split_membership_dues(req.membership_tier),
            utc_now(),
        )
        saved = await self._insert(db, record)
        logger.info(
            "Membership dues recorded: ref=%s player=%s operator=%s gross=%d operator_cut=%d",
            saved.reference_id,
            saved.payee_id,
            saved.operator_id,
            saved.gross_cents,
            saved.operator_cents,
        )
        return SettlementRecordOut.from_domain(saved)

    async def operator_payout(
        self,
        db: AsyncSession,
        operator_id: str,
        period_start: datetime,
        period_end: datetime,
    ) -> OperatorPayoutResponse:
        period_start, period_end = as_utc(period_start), as_utc(period_end)
        if period_start >= period_end:
            raise InvalidPeriodError(period_start.isoformat(), period_end.isoformat())
        records = await self._repo.list_by_operator(db, operator_id, period_start, period_end)
        summary = summarize_operator_payout(operator_id, records, period_start, period_end)
        return OperatorPayoutResponse.from_domain(summary)

    async def _insert(self, db: AsyncSession, record: SettlementRecord) -> SettlementRecord:
        try:
            saved = await self._repo.insert_settlement(db, record)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return saved
