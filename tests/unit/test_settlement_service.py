"""Unit tests for SettlementApplicationService: quotes, escrow, dues and operator payouts."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from config.settings import Settings
from src.pl_common.enums import MembershipTier
from src.pl_common.errors import InvalidAmountError, InvalidPeriodError
from src.pl_membership.domain.tiers import split_membership_dues
from src.pl_settlement.application.schemas import (
    DuesSettlementRequest,
    EscrowQuoteRequest,
    EscrowSettlementRequest,
    QuoteRequest,
)
from src.pl_settlement.application.service import (
    SettlementApplicationService,
    escrow_policy_from_settings,
    fee_policy_from_settings,
)
from src.pl_settlement.domain.fee import settle
from src.pl_settlement.domain.models import EscrowPolicy, FeePolicy
from src.pl_settlement.domain.records import commission_record, dues_record


class TestQuote:
    def test_uses_actor_tier_by_default(self) -> None:
        svc = SettlementApplicationService(FeePolicy())
        resp = svc.quote(QuoteRequest(amount_cents=12_345), MembershipTier.BASIC)
        assert resp.commission_rate_bps == 800
        assert resp.raw_commission_cents == 988
        assert resp.rounded_commission_cents == 1_000
        assert resp.prize_pool_cents == 11_345
        assert {s.stakeholder: s.amount_cents for s in resp.shares} == {
            "PLATFORM": 500, "OPERATOR": 300, "BONUS_FUND": 200,
        }

    def test_explicit_tier_overrides_actor(self) -> None:
        svc = SettlementApplicationService(FeePolicy())
        resp = svc.quote(QuoteRequest(amount_cents=10_000, membership_tier="pro"), MembershipTier.NONE)
        assert resp.commission_rate_bps == 500

    def test_unknown_tier_is_non_member(self) -> None:
        svc = SettlementApplicationService(FeePolicy())
        resp = svc.quote(QuoteRequest(amount_cents=10_000, membership_tier="gold"), MembershipTier.PRO)
        assert resp.commission_rate_bps == 1000


class TestPolicyFromSettings:
    def test_round_up_can_be_disabled(self) -> None:
        policy = fee_policy_from_settings(Settings(COMMISSION_ROUND_UP_TO_DOLLAR=False))
        assert policy.round_up_to_dollar is False

    def test_splits_over_100_rejected(self) -> None:
        with pytest.raises(ValueError):
            fee_policy_from_settings(Settings(COMMISSION_SPLIT_PLATFORM_PCT=90))

    def test_escrow_policy_from_settings(self) -> None:
        policy = escrow_policy_from_settings(
            Settings(ESCROW_HIGH_VOLUME_THRESHOLD_CENTS=10_000, ESCROW_HIGH_VOLUME_RATE_BPS=100)
        )
        assert policy == EscrowPolicy(high_volume_threshold_cents=10_000, high_volume_rate_bps=100)


def _echo(_db, record):
    return record


@pytest.fixture
def db() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def repo() -> AsyncMock:
    repo = AsyncMock()
    repo.insert_settlement.side_effect = _echo
    return repo


@pytest.fixture
def svc(repo: AsyncMock) -> SettlementApplicationService:
    return SettlementApplicationService(FeePolicy(), repo, EscrowPolicy())


class TestEscrow:
    def test_quote(self, svc: SettlementApplicationService) -> None:
        resp = svc.quote_escrow(EscrowQuoteRequest(pool_cents=49_999))
        assert resp.commission_rate_bps == 500
        assert resp.rounded_commission_cents == 2_500
        assert resp.prize_pool_cents == 47_499
        assert {s.stakeholder: s.amount_cents for s in resp.shares} == {"PLATFORM": 2_500}

    async def test_record(
        self, svc: SettlementApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        req = EscrowSettlementRequest(
            pool_id="esc_1", winner_id="p1", pool_cents=50_000, operator_id="op1"
        )
        out = await svc.record_escrow(db, req)
        assert out.source == "ESCROW_FEE"
        assert out.commission_cents == 1_000
        assert out.payout_cents == 49_000
        saved = repo.insert_settlement.await_args.args[1]
        assert saved.operator_cents == 0
        assert saved.operator_id == "op1"
        db.commit.assert_awaited_once()

    async def test_insert_failure_rolls_back(
        self, svc: SettlementApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        repo.insert_settlement.side_effect = RuntimeError("db down")
        req = EscrowSettlementRequest(pool_id="esc_1", winner_id="p1", pool_cents=50_000)
        with pytest.raises(RuntimeError):
            await svc.record_escrow(db, req)
        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()


class TestDues:
    async def test_record_pro(
        self, svc: SettlementApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        req = DuesSettlementRequest(
            billing_reference="sub_1:2026-03", player_id="p1", operator_id="op1",
            membership_tier="pro",
        )
        out = await svc.record_dues(db, req)
        assert out.source == "MEMBERSHIP_DUES"
        assert out.commission_cents == 6_000
        assert out.payout_cents == 0
        saved = repo.insert_settlement.await_args.args[1]
        assert saved.operator_cents == 1_000
        assert saved.platform_cents == 5_000

    async def test_non_member_rejected(
        self, svc: SettlementApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        req = DuesSettlementRequest(
            billing_reference="sub_1:2026-03", player_id="p1", operator_id="op1",
            membership_tier="none",
        )
        with pytest.raises(InvalidAmountError):
            await svc.record_dues(db, req)
        repo.insert_settlement.assert_not_awaited()


class TestOperatorPayout:
    async def test_totals(
        self, svc: SettlementApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        now = datetime(2026, 3, 10, tzinfo=UTC)
        repo.list_by_operator.return_value = [
            commission_record("stl_1", "chl_1", "p1", settle(10_000, None), now, operator_id="op1"),
            dues_record("stl_2", "sub_1:2026-03", "p2", "op1", split_membership_dues("basic"), now),
        ]
        resp = await svc.operator_payout(
            db, "op1", datetime(2026, 3, 1), datetime(2026, 4, 1)
        )
        assert resp.match_commission_cents == 300
        assert resp.membership_dues_cents == 700
        assert resp.escrow_fee_cents == 0
        assert resp.total_cents == 1_000
        assert resp.total_display == "$10.00"
        assert resp.record_count == 2
        # Naive bounds are read as UTC
        _db, operator_id, start, end = repo.list_by_operator.await_args.args
        assert operator_id == "op1"
        assert start == datetime(2026, 3, 1, tzinfo=UTC)
        assert end == datetime(2026, 4, 1, tzinfo=UTC)

    async def test_inverted_period_rejected(
        self, svc: SettlementApplicationService, repo: AsyncMock, db: AsyncMock
    ) -> None:
        with pytest.raises(InvalidPeriodError):
            await svc.operator_payout(
                db, "op1", datetime(2026, 4, 1, tzinfo=UTC), datetime(2026, 3, 1, tzinfo=UTC)
            )
        repo.list_by_operator.assert_not_awaited()
