"""Tests for pl_settlement.domain.payouts — operator earnings per period."""

from datetime import UTC, datetime, timedelta

import pytest

from src.pl_common.errors import InvalidPeriodError
from src.pl_membership.domain.tiers import split_membership_dues
from src.pl_settlement.domain.fee import settle, settle_escrow
from src.pl_settlement.domain.payouts import summarize_operator_payout
from src.pl_settlement.domain.records import (
    commission_record,
    dues_record,
    escrow_record,
    payout_record,
)

_START = datetime(2026, 3, 1, tzinfo=UTC)
_END = datetime(2026, 4, 1, tzinfo=UTC)
_MID = datetime(2026, 3, 15, tzinfo=UTC)


def _records() -> list:
    return [
        # 10_000 stake, non-member: 1000 commission, operator 300
        commission_record("stl_1", "chl_1", "p1", settle(10_000, None), _MID, operator_id="op1"),
        commission_record("stl_2", "chl_2", "p2", settle(20_000, None), _MID, operator_id="op1"),
        escrow_record("stl_3", "esc_1", "p3", settle_escrow(60_000), _MID, operator_id="op1"),
        dues_record("stl_4", "sub_1:2026-03", "p4", "op1", split_membership_dues("pro"), _MID),
        payout_record("stl_5", "pot_1", "p5", 3_000, _MID),
        # Other operator and out-of-period rows are ignored
        commission_record("stl_6", "chl_3", "p1", settle(10_000, None), _MID, operator_id="op2"),
        commission_record("stl_7", "chl_4", "p1", settle(10_000, None), _END, operator_id="op1"),
        commission_record(
            "stl_8", "chl_5", "p1", settle(10_000, None), _START - timedelta(seconds=1),
            operator_id="op1",
        ),
    ]


class TestOperatorPayout:
    def test_totals_by_source(self) -> None:
        summary = summarize_operator_payout("op1", _records(), _START, _END)
        assert summary.match_commission_cents == 300 + 600
        assert summary.escrow_fee_cents == 0
        assert summary.membership_dues_cents == 1_000
        assert summary.total_cents == 1_900
        assert summary.record_count == 4

    def test_period_start_is_inclusive(self) -> None:
        record = commission_record(
            "stl_9", "chl_9", "p1", settle(10_000, None), _START, operator_id="op1"
        )
        summary = summarize_operator_payout("op1", [record], _START, _END)
        assert summary.match_commission_cents == 300

    def test_no_earnings(self) -> None:
        summary = summarize_operator_payout("op3", _records(), _START, _END)
        assert summary.total_cents == 0
        assert summary.record_count == 0

    @pytest.mark.parametrize("end", [_START, _START - timedelta(days=1)])
    def test_empty_or_inverted_period(self, end: datetime) -> None:
        with pytest.raises(InvalidPeriodError):
            summarize_operator_payout("op1", [], _START, end)
