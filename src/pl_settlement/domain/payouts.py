"""Operator payout summary over settlement hand-off rows.

Pure aggregation: the caller loads the rows, this module only sums the
operator column per source. Pot payouts never carry an operator share and
are ignored.
"""

from collections.abc import Iterable
from datetime import datetime

from src.pl_common.enums import SettlementSource
from src.pl_common.errors import InvalidPeriodError
from src.pl_settlement.domain.models import OperatorPayoutSummary, SettlementRecord

_FIELD_BY_SOURCE = {
    SettlementSource.CHALLENGE_COMMISSION: "match_commission_cents",
    SettlementSource.ESCROW_FEE: "escrow_fee_cents",
    SettlementSource.MEMBERSHIP_DUES: "membership_dues_cents",
}


def summarize_operator_payout(
    operator_id: str,
    records: Iterable[SettlementRecord],
    period_start: datetime,
    period_end: datetime,
) -> OperatorPayoutSummary:
    if period_start >= period_end:
        raise InvalidPeriodError(period_start.isoformat(), period_end.isoformat())

    totals = dict.fromkeys(_FIELD_BY_SOURCE.values(), 0)
    count = 0
    for record in records:
        if record.operator_id != operator_id or record.created_at is None:
            continue
        if not (period_start <= record.created_at < period_end):
            continue
        field_name = _FIELD_BY_SOURCE.get(record.source)
        if field_name is None:
            continue
        totals[field_name] += record.operator_cents
        count += 1

    return OperatorPayoutSummary(
        operator_id=operator_id,
        period_start=period_start,
        period_end=period_end,
        record_count=count,
        **totals,
    )
