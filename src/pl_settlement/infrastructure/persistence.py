"""SettlementRepository — concrete implementation of SettlementRepositoryProtocol.

Settlement rows are append-only. UNIQUE (source, reference_id) means a
challenge, pot game, escrow pool or dues billing reference can be handed
to payment at most once; a duplicate
insert fails inside the caller's transaction and rolls it back.

Transaction ownership: the calling application service commits.
"""

from datetime import datetime

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pl_common.enums import SettlementSource, SettlementStatus
from src.pl_common.errors import InternalError
from src.pl_settlement.domain.models import SettlementRecord

_COLUMNS = """
    id, source, reference_id, payee_id, gross_cents, commission_cents,
    platform_cents, operator_cents, bonus_fund_cents, payout_cents,
    commission_rate_bps, operator_id, status, created_at
"""

_INSERT_SETTLEMENT_SQL = text(f"""
    INSERT INTO settlements
        (id, source, reference_id, payee_id, gross_cents, commission_cents,
         platform_cents, operator_cents, bonus_fund_cents, payout_cents,
         commission_rate_bps, operator_id, status, created_at)
    VALUES
        (:id, :source, :reference_id, :payee_id, :gross_cents, :commission_cents,
         :platform_cents, :operator_cents, :bonus_fund_cents, :payout_cents,
         :commission_rate_bps, :operator_id, :status, :created_at)
    RETURNING {_COLUMNS}
""")

_LIST_BY_OPERATOR_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM settlements
    WHERE operator_id = :operator_id
      AND created_at >= :period_start
      AND created_at < :period_end
    ORDER BY created_at, id
""")

def _row_to_settlement(row: object) -> SettlementRecord:
    return SettlementRecord(
        id=row.id,  # type: ignore[attr-defined]
        source=SettlementSource(row.source),  # type: ignore[attr-defined]
        reference_id=row.reference_id,  # type: ignore[attr-defined]
        payee_id=row.payee_id,  # type: ignore[attr-defined]
        gross_cents=row.gross_cents,  # type: ignore[attr-defined]
        commission_cents=row.commission_cents,  # type: ignore[attr-defined]
        platform_cents=row.platform_cents,  # type: ignore[attr-defined]
        operator_cents=row.operator_cents,  # type: ignore[attr-defined]
        bonus_fund_cents=row.bonus_fund_cents,  # type: ignore[attr-defined]
        payout_cents=row.payout_cents,  # type: ignore[attr-defined]
        commission_rate_bps=row.commission_rate_bps,  # type: ignore[attr-defined]
        operator_id=row.operator_id,  # type: ignore[attr-defined]
        status=SettlementStatus(row.status),  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


class SettlementRepository:
    async def insert_settlement(
        self, db: AsyncSession, record: SettlementRecord
    ) -> SettlementRecord:
        result = await db.execute(
            _INSERT_SETTLEMENT_SQL,
            {
                "id": record.id,
                "source": record.source.value,
                "reference_id": record.reference_id,
                "payee_id": record.payee_id,
                "gross_cents": record.gross_cents,
                "commission_cents": record.commission_cents,
                "platform_cents": record.platform_cents,
                "operator_cents": record.operator_cents,
                "bonus_fund_cents": record.bonus_fund_cents,
                "payout_cents": record.payout_cents,
                "commission_rate_bps": record.commission_rate_bps,
                "operator_id": record.operator_id,
                "status": record.status.value,
                "created_at": record.created_at,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Settlement insert returned no rows")
        return _row_to_settlement(row)

    async def list_by_operator(
        self, db: AsyncSession, operator_id: str, period_start: datetime, period_end: datetime
    ) -> list[SettlementRecord]:
        result = await db.execute(
            _LIST_BY_OPERATOR_SQL,
            {"operator_id": operator_id, "period_start": period_start, "period_end": period_end},
        )
        return [_row_to_settlement(row) for row in result.fetchall()]
