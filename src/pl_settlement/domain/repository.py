"""Repository Protocol — dependency inversion for testability."""

from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pl_settlement.domain.models import SettlementRecord


class SettlementRepositoryProtocol(Protocol):
    async def insert_settlement(
        self, db: AsyncSession, record: SettlementRecord
    ) -> SettlementRecord: ...

    async def list_by_operator(
        self, db: AsyncSession, operator_id: str, period_start: datetime, period_end: datetime
    ) -> list[SettlementRecord]: ...
