"""pl_settlement REST API.

POST /settlements/quote                       — commission, split and prize pool preview
POST /settlements/escrow/quote                — escrow fee preview for a held pool
POST /settlements/escrow                      — record an escrow release (owner/staff/operator)
POST /settlements/dues                        — record one month of dues (owner/staff/operator)
GET  /settlements/operators/{id}/payout       — operator earnings for [period_start, period_end)
"""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pl_common.actor import Actor
from src.pl_common.database import get_db_session
from src.pl_common.response import ApiResponse, success_response
from src.pl_gateway.auth.dependencies import get_current_actor, require_privileged
from src.pl_settlement.application.schemas import (
    DuesSettlementRequest,
    EscrowQuoteRequest,
    EscrowSettlementRequest,
    QuoteRequest,
)
from src.pl_settlement.application.service import SettlementApplicationService

router = APIRouter(prefix="/settlements", tags=["settlements"])

_service = SettlementApplicationService()


def _wrap(data: dict, request: Request) -> ApiResponse:
    resp = success_response(data)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/quote")
async def quote(
    body: QuoteRequest,
    actor: Annotated[Actor, Depends(get_current_actor)],
    request: Request,
) -> ApiResponse:
    return _wrap(_service.quote(body, actor.tier).model_dump(), request)


@router.post("/escrow/quote")
async def quote_escrow(
    body: EscrowQuoteRequest,
    actor: Annotated[Actor, Depends(get_current_actor)],
    request: Request,
) -> ApiResponse:
    return _wrap(_service.quote_escrow(body).model_dump(), request)


@router.post("/escrow", status_code=201)
async def record_escrow(
    body: EscrowSettlementRequest,
    request: Request,
    actor: Annotated[Actor, Depends(require_privileged)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.record_escrow(db, body)
    return _wrap(data.model_dump(), request)


@router.post("/dues", status_code=201)
async def record_dues(
    body: DuesSettlementRequest,
    request: Request,
    actor: Annotated[Actor, Depends(require_privileged)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.record_dues(db, body)
    return _wrap(data.model_dump(), request)


@router.get("/operators/{operator_id}/payout")
async def operator_payout(
    operator_id: str,
    request: Request,
    actor: Annotated[Actor, Depends(require_privileged)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    period_start: Annotated[datetime, Query()],
    period_end: Annotated[datetime, Query()],
) -> ApiResponse:
    data = await _service.operator_payout(db, operator_id, period_start, period_end)
    return _wrap(data.model_dump(), request)
