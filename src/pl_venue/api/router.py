"""pl_venue REST API.

GET  /venues/{venue_id}         — hall record and unlock state
POST /venues/{venue_id}/unlock  — owner/staff/operator only, audited
POST /venues/{venue_id}/lock    — owner/staff/operator only, audited
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pl_common.actor import Actor
from src.pl_common.database import get_db_session
from src.pl_common.response import ApiResponse, success_response
from src.pl_gateway.auth.dependencies import get_current_actor
from src.pl_venue.application.service import VenueApplicationService

router = APIRouter(prefix="/venues", tags=["venues"])

_service = VenueApplicationService()


@router.get("/{venue_id}")
async def get_venue(
    venue_id: str,
    request: Request,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.get_venue(db, venue_id)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/{venue_id}/unlock")
async def unlock_venue(
    venue_id: str,
    request: Request,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.unlock(db, venue_id, actor)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/{venue_id}/lock")
async def lock_venue(
    venue_id: str,
    request: Request,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.lock(db, venue_id, actor)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
