"""pl_pot REST API.

POST /pot-games                      — create (owner/staff/operator)
GET  /pot-games/{game_id}            — seats and live pot
POST /pot-games/{game_id}/join       — caller takes the lowest open seat
POST /pot-games/{game_id}/complete   — pay the pot to the winning seat (owner/staff/operator)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pl_common.actor import Actor
from src.pl_common.database import get_db_session
from src.pl_common.response import ApiResponse, success_response
from src.pl_gateway.auth.dependencies import get_current_actor, require_privileged
from src.pl_pot.application.schemas import CompletePotGameRequest, CreatePotGameRequest
from src.pl_pot.application.service import PotGameApplicationService

router = APIRouter(prefix="/pot-games", tags=["pot-games"])

_service = PotGameApplicationService()


@router.post("", status_code=201)
async def create_pot_game(
    body: CreatePotGameRequest,
    request: Request,
    actor: Annotated[Actor, Depends(require_privileged)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.create(db, actor, body)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/{game_id}")
async def get_pot_game(
    game_id: str,
    request: Request,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.get_game(db, game_id)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/{game_id}/join")
async def join_pot_game(
    game_id: str,
    request: Request,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.join(db, game_id, actor)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/{game_id}/complete")
async def complete_pot_game(
    game_id: str,
    body: CompletePotGameRequest,
    request: Request,
    actor: Annotated[Actor, Depends(require_privileged)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.complete(db, game_id, body)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
