"""pl_challenge REST API.

POST /challenges                          — create (individual, team or hall)
GET  /challenges/{challenge_id}           — current state and allowed actions
POST /challenges/{challenge_id}/stake     — revise stake (OPEN only)
POST /challenges/{challenge_id}/accept
POST /challenges/{challenge_id}/start
POST /challenges/{challenge_id}/complete  — ladder update + PENDING settlement
POST /challenges/{challenge_id}/cancel    — OPEN/ACCEPTED only, full refund
POST /challenges/{challenge_id}/void      — IN_PROGRESS, owner/staff/operator, audited
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pl_challenge.application.schemas import (
    AcceptChallengeRequest,
    CancelChallengeRequest,
    CompleteChallengeRequest,
    CreateChallengeRequest,
    ReviseStakeRequest,
    VoidChallengeRequest,
)
from src.pl_challenge.application.service import ChallengeApplicationService
from src.pl_common.actor import Actor
from src.pl_common.database import get_db_session
from src.pl_common.response import ApiResponse, success_response
from src.pl_gateway.auth.dependencies import get_current_actor

router = APIRouter(prefix="/challenges", tags=["challenges"])

_service = ChallengeApplicationService()


def _wrap(data: object, request: Request) -> ApiResponse:
    resp = success_response(data)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("", status_code=201)
async def create_challenge(
    body: CreateChallengeRequest,
    request: Request,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.create(db, actor, body)
    return _wrap(data.model_dump(), request)


@router.get("/{challenge_id}")
async def get_challenge(
    challenge_id: str,
    request: Request,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.get_challenge(db, challenge_id)
    return _wrap(data.model_dump(), request)


@router.post("/{challenge_id}/stake")
async def revise_stake(
    challenge_id: str,
    body: ReviseStakeRequest,
    request: Request,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.revise_stake(db, challenge_id, actor, body)
    return _wrap(data.model_dump(), request)


@router.post("/{challenge_id}/accept")
async def accept_challenge(
    challenge_id: str,
    body: AcceptChallengeRequest,
    request: Request,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.accept(db, challenge_id, actor, body)
    return _wrap(data.model_dump(), request)


@router.post("/{challenge_id}/start")
async def start_challenge(
    challenge_id: str,
    request: Request,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.start(db, challenge_id, actor)
    return _wrap(data.model_dump(), request)


@router.post("/{challenge_id}/complete")
async def complete_challenge(
    challenge_id: str,
    body: CompleteChallengeRequest,
    request: Request,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.complete(db, challenge_id, actor, body)
    return _wrap(data.model_dump(), request)


@router.post("/{challenge_id}/cancel")
async def cancel_challenge(
    challenge_id: str,
    body: CancelChallengeRequest,
    request: Request,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.cancel(db, challenge_id, actor, body)
    return _wrap(data.model_dump(), request)


@router.post("/{challenge_id}/void")
async def void_challenge(
    challenge_id: str,
    body: VoidChallengeRequest,
    request: Request,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.void(db, challenge_id, actor, body)
    return _wrap(data.model_dump(), request)
