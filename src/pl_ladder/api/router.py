"""pl_ladder REST API.

GET /ladder/{division} — standings with competition-ranked positions
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pl_common.actor import Actor
from src.pl_common.database import get_db_session
from src.pl_common.enums import Division
from src.pl_common.response import ApiResponse, success_response
from src.pl_gateway.auth.dependencies import get_current_actor
from src.pl_ladder.application.service import LadderApplicationService

router = APIRouter(prefix="/ladder", tags=["ladder"])

_service = LadderApplicationService()


@router.get("/{division}")
async def get_standings(
    division: Division,
    request: Request,
    actor: Annotated[Actor, Depends(get_current_actor)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.get_standings(db, division)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
