"""pl_membership REST API.

GET /memberships/{tier} — resolved benefit set (unknown tags resolve to NONE)
"""

from fastapi import APIRouter, Request

from src.pl_common.response import ApiResponse, success_response
from src.pl_membership.application.schemas import MembershipBenefitsResponse
from src.pl_membership.domain.tiers import resolve_benefits

router = APIRouter(prefix="/memberships", tags=["memberships"])


@router.get("/{tier}")
async def get_membership(tier: str, request: Request) -> ApiResponse:
    data = MembershipBenefitsResponse.from_domain(resolve_benefits(tier))
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
