"""FastAPI dependencies: get_current_actor / require_privileged.

Authentication happens upstream. The identity gateway forwards the
verified actor as three headers; this service only parses them:
    X-Actor-Id    required
    X-Actor-Tier  membership tier tag (unknown tags resolve to NONE)
    X-Actor-Role  OWNER | STAFF | OPERATOR | CREATOR | PLAYER (default PLAYER)

Usage in any router:
    from src.pl_gateway.auth.dependencies import get_current_actor

    @router.get("/protected")
    async def protected(actor: Actor = Depends(get_current_actor)):
        ...
"""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from src.pl_common.actor import Actor
from src.pl_common.enums import ActorRole
from src.pl_common.errors import AdminRequiredError
from src.pl_membership.domain.tiers import parse_tier

_MISSING_ACTOR_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Missing actor identity",
)


async def get_current_actor(
    x_actor_id: Annotated[str | None, Header()] = None,
    x_actor_tier: Annotated[str | None, Header()] = None,
    x_actor_role: Annotated[str | None, Header()] = None,
) -> Actor:
    """Raises HTTP 401 if the actor id header is missing or blank."""
    if not x_actor_id or not x_actor_id.strip():
        raise _MISSING_ACTOR_EXCEPTION

    role = ActorRole.PLAYER
    if x_actor_role:
        try:
            role = ActorRole(x_actor_role.strip().upper())
        except ValueError:
            raise _MISSING_ACTOR_EXCEPTION from None

    return Actor(id=x_actor_id.strip(), tier=parse_tier(x_actor_tier), role=role)


async def require_privileged(
    actor: Annotated[Actor, Depends(get_current_actor)],
) -> Actor:
    """Owner, staff or operator only; raises AdminRequiredError (1001) otherwise."""
    if not actor.is_privileged:
        raise AdminRequiredError(actor.id)
    return actor
