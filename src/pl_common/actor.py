"""Authenticated actor, as supplied by the identity collaborator."""

from dataclasses import dataclass

from src.pl_common.enums import ActorRole, MembershipTier

PRIVILEGED_ROLES = frozenset({ActorRole.OWNER, ActorRole.STAFF, ActorRole.OPERATOR})


@dataclass(frozen=True)
class Actor:
    id: str
    tier: MembershipTier = MembershipTier.NONE
    role: ActorRole = ActorRole.PLAYER

    @property
    def is_privileged(self) -> bool:
        return self.role in PRIVILEGED_ROLES
