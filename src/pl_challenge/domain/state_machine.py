"""Central transition table for challenges.

Every status change goes through next_status(); no other code compares
statuses to decide whether an action is legal.
"""

from src.pl_common.enums import ChallengeAction, ChallengeStatus
from src.pl_common.errors import AlreadyAcceptedError, InvalidTransitionError

_TRANSITIONS: dict[tuple[ChallengeStatus, ChallengeAction], ChallengeStatus] = {
    (ChallengeStatus.OPEN, ChallengeAction.REVISE_STAKE): ChallengeStatus.OPEN,
    (ChallengeStatus.OPEN, ChallengeAction.ACCEPT): ChallengeStatus.ACCEPTED,
    (ChallengeStatus.ACCEPTED, ChallengeAction.START): ChallengeStatus.IN_PROGRESS,
    (ChallengeStatus.IN_PROGRESS, ChallengeAction.COMPLETE): ChallengeStatus.COMPLETED,
    (ChallengeStatus.OPEN, ChallengeAction.CANCEL): ChallengeStatus.CANCELLED,
    (ChallengeStatus.ACCEPTED, ChallengeAction.CANCEL): ChallengeStatus.CANCELLED,
    # Administrative void of a match already in play (audited separately)
    (ChallengeStatus.IN_PROGRESS, ChallengeAction.VOID): ChallengeStatus.CANCELLED,
}

_ACCEPTED_ONCE = frozenset(
    {ChallengeStatus.ACCEPTED, ChallengeStatus.IN_PROGRESS, ChallengeStatus.COMPLETED}
)


def next_status(
    challenge_id: str, status: ChallengeStatus, action: ChallengeAction
) -> ChallengeStatus:
    try:
        return _TRANSITIONS[(status, action)]
    except KeyError:
        if action == ChallengeAction.ACCEPT and status in _ACCEPTED_ONCE:
            raise AlreadyAcceptedError(challenge_id) from None
        raise InvalidTransitionError(challenge_id, status.value, action.value.lower()) from None


def allowed_actions(status: ChallengeStatus) -> list[ChallengeAction]:
    return [action for (src, action) in _TRANSITIONS if src == status]
