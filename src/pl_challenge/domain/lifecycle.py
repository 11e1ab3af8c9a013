"""Challenge lifecycle — pure transitions over an immutable snapshot.

Each operation validates everything first and only then builds the new
Challenge with dataclasses.replace(); a rejected call leaves nothing
half-applied. Persisting the result (with a version check) and moving
money are the caller's job.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import replace
from datetime import datetime

from src.pl_common.actor import Actor
from src.pl_common.enums import (
    CancelReason,
    ChallengeAction,
    ChallengeKind,
    MembershipTier,
)
from src.pl_common.errors import (
    AdminRequiredError,
    IneligibleChallengeError,
    InvalidAmountError,
    InvalidTeamSizeError,
    InvalidTransitionError,
    InvalidWinnerError,
    MembershipRequiredError,
)
from src.pl_challenge.domain.models import (
    TEAM_SIZES,
    CancellationResult,
    Challenge,
    CompletionResult,
    LadderContext,
    StakeRules,
)
from src.pl_challenge.domain.state_machine import next_status
from src.pl_ladder.domain.ranking import apply_result
from src.pl_membership.domain.tiers import best_tier, parse_tier
from src.pl_settlement.domain.fee import DEFAULT_FEE_POLICY, settle
from src.pl_settlement.domain.models import FeePolicy
from src.pl_venue.domain.access import ensure_battles_unlocked
from src.pl_venue.domain.models import Venue

audit_logger = logging.getLogger("pl.audit")

TierLookup = Mapping[str, str | MembershipTier]


def validate_stake(stake_cents: int, rules: StakeRules) -> None:
    if not (rules.min_stake_cents <= stake_cents <= rules.max_stake_cents):
        raise InvalidAmountError(
            f"stake {stake_cents} cents must be in "
            f"[{rules.min_stake_cents}, {rules.max_stake_cents}]"
        )


def team_total_stake(individual_fee_cents: int, team_size: int) -> int:
    """Team stake = per-player fee x team size."""
    _check_team_size(team_size)
    return individual_fee_cents * team_size


def create_challenge(
    *,
    challenge_id: str,
    kind: ChallengeKind,
    challenger_id: str,
    stake_cents: int,
    rules: StakeRules,
    tiers: TierLookup,
    now: datetime,
    challenger_members: Sequence[str] = (),
    opponent_id: str | None = None,
    opponent_members: Sequence[str] = (),
    operator_id: str | None = None,
    requires_pro_membership: bool = False,
    challenger_venue: Venue | None = None,
) -> Challenge:
    validate_stake(stake_cents, rules)
    if opponent_id is not None and opponent_id == challenger_id:
        raise IneligibleChallengeError("a side cannot challenge itself")
    if opponent_members and opponent_id is None:
        raise IneligibleChallengeError("opponent members were given without an opponent")

    own = _side_members(kind, challenger_id, challenger_members)
    other = _side_members(kind, opponent_id, opponent_members)
    if kind == ChallengeKind.TEAM:
        _check_team_size(len(own))
        if other and len(other) != len(own):
            raise InvalidTeamSizeError(f"{len(other)} vs {len(own)} players")
    if kind == ChallengeKind.HALL:
        _check_venue(challenger_venue, challenger_id)
    if requires_pro_membership:
        _require_pro(own + other, tiers)

    return Challenge(
        id=challenge_id,
        kind=kind,
        challenger_id=challenger_id,
        stake_cents=stake_cents,
        challenger_members=own,
        opponent_id=opponent_id,
        opponent_members=other,
        operator_id=operator_id,
        requires_pro_membership=requires_pro_membership,
        created_at=now,
    )


def revise_stake(challenge: Challenge, stake_cents: int, rules: StakeRules) -> Challenge:
    next_status(challenge.id, challenge.status, ChallengeAction.REVISE_STAKE)
    validate_stake(stake_cents, rules)
    return replace(challenge, stake_cents=stake_cents)


def accept_challenge(
    challenge: Challenge,
    *,
    accepting_id: str,
    tiers: TierLookup,
    now: datetime,
    accepting_members: Sequence[str] = (),
    accepting_venue: Venue | None = None,
) -> Challenge:
    status = next_status(challenge.id, challenge.status, ChallengeAction.ACCEPT)
    if accepting_id == challenge.challenger_id:
        raise InvalidTransitionError(
            challenge.id, challenge.status.value, "be accepted by its initiator"
        )
    if challenge.opponent_id is not None and challenge.opponent_id != accepting_id:
        raise IneligibleChallengeError(
            f"challenge {challenge.id} is addressed to {challenge.opponent_id}"
        )

    members = (
        tuple(accepting_members)
        or challenge.opponent_members
        or _side_members(challenge.kind, accepting_id, ())
    )
    if challenge.kind == ChallengeKind.TEAM and len(members) != len(challenge.challenger_members):
        raise InvalidTeamSizeError(
            f"{len(members)} vs {len(challenge.challenger_members)} players"
        )
    if challenge.kind == ChallengeKind.HALL:
        _check_venue(accepting_venue, accepting_id)
    if challenge.requires_pro_membership:
        _require_pro(members, tiers)

    return replace(
        challenge,
        status=status,
        opponent_id=accepting_id,
        opponent_members=members,
        accepted_at=now,
    )


def start_challenge(challenge: Challenge, now: datetime) -> Challenge:
    status = next_status(challenge.id, challenge.status, ChallengeAction.START)
    return replace(challenge, status=status, started_at=now)


def complete_challenge(challenge: Challenge, winner_id: str, now: datetime) -> Challenge:
    status = next_status(challenge.id, challenge.status, ChallengeAction.COMPLETE)
    if winner_id not in challenge.participants:
        raise InvalidWinnerError(challenge.id, winner_id)
    return replace(challenge, status=status, winner_id=winner_id, completed_at=now)


def complete_and_settle(
    challenge: Challenge,
    winner_id: str,
    *,
    tiers: TierLookup,
    now: datetime,
    fee_policy: FeePolicy = DEFAULT_FEE_POLICY,
    ladder: LadderContext | None = None,
) -> CompletionResult:
    """Complete, then score the ladder (individual only) and settle the stake.

    The commission tier is the best tier held by any fielded player.
    """
    completed = complete_challenge(challenge, winner_id, now)

    outcome = None
    if completed.kind == ChallengeKind.INDIVIDUAL:
        if ladder is None:
            raise ValueError(f"Challenge {challenge.id}: individual completion needs ladder standings")
        by_id = {p.id: p for p in ladder.players}
        winner = by_id.get(winner_id)
        loser = by_id.get(completed.loser_id or "")
        if winner is None or loser is None:
            raise IneligibleChallengeError(
                f"challenge {challenge.id} participants are missing from the ladder snapshot"
            )
        outcome = apply_result(winner, loser, ladder.players, ladder.policy)

    tier = best_tier(*(tiers.get(member) for member in completed.members))
    settlement = settle(completed.stake_cents, tier, fee_policy)
    return CompletionResult(challenge=completed, settlement=settlement, ladder=outcome)


def cancel_challenge(
    challenge: Challenge, reason: CancelReason, now: datetime
) -> CancellationResult:
    """Withdraw or expire a challenge that has not started; no fee is taken."""
    status = next_status(challenge.id, challenge.status, ChallengeAction.CANCEL)
    cancelled = replace(challenge, status=status, cancel_reason=reason, cancelled_at=now)
    return CancellationResult(challenge=cancelled, refund_cents=challenge.stake_cents)


def void_challenge(
    challenge: Challenge, actor: Actor, reason: str, now: datetime
) -> CancellationResult:
    """Administrative void of a match in play; full refund, no settlement."""
    if not actor.is_privileged:
        raise AdminRequiredError(actor.id)
    status = next_status(challenge.id, challenge.status, ChallengeAction.VOID)
    voided = replace(
        challenge,
        status=status,
        cancel_reason=CancelReason.ADMIN,
        voided_by=actor.id,
        cancelled_at=now,
    )
    audit_logger.info(
        "Challenge voided: challenge=%s by=%s at=%s reason=%s",
        challenge.id,
        actor.id,
        now.isoformat(),
        reason,
    )
    return CancellationResult(challenge=voided, refund_cents=challenge.stake_cents)


def _side_members(
    kind: ChallengeKind, side_id: str | None, members: Sequence[str]
) -> tuple[str, ...]:
    if members:
        return tuple(members)
    if kind == ChallengeKind.INDIVIDUAL and side_id is not None:
        return (side_id,)
    return ()


def _check_team_size(size: int) -> None:
    if size not in TEAM_SIZES:
        raise InvalidTeamSizeError(f"{size} players; allowed sizes are {TEAM_SIZES}")


def _check_venue(venue: Venue | None, side_id: str) -> None:
    if venue is None or venue.id != side_id:
        raise ValueError(f"Hall challenge side {side_id} needs its venue snapshot")
    ensure_battles_unlocked(venue)


def _require_pro(members: Sequence[str], tiers: TierLookup) -> None:
    for member in members:
        if parse_tier(tiers.get(member)) != MembershipTier.PRO:
            raise MembershipRequiredError(member, MembershipTier.PRO.value)
