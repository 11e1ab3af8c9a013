"""ChallengeApplicationService — loads snapshots, runs the pure lifecycle, persists.

Every state-changing call follows the same shape:
  1. hold the per-challenge Redis lock (accept/start/complete/cancel/void/stake)
  2. load the challenge and any players/venues the transition needs
  3. run the pure domain transition (raises leave nothing half-written)
  4. CAS-update every touched row, then commit; rollback on any error

Completion also writes the ladder deltas, the hall record and one PENDING
settlements row for the payment collaborator, all in the same transaction.
"""

import logging
from collections.abc import Iterable, Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pl_challenge.application.schemas import (
    AcceptChallengeRequest,
    CancellationResponse,
    CancelChallengeRequest,
    ChallengeResponse,
    CompleteChallengeRequest,
    CompletionResponse,
    CreateChallengeRequest,
    LadderOutcomeOut,
    ReviseStakeRequest,
    VoidChallengeRequest,
)
from src.pl_challenge.domain.lifecycle import (
    TierLookup,
    accept_challenge,
    cancel_challenge,
    complete_and_settle,
    create_challenge,
    revise_stake,
    start_challenge,
    team_total_stake,
    void_challenge,
)
from src.pl_challenge.domain.models import (
    CancellationResult,
    Challenge,
    LadderContext,
    StakeRules,
)
from src.pl_challenge.domain.repository import ChallengeRepositoryProtocol
from src.pl_challenge.infrastructure.persistence import ChallengeRepository
from src.pl_common.actor import Actor
from src.pl_common.cents import cents_to_display
from src.pl_common.datetime_utils import utc_now
from src.pl_common.entity_lock import EntityLock, default_entity_lock
from src.pl_common.enums import CancelReason, ChallengeKind
from src.pl_common.errors import (
    AdminRequiredError,
    ChallengeNotFoundError,
    IneligibleChallengeError,
    VenueNotFoundError,
)
from src.pl_common.id_generator import generate_id
from src.pl_ladder.application.service import LadderApplicationService, ladder_policy_from_settings
from src.pl_ladder.domain.models import LadderPolicy
from src.pl_ladder.domain.repository import PlayerRepositoryProtocol
from src.pl_ladder.infrastructure.persistence import PlayerRepository
from src.pl_settlement.application.schemas import SettlementRecordOut
from src.pl_settlement.application.service import fee_policy_from_settings
from src.pl_settlement.domain.models import FeePolicy
from src.pl_settlement.domain.records import commission_record
from src.pl_settlement.domain.repository import SettlementRepositoryProtocol
from src.pl_settlement.infrastructure.persistence import SettlementRepository
from src.pl_venue.domain.access import record_hall_result
from src.pl_venue.domain.models import Venue
from src.pl_venue.domain.repository import VenueRepositoryProtocol
from src.pl_venue.infrastructure.persistence import VenueRepository

logger = logging.getLogger(__name__)

_ENTITY = "challenge"


def stake_rules_from_settings() -> StakeRules:
    return StakeRules(
        min_stake_cents=settings.CHALLENGE_MIN_STAKE_CENTS,
        max_stake_cents=settings.CHALLENGE_MAX_STAKE_CENTS,
    )


def _acts_for(actor: Actor, side_id: str | None, members: Iterable[str]) -> bool:
    return actor.is_privileged or actor.id == side_id or actor.id in members


def _cancellation_response(result: CancellationResult, saved: Challenge) -> CancellationResponse:
    return CancellationResponse(
        challenge=ChallengeResponse.from_domain(saved),
        refund_cents=result.refund_cents,
        refund_display=cents_to_display(result.refund_cents),
    )


class ChallengeApplicationService:
    def __init__(
        self,
        repo: ChallengeRepositoryProtocol | None = None,
        players: PlayerRepositoryProtocol | None = None,
        venues: VenueRepositoryProtocol | None = None,
        settlements: SettlementRepositoryProtocol | None = None,
        lock: EntityLock | None = None,
        fee_policy: FeePolicy | None = None,
        ladder_policy: LadderPolicy | None = None,
        stake_rules: StakeRules | None = None,
        hall_win_points: int | None = None,
    ) -> None:
        self._repo: ChallengeRepositoryProtocol = repo or ChallengeRepository()
        self._players: PlayerRepositoryProtocol = players or PlayerRepository()
        self._venues: VenueRepositoryProtocol = venues or VenueRepository()
        self._settlements: SettlementRepositoryProtocol = settlements or SettlementRepository()
        self._ladder = LadderApplicationService(self._players)
        self._lock = lock
        self._fee_policy = fee_policy or fee_policy_from_settings()
        self._ladder_policy = ladder_policy or ladder_policy_from_settings()
        self._stake_rules = stake_rules or stake_rules_from_settings()
        self._hall_win_points = (
            settings.HALL_WIN_POINTS if hall_win_points is None else hall_win_points
        )

    async def _entity_lock(self) -> EntityLock:
        if self._lock is None:
            self._lock = await default_entity_lock()
        return self._lock

    # ------------------------------------------------------------------
    # Loaders
    # ------------------------------------------------------------------

    async def _load(self, db: AsyncSession, challenge_id: str) -> Challenge:
        challenge = await self._repo.get_challenge(db, challenge_id)
        if challenge is None:
            raise ChallengeNotFoundError(challenge_id)
        return challenge

    async def _load_venue(self, db: AsyncSession, venue_id: str) -> Venue:
        venue = await self._venues.get_venue(db, venue_id)
        if venue is None:
            raise VenueNotFoundError(venue_id)
        return venue

    async def _tiers(self, db: AsyncSession, member_ids: Sequence[str]) -> TierLookup:
        # Members with no player row stay absent and resolve to NONE
        players = await self._players.get_players(db, list(dict.fromkeys(member_ids)))
        return {p.id: p.membership_tier for p in players}

    async def _ladder_context(self, db: AsyncSession, challenge: Challenge) -> LadderContext:
        challenger = await self._ladder.get_player(db, challenge.challenger_id)
        roster = await self._players.list_division(db, challenger.division)
        present = {p.id for p in roster}
        missing = [pid for pid in challenge.participants if pid not in present]
        if missing:
            roster += await self._players.get_players(db, missing)
        return LadderContext(players=tuple(roster), policy=self._ladder_policy)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_challenge(self, db: AsyncSession, challenge_id: str) -> ChallengeResponse:
        return ChallengeResponse.from_domain(await self._load(db, challenge_id))

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def create(
        self, db: AsyncSession, actor: Actor, req: CreateChallengeRequest
    ) -> ChallengeResponse:
        if req.kind == ChallengeKind.INDIVIDUAL:
            challenger_id = actor.id
        else:
            challenger_id = req.challenger_id or actor.id
        if req.kind == ChallengeKind.HALL and not actor.is_privileged:
            raise AdminRequiredError(actor.id)
        if not _acts_for(actor, challenger_id, req.challenger_members):
            raise IneligibleChallengeError(f"actor {actor.id} does not act for {challenger_id}")

        if req.per_player_fee_cents is not None:
            stake = team_total_stake(req.per_player_fee_cents, len(req.challenger_members))
        else:
            stake = req.stake_cents or 0

        try:
            if req.kind == ChallengeKind.INDIVIDUAL:
                if req.opponent_id is not None:
                    await self._ladder.check_eligibility(db, challenger_id, req.opponent_id)
                else:
                    await self._ladder.get_player(db, challenger_id)
            venue = (
                await self._load_venue(db, challenger_id)
                if req.kind == ChallengeKind.HALL
                else None
            )
            members = [*req.challenger_members, *req.opponent_members]
            if req.kind == ChallengeKind.INDIVIDUAL:
                members += [challenger_id, *([req.opponent_id] if req.opponent_id else [])]
            challenge = create_challenge(
                challenge_id=generate_id("chl"),
                kind=req.kind,
                challenger_id=challenger_id,
                stake_cents=stake,
                rules=self._stake_rules,
                tiers=await self._tiers(db, members),
                now=utc_now(),
                challenger_members=req.challenger_members,
                opponent_id=req.opponent_id,
                opponent_members=req.opponent_members,
                operator_id=req.operator_id,
                requires_pro_membership=req.requires_pro_membership,
                challenger_venue=venue,
            )
            saved = await self._repo.insert_challenge(db, challenge)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "Challenge created: id=%s kind=%s challenger=%s stake=%d",
            saved.id,
            saved.kind.value,
            saved.challenger_id,
            saved.stake_cents,
        )
        return ChallengeResponse.from_domain(saved)

    async def revise_stake(
        self, db: AsyncSession, challenge_id: str, actor: Actor, req: ReviseStakeRequest
    ) -> ChallengeResponse:
        lock = await self._entity_lock()
        async with lock.hold(_ENTITY, challenge_id):
            try:
                challenge = await self._load(db, challenge_id)
                if not _acts_for(actor, challenge.challenger_id, challenge.challenger_members):
                    raise IneligibleChallengeError(
                        f"only the challenger may revise the stake of {challenge_id}"
                    )
                revised = revise_stake(challenge, req.stake_cents, self._stake_rules)
                saved = await self._repo.update_challenge(db, revised)
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        return ChallengeResponse.from_domain(saved)

    async def accept(
        self, db: AsyncSession, challenge_id: str, actor: Actor, req: AcceptChallengeRequest
    ) -> ChallengeResponse:
        lock = await self._entity_lock()
        async with lock.hold(_ENTITY, challenge_id):
            try:
                challenge = await self._load(db, challenge_id)
                side_id = actor.id if challenge.kind == ChallengeKind.INDIVIDUAL else (
                    req.side_id or actor.id
                )
                if challenge.kind == ChallengeKind.HALL and not actor.is_privileged:
                    raise AdminRequiredError(actor.id)
                # An addressed side is vouched for by its stored roster, never by the request body
                roster = (
                    challenge.opponent_members if challenge.opponent_id is not None else req.members
                )
                if not _acts_for(actor, side_id, roster):
                    raise IneligibleChallengeError(f"actor {actor.id} does not act for {side_id}")
                venue = (
                    await self._load_venue(db, side_id)
                    if challenge.kind == ChallengeKind.HALL
                    else None
                )
                tiers = await self._tiers(
                    db, [side_id, *req.members, *challenge.opponent_members]
                )
                accepted = accept_challenge(
                    challenge,
                    accepting_id=side_id,
                    tiers=tiers,
                    now=utc_now(),
                    accepting_members=req.members,
                    accepting_venue=venue,
                )
                # Open individual challenges are checked against the ladder window on accept
                if challenge.kind == ChallengeKind.INDIVIDUAL and challenge.opponent_id is None:
                    await self._ladder.check_eligibility(db, challenge.challenger_id, side_id)
                saved = await self._repo.update_challenge(db, accepted)
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        logger.info("Challenge accepted: id=%s by=%s", saved.id, saved.opponent_id)
        return ChallengeResponse.from_domain(saved)

    async def start(
        self, db: AsyncSession, challenge_id: str, actor: Actor
    ) -> ChallengeResponse:
        lock = await self._entity_lock()
        async with lock.hold(_ENTITY, challenge_id):
            try:
                challenge = await self._load(db, challenge_id)
                self._require_participant(challenge, actor)
                saved = await self._repo.update_challenge(
                    db, start_challenge(challenge, utc_now())
                )
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        return ChallengeResponse.from_domain(saved)

    async def complete(
        self,
        db: AsyncSession,
        challenge_id: str,
        actor: Actor,
        req: CompleteChallengeRequest,
    ) -> CompletionResponse:
        lock = await self._entity_lock()
        async with lock.hold(_ENTITY, challenge_id):
            try:
                challenge = await self._load(db, challenge_id)
                self._require_participant(challenge, actor)
                ladder = (
                    await self._ladder_context(db, challenge)
                    if challenge.kind == ChallengeKind.INDIVIDUAL
                    else None
                )
                now = utc_now()
                result = complete_and_settle(
                    challenge,
                    req.winner_id,
                    tiers=await self._tiers(db, challenge.members),
                    now=now,
                    fee_policy=self._fee_policy,
                    ladder=ladder,
                )
                saved = await self._repo.update_challenge(db, result.challenge)

                if result.ladder is not None:
                    await self._players.update_standing(db, result.ladder.winner_after)
                    await self._players.update_standing(db, result.ladder.loser_after)
                if saved.kind == ChallengeKind.HALL:
                    await self._record_hall_result(db, saved)

                record = await self._settlements.insert_settlement(
                    db,
                    commission_record(
                        generate_id("stl"),
                        saved.id,
                        req.winner_id,
                        result.settlement,
                        now,
                        operator_id=saved.operator_id,
                    ),
                )
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        logger.info(
            "Challenge settled: id=%s winner=%s stake=%d commission=%d prize=%d settlement=%s",
            saved.id,
            saved.winner_id,
            result.settlement.original_amount_cents,
            result.settlement.rounded_commission_cents,
            result.settlement.prize_pool_cents,
            record.id,
        )
        return CompletionResponse(
            challenge=ChallengeResponse.from_domain(saved),
            settlement=SettlementRecordOut.from_domain(record),
            ladder=LadderOutcomeOut.from_domain(result.ladder) if result.ladder else None,
        )

    async def cancel(
        self,
        db: AsyncSession,
        challenge_id: str,
        actor: Actor,
        req: CancelChallengeRequest,
    ) -> CancellationResponse:
        # TIMEOUT comes from the scheduled-job collaborator, ADMIN from staff
        if req.reason != CancelReason.WITHDRAWN and not actor.is_privileged:
            raise AdminRequiredError(actor.id)
        lock = await self._entity_lock()
        async with lock.hold(_ENTITY, challenge_id):
            try:
                challenge = await self._load(db, challenge_id)
                self._require_participant(challenge, actor)
                result = cancel_challenge(challenge, req.reason, utc_now())
                saved = await self._repo.update_challenge(db, result.challenge)
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        logger.info(
            "Challenge cancelled: id=%s reason=%s refund=%d",
            saved.id,
            req.reason.value,
            result.refund_cents,
        )
        return _cancellation_response(result, saved)

    async def void(
        self,
        db: AsyncSession,
        challenge_id: str,
        actor: Actor,
        req: VoidChallengeRequest,
    ) -> CancellationResponse:
        lock = await self._entity_lock()
        async with lock.hold(_ENTITY, challenge_id):
            try:
                challenge = await self._load(db, challenge_id)
                result = void_challenge(challenge, actor, req.reason, utc_now())
                saved = await self._repo.update_challenge(db, result.challenge)
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        return _cancellation_response(result, saved)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _require_participant(challenge: Challenge, actor: Actor) -> None:
        if _acts_for(actor, None, (*challenge.participants, *challenge.members)):
            return
        raise IneligibleChallengeError(
            f"actor {actor.id} is not a participant of challenge {challenge.id}"
        )

    async def _record_hall_result(self, db: AsyncSession, challenge: Challenge) -> None:
        winner = await self._load_venue(db, challenge.winner_id or "")
        loser = await self._load_venue(db, challenge.loser_id or "")
        winner_after, loser_after = record_hall_result(winner, loser, self._hall_win_points)
        await self._venues.update_venue(db, winner_after)
        await self._venues.update_venue(db, loser_after)
