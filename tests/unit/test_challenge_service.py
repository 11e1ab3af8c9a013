"""Unit tests for ChallengeApplicationService using mock repositories."""

from unittest.mock import AsyncMock

import pytest

from src.pl_challenge.application.schemas import (
    AcceptChallengeRequest,
    CancelChallengeRequest,
    CompleteChallengeRequest,
    CreateChallengeRequest,
    VoidChallengeRequest,
)
from src.pl_challenge.application.service import ChallengeApplicationService
from src.pl_challenge.domain.models import Challenge, StakeRules
from src.pl_common.actor import Actor
from src.pl_common.entity_lock import EntityLock
from src.pl_common.enums import (
    ActorRole,
    CancelReason,
    ChallengeKind,
    ChallengeStatus,
    MembershipTier,
)
from src.pl_common.errors import (
    AdminRequiredError,
    AlreadyAcceptedError,
    ChallengeNotFoundError,
    ConcurrentModificationError,
    IneligibleChallengeError,
)
from src.pl_ladder.domain.models import LadderPolicy, Player
from src.pl_settlement.domain.models import FeePolicy
from src.pl_venue.domain.models import Venue

_STAFF = Actor(id="staff1", role=ActorRole.STAFF)


def _echo(_db, entity):
    return entity


def _players() -> dict[str, Player]:
    return {
        "p0": Player(id="p0", rating=700, points=500),
        "p2": Player(id="p2", rating=700, points=400, membership_tier=MembershipTier.PRO),
        "p1": Player(id="p1", rating=700, points=300, membership_tier=MembershipTier.BASIC),
    }


def _challenge(status: ChallengeStatus = ChallengeStatus.IN_PROGRESS, **kwargs) -> Challenge:
    defaults = dict(
        id="chl_1",
        kind=ChallengeKind.INDIVIDUAL,
        challenger_id="p1",
        challenger_members=("p1",),
        opponent_id="p2",
        opponent_members=("p2",),
        stake_cents=10_000,
        status=status,
    )
    defaults.update(kwargs)
    return Challenge(**defaults)


@pytest.fixture
def db():
    return AsyncMock()


@pytest.fixture
def redis():
    mock = AsyncMock()
    mock.set.return_value = True
    mock.eval.return_value = 1
    return mock


@pytest.fixture
def repos():
    players = _players()
    challenge_repo = AsyncMock()
    challenge_repo.insert_challenge.side_effect = _echo
    challenge_repo.update_challenge.side_effect = _echo
    player_repo = AsyncMock()
    player_repo.get_player.side_effect = lambda _db, pid: players.get(pid)
    player_repo.get_players.side_effect = lambda _db, ids: [players[i] for i in ids if i in players]
    player_repo.list_division.return_value = list(players.values())
    player_repo.update_standing.side_effect = _echo
    venue_repo = AsyncMock()
    venue_repo.update_venue.side_effect = _echo
    settlement_repo = AsyncMock()
    settlement_repo.insert_settlement.side_effect = _echo
    return challenge_repo, player_repo, venue_repo, settlement_repo


@pytest.fixture
def svc(repos, redis) -> ChallengeApplicationService:
    challenge_repo, player_repo, venue_repo, settlement_repo = repos
    return ChallengeApplicationService(
        repo=challenge_repo,
        players=player_repo,
        venues=venue_repo,
        settlements=settlement_repo,
        lock=EntityLock(redis, ttl_ms=5_000, wait_ms=50),
        fee_policy=FeePolicy(),
        ladder_policy=LadderPolicy(),
        stake_rules=StakeRules(),
        hall_win_points=3,
    )


class TestCreate:
    async def test_individual_challenger_is_actor(self, svc, repos, db) -> None:
        req = CreateChallengeRequest(stake_cents=5_000, opponent_id="p2", challenger_id="p0")
        resp = await svc.create(db, Actor(id="p1"), req)
        assert resp.challenger_id == "p1"
        assert resp.status == "OPEN"
        assert resp.allowed_actions == ["REVISE_STAKE", "ACCEPT", "CANCEL"]
        db.commit.assert_awaited_once()

    async def test_individual_outside_window(self, svc, repos, db) -> None:
        # p0 is the king; p1 sits two groups below
        req = CreateChallengeRequest(stake_cents=5_000, opponent_id="p0")
        with pytest.raises(IneligibleChallengeError):
            await svc.create(db, Actor(id="p1"), req)
        repos[0].insert_challenge.assert_not_awaited()
        db.rollback.assert_awaited_once()

    async def test_hall_needs_privileged_actor(self, svc, repos, db) -> None:
        req = CreateChallengeRequest(kind=ChallengeKind.HALL, stake_cents=5_000, challenger_id="v1")
        with pytest.raises(AdminRequiredError):
            await svc.create(db, Actor(id="p1"), req)
        repos[0].insert_challenge.assert_not_awaited()

    async def test_team_per_player_fee(self, svc, db) -> None:
        req = CreateChallengeRequest(
            kind=ChallengeKind.TEAM,
            per_player_fee_cents=2_000,
            challenger_id="t1",
            challenger_members=["a", "b", "c"],
        )
        resp = await svc.create(db, Actor(id="a"), req)
        assert resp.stake_cents == 6_000
        assert resp.challenger_id == "t1"

    async def test_team_actor_must_act_for_side(self, svc, db) -> None:
        req = CreateChallengeRequest(
            kind=ChallengeKind.TEAM,
            stake_cents=6_000,
            challenger_id="t1",
            challenger_members=["a", "b"],
        )
        with pytest.raises(IneligibleChallengeError):
            await svc.create(db, Actor(id="z"), req)


class TestAccept:
    async def test_accept_open_individual(self, svc, repos, db) -> None:
        repos[0].get_challenge.return_value = _challenge(
            ChallengeStatus.OPEN, challenger_id="p1", challenger_members=("p1",),
            opponent_id=None, opponent_members=(),
        )
        resp = await svc.accept(db, "chl_1", Actor(id="p2"), AcceptChallengeRequest())
        assert resp.status == "ACCEPTED"
        assert resp.opponent_id == "p2"

    async def test_addressed_team_checks_stored_roster(self, svc, repos, db) -> None:
        repos[0].get_challenge.return_value = _challenge(
            ChallengeStatus.OPEN, kind=ChallengeKind.TEAM,
            challenger_id="t1", challenger_members=("a", "b"),
            opponent_id="t2", opponent_members=("d", "e"),
        )
        # Listing yourself in the request body does not make you a member of t2
        with pytest.raises(IneligibleChallengeError):
            await svc.accept(
                db, "chl_1", Actor(id="z"), AcceptChallengeRequest(side_id="t2", members=["z", "y"])
            )
        repos[0].update_challenge.assert_not_awaited()

        resp = await svc.accept(db, "chl_1", Actor(id="d"), AcceptChallengeRequest(side_id="t2"))
        assert resp.status == "ACCEPTED"
        assert resp.opponent_id == "t2"

    async def test_re_accept_rolls_back_and_releases(self, svc, repos, redis, db) -> None:
        repos[0].get_challenge.return_value = _challenge(ChallengeStatus.ACCEPTED)
        with pytest.raises(AlreadyAcceptedError):
            await svc.accept(db, "chl_1", Actor(id="p2"), AcceptChallengeRequest())
        db.rollback.assert_awaited_once()
        repos[0].update_challenge.assert_not_awaited()
        redis.eval.assert_awaited_once()

    async def test_lost_race_surfaces(self, svc, repos, db) -> None:
        repos[0].get_challenge.return_value = _challenge(ChallengeStatus.OPEN)
        repos[0].update_challenge.side_effect = ConcurrentModificationError("Challenge", "chl_1")
        with pytest.raises(ConcurrentModificationError):
            await svc.accept(db, "chl_1", Actor(id="p2"), AcceptChallengeRequest())
        db.commit.assert_not_awaited()
        db.rollback.assert_awaited_once()


class TestComplete:
    async def test_individual_scores_ladder_and_settles(self, svc, repos, db) -> None:
        challenge_repo, player_repo, _, settlement_repo = repos
        challenge_repo.get_challenge.return_value = _challenge()

        resp = await svc.complete(
            db, "chl_1", Actor(id="p1"), CompleteChallengeRequest(winner_id="p1")
        )

        assert resp.challenge.status == "COMPLETED"
        assert resp.challenge.winner_id == "p1"
        # Best tier in the match is PRO: 500 bp of 10_000
        assert resp.settlement.commission_cents == 500
        assert resp.settlement.payout_cents == 9_500
        assert resp.ladder is not None
        assert resp.ladder.winner.points_delta == 50
        assert resp.ladder.loser.points_delta == -20
        written = [c.args[1] for c in player_repo.update_standing.await_args_list]
        assert [(p.id, p.points) for p in written] == [("p1", 350), ("p2", 380)]
        record = settlement_repo.insert_settlement.await_args.args[1]
        assert record.reference_id == "chl_1"
        assert record.payee_id == "p1"
        db.commit.assert_awaited_once()

    async def test_hall_updates_venue_records(self, svc, repos, db) -> None:
        challenge_repo, player_repo, venue_repo, _ = repos
        challenge_repo.get_challenge.return_value = _challenge(
            kind=ChallengeKind.HALL,
            challenger_id="v1",
            challenger_members=(),
            opponent_id="v2",
            opponent_members=(),
        )
        venues = {"v1": Venue(id="v1", name="North"), "v2": Venue(id="v2", name="South")}
        venue_repo.get_venue.side_effect = lambda _db, vid: venues.get(vid)

        resp = await svc.complete(db, "chl_1", _STAFF, CompleteChallengeRequest(winner_id="v2"))

        assert resp.ladder is None
        assert resp.settlement.commission_cents == 1_000
        player_repo.update_standing.assert_not_awaited()
        winner, loser = [c.args[1] for c in venue_repo.update_venue.await_args_list]
        assert (winner.id, winner.wins, winner.points) == ("v2", 1, 3)
        assert (loser.id, loser.losses) == ("v1", 1)

    async def test_outsider_cannot_complete(self, svc, repos, db) -> None:
        repos[0].get_challenge.return_value = _challenge()
        with pytest.raises(IneligibleChallengeError):
            await svc.complete(db, "chl_1", Actor(id="p9"), CompleteChallengeRequest(winner_id="p1"))
        repos[3].insert_settlement.assert_not_awaited()

    async def test_missing_challenge(self, svc, repos, db) -> None:
        repos[0].get_challenge.return_value = None
        with pytest.raises(ChallengeNotFoundError):
            await svc.complete(db, "chl_x", _STAFF, CompleteChallengeRequest(winner_id="p1"))


class TestCancelAndVoid:
    async def test_withdraw_refunds(self, svc, repos, db) -> None:
        repos[0].get_challenge.return_value = _challenge(ChallengeStatus.ACCEPTED)
        resp = await svc.cancel(db, "chl_1", Actor(id="p1"), CancelChallengeRequest())
        assert resp.challenge.status == "CANCELLED"
        assert resp.refund_cents == 10_000
        assert resp.refund_display == "$100.00"

    async def test_timeout_needs_privilege(self, svc, redis, db) -> None:
        with pytest.raises(AdminRequiredError):
            await svc.cancel(
                db, "chl_1", Actor(id="p1"), CancelChallengeRequest(reason=CancelReason.TIMEOUT)
            )
        redis.set.assert_not_awaited()

    async def test_void_by_staff(self, svc, repos, db) -> None:
        repos[0].get_challenge.return_value = _challenge()
        resp = await svc.void(db, "chl_1", _STAFF, VoidChallengeRequest(reason="table dispute"))
        assert resp.challenge.cancel_reason == "ADMIN"
        assert resp.challenge.voided_by == "staff1"
        assert resp.refund_cents == 10_000

    async def test_void_by_player_rejected(self, svc, repos, db) -> None:
        repos[0].get_challenge.return_value = _challenge()
        with pytest.raises(AdminRequiredError):
            await svc.void(db, "chl_1", Actor(id="p1"), VoidChallengeRequest(reason="x"))
        db.rollback.assert_awaited_once()
