"""Unit tests for LadderApplicationService using a mock repository."""

from unittest.mock import AsyncMock

import pytest

from src.pl_common.enums import Division
from src.pl_common.errors import IneligibleChallengeError, PlayerNotFoundError
from src.pl_ladder.application.service import LadderApplicationService
from src.pl_ladder.domain.models import Player

_PLAYERS = {
    "a": Player(id="a", rating=650, points=500, name="Ada"),
    "b": Player(id="b", rating=640, points=400),
    "c": Player(id="c", rating=630, points=400),
    "d": Player(id="d", rating=620, points=100),
    "low": Player(id="low", rating=300, points=900),
}


@pytest.fixture
def db():
    return AsyncMock()


@pytest.fixture
def repo():
    mock = AsyncMock()
    mock.get_player.side_effect = lambda _db, pid: _PLAYERS.get(pid)
    mock.list_division.return_value = [_PLAYERS[k] for k in ("a", "b", "c", "d")]
    return mock


class TestStandings:
    async def test_competition_positions(self, repo, db) -> None:
        resp = await LadderApplicationService(repo).get_standings(db, Division.HIGH)
        assert resp.division == "HIGH"
        assert [(s.player_id, s.position) for s in resp.standings] == [
            ("a", 1), ("b", 2), ("c", 2), ("d", 4),
        ]
        assert resp.standings[0].name == "Ada"
        repo.list_division.assert_awaited_once_with(db, Division.HIGH)


class TestEligibility:
    async def test_next_group_up(self, repo, db) -> None:
        await LadderApplicationService(repo).check_eligibility(db, "d", "c")

    async def test_two_groups_up_rejected(self, repo, db) -> None:
        with pytest.raises(IneligibleChallengeError):
            await LadderApplicationService(repo).check_eligibility(db, "d", "a")

    async def test_cross_division_rejected(self, repo, db) -> None:
        with pytest.raises(IneligibleChallengeError):
            await LadderApplicationService(repo).check_eligibility(db, "d", "low")

    async def test_unknown_player(self, repo, db) -> None:
        with pytest.raises(PlayerNotFoundError):
            await LadderApplicationService(repo).check_eligibility(db, "d", "ghost")
