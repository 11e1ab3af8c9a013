"""Tests for pl_ladder.domain — standings, challenge window, streaks, king's rule."""

import logging

import pytest

from src.pl_common.enums import Division
from src.pl_common.errors import IneligibleChallengeError, PlayerNotFoundError
from src.pl_ladder.domain.models import LadderPolicy, Player, division_for
from src.pl_ladder.domain.ranking import (
    apply_result,
    check_challenge_eligibility,
    position_of,
    standings,
)


def _p(player_id: str, points: int, rating: int = 700, streak: int = 0) -> Player:
    return Player(id=player_id, rating=rating, points=points, streak=streak)


def _ladder() -> list[Player]:
    # Positions: a=1, b=2, c=2, d=4, e=5, f=6
    return [
        _p("a", 500),
        _p("b", 400),
        _p("c", 400),
        _p("d", 300),
        _p("e", 200),
        _p("f", 100),
    ]


def _by_id(players: list[Player]) -> dict[str, Player]:
    return {p.id: p for p in players}


class TestDivision:
    def test_boundary(self) -> None:
        assert division_for(600) == Division.HIGH
        assert division_for(599) == Division.LOW

    def test_player_division_is_derived(self) -> None:
        assert _p("x", 0, rating=650).division == Division.HIGH
        assert _p("y", 0, rating=320).division == Division.LOW


class TestStandings:
    def test_competition_ranking(self) -> None:
        table = standings(_ladder())
        assert [(row.player.id, row.position) for row in table] == [
            ("a", 1), ("b", 2), ("c", 2), ("d", 4), ("e", 5), ("f", 6),
        ]

    def test_ties_keep_input_order(self) -> None:
        players = [_p("c", 400), _p("b", 400)]
        assert [row.player.id for row in standings(players)] == ["c", "b"]

    def test_division_filter(self) -> None:
        players = [*_ladder(), _p("low", 900, rating=400)]
        high = standings(players, Division.HIGH)
        low = standings(players, Division.LOW)
        assert "low" not in {row.player.id for row in high}
        assert [(row.player.id, row.position) for row in low] == [("low", 1)]

    def test_position_of_missing_player(self) -> None:
        with pytest.raises(PlayerNotFoundError):
            position_of(standings(_ladder()), "zz")


class TestChallengeEligibility:
    def test_next_group_above_allowed(self) -> None:
        ladder = _by_id(_ladder())
        check_challenge_eligibility(ladder["d"], ladder["b"], _ladder())
        check_challenge_eligibility(ladder["d"], ladder["c"], _ladder())

    def test_same_position_allowed(self) -> None:
        ladder = _by_id(_ladder())
        check_challenge_eligibility(ladder["b"], ladder["c"], _ladder())

    def test_two_groups_above_rejected(self) -> None:
        ladder = _by_id(_ladder())
        with pytest.raises(IneligibleChallengeError):
            check_challenge_eligibility(ladder["d"], ladder["a"], _ladder())

    def test_downward_rejected(self) -> None:
        ladder = _by_id(_ladder())
        with pytest.raises(IneligibleChallengeError):
            check_challenge_eligibility(ladder["a"], ladder["b"], _ladder())

    def test_self_rejected(self) -> None:
        ladder = _by_id(_ladder())
        with pytest.raises(IneligibleChallengeError):
            check_challenge_eligibility(ladder["b"], ladder["b"], _ladder())

    def test_cross_division_rejected(self) -> None:
        high = _p("h", 100, rating=600)
        low = _p("l", 100, rating=599)
        with pytest.raises(IneligibleChallengeError, match="different divisions"):
            check_challenge_eligibility(low, high, [high, low])


class TestStreakBonus:
    def test_third_consecutive_win_earns_bonus(self) -> None:
        ladder = _by_id(_ladder())
        winner = _p("d", 300, streak=2)
        outcome = apply_result(winner, ladder["e"], _ladder())
        assert outcome.winner.streak_after == 3
        assert outcome.winner.streak_bonus_awarded is True
        assert outcome.winner.points_delta == 50 + 25
        assert outcome.winner_after.points == 375

    def test_fourth_win_no_bonus(self) -> None:
        ladder = _by_id(_ladder())
        winner = _p("d", 300, streak=3)
        outcome = apply_result(winner, ladder["e"], _ladder())
        assert outcome.winner.streak_after == 4
        assert outcome.winner.streak_bonus_awarded is False
        assert outcome.winner.points_delta == 50

    def test_loss_resets_streak(self) -> None:
        ladder = _by_id(_ladder())
        loser = _p("b", 400, streak=5)
        outcome = apply_result(ladder["d"], loser, _ladder())
        assert outcome.loser_after.streak == 0
        assert outcome.loser.points_delta == -20
        assert outcome.loser_after.points == 380
        assert outcome.king_dethroned is False


class TestKingsRule:
    def test_king_win_keeps_top(self) -> None:
        ladder = _by_id(_ladder())
        outcome = apply_result(ladder["a"], ladder["b"], _ladder())
        assert outcome.winner.position_before == 1
        assert outcome.winner.position_after == 1
        assert outcome.king_dethroned is False

    def test_king_loss_drops_by_policy(self) -> None:
        ladder = _by_id(_ladder())
        outcome = apply_result(ladder["b"], ladder["a"], _ladder())
        assert outcome.king_dethroned is True
        assert outcome.loser.position_before == 1
        # b 450, c 400, d 300 stay ahead; the king lands just under d
        assert outcome.loser_after.points == 299
        assert outcome.loser.position_after == 4
        assert outcome.winner.position_after == 1

    @pytest.mark.parametrize("drop", [3, 4, 5, 6, 7])
    def test_king_drop_within_window(self, drop: int) -> None:
        players = [_p(f"p{i}", 1000 - i * 10) for i in range(12)]
        ladder = _by_id(players)
        outcome = apply_result(ladder["p1"], ladder["p0"], players, LadderPolicy(king_drop=drop))
        fallen = outcome.loser.position_after - outcome.loser.position_before
        assert 3 <= fallen <= 7
        assert fallen == drop

    def test_tie_at_landing_pushes_below_the_tie(self) -> None:
        players = [_p("a", 500), _p("b", 400), _p("c", 400), _p("d", 300), _p("e", 300), _p("f", 100)]
        ladder = _by_id(players)
        # After b wins: b 450, c 400, d 300, e 300, f 100; d/e tie spans the landing slot
        outcome = apply_result(ladder["b"], ladder["a"], players)
        assert outcome.loser_after.points == 299
        assert outcome.loser.position_after == 5

    def test_wide_tie_extends_drop_past_seven(self, caplog: pytest.LogCaptureFixture) -> None:
        # No points value can split a seven-way tie, so the king lands below all of it
        players = [_p("king", 200), _p("w", 150), *[_p(f"t{i}", 90) for i in range(7)], _p("z", 80)]
        ladder = _by_id(players)
        with caplog.at_level(logging.WARNING, logger="src.pl_ladder.domain.ranking"):
            outcome = apply_result(ladder["w"], ladder["king"], players)
        assert outcome.king_dethroned is True
        assert outcome.loser_after.points == 89
        assert outcome.loser.position_before == 1
        assert outcome.loser.position_after == 9
        assert "King drop extended to 8" in caplog.text

    def test_small_ladder_king_goes_last(self) -> None:
        players = [_p("a", 500), _p("b", 400), _p("c", 300)]
        ladder = _by_id(players)
        outcome = apply_result(ladder["b"], ladder["a"], players)
        assert outcome.loser.position_after == 3
        assert outcome.loser_after.points == 299

    def test_inputs_are_not_mutated(self) -> None:
        players = _ladder()
        snapshot = list(players)
        apply_result(players[1], players[0], players)
        assert players == snapshot


class TestLadderPolicy:
    def test_king_drop_bounds(self) -> None:
        with pytest.raises(ValueError):
            LadderPolicy(king_drop=2)
        with pytest.raises(ValueError):
            LadderPolicy(king_drop=8)

    def test_streak_every_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            LadderPolicy(streak_bonus_every=0)
