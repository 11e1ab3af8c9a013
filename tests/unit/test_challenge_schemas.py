"""Tests for pl_challenge request schema validation."""

import pytest
from pydantic import ValidationError

from src.pl_challenge.application.schemas import CreateChallengeRequest
from src.pl_common.enums import ChallengeKind


class TestCreateChallengeRequest:
    def test_opponent_members_without_opponent_rejected(self) -> None:
        with pytest.raises(ValidationError, match="opponent_members requires opponent_id"):
            CreateChallengeRequest(stake_cents=5_000, opponent_members=["x"])

    def test_open_challenge_without_members(self) -> None:
        req = CreateChallengeRequest(stake_cents=5_000)
        assert req.opponent_id is None
        assert req.opponent_members == []

    def test_addressed_team_with_members(self) -> None:
        req = CreateChallengeRequest(
            kind=ChallengeKind.TEAM,
            stake_cents=5_000,
            challenger_id="t1",
            challenger_members=["a", "b"],
            opponent_id="t2",
            opponent_members=["c", "d"],
        )
        assert req.opponent_members == ["c", "d"]

    @pytest.mark.parametrize(
        "fields",
        [
            {},
            {"stake_cents": 5_000, "per_player_fee_cents": 2_500},
        ],
    )
    def test_exactly_one_stake_form(self, fields: dict) -> None:
        with pytest.raises(ValidationError, match="exactly one"):
            CreateChallengeRequest(kind=ChallengeKind.TEAM, **fields)

    def test_per_player_fee_is_team_only(self) -> None:
        with pytest.raises(ValidationError, match="only valid for TEAM"):
            CreateChallengeRequest(per_player_fee_cents=2_500)
