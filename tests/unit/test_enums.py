"""Tests for pl_common.enums — values must match DB CHECK constraints."""

from src.pl_common.enums import (
    CancelReason,
    ChallengeKind,
    ChallengeStatus,
    MembershipTier,
    PotGameStatus,
    SettlementSource,
    Stakeholder,
)


class TestAllEnumsAreStr:
    def test_challenge_status_is_str(self) -> None:
        assert isinstance(ChallengeStatus.IN_PROGRESS, str)
        assert ChallengeStatus.IN_PROGRESS == "IN_PROGRESS"

    def test_membership_tier_is_str(self) -> None:
        assert MembershipTier.PRO == "PRO"

    def test_settlement_source_is_str(self) -> None:
        assert SettlementSource.POT_PAYOUT == "POT_PAYOUT"


class TestEnumMembers:
    def test_challenge_status_values(self) -> None:
        assert {s.value for s in ChallengeStatus} == {
            "OPEN", "ACCEPTED", "IN_PROGRESS", "COMPLETED", "CANCELLED",
        }

    def test_challenge_kinds(self) -> None:
        assert {k.value for k in ChallengeKind} == {"INDIVIDUAL", "TEAM", "HALL"}

    def test_pot_game_status_values(self) -> None:
        assert {s.value for s in PotGameStatus} == {"OPEN", "ACTIVE", "COMPLETED"}

    def test_cancel_reasons(self) -> None:
        assert {r.value for r in CancelReason} == {"WITHDRAWN", "TIMEOUT", "ADMIN"}

    def test_platform_listed_first(self) -> None:
        assert list(Stakeholder)[0] == Stakeholder.PLATFORM

    def test_settlement_sources(self) -> None:
        assert {s.value for s in SettlementSource} == {
            "CHALLENGE_COMMISSION", "POT_PAYOUT", "ESCROW_FEE", "MEMBERSHIP_DUES",
        }
