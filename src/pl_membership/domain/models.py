"""Domain models for pl_membership — pure dataclasses, no business logic."""

from dataclasses import dataclass

from src.pl_common.cents import BasisPoints
from src.pl_common.enums import MembershipTier


@dataclass(frozen=True)
class MembershipBenefits:
    """Canonical benefit set; every tier carries every field."""

    tier: MembershipTier
    commission_rate_bps: BasisPoints
    tournament_entry_fee_cents: int
    free_tournament_entry: bool
    monthly_dues_cents: int
    operator_dues_cut_cents: int  # operator's share of monthly dues
    perks: tuple[str, ...] = ()


@dataclass(frozen=True)
class DuesSplit:
    tier: MembershipTier
    gross_cents: int
    operator_cents: int
    platform_cents: int
