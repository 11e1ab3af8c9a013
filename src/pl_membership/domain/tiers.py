"""Membership tier resolver.

One read-only table maps each tier to its benefit set. Tier tags coming
from the identity collaborator are free-form strings; anything that does
not resolve to a known tier is treated as a non-member (fail-closed: an
unrecognised tag never earns a discount).
"""

from src.pl_common.cents import BasisPoints, validate_bps
from src.pl_common.enums import MembershipTier
from src.pl_membership.domain.models import DuesSplit, MembershipBenefits

_BENEFITS: dict[MembershipTier, MembershipBenefits] = {
    MembershipTier.NONE: MembershipBenefits(
        tier=MembershipTier.NONE,
        commission_rate_bps=validate_bps(1000),
        tournament_entry_fee_cents=3000,
        free_tournament_entry=False,
        monthly_dues_cents=0,
        operator_dues_cut_cents=0,
    ),
    MembershipTier.BASIC: MembershipBenefits(
        tier=MembershipTier.BASIC,
        commission_rate_bps=validate_bps(800),
        tournament_entry_fee_cents=2500,
        free_tournament_entry=False,
        monthly_dues_cents=2500,
        operator_dues_cut_cents=700,
        perks=("ladder_access", "reduced_commission"),
    ),
    MembershipTier.PRO: MembershipBenefits(
        tier=MembershipTier.PRO,
        commission_rate_bps=validate_bps(500),
        tournament_entry_fee_cents=0,
        free_tournament_entry=True,
        monthly_dues_cents=6000,
        operator_dues_cut_cents=1000,
        perks=(
            "ladder_access",
            "lowest_commission",
            "free_tournament_entry",
            "team_challenges",
            "priority_seeding",
        ),
    ),
}

# Pricing-page names that map onto a canonical tier
_ALIASES: dict[str, MembershipTier] = {
    "ROOKIE": MembershipTier.BASIC,
    "NONMEMBER": MembershipTier.NONE,
}

# Best first
_TIER_ORDER: tuple[MembershipTier, ...] = (
    MembershipTier.PRO,
    MembershipTier.BASIC,
    MembershipTier.NONE,
)


def parse_tier(tag: str | MembershipTier | None) -> MembershipTier:
    """Normalise a tier tag; unknown or missing → NONE."""
    if isinstance(tag, MembershipTier):
        return tag
    if not tag:
        return MembershipTier.NONE
    key = tag.strip().upper()
    if key in _ALIASES:
        return _ALIASES[key]
    try:
        return MembershipTier(key)
    except ValueError:
        return MembershipTier.NONE


def resolve_benefits(tag: str | MembershipTier | None) -> MembershipBenefits:
    return _BENEFITS[parse_tier(tag)]


def commission_rate(tag: str | MembershipTier | None) -> BasisPoints:
    return resolve_benefits(tag).commission_rate_bps


def tournament_entry_fee(tag: str | MembershipTier | None) -> int:
    return resolve_benefits(tag).tournament_entry_fee_cents


def best_tier(*tags: str | MembershipTier | None) -> MembershipTier:
    """Best tier held by any of the given tags (PRO > BASIC > NONE)."""
    held = {parse_tier(t) for t in tags}
    for tier in _TIER_ORDER:
        if tier in held:
            return tier
    return MembershipTier.NONE


def split_membership_dues(tag: str | MembershipTier | None) -> DuesSplit:
    """Monthly dues split: operator keeps a flat cut, the platform keeps the rest."""
    benefits = resolve_benefits(tag)
    return DuesSplit(
        tier=benefits.tier,
        gross_cents=benefits.monthly_dues_cents,
        operator_cents=benefits.operator_dues_cut_cents,
        platform_cents=benefits.monthly_dues_cents - benefits.operator_dues_cut_cents,
    )
