"""Pydantic schemas for pl_membership API responses."""

from pydantic import BaseModel

from src.pl_common.cents import cents_to_display
from src.pl_membership.domain.models import MembershipBenefits
from src.pl_membership.domain.tiers import split_membership_dues


class MembershipBenefitsResponse(BaseModel):
    tier: str
    commission_rate_bps: int
    tournament_entry_fee_cents: int
    tournament_entry_fee_display: str
    free_tournament_entry: bool
    monthly_dues_cents: int
    monthly_dues_display: str
    operator_dues_cents: int
    platform_dues_cents: int
    perks: list[str]

    @classmethod
    def from_domain(cls, benefits: MembershipBenefits) -> "MembershipBenefitsResponse":
        dues = split_membership_dues(benefits.tier)
        return cls(
            tier=benefits.tier.value,
            commission_rate_bps=benefits.commission_rate_bps,
            tournament_entry_fee_cents=benefits.tournament_entry_fee_cents,
            tournament_entry_fee_display=cents_to_display(benefits.tournament_entry_fee_cents),
            free_tournament_entry=benefits.free_tournament_entry,
            monthly_dues_cents=dues.gross_cents,
            monthly_dues_display=cents_to_display(dues.gross_cents),
            operator_dues_cents=dues.operator_cents,
            platform_dues_cents=dues.platform_cents,
            perks=list(benefits.perks),
        )
