"""Fee settlement engine — commission, round-up policy, stakeholder split.

Rounding always favours the platform margin:
  raw      = ceil(amount * rate_bps / 10000)
  rounded  = raw rounded up to the next whole dollar (when enabled)
  share_i  = floor(rounded * pct_i / 100)
  prize    = amount - rounded
Shares may sum to less than `rounded`; the remainder stays with the
first-listed stakeholder and is never redistributed.

Escrow fees on held side-bet pools use a volume-tiered rate instead of
the membership rate, and go to the platform alone.
"""

from src.pl_common.cents import (
    BasisPoints,
    ceil_bps,
    percent_share,
    round_up_to_unit,
    validate_amount,
    validate_bps,
)
from src.pl_common.enums import MembershipTier, Stakeholder
from src.pl_membership.domain.tiers import commission_rate
from src.pl_settlement.domain.models import EscrowPolicy, FeePolicy, SettlementResult

DEFAULT_FEE_POLICY = FeePolicy()
DEFAULT_ESCROW_POLICY = EscrowPolicy()


def settle(
    amount_cents: int,
    membership_tier: str | MembershipTier | None,
    policy: FeePolicy = DEFAULT_FEE_POLICY,
) -> SettlementResult:
    """Pure settlement of a stake; raises InvalidAmountError if amount <= 0."""
    validate_amount(amount_cents)
    rate = commission_rate(membership_tier)
    raw = ceil_bps(amount_cents, rate)
    rounded = round_up_to_unit(raw) if policy.round_up_to_dollar else raw
    # A commission can never exceed the stake it is taken from
    rounded = min(rounded, amount_cents)
    shares = {stakeholder: percent_share(rounded, pct) for stakeholder, pct in policy.splits}
    return SettlementResult(
        original_amount_cents=amount_cents,
        commission_rate_bps=rate,
        raw_commission_cents=raw,
        rounded_commission_cents=rounded,
        shares=shares,
        prize_pool_cents=amount_cents - rounded,
    )


def escrow_rate(pool_cents: int, policy: EscrowPolicy = DEFAULT_ESCROW_POLICY) -> BasisPoints:
    """Pools at or above the threshold pay the high-volume rate."""
    if pool_cents >= policy.high_volume_threshold_cents:
        return validate_bps(policy.high_volume_rate_bps)
    return validate_bps(policy.default_rate_bps)


def settle_escrow(
    pool_cents: int, policy: EscrowPolicy = DEFAULT_ESCROW_POLICY
) -> SettlementResult:
    """Escrow fee on a held pool: ceil bps, no dollar round-up, platform only."""
    validate_amount(pool_cents)
    rate = escrow_rate(pool_cents, policy)
    fee = min(ceil_bps(pool_cents, rate), pool_cents)
    return SettlementResult(
        original_amount_cents=pool_cents,
        commission_rate_bps=rate,
        raw_commission_cents=fee,
        rounded_commission_cents=fee,
        shares={Stakeholder.PLATFORM: fee},
        prize_pool_cents=pool_cents - fee,
    )
