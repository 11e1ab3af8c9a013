"""Integer arithmetic utilities for cents-based league money.

All stakes, fees, shares and pots use int (cents). No float, no Decimal.
Rates are basis points (1 bp = 0.01%, 10000 bp = 100%).
"""

from typing import NewType

from src.pl_common.errors import InvalidAmountError

BasisPoints = NewType("BasisPoints", int)

BPS_DENOMINATOR = 10_000
CENTS_PER_UNIT = 100


def validate_amount(amount: int) -> None:
    """Reject non-positive amounts."""
    if amount <= 0:
        raise InvalidAmountError(f"Amount must be positive, got {amount} cents")


def validate_bps(rate_bps: int) -> BasisPoints:
    if not (0 <= rate_bps <= BPS_DENOMINATOR):
        raise ValueError(f"Rate must be between 0 and {BPS_DENOMINATOR} bps, got {rate_bps}")
    return BasisPoints(rate_bps)


def cents_to_display(cents: int) -> str:
    """Convert cents to display string: 6500 -> '$65.00', -1200 -> '-$12.00'."""
    if cents < 0:
        abs_cents = -cents
        return f"-${abs_cents // 100:,}.{abs_cents % 100:02d}"
    return f"${cents // 100:,}.{cents % 100:02d}"


def ceil_bps(amount: int, rate_bps: int) -> int:
    """Apply a bps rate with ceiling division (platform never loses).

    fee = ceil(amount * rate_bps / 10000)
    Using integer ceiling: (a + b - 1) // b
    """
    if amount == 0 or rate_bps == 0:
        return 0
    return (amount * rate_bps + BPS_DENOMINATOR - 1) // BPS_DENOMINATOR


def round_up_to_unit(cents: int, unit: int = CENTS_PER_UNIT) -> int:
    """Round up to the next whole currency unit: 1005 -> 1100, 1100 -> 1100, 0 -> 0."""
    return -(-cents // unit) * unit


def percent_share(amount: int, percent: int) -> int:
    """Floor share of amount at a whole percentage."""
    return amount * percent // 100
