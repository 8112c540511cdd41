"""Shared high-precision Decimal utilities for execution math.

Amounts are integers in base units (up to 10^36 for 18-decimal tokens) and
prices can be tiny ratios, so every multiplication and division of the
execution path runs under a wide context to keep rounding out of the
result until the explicit floor.
"""

from __future__ import annotations

import decimal
from decimal import ROUND_DOWN, ROUND_HALF_UP, Decimal

# 78 digits of precision, enough for any uint256 amount
DECIMAL_HIGH_PREC_CONTEXT = decimal.Context(prec=78)

# Fractional digits carried by belief prices
BELIEF_PRICE_PLACES = Decimal("1e-18")


def to_units(amount: int, decimals: int) -> Decimal:
    """Convert an integer base-unit amount to a token-unit Decimal."""
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return Decimal(amount) / (Decimal(10) ** decimals)


def to_base_units(amount: Decimal, decimals: int) -> int:
    """Convert a token-unit Decimal to base units, rounding toward zero."""
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        scaled = amount * (Decimal(10) ** decimals)
        return int(scaled.to_integral_value(rounding=ROUND_DOWN))


def quantize_price(price: Decimal) -> Decimal:
    """Round a price to 18 fractional digits (half up)."""
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        return price.quantize(BELIEF_PRICE_PLACES, rounding=ROUND_HALF_UP)


__all__ = [
    "BELIEF_PRICE_PLACES",
    "DECIMAL_HIGH_PREC_CONTEXT",
    "quantize_price",
    "to_base_units",
    "to_units",
]
