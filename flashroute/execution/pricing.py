"""Per-hop amount and belief price math.

A pool's native price `p` is the base token priced in quote token units.
Offering the base yields `x * p` quote tokens, offering the quote yields
`x / p` base tokens, before fee and slippage.
"""

from __future__ import annotations

import decimal
from decimal import Decimal

from flashroute.decimal_utils import (
    DECIMAL_HIGH_PREC_CONTEXT,
    quantize_price,
    to_base_units,
    to_units,
)


def swap_output(
    offer_amount: int,
    offer_decimals: int,
    ask_decimals: int,
    price: Decimal,
    offering_base: bool,
    fee: Decimal,
    slippage: Decimal,
) -> int:
    """Expected output of one hop in ask-token base units (floored).

    Args:
        offer_amount: Offered amount in offer-token base units
        offer_decimals: Precision of the offered token
        ask_decimals: Precision of the asked token
        price: Pool native price (base in quote units), must be positive
        offering_base: True if the offered token is the pool's base
        fee: Pool swap fee as a fraction
        slippage: Slippage tolerance as a fraction

    Returns:
        `x * p_applied * (1 - fee) * (1 - slippage)` in base units, rounded down
    """
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        units = to_units(offer_amount, offer_decimals)
        gross = units * price if offering_base else units / price
        net = gross * (1 - fee) * (1 - slippage)
    return to_base_units(net, ask_decimals)


def belief_price(price: Decimal, offering_base: bool, slippage: Decimal) -> Decimal:
    """Price bound submitted with the swap.

    One slippage increment away from the observed price: above it when
    offering the base asset, below it when offering the quote asset.
    """
    with decimal.localcontext(DECIMAL_HIGH_PREC_CONTEXT):
        factor = 1 + slippage if offering_base else 1 - slippage
        return quantize_price(price * factor)


def format_price(value: Decimal) -> str:
    """Fixed-point rendering with the quantized digits kept."""
    return format(value, "f")


__all__ = ["belief_price", "format_price", "swap_output"]
