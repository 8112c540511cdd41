"""Test helpers module for shared test utilities.

This module consolidates common test utilities to reduce duplication:
- constants: Token denoms and common amounts
- factories: Pool, token and raw source record factory functions
"""

from tests.helpers.constants import (
    ATOM,
    CW20,
    DAI,
    HIGH_LIQUIDITY,
    LOAN_AMOUNT,
    LOW_LIQUIDITY,
    OSMO,
    STATOM,
    SYMBOLS,
    USDC,
    WBTC,
)
from tests.helpers.factories import catalog_record, dex_pair, lcd_pool, make_pool, make_token

__all__ = [
    # Constants
    "OSMO",
    "ATOM",
    "USDC",
    "WBTC",
    "DAI",
    "STATOM",
    "CW20",
    "SYMBOLS",
    "LOAN_AMOUNT",
    "HIGH_LIQUIDITY",
    "LOW_LIQUIDITY",
    # Factories
    "catalog_record",
    "dex_pair",
    "lcd_pool",
    "make_pool",
    "make_token",
]
