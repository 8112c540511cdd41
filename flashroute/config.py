"""Scanner configuration.

All tunable constants live on ScannerConfig so tests and entry points can
swap them without touching module globals.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from decimal import Decimal

from flashroute.constants import (
    DEFAULT_WATCHLIST,
    FLASH_LOAN_CONTRACT,
    REFERENCE_DECIMALS,
    REFERENCE_DENOM,
    REFERENCE_SYMBOL,
)

ENV_PREFIX = "FLASHROUTE_"


@dataclass(frozen=True)
class ScannerConfig:
    """Centralized configuration for pool discovery, routing and execution.

    Attributes:
        reference_denom: Denom of the chain's reference asset (loan currency)
        reference_symbol: Display symbol of the reference asset
        reference_decimals: Decimal precision of the reference asset
        loan_amount: Flash-loan principal in reference base units
        slippage_tolerance: Per-hop slippage bound, also used as max spread
        fallback_fee: Swap fee applied when the fee oracle has no answer
        arbitrage_multiplier: Price ratio over the baseline that marks a target
        min_liquidity_usd: Pools at or below this liquidity are ignored
        runner_up_tolerance: Ratio within which a pool is kept as runner-up
        default_decimals: Decimals assumed when a source omits them
        chain_id: Chain name used by the primary source
        contract_prefix: Bech32 prefix of contract (cw20) addresses
    """

    reference_denom: str = REFERENCE_DENOM
    reference_symbol: str = REFERENCE_SYMBOL
    reference_decimals: int = REFERENCE_DECIMALS

    loan_amount: int = 10_000_000
    slippage_tolerance: Decimal = Decimal("0.005")
    fallback_fee: Decimal = Decimal("0.002")

    arbitrage_multiplier: float = 1.025
    min_liquidity_usd: float = 1000.0
    runner_up_tolerance: float = 1.01

    default_decimals: int = 6
    chain_id: str = "osmosis"
    contract_prefix: str = "osmo1"
    flash_loan_contract: str = FLASH_LOAN_CONTRACT

    # Endpoints
    primary_search_url: str = "https://api.dexscreener.com/latest/dex/search"
    catalog_url: str = "https://osmosis.numia.xyz/pairs/v2/summary"
    catalog_token: str = ""
    catalog_page_size: int = 1000
    lcd_url: str = "https://lcd-osmosis.keplr.app"
    http_timeout: float = 30.0

    watchlist: tuple[str, ...] = field(default=DEFAULT_WATCHLIST)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> ScannerConfig:
        """Build a config with overrides from FLASHROUTE_* environment variables.

        Variable names are the upper-cased field names (e.g.
        FLASHROUTE_SLIPPAGE_TOLERANCE). The watchlist is comma-separated.

        Raises:
            ValueError: If a variable cannot be converted to the field type
        """
        env = os.environ if environ is None else environ
        base = cls()
        overrides: dict[str, object] = {}
        for f in fields(cls):
            raw = env.get(ENV_PREFIX + f.name.upper())
            if raw is None or raw == "":
                continue
            current = getattr(base, f.name)
            if isinstance(current, tuple):
                overrides[f.name] = tuple(t.strip() for t in raw.split(",") if t.strip())
            elif isinstance(current, bool):
                overrides[f.name] = raw.lower() in ("true", "1", "yes")
            else:
                try:
                    overrides[f.name] = type(current)(raw)
                except (ValueError, ArithmeticError) as e:
                    raise ValueError(f"{ENV_PREFIX}{f.name.upper()}={raw!r}: {e}") from e
        return replace(base, **overrides)

    def is_contract_address(self, address: str) -> bool:
        """True if the address is a contract token rather than a native denom."""
        return address.startswith(self.contract_prefix)


# Default configuration instance
DEFAULT_SCANNER_CONFIG = ScannerConfig()
