"""Osmosis cross-pool arbitrage scanner and flash-loan route builder."""

__version__ = "0.1.0"

from flashroute.scanner import ArbitrageScanner, get_default_scanner  # noqa: E402

__all__ = ["ArbitrageScanner", "get_default_scanner", "__version__"]
