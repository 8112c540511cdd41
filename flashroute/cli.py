"""Command-line entry point.

Usage:
    flashroute scan                       # scan the configured watchlist
    flashroute scan <denom> [<denom> ...] --out artifacts/
    flashroute serve
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

import structlog

from flashroute.artifacts import export_opportunity
from flashroute.config import ScannerConfig
from flashroute.logging_config import configure_logging
from flashroute.models.report import TokenReport
from flashroute.scanner import ArbitrageScanner

logger = structlog.get_logger()


async def run_scan(
    tokens: list[str], config: ScannerConfig, out: Path | None = None
) -> list[TokenReport]:
    """Scan tokens and optionally write artifacts for every target.

    Args:
        tokens: Token denoms; the configured watchlist when empty
        config: Scanner configuration
        out: Directory for route / flash-loan JSON files

    Returns:
        One report per token, in input order
    """
    scanner = ArbitrageScanner.create(config)
    try:
        if tokens:
            scanner.set_watchlist(tokens)
        reports = await scanner.scan_watchlist()
    finally:
        await scanner.aclose()

    if out is not None:
        for report in reports:
            for opportunity in report.opportunities:
                export_opportunity(opportunity, out)
    return reports


def _print_summary(report: TokenReport) -> None:
    label = report.symbol or report.token
    if report.error:
        print(f"{label}: {report.error}")
        return
    print(
        f"{label}: baseline pool {report.baseline_pool_id} at {report.min_price:.6f} USD, "
        f"{len(report.opportunities)} target(s), {report.viable_count} viable"
    )
    for opp in report.opportunities:
        status = "VIABLE" if opp.viable else opp.error
        print(f"  pool {opp.pool_id} {opp.pair} (+{opp.difference_pct:.2f}%) [{opp.topology}]: {status}")


def main(argv: list[str] | None = None) -> None:
    """Entry point for the flashroute command."""
    parser = argparse.ArgumentParser(
        prog="flashroute",
        description="Find cross-pool price gaps on Osmosis and build flash-loan routes",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-json", action="store_true", help="Emit logs as JSON lines")
    subparsers = parser.add_subparsers(dest="command", required=True)

    scan = subparsers.add_parser("scan", help="Scan tokens for arbitrage opportunities")
    scan.add_argument("tokens", nargs="*", help="Token denoms (default: configured watchlist)")
    scan.add_argument(
        "--out",
        type=Path,
        default=None,
        help="Directory for route_<pair>.json and flashloan_<pair>.json files",
    )
    scan.add_argument("--json", action="store_true", help="Print full reports as JSON")

    subparsers.add_parser("serve", help="Run the HTTP API server")

    args = parser.parse_args(argv)
    configure_logging("debug" if args.verbose else "info", json=args.log_json)

    if args.command == "serve":
        from flashroute.api.main import run

        run()
        return

    try:
        config = ScannerConfig.from_env()
    except ValueError as e:
        parser.error(f"invalid configuration: {e}")

    reports = asyncio.run(run_scan(args.tokens, config, args.out))

    if args.json:
        payload = [r.model_dump(mode="json", by_alias=True, exclude_none=True) for r in reports]
        json.dump(payload, sys.stdout, indent=2)
        print()
    else:
        for report in reports:
            _print_summary(report)


if __name__ == "__main__":
    main()
