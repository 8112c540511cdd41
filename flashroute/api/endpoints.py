"""API endpoints for the arbitrage scanner."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from flashroute.models.report import TokenReport
from flashroute.scanner import ArbitrageScanner, get_default_scanner

logger = structlog.get_logger()

router = APIRouter()

SCAN_FAILED_ERROR = "Scan failed unexpectedly; see server logs."


class Watchlist(BaseModel):
    """Tokens scanned by the watchlist endpoints."""

    tokens: list[str] = Field(default_factory=list)


def get_scanner() -> ArbitrageScanner:
    """Dependency provider for the scanner instance.

    Override this in tests to inject a scanner with fake sources:
        app.dependency_overrides[get_scanner] = lambda: scanner

    Returns:
        The scanner instance to use for scanning tokens.
    """
    return get_default_scanner()


@router.get("/tokens")
async def list_tokens(scanner: ArbitrageScanner = Depends(get_scanner)) -> Watchlist:
    return Watchlist(tokens=scanner.watchlist)


@router.put("/tokens")
async def replace_tokens(
    watchlist: Watchlist,
    scanner: ArbitrageScanner = Depends(get_scanner),
) -> Watchlist:
    """Replace the watchlist; cached token data is dropped."""
    return Watchlist(tokens=scanner.set_watchlist(watchlist.tokens))


@router.get("/tokens/{token:path}/scan", response_model_exclude_none=True)
async def scan_token(
    token: str,
    scanner: ArbitrageScanner = Depends(get_scanner),
) -> TokenReport:
    """Scan one token and return its report.

    Args:
        token: Token denom; IBC denoms contain a slash and are matched as a path
        scanner: Injected scanner (via FastAPI Depends)

    Returns:
        TokenReport. Routes are serialized with their display field names.

    Error Handling:
        - Token without data: report with an error-only route
        - Scanner exception: logged with traceback, report carries an
          error-only route
    """
    logger.info("scan_requested", token=token)
    try:
        report = await scanner.scan_token(token)
    except Exception:
        logger.exception("scan_error", token=token)
        return TokenReport.failed(token, scanner.assembler.error_route(SCAN_FAILED_ERROR))

    logger.info(
        "returning_report",
        token=token,
        opportunities=len(report.opportunities),
        viable=report.viable_count,
    )
    return report
