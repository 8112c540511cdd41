"""Downloadable JSON artifacts for an opportunity."""

from __future__ import annotations

import re
from pathlib import Path

import structlog

from flashroute.models.report import OpportunityResult

logger = structlog.get_logger()

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def artifact_stem(result: OpportunityResult) -> str:
    """File-system safe name for an opportunity, based on its pair address."""
    stem = _UNSAFE_CHARS.sub("_", result.pair_address or result.pool_id).strip("_")
    return stem or result.pool_id


def export_opportunity(result: OpportunityResult, directory: Path) -> list[Path]:
    """Write the route and, for viable plans, the flash-loan message.

    Files are `route_<pair>.json` and `flashloan_<pair>.json`; each is a
    self-contained JSON document.

    Args:
        result: Evaluated opportunity
        directory: Output directory, created if missing

    Returns:
        Paths written, flash-loan message first when present
    """
    directory.mkdir(parents=True, exist_ok=True)
    stem = artifact_stem(result)
    written: list[Path] = []

    if result.flash_loan is not None:
        path = directory / f"flashloan_{stem}.json"
        path.write_text(result.flash_loan.to_json(), encoding="utf-8")
        written.append(path)

    path = directory / f"route_{stem}.json"
    path.write_text(result.route.to_json(), encoding="utf-8")
    written.append(path)

    logger.info("artifacts_written", pair=result.pair, files=[p.name for p in written])
    return written


__all__ = ["artifact_stem", "export_opportunity"]
