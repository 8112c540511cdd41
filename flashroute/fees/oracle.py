"""Swap fee lookups against the chain's LCD (REST) endpoint.

The fee of a pool lives in different places depending on the pool type:
concentrated-liquidity pools expose `spread_factor`, CosmWasm pools a
`spread`, and classic GAMM pools a `swap_fee` nested under `pool_params`.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from typing import Any, Protocol

import httpx
import structlog

from flashroute.config import DEFAULT_SCANNER_CONFIG, ScannerConfig
from flashroute.models.types import (
    FEE_ERROR,
    FEE_INVALID_POOL,
    FEE_NOT_AVAILABLE,
    POOL_ID_UNKNOWN,
    format_decimal,
    is_numeric_pool_id,
    parse_decimal,
)

logger = structlog.get_logger()

POOL_QUERY_PATH = "/osmosis/gamm/v1beta1/pools/{pool_id}"


class FeeSource(Protocol):
    """Anything that resolves pool identifiers to raw fee strings."""

    async def get_fees(self, pool_ids: Iterable[str]) -> dict[str, str]:
        """Fetch fees for several pools, keyed by pool id."""
        ...


def extract_fee(payload: Any) -> str | None:
    """Pull the fee out of an LCD pool query response.

    Fields are checked in priority order: `pool.spread_factor`,
    `pool.pool_params.spread`, `pool.spread`, `pool.pool_params.swap_fee`,
    `pool.swap_fee`. The first present string value wins.

    Args:
        payload: Decoded JSON body of the pool query

    Returns:
        The fee as a normalized decimal string (e.g. "0.002"), or None if no
        field is present or the value does not parse
    """
    if not isinstance(payload, dict):
        return None
    pool = payload.get("pool")
    if not isinstance(pool, dict):
        return None
    params = pool.get("pool_params")
    if not isinstance(params, dict):
        params = {}

    candidates = (
        pool.get("spread_factor"),
        params.get("spread"),
        pool.get("spread"),
        params.get("swap_fee"),
        pool.get("swap_fee"),
    )
    raw = next((c for c in candidates if c), None)
    if not isinstance(raw, str):
        return None

    fee = parse_decimal(raw)
    if fee is None:
        logger.warning("fee_value_unparsable", raw=raw)
        return None
    return format_decimal(fee)


class FeeOracle:
    """Resolves pool identifiers to swap fees.

    Lookups never raise. The result is always a string:
    - a decimal fee such as "0.002"
    - "N/A" when the pool is unknown or carries no recognizable fee field
    - "Error" on transport or decoding failure
    - "0" when the identifier itself is invalid

    Successful lookups are memoized for the lifetime of the oracle.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        config: ScannerConfig = DEFAULT_SCANNER_CONFIG,
    ) -> None:
        self._client = client or httpx.AsyncClient(timeout=config.http_timeout)
        self._owns_client = client is None
        self._base_url = config.lcd_url.rstrip("/")
        self._cache: dict[str, str] = {}

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def cached(self, pool_id: str) -> str | None:
        return self._cache.get(pool_id)

    async def get_fee(self, pool_id: str | int | None) -> str:
        """Fetch the swap fee for one pool.

        Args:
            pool_id: Numeric pool identifier

        Returns:
            Fee string or one of the sentinels described on the class
        """
        if pool_id is None or pool_id in (0, "0", "", POOL_ID_UNKNOWN):
            logger.warning("fee_lookup_invalid_pool_id", pool_id=pool_id)
            return FEE_INVALID_POOL
        pool_id = str(pool_id)
        if not is_numeric_pool_id(pool_id):
            logger.warning("fee_lookup_invalid_pool_id", pool_id=pool_id)
            return FEE_INVALID_POOL

        if pool_id in self._cache:
            return self._cache[pool_id]

        url = self._base_url + POOL_QUERY_PATH.format(pool_id=pool_id)
        try:
            response = await self._client.get(url)
            if response.status_code in (404, 500):
                logger.warning(
                    "fee_lookup_pool_not_found", pool_id=pool_id, status=response.status_code
                )
                return FEE_NOT_AVAILABLE
            if response.status_code == 400:
                logger.warning("fee_lookup_bad_request", pool_id=pool_id)
                return FEE_NOT_AVAILABLE
            if response.is_error:
                logger.error("fee_lookup_failed", pool_id=pool_id, status=response.status_code)
                return FEE_NOT_AVAILABLE
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("fee_lookup_error", pool_id=pool_id, error=str(e))
            return FEE_ERROR

        fee = extract_fee(payload)
        if fee is None:
            logger.warning("fee_field_missing", pool_id=pool_id)
            return FEE_NOT_AVAILABLE

        self._cache[pool_id] = fee
        return fee

    async def get_fees(self, pool_ids: Iterable[str]) -> dict[str, str]:
        """Fetch fees for several pools concurrently (each distinct id once)."""
        distinct = list(dict.fromkeys(pool_ids))
        results = await asyncio.gather(*(self.get_fee(pid) for pid in distinct))
        return dict(zip(distinct, results, strict=True))
