"""Client for the primary pool-search API (DexScreener-style).

A search returns `{"pairs": [...]}` where every pair carries `pairAddress`,
`baseToken`/`quoteToken` (`address`, `symbol`), `priceNative`, `priceUsd`,
`liquidity.usd` and `chainId`.
"""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from flashroute.config import DEFAULT_SCANNER_CONFIG, ScannerConfig

logger = structlog.get_logger()


def pairs_of(response: dict[str, Any] | None) -> list[dict[str, Any]]:
    """Extract the list of pair records from a search response (empty if absent)."""
    if not isinstance(response, dict):
        return []
    pairs = response.get("pairs")
    if not isinstance(pairs, list):
        return []
    return [p for p in pairs if isinstance(p, dict)]


class PrimarySource:
    """Token search against the primary source.

    Any failure (transport error, non-2xx status, undecodable body) is logged
    and reported as None; the caller treats it as missing data.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        config: ScannerConfig = DEFAULT_SCANNER_CONFIG,
    ) -> None:
        self._client = client or httpx.AsyncClient(timeout=config.http_timeout)
        self._owns_client = client is None
        self._url = config.primary_search_url

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def search(self, query: str) -> dict[str, Any] | None:
        """Run a search query.

        Args:
            query: Token denom, symbol, or free text such as "OSMO ATOM"

        Returns:
            The decoded response object, or None on any failure
        """
        try:
            response = await self._client.get(self._url, params={"q": query})
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(
                "primary_search_failed", query=query, status=e.response.status_code
            )
            return None
        except (httpx.HTTPError, ValueError) as e:
            logger.error("primary_search_error", query=query, error=str(e))
            return None

        if not isinstance(data, dict):
            logger.warning("primary_search_malformed", query=query)
            return None
        logger.debug("primary_search_done", query=query, pairs=len(pairs_of(data)))
        return data
