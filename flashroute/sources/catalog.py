"""Process-wide cache of the secondary pool catalog (Numia-style).

The catalog lists every pool on the chain with its numeric `pool_id`,
`pool_address` (the executable contract), base/quote symbols and addresses,
`liquidity` and `price`. It is fetched page by page (`limit`/`offset`) with a
bearer credential and then reused by every token query.

Lifecycle:
    EMPTY -> POPULATING -> POPULATED
                        -> FAILED  (next get_or_fetch retries from scratch)

Concurrent callers during POPULATING await the same in-flight task, so the
network is hit once no matter how many queries start at the same time.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any

import httpx
import structlog

from flashroute.config import DEFAULT_SCANNER_CONFIG, ScannerConfig

logger = structlog.get_logger()


class CatalogState(Enum):
    EMPTY = "empty"
    POPULATING = "populating"
    POPULATED = "populated"
    FAILED = "failed"


class CatalogCache:
    """Single-flight cache service for the secondary source catalog.

    Pass one instance to every collaborator that needs the catalog (directory,
    intermediary resolver, plan builder) instead of relying on module state.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        config: ScannerConfig = DEFAULT_SCANNER_CONFIG,
    ) -> None:
        self._client = client or httpx.AsyncClient(timeout=config.http_timeout)
        self._owns_client = client is None
        self._url = config.catalog_url
        self._token = config.catalog_token
        self._page_size = config.catalog_page_size

        self._state = CatalogState.EMPTY
        self._records: list[dict[str, Any]] | None = None
        self._by_pool_id: dict[str, dict[str, Any]] = {}
        self._inflight: asyncio.Task[list[dict[str, Any]] | None] | None = None

    @property
    def state(self) -> CatalogState:
        return self._state

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def invalidate(self) -> None:
        """Drop cached records; the next get_or_fetch fetches again."""
        self._records = None
        self._by_pool_id = {}
        self._state = CatalogState.EMPTY

    async def get_or_fetch(self) -> list[dict[str, Any]] | None:
        """Return the full catalog, fetching it once if needed.

        Returns:
            All catalog records, or None if the fetch failed
        """
        if self._state is CatalogState.POPULATED and self._records is not None:
            return self._records

        if self._inflight is None:
            self._state = CatalogState.POPULATING
            self._inflight = asyncio.ensure_future(self._populate())
        else:
            logger.debug("catalog_fetch_joined")

        # A cancelled waiter must not cancel the shared fetch
        return await asyncio.shield(self._inflight)

    async def find(self, pool_id: str | int) -> dict[str, Any] | None:
        """Look up a catalog record by pool identifier."""
        if await self.get_or_fetch() is None:
            return None
        return self._by_pool_id.get(str(pool_id))

    async def contract_address(self, pool_id: str | int) -> str | None:
        """Resolve a pool identifier to its contract address via the catalog.

        Returns:
            The pool contract address, or None when the catalog is unavailable
            or does not list the pool
        """
        record = await self.find(pool_id)
        if record is None:
            logger.warning("catalog_pool_not_found", pool_id=str(pool_id))
            return None
        address = record.get("pool_address")
        return address if isinstance(address, str) and address else None

    async def _populate(self) -> list[dict[str, Any]] | None:
        logger.info("catalog_fetch_started", url=self._url, page_size=self._page_size)
        try:
            records = await self._fetch_all_pages()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("catalog_fetch_failed", error=str(e))
            self.invalidate()
            self._state = CatalogState.FAILED
            return None
        finally:
            self._inflight = None

        self._records = records
        self._by_pool_id = {
            str(r["pool_id"]): r for r in records if r.get("pool_id") not in (None, "")
        }
        self._state = CatalogState.POPULATED
        logger.info("catalog_fetch_done", pools=len(records))
        return records

    async def _fetch_all_pages(self) -> list[dict[str, Any]]:
        headers = {"Authorization": f"Bearer {self._token}"} if self._token else {}
        records: list[dict[str, Any]] = []
        offset = 0
        while True:
            response = await self._client.get(
                self._url,
                params={"limit": self._page_size, "offset": offset},
                headers=headers,
            )
            response.raise_for_status()
            body = response.json()
            page = body.get("data") if isinstance(body, dict) else None
            if not isinstance(page, list) or not page:
                break
            records.extend(r for r in page if isinstance(r, dict))
            offset += len(page)
            if len(page) < self._page_size:
                break
        return records
