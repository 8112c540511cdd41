"""Combined per-token fetch over both pool sources."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

import structlog

from flashroute.sources.catalog import CatalogCache
from flashroute.sources.primary import PrimarySource, pairs_of

logger = structlog.get_logger()


@dataclass(frozen=True)
class TokenPoolData:
    """Raw pool data for one token from both sources.

    Either side may be a placeholder when its fetch failed: `primary` is None
    and `secondary` is an empty list.
    """

    token: str
    primary: dict[str, Any] | None = None
    secondary: list[dict[str, Any]] = field(default_factory=list)

    @property
    def primary_pairs(self) -> list[dict[str, Any]]:
        return pairs_of(self.primary)

    @property
    def is_empty(self) -> bool:
        return not self.primary_pairs and not self.secondary


class PoolDirectory:
    """Fetches a token's primary search result and the shared catalog together."""

    def __init__(self, primary: PrimarySource, catalog: CatalogCache) -> None:
        self.primary = primary
        self.catalog = catalog

    async def fetch_for_token(self, token: str) -> TokenPoolData:
        """Fetch both sources concurrently for a token.

        A failure in one branch never blocks or fails the other; the failed
        branch is returned as its placeholder.

        Args:
            token: Token denom used as the primary search query

        Returns:
            TokenPoolData with whatever each source delivered
        """
        primary_result, catalog_result = await asyncio.gather(
            self.primary.search(token),
            self.catalog.get_or_fetch(),
            return_exceptions=True,
        )

        if isinstance(primary_result, BaseException) or not isinstance(primary_result, dict):
            if isinstance(primary_result, BaseException):
                logger.error("primary_branch_failed", token=token, error=str(primary_result))
            else:
                logger.warning("primary_data_missing", token=token)
            primary_result = None
        elif not pairs_of(primary_result):
            logger.warning("primary_data_missing", token=token)

        if isinstance(catalog_result, BaseException) or catalog_result is None:
            if isinstance(catalog_result, BaseException):
                logger.error("catalog_branch_failed", token=token, error=str(catalog_result))
            else:
                logger.warning("catalog_data_missing", token=token)
            catalog_result = []

        return TokenPoolData(token=token, primary=primary_result, secondary=catalog_result)


class TokenDataCache:
    """Consumer-side cache of combined token data.

    Avoids refetching a token's sources on every refresh; cleared whenever the
    watchlist changes.
    """

    def __init__(self) -> None:
        self._entries: dict[str, TokenPoolData] = {}

    def __contains__(self, token: str) -> bool:
        return token in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, token: str) -> TokenPoolData | None:
        return self._entries.get(token)

    def put(self, data: TokenPoolData) -> None:
        self._entries[data.token] = data

    def clear(self) -> None:
        self._entries.clear()

    async def get_or_fetch(self, directory: PoolDirectory, token: str) -> TokenPoolData:
        cached = self._entries.get(token)
        if cached is not None:
            return cached
        data = await directory.fetch_for_token(token)
        # Empty results are not cached so a later refresh can recover
        if not data.is_empty:
            self._entries[token] = data
        return data
