"""Locating pools that connect the reference asset to an intermediary token.

Resolution order:
1. Known-pool override table
2. Highest-liquidity pool for the pair in the liquidity-filtered unified set
3. External search "<REF> <SYMBOL>" against the primary source, filtered by
   liquidity; an exact address match is preferred, a symbol-only match is
   accepted with low confidence. The match is accepted only if the catalog
   lists its pool id.
"""

from __future__ import annotations

import asyncio
from typing import Any

import structlog

from flashroute.config import DEFAULT_SCANNER_CONFIG, ScannerConfig
from flashroute.models.pool import Pool, Token
from flashroute.models.types import derive_pool_id, parse_float
from flashroute.pools.registry import PoolSet
from flashroute.pools.unifier import pool_from_primary
from flashroute.routing.overrides import KNOWN_POOL_OVERRIDES, PoolOverride, find_override
from flashroute.routing.types import Confidence, IntermediaryMatch
from flashroute.sources.catalog import CatalogCache
from flashroute.sources.primary import PrimarySource, pairs_of

logger = structlog.get_logger()


def _liquidity(record: dict[str, Any]) -> float:
    liquidity = record.get("liquidity")
    if not isinstance(liquidity, dict):
        return 0.0
    return parse_float(liquidity.get("usd"))


def _record_tokens(record: dict[str, Any], key: str) -> set[str]:
    base = record.get("baseToken") or {}
    quote = record.get("quoteToken") or {}
    return {str(base.get(key) or ""), str(quote.get(key) or "")}


class IntermediaryResolver:
    """Finds reference-asset pools for intermediary tokens of one scan.

    Results are memoized per token address; concurrent requests for the same
    token share one lookup.
    """

    def __init__(
        self,
        pools: PoolSet,
        primary: PrimarySource | None = None,
        catalog: CatalogCache | None = None,
        config: ScannerConfig = DEFAULT_SCANNER_CONFIG,
        overrides: tuple[PoolOverride, ...] = KNOWN_POOL_OVERRIDES,
    ) -> None:
        """Initialize the resolver.

        Args:
            pools: Unified pools of the current scan (unfiltered)
            primary: Search client for the external fallback; None disables it
            catalog: Catalog used to verify external matches
            config: Reference asset and liquidity threshold
            overrides: Known-pool table consulted first
        """
        self._pools = pools
        self._filtered = pools.with_min_liquidity(config.min_liquidity_usd)
        self._primary = primary
        self._catalog = catalog
        self._config = config
        self._overrides = overrides
        self._lookups: dict[str, asyncio.Task[IntermediaryMatch | None]] = {}

    async def resolve(self, token: Token | None) -> IntermediaryMatch | None:
        """Find the pool trading `token` against the reference asset.

        Returns:
            The match, or None when every strategy failed
        """
        if token is None:
            return None
        task = self._lookups.get(token.address)
        if task is None:
            task = asyncio.ensure_future(self._resolve(token))
            self._lookups[token.address] = task
        return await asyncio.shield(task)

    async def _resolve(self, token: Token) -> IntermediaryMatch | None:
        match = self.from_override(token) or self.from_pool_set(token)
        if match is None:
            match = await self.from_search(token)
        if match is None:
            logger.warning("intermediary_not_found", token=token.address, symbol=token.symbol)
        else:
            logger.info(
                "intermediary_resolved",
                token=token.symbol,
                pool_id=match.pool.pool_id,
                source=match.source,
                confidence=match.confidence.value,
            )
        return match

    def from_override(self, token: Token) -> IntermediaryMatch | None:
        override = find_override(token, self._overrides)
        if override is None:
            return None
        pool: Pool | None = None
        if override.pool_id is not None:
            pool = self._pools.get(override.pool_id)
        if pool is None:
            pool = self._pools.find_by_contract(override.contract_address)
        if pool is None:
            logger.warning(
                "override_pool_unavailable",
                token=token.symbol,
                contract=override.contract_address,
            )
            return None
        return IntermediaryMatch(pool=pool, source="override")

    def from_pool_set(self, token: Token) -> IntermediaryMatch | None:
        pool = self._filtered.best_pool_for_pair(self._config.reference_denom, token.address)
        if pool is None:
            return None
        return IntermediaryMatch(pool=pool, source="unified")

    async def from_search(self, token: Token) -> IntermediaryMatch | None:
        if self._primary is None or not token.symbol:
            return None

        query = f"{self._config.reference_symbol} {token.symbol}"
        response = await self._primary.search(query)
        records = [
            r
            for r in pairs_of(response)
            if _liquidity(r) > self._config.min_liquidity_usd
            and r.get("chainId", self._config.chain_id) == self._config.chain_id
        ]
        records.sort(key=_liquidity, reverse=True)

        wanted_addresses = {self._config.reference_denom, token.address}
        wanted_symbols = {self._config.reference_symbol, token.symbol}
        confidence = Confidence.HIGH
        record = next((r for r in records if _record_tokens(r, "address") == wanted_addresses), None)
        if record is None:
            record = next(
                (r for r in records if _record_tokens(r, "symbol") == wanted_symbols), None
            )
            confidence = Confidence.LOW
            if record is not None:
                logger.warning(
                    "intermediary_symbol_match",
                    token=token.address,
                    symbol=token.symbol,
                    pair_address=record.get("pairAddress"),
                )
        if record is None:
            return None

        pool_id = derive_pool_id({"pairAddress": record.get("pairAddress")})
        if pool_id is None:
            logger.warning("intermediary_pool_id_invalid", pair_address=record.get("pairAddress"))
            return None

        contract = await self._catalog.contract_address(pool_id) if self._catalog else None
        if contract is None:
            logger.warning("intermediary_unverified", pool_id=pool_id, symbol=token.symbol)
            return None

        pool = pool_from_primary(record, self._config, contract_address=contract)
        if pool is None:
            return None
        return IntermediaryMatch(pool=pool, confidence=confidence, source="search")


__all__ = ["IntermediaryResolver"]
