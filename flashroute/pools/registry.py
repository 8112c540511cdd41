"""Indexed view over a unified pool map.

PoolSet answers the lookups the selector and planner need: pools by id, by
contract address, by unordered token pair, and liquidity-filtered subsets.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

import structlog

from flashroute.models.pool import Pool

logger = structlog.get_logger()


class PoolSet:
    """Immutable collection of canonical pools with lookup indexes.

    Pair lookups are order independent: `pools_for_pair(a, b)` and
    `pools_for_pair(b, a)` return the same pools.
    """

    def __init__(self, pools: Iterable[Pool] | None = None) -> None:
        """Initialize the set.

        Args:
            pools: Pools to index. A later pool with an already-seen id
                   replaces the earlier one.
        """
        self._by_id: dict[str, Pool] = {}
        # Unordered pair index; several pools can trade the same pair
        self._by_pair: dict[frozenset[str], list[Pool]] = {}
        self._by_contract: dict[str, Pool] = {}

        for pool in pools or ():
            if pool.pool_id in self._by_id:
                logger.debug("pool_replaced", pool_id=pool.pool_id)
            self._by_id[pool.pool_id] = pool

        for pool in self._by_id.values():
            key = frozenset((pool.base.address, pool.quote.address))
            self._by_pair.setdefault(key, []).append(pool)
            if pool.contract_address:
                self._by_contract[pool.contract_address] = pool

    @classmethod
    def from_mapping(cls, pools: dict[str, Pool]) -> PoolSet:
        return cls(pools.values())

    def __len__(self) -> int:
        return len(self._by_id)

    def __iter__(self) -> Iterator[Pool]:
        return iter(self._by_id.values())

    def __contains__(self, pool_id: object) -> bool:
        return pool_id in self._by_id

    def get(self, pool_id: str) -> Pool | None:
        return self._by_id.get(pool_id)

    def find_by_contract(self, address: str) -> Pool | None:
        """Find a pool by its contract (or pair) address."""
        pool = self._by_contract.get(address)
        if pool is not None:
            return pool
        return next((p for p in self._by_id.values() if p.pair_address == address), None)

    def pools_for_pair(self, token_a: str, token_b: str) -> list[Pool]:
        """All pools trading the two tokens (order independent)."""
        return list(self._by_pair.get(frozenset((token_a, token_b)), []))

    def best_pool_for_pair(self, token_a: str, token_b: str) -> Pool | None:
        """Highest-liquidity pool trading the two tokens.

        Ties are broken by the lower numeric pool id so the choice does not
        depend on input order.
        """
        candidates = self.pools_for_pair(token_a, token_b)
        if not candidates:
            return None
        return max(candidates, key=lambda p: (p.liquidity_usd, -int(p.pool_id)))

    def with_min_liquidity(self, threshold: float) -> PoolSet:
        """Subset of pools whose liquidity is strictly above the threshold."""
        return PoolSet(p for p in self._by_id.values() if p.liquidity_usd > threshold)

    def containing(self, address: str) -> list[Pool]:
        """Pools holding the token on either side, in insertion order."""
        return [p for p in self._by_id.values() if p.has_token(address)]


__all__ = ["PoolSet"]
