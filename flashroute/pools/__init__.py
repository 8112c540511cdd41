"""Canonical pool handling: unification, indexing and baseline selection."""

from flashroute.pools.baseline import (
    BaselineSelection,
    PoolQuote,
    holds_reference,
    is_arbitrage_target,
    price_difference_pct,
    select_baseline,
    token_price,
)
from flashroute.pools.registry import PoolSet
from flashroute.pools.unifier import (
    merge_primary,
    pool_from_primary,
    pool_from_secondary,
    unify_pools,
)

__all__ = [
    "BaselineSelection",
    "PoolQuote",
    "PoolSet",
    "holds_reference",
    "is_arbitrage_target",
    "merge_primary",
    "pool_from_primary",
    "pool_from_secondary",
    "price_difference_pct",
    "select_baseline",
    "token_price",
    "unify_pools",
]
