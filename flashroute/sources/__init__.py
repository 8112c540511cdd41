"""External pool data sources: primary search, secondary catalog, combined directory."""

from flashroute.sources.catalog import CatalogCache, CatalogState
from flashroute.sources.directory import PoolDirectory, TokenDataCache, TokenPoolData
from flashroute.sources.primary import PrimarySource, pairs_of

__all__ = [
    "CatalogCache",
    "CatalogState",
    "PoolDirectory",
    "PrimarySource",
    "TokenDataCache",
    "TokenPoolData",
    "pairs_of",
]
