"""Tests for intermediary pool resolution."""

import asyncio

import pytest

from flashroute.pools.registry import PoolSet
from flashroute.routing.intermediary import IntermediaryResolver
from flashroute.routing.overrides import KNOWN_POOL_OVERRIDES, PoolOverride, find_override
from flashroute.routing.types import Confidence
from tests.conftest import FakeCatalog, FakeSearch
from tests.helpers import (
    ATOM,
    LOW_LIQUIDITY,
    OSMO,
    USDC,
    WBTC,
    catalog_record,
    dex_pair,
    make_pool,
    make_token,
)

WBTC_OVERRIDE_CONTRACT = "osmo13l9nyqrn2q5fce89hp4jymhsrmn6yh6m4xsjxp4p6pakp82z76nqv6vk7f"


def usdc_search(**kwargs) -> FakeSearch:
    return FakeSearch({"OSMO USDC": {"pairs": [dex_pair(678, OSMO, USDC, **kwargs)]}})


class TestOverrides:
    """Tests for the known-pool override table."""

    def test_match_by_denom(self):
        assert find_override(make_token(WBTC)).contract_address == WBTC_OVERRIDE_CONTRACT

    def test_match_by_symbol(self):
        override = find_override(make_token("ibc/TIA", symbol="TIA"))
        assert override.pool_id == "1248"

    def test_no_match(self):
        assert find_override(make_token(USDC)) is None

    def test_override_needs_a_key(self):
        with pytest.raises(ValueError):
            PoolOverride(contract_address="osmo1x")

    def test_table_is_consistent(self):
        assert all(o.contract_address.startswith("osmo1") for o in KNOWN_POOL_OVERRIDES)


class TestIntermediaryResolver:
    """Tests for the resolution order and its fallbacks."""

    def test_override_wins_over_liquidity(self, config):
        pinned = make_pool("10", OSMO, WBTC, contract_address=WBTC_OVERRIDE_CONTRACT, liquidity_usd=2_000)
        deeper = make_pool("11", OSMO, WBTC, liquidity_usd=900_000)
        resolver = IntermediaryResolver(PoolSet([pinned, deeper]), config=config)

        match = asyncio.run(resolver.resolve(make_token(WBTC, decimals=8)))

        assert match.pool.pool_id == "10"
        assert match.source == "override"

    def test_missing_override_pool_falls_through(self, config):
        deeper = make_pool("11", OSMO, WBTC, liquidity_usd=900_000)
        resolver = IntermediaryResolver(PoolSet([deeper]), config=config)

        match = asyncio.run(resolver.resolve(make_token(WBTC)))

        assert match.pool.pool_id == "11"
        assert match.source == "unified"

    def test_highest_liquidity_pool_in_unified_set(self, config):
        pools = PoolSet(
            [
                make_pool("1", OSMO, USDC, liquidity_usd=10_000),
                make_pool("2", USDC, OSMO, liquidity_usd=50_000),
                make_pool("3", OSMO, USDC, liquidity_usd=LOW_LIQUIDITY),
            ]
        )
        match = asyncio.run(IntermediaryResolver(pools, config=config).resolve(make_token(USDC)))
        assert match.pool.pool_id == "2"
        assert match.confidence is Confidence.HIGH

    def test_search_fallback_verified_by_catalog(self, config):
        search = usdc_search(liquidity_usd=50_000)
        catalog = FakeCatalog([catalog_record(678, OSMO, USDC)])
        resolver = IntermediaryResolver(PoolSet(), search, catalog, config)

        match = asyncio.run(resolver.resolve(make_token(USDC)))

        assert search.queries == ["OSMO USDC"]
        assert match.pool.pool_id == "678"
        assert match.pool.contract_address == "osmo1pool678"
        assert match.source == "search"
        assert match.confidence is Confidence.HIGH

    def test_search_match_not_in_catalog_rejected(self, config):
        resolver = IntermediaryResolver(PoolSet(), usdc_search(), FakeCatalog([]), config)
        assert asyncio.run(resolver.resolve(make_token(USDC))) is None

    def test_search_results_below_liquidity_ignored(self, config):
        catalog = FakeCatalog([catalog_record(678, OSMO, USDC)])
        resolver = IntermediaryResolver(
            PoolSet(), usdc_search(liquidity_usd=LOW_LIQUIDITY), catalog, config
        )
        assert asyncio.run(resolver.resolve(make_token(USDC))) is None

    def test_symbol_only_match_is_low_confidence(self, config):
        record = dex_pair(679, OSMO, "ibc/OTHERUSDC")
        record["quoteToken"]["symbol"] = "USDC"
        search = FakeSearch({"OSMO USDC": {"pairs": [record]}})
        catalog = FakeCatalog([catalog_record(679, OSMO, "ibc/OTHERUSDC")])
        resolver = IntermediaryResolver(PoolSet(), search, catalog, config)

        match = asyncio.run(resolver.resolve(make_token(USDC)))

        assert match.confidence is Confidence.LOW
        assert match.pool.pool_id == "679"

    def test_address_match_preferred_over_symbol_match(self, config):
        symbol_only = dex_pair(679, OSMO, "ibc/OTHERUSDC", liquidity_usd=900_000)
        symbol_only["quoteToken"]["symbol"] = "USDC"
        exact = dex_pair(678, OSMO, USDC, liquidity_usd=20_000)
        search = FakeSearch({"OSMO USDC": {"pairs": [symbol_only, exact]}})
        catalog = FakeCatalog([catalog_record(678, OSMO, USDC), catalog_record(679, OSMO, USDC)])

        match = asyncio.run(IntermediaryResolver(PoolSet(), search, catalog, config).resolve(make_token(USDC)))

        assert match.pool.pool_id == "678"

    def test_lookups_are_memoized(self, config):
        search = usdc_search()
        resolver = IntermediaryResolver(PoolSet(), search, FakeCatalog([]), config)

        async def run():
            await asyncio.gather(resolver.resolve(make_token(USDC)), resolver.resolve(make_token(USDC)))
            await resolver.resolve(make_token(USDC))

        asyncio.run(run())
        assert search.queries == ["OSMO USDC"]

    def test_unknown_token(self, config):
        assert asyncio.run(IntermediaryResolver(PoolSet(), config=config).resolve(None)) is None
        resolver = IntermediaryResolver(PoolSet([make_pool("1", ATOM, USDC)]), config=config)
        assert asyncio.run(resolver.resolve(make_token(ATOM))) is None
