"""Tests for the primary search client and the combined token fetch."""

import asyncio

import httpx

from flashroute.sources.directory import PoolDirectory, TokenDataCache, TokenPoolData
from flashroute.sources.primary import PrimarySource, pairs_of
from tests.conftest import FakeCatalog, FakeSearch, json_handler, mock_client
from tests.helpers import ATOM, OSMO, catalog_record, dex_pair


class TestPairsOf:
    """Tests for extracting pair records from a search response."""

    def test_extracts_dict_pairs(self):
        response = {"pairs": [dex_pair(1, OSMO, ATOM), "junk", None]}
        assert len(pairs_of(response)) == 1

    def test_missing_or_malformed(self):
        assert pairs_of(None) == []
        assert pairs_of({"pairs": None}) == []
        assert pairs_of({"schemaVersion": "1.0.0"}) == []


class TestPrimarySource:
    """Tests for PrimarySource.search."""

    def test_search_sends_query(self):
        calls: list[httpx.Request] = []
        payload = {"pairs": [dex_pair(1, OSMO, ATOM)]}

        async def run():
            async with mock_client(json_handler(payload, calls=calls)) as client:
                return await PrimarySource(client).search("OSMO ATOM")

        assert asyncio.run(run()) == payload
        assert calls[0].url.params["q"] == "OSMO ATOM"

    def test_error_status_returns_none(self):
        async def run():
            async with mock_client(json_handler({}, status_code=429)) as client:
                return await PrimarySource(client).search(ATOM)

        assert asyncio.run(run()) is None

    def test_non_object_body_returns_none(self):
        async def run():
            async with mock_client(json_handler([1, 2, 3])) as client:
                return await PrimarySource(client).search(ATOM)

        assert asyncio.run(run()) is None

    def test_transport_error_returns_none(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        async def run():
            async with mock_client(handler) as client:
                return await PrimarySource(client).search(ATOM)

        assert asyncio.run(run()) is None


class ExplodingSearch:
    """Search double whose call raises."""

    async def search(self, query: str):
        raise RuntimeError("search backend down")


class TestPoolDirectory:
    """Tests for the concurrent two-source fetch."""

    def test_both_sources_delivered(self):
        search = FakeSearch({ATOM: {"pairs": [dex_pair(1, OSMO, ATOM)]}})
        catalog = FakeCatalog([catalog_record(1, OSMO, ATOM)])

        data = asyncio.run(PoolDirectory(search, catalog).fetch_for_token(ATOM))

        assert len(data.primary_pairs) == 1
        assert len(data.secondary) == 1
        assert not data.is_empty

    def test_failed_primary_branch_keeps_catalog(self):
        """A raising branch becomes its placeholder; the other branch survives."""
        catalog = FakeCatalog([catalog_record(1, OSMO, ATOM)])

        data = asyncio.run(PoolDirectory(ExplodingSearch(), catalog).fetch_for_token(ATOM))

        assert data.primary is None
        assert len(data.secondary) == 1

    def test_failed_catalog_branch_keeps_primary(self):
        search = FakeSearch({ATOM: {"pairs": [dex_pair(1, OSMO, ATOM)]}})

        data = asyncio.run(PoolDirectory(search, FakeCatalog(None)).fetch_for_token(ATOM))

        assert data.secondary == []
        assert len(data.primary_pairs) == 1

    def test_both_failed(self):
        data = asyncio.run(PoolDirectory(FakeSearch(), FakeCatalog(None)).fetch_for_token(ATOM))
        assert data.is_empty


class TestTokenDataCache:
    """Tests for the per-token consumer cache."""

    def test_second_request_served_from_cache(self):
        search = FakeSearch({ATOM: {"pairs": [dex_pair(1, OSMO, ATOM)]}})
        directory = PoolDirectory(search, FakeCatalog([]))
        cache = TokenDataCache()

        async def run():
            await cache.get_or_fetch(directory, ATOM)
            await cache.get_or_fetch(directory, ATOM)

        asyncio.run(run())
        assert search.queries == [ATOM]
        assert ATOM in cache

    def test_empty_results_not_cached(self):
        directory = PoolDirectory(FakeSearch(), FakeCatalog(None))
        cache = TokenDataCache()

        asyncio.run(cache.get_or_fetch(directory, ATOM))

        assert len(cache) == 0

    def test_clear(self):
        cache = TokenDataCache()
        cache.put(TokenPoolData(token=ATOM, secondary=[catalog_record(1, OSMO, ATOM)]))
        assert cache.get(ATOM) is not None
        cache.clear()
        assert cache.get(ATOM) is None
