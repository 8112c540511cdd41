"""Tests for the single-flight catalog cache."""

import asyncio

import httpx

from flashroute.config import ScannerConfig
from flashroute.sources.catalog import CatalogCache, CatalogState
from tests.conftest import mock_client
from tests.helpers import ATOM, OSMO, USDC, catalog_record


def paged_handler(records: list[dict], calls: list[httpx.Request], delay: float = 0.0):
    """Serve `records` with limit/offset pagination, optionally after a delay."""

    async def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if delay:
            await asyncio.sleep(delay)
        limit = int(request.url.params["limit"])
        offset = int(request.url.params["offset"])
        return httpx.Response(200, json={"data": records[offset : offset + limit]})

    return handler


RECORDS = [
    catalog_record(1, OSMO, ATOM),
    catalog_record(2, ATOM, USDC),
    catalog_record(3, OSMO, USDC),
]


class TestCatalogCache:
    """Tests for catalog fetching and lifecycle."""

    def test_paginates_until_short_page(self):
        calls: list[httpx.Request] = []
        config = ScannerConfig(catalog_page_size=2)

        async def run():
            async with mock_client(paged_handler(RECORDS, calls)) as client:
                cache = CatalogCache(client, config)
                return await cache.get_or_fetch(), cache.state

        records, state = asyncio.run(run())
        assert [r["pool_id"] for r in records] == [1, 2, 3]
        assert state is CatalogState.POPULATED
        assert [c.url.params["offset"] for c in calls] == ["0", "2"]

    def test_stops_on_empty_page(self):
        calls: list[httpx.Request] = []
        config = ScannerConfig(catalog_page_size=3)

        async def run():
            async with mock_client(paged_handler(RECORDS, calls)) as client:
                return await CatalogCache(client, config).get_or_fetch()

        assert len(asyncio.run(run())) == 3
        assert len(calls) == 2

    def test_bearer_credential_sent(self):
        calls: list[httpx.Request] = []
        config = ScannerConfig(catalog_token="secret")

        async def run():
            async with mock_client(paged_handler(RECORDS, calls)) as client:
                await CatalogCache(client, config).get_or_fetch()

        asyncio.run(run())
        assert calls[0].headers["Authorization"] == "Bearer secret"

    def test_concurrent_callers_share_one_fetch(self):
        """Two callers during population trigger exactly one network fetch."""
        calls: list[httpx.Request] = []

        async def run():
            async with mock_client(paged_handler(RECORDS, calls, delay=0.01)) as client:
                cache = CatalogCache(client)
                first, second = await asyncio.gather(cache.get_or_fetch(), cache.get_or_fetch())
                return first, second

        first, second = asyncio.run(run())
        assert len(calls) == 1
        assert first is second

    def test_populated_cache_is_reused(self):
        calls: list[httpx.Request] = []

        async def run():
            async with mock_client(paged_handler(RECORDS, calls)) as client:
                cache = CatalogCache(client)
                await cache.get_or_fetch()
                await cache.get_or_fetch()

        asyncio.run(run())
        assert len(calls) == 1

    def test_failure_invalidates_and_next_call_retries(self):
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            if len(calls) == 1:
                return httpx.Response(503)
            return httpx.Response(200, json={"data": RECORDS})

        async def run():
            async with mock_client(handler) as client:
                cache = CatalogCache(client)
                failed = await cache.get_or_fetch()
                state = cache.state
                retried = await cache.get_or_fetch()
                return failed, state, retried

        failed, state, retried = asyncio.run(run())
        assert failed is None
        assert state is CatalogState.FAILED
        assert len(retried) == 3

    def test_malformed_body_ends_pagination(self):
        async def run():
            async with mock_client(lambda r: httpx.Response(200, json={"pools": []})) as client:
                return await CatalogCache(client).get_or_fetch()

        assert asyncio.run(run()) == []

    def test_contract_address_lookup(self):
        calls: list[httpx.Request] = []

        async def run():
            async with mock_client(paged_handler(RECORDS, calls)) as client:
                cache = CatalogCache(client)
                return await cache.contract_address("2"), await cache.contract_address(99)

        assert asyncio.run(run()) == ("osmo1pool2", None)

    def test_invalidate_resets_state(self):
        calls: list[httpx.Request] = []

        async def run():
            async with mock_client(paged_handler(RECORDS, calls)) as client:
                cache = CatalogCache(client)
                await cache.get_or_fetch()
                cache.invalidate()
                state = cache.state
                await cache.get_or_fetch()
                return state

        assert asyncio.run(run()) is CatalogState.EMPTY
        assert len(calls) == 2
