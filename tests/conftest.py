"""Pytest configuration and fixtures."""

from collections.abc import Callable, Iterable
from typing import Any

import httpx
import pytest

from flashroute.config import ScannerConfig
from flashroute.models.pool import Token
from tests.helpers import ATOM, OSMO, USDC, make_pool

# =============================================================================
# HTTP doubles
# =============================================================================


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    """AsyncClient whose requests are answered by `handler` instead of the network.

    Create it inside the coroutine under test so it lives on that event loop.
    """
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def json_handler(
    payload: Any, status_code: int = 200, calls: list[httpx.Request] | None = None
) -> Callable[[httpx.Request], httpx.Response]:
    """Handler that answers every request with the same JSON payload."""

    def handler(request: httpx.Request) -> httpx.Response:
        if calls is not None:
            calls.append(request)
        return httpx.Response(status_code, json=payload)

    return handler


# =============================================================================
# Mock classes for dependency injection
# =============================================================================


class FakeFeeOracle:
    """Fee source with canned answers.

    Usage:
        # Every pool charges 0.2%
        oracle = FakeFeeOracle()

        # Per-pool fees and sentinels
        oracle = FakeFeeOracle({"1": "0.003", "2": "N/A"})
    """

    def __init__(self, fees: dict[str, str] | None = None, default: str = "0.002") -> None:
        self.fees = fees or {}
        self.default = default
        self.calls: list[list[str]] = []  # Track calls for assertions

    async def get_fees(self, pool_ids: Iterable[str]) -> dict[str, str]:
        ids = list(dict.fromkeys(pool_ids))
        self.calls.append(ids)
        return {pid: self.fees.get(pid, self.default) for pid in ids}


class FakeSearch:
    """Primary search double returning canned responses per query.

    Usage:
        search = FakeSearch({"OSMO ATOM": {"pairs": [...]}})
    """

    def __init__(self, responses: dict[str, dict[str, Any] | None] | None = None) -> None:
        self.responses = responses or {}
        self.queries: list[str] = []

    async def search(self, query: str) -> dict[str, Any] | None:
        self.queries.append(query)
        return self.responses.get(query)

    async def aclose(self) -> None:
        pass


class FakeCatalog:
    """Catalog double keyed by pool id.

    Usage:
        catalog = FakeCatalog([catalog_record(1, OSMO, ATOM)])
        catalog = FakeCatalog(None)  # catalog unavailable
    """

    def __init__(self, records: list[dict[str, Any]] | None = None) -> None:
        self.records = records
        self.fetches = 0

    async def get_or_fetch(self) -> list[dict[str, Any]] | None:
        self.fetches += 1
        return self.records

    async def find(self, pool_id: str | int) -> dict[str, Any] | None:
        for record in self.records or []:
            if str(record.get("pool_id")) == str(pool_id):
                return record
        return None

    async def contract_address(self, pool_id: str | int) -> str | None:
        record = await self.find(pool_id)
        return record.get("pool_address") if record else None

    async def aclose(self) -> None:
        pass


# =============================================================================
# Pytest fixtures
# =============================================================================


@pytest.fixture
def config() -> ScannerConfig:
    """Default configuration with an empty catalog credential."""
    return ScannerConfig()


@pytest.fixture
def osmo() -> Token:
    return Token(symbol="OSMO", address=OSMO, decimals=6)


@pytest.fixture
def fee_oracle() -> FakeFeeOracle:
    return FakeFeeOracle()


@pytest.fixture
def osmo_atom_pool():
    """OSMO/ATOM pool: 1 OSMO = 0.1 ATOM."""
    return make_pool("1", OSMO, ATOM, price_usd=0.85, price_native="0.1")


@pytest.fixture
def atom_usdc_pool():
    """ATOM/USDC pool: 1 ATOM = 8.5 USDC."""
    return make_pool("2", ATOM, USDC, price_usd=8.5, price_native="8.5")
