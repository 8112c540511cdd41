"""Tests for display route assembly."""

import asyncio

from flashroute.routing.assembler import RouteAssembler
from flashroute.routing.planner import NO_SHARED_TOKEN
from flashroute.routing.types import HopPlan, HopRole, PlannedRoute
from tests.conftest import FakeFeeOracle
from tests.helpers import ATOM, OSMO, STATOM, USDC, make_pool, make_token


def direct_route(baseline=None, target=None) -> PlannedRoute:
    baseline = baseline or make_pool("1", OSMO, ATOM)
    target = target or make_pool("2", ATOM, OSMO)
    return PlannedRoute(
        topology="direct",
        baseline=baseline,
        target=target,
        hops=[
            HopPlan(HopRole.BASELINE, make_token(OSMO), make_token(ATOM), baseline),
            HopPlan(HopRole.TARGET, make_token(ATOM), make_token(OSMO), target),
        ],
    )


def four_hop_missing_exit() -> PlannedRoute:
    enter = make_pool("20", OSMO, USDC)
    baseline = make_pool("1", USDC, ATOM)
    target = make_pool("2", ATOM, STATOM)
    return PlannedRoute(
        topology="four_hop",
        baseline=baseline,
        target=target,
        hops=[
            HopPlan(HopRole.ENTER, make_token(OSMO), make_token(USDC), enter),
            HopPlan(HopRole.BASELINE, make_token(USDC), make_token(ATOM), baseline),
            HopPlan(HopRole.TARGET, make_token(ATOM), make_token(STATOM), target),
            HopPlan(
                HopRole.EXIT,
                make_token(STATOM),
                make_token(OSMO),
                None,
                error="Exit pool not found for OSMO/stATOM",
            ),
        ],
    )


class TestCompleteRoutes:
    """Routes whose hops all resolved."""

    def test_direct_route_with_fees(self):
        oracle = FakeFeeOracle({"1": "0.002", "2": "0.003"})
        route = asyncio.run(RouteAssembler(oracle).assemble(direct_route()))

        assert route.hop_count == 2
        assert route.is_chained
        assert route.error is None
        assert [s.swap_fee for s in route.steps] == ["0.002", "0.003"]
        assert [s.pool_id for s in route.steps] == ["1", "2"]
        assert route.steps[0].to_token.symbol == "ATOM"
        assert route.steps[0].pool_provider == "OSMO/ATOM"
        assert all(s.error is None for s in route.steps)
        assert oracle.calls == [["1", "2"]]

    def test_json_shape(self):
        route = asyncio.run(RouteAssembler(FakeFeeOracle()).assemble(direct_route()))
        data = route.model_dump(by_alias=True, exclude_none=True)

        assert set(data) == {"from", "to", "steps"}
        assert set(data["steps"][0]) == {"poolId", "swapFee", "fromToken", "toToken", "poolProvider"}
        assert data["from"]["denom"] == OSMO
        assert data["from"]["logo"] == "/images/osmo.png"

    def test_unavailable_fee_annotates_step(self):
        oracle = FakeFeeOracle({"2": "N/A"})
        route = asyncio.run(RouteAssembler(oracle).assemble(direct_route()))

        assert route.steps[1].swap_fee == "N/A"
        assert route.steps[1].error == "Swap fee not available"
        assert route.steps[0].error is None

    def test_fee_fetch_error_annotates_step(self):
        route = asyncio.run(RouteAssembler(FakeFeeOracle({"1": "Error"})).assemble(direct_route()))
        assert route.steps[0].error == "Fee fetch error"

    def test_non_numeric_pool_id(self):
        oracle = FakeFeeOracle()
        baseline = make_pool("1", OSMO, ATOM).model_copy(update={"pool_id": "abc"})

        route = asyncio.run(RouteAssembler(oracle).assemble(direct_route(baseline=baseline)))

        assert route.steps[0].swap_fee == "0"
        assert route.steps[0].error == "Pool has invalid numeric ID"
        assert oracle.calls == [["2"]]

    def test_top_level_error_argument(self):
        route = asyncio.run(
            RouteAssembler(FakeFeeOracle()).assemble(direct_route(), error="Path not profitable")
        )
        assert route.error == "Path not profitable"


class TestIncompleteRoutes:
    """Routes with unresolved hops keep their structure."""

    def test_missing_exit_pool(self):
        route = asyncio.run(RouteAssembler(FakeFeeOracle()).assemble(four_hop_missing_exit()))

        assert route.hop_count == 4
        assert route.is_chained
        exit_step = route.steps[3]
        assert exit_step.pool_id == "N/A"
        assert exit_step.swap_fee == "N/A"
        assert exit_step.error == "Exit pool not found for OSMO/stATOM"
        assert exit_step.pool_provider == "Intermediary Exit Pool"
        # Reference asset output is known regardless of the pool
        assert exit_step.to_token.error is None
        assert [s.from_token.symbol for s in route.steps] == ["OSMO", "USDC", "ATOM", "STATOM"]

    def test_missing_pool_default_error(self):
        planned = four_hop_missing_exit()
        planned.hops[0] = HopPlan(HopRole.ENTER, make_token(OSMO), make_token(USDC), None)

        route = asyncio.run(RouteAssembler(FakeFeeOracle()).assemble(planned))

        assert route.steps[0].error == "Enter pool data missing"
        assert route.steps[0].to_token.error == (
            "Output token details may be incorrect due to missing enter pool"
        )
        assert route.steps[1].from_token.denom == USDC

    def test_no_shared_token_uses_placeholder(self):
        baseline = make_pool("1", OSMO, ATOM)
        target = make_pool("2", OSMO, USDC)
        planned = PlannedRoute(
            topology="direct",
            baseline=baseline,
            target=target,
            hops=[
                HopPlan(
                    HopRole.BASELINE,
                    make_token(OSMO),
                    None,
                    baseline,
                    error="Shared token not found in baseline pair",
                ),
                HopPlan(
                    HopRole.TARGET,
                    None,
                    make_token(OSMO),
                    target,
                    error="Shared token not found in target pair",
                ),
            ],
            error=NO_SHARED_TOKEN,
        )

        route = asyncio.run(RouteAssembler(FakeFeeOracle()).assemble(planned))

        assert route.error == NO_SHARED_TOKEN
        assert route.hop_count == 2
        placeholder = route.steps[0].to_token
        assert placeholder.symbol == "SHARED_B"
        assert placeholder.denom == "unknown_denom"
        assert placeholder.error == "Output of the baseline hop could not be determined"
        assert route.steps[1].from_token == placeholder
        assert route.steps[0].error == "Shared token not found in baseline pair"

    def test_error_route(self):
        route = RouteAssembler(FakeFeeOracle()).error_route("No pool data available for this token.")
        assert route.steps == []
        assert route.from_token.denom == OSMO
        assert route.error == "No pool data available for this token."
