"""Route planning between a baseline and a target pool.

The planner classifies the pair into a topology and dispatches to one
handler per variant. Handlers never abort: a hop whose token or pool cannot
be determined is kept with an error so the route keeps its full length.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

import structlog

from flashroute.config import DEFAULT_SCANNER_CONFIG, ScannerConfig
from flashroute.models.pool import Pool, Token
from flashroute.routing.intermediary import IntermediaryResolver
from flashroute.routing.topology import (
    BridgeViaBaseline,
    BridgeViaTarget,
    Direct,
    FourHop,
    Topology,
    classify,
)
from flashroute.routing.types import HopPlan, HopRole, IntermediaryMatch, PlannedRoute

logger = structlog.get_logger()

NO_SHARED_TOKEN = "No shared token found between baseline and target pairs."


class RoutePlanner:
    """Builds the hop sequence for an arbitrage between two pools of one token."""

    def __init__(
        self,
        resolver: IntermediaryResolver,
        config: ScannerConfig = DEFAULT_SCANNER_CONFIG,
    ) -> None:
        self._resolver = resolver
        self._config = config
        self.reference = Token(
            symbol=config.reference_symbol,
            address=config.reference_denom,
            decimals=config.reference_decimals,
        )
        self._handlers: dict[type, Callable[[Any], Awaitable[list[HopPlan]]]] = {
            Direct: self._plan_direct,
            BridgeViaBaseline: self._plan_bridge_via_baseline,
            BridgeViaTarget: self._plan_bridge_via_target,
            FourHop: self._plan_four_hop,
        }

    async def plan(
        self, baseline: Pool, target: Pool, token: str | None = None
    ) -> PlannedRoute:
        """Plan the route that buys on the baseline and sells on the target.

        Args:
            baseline: Cheapest pool for the token
            target: Over-priced pool for the token
            token: Scanned token; bridges through it when both pools trade it

        Returns:
            PlannedRoute with exactly the topology's hop count
        """
        topology = classify(baseline, target, self._config, token)
        hops = await self._handlers[type(topology)](topology)
        error = NO_SHARED_TOKEN if topology.bridge is None else None

        route = PlannedRoute(
            topology=topology.name,
            baseline=baseline,
            target=target,
            hops=hops,
            error=error,
        )
        logger.info(
            "route_planned",
            topology=topology.name,
            baseline=baseline.pool_id,
            target=target.pool_id,
            hops=route.hop_count,
            unresolved=route.unresolved_hops,
            low_confidence=route.low_confidence,
        )
        return route

    def classify(self, baseline: Pool, target: Pool, token: str | None = None) -> Topology:
        return classify(baseline, target, self._config, token)

    # -------------------------------------------------------------------------
    # Handlers (one per topology)
    # -------------------------------------------------------------------------

    async def _plan_direct(self, t: Direct) -> list[HopPlan]:
        return [
            self._pool_hop(HopRole.BASELINE, t.baseline, self.reference, t.bridge),
            self._pool_hop(HopRole.TARGET, t.target, t.bridge, self.reference),
        ]

    async def _plan_bridge_via_baseline(self, t: BridgeViaBaseline) -> list[HopPlan]:
        exit_match = await self._resolver.resolve(t.exit_token)
        return [
            self._pool_hop(HopRole.BASELINE, t.baseline, self.reference, t.bridge),
            self._pool_hop(HopRole.TARGET, t.target, t.bridge, t.exit_token),
            self._intermediary_hop(HopRole.EXIT, exit_match, t.exit_token, self.reference),
        ]

    async def _plan_bridge_via_target(self, t: BridgeViaTarget) -> list[HopPlan]:
        enter_match = await self._resolver.resolve(t.enter_token)
        return [
            self._intermediary_hop(HopRole.ENTER, enter_match, self.reference, t.enter_token),
            self._pool_hop(HopRole.BASELINE, t.baseline, t.enter_token, t.bridge),
            self._pool_hop(HopRole.TARGET, t.target, t.bridge, self.reference),
        ]

    async def _plan_four_hop(self, t: FourHop) -> list[HopPlan]:
        enter_match, exit_match = await asyncio.gather(
            self._resolver.resolve(t.enter_token),
            self._resolver.resolve(t.exit_token),
        )
        return [
            self._intermediary_hop(HopRole.ENTER, enter_match, self.reference, t.enter_token),
            self._pool_hop(HopRole.BASELINE, t.baseline, t.enter_token, t.bridge),
            self._pool_hop(HopRole.TARGET, t.target, t.bridge, t.exit_token),
            self._intermediary_hop(HopRole.EXIT, exit_match, t.exit_token, self.reference),
        ]

    # -------------------------------------------------------------------------
    # Hop construction
    # -------------------------------------------------------------------------

    def _pool_hop(
        self, role: HopRole, pool: Pool, offer: Token | None, ask: Token | None
    ) -> HopPlan:
        error = None
        if offer is None or ask is None:
            error = f"Shared token not found in {role.value} pair"
        return HopPlan(role=role, offer=offer, ask=ask, pool=pool, error=error)

    def _intermediary_hop(
        self,
        role: HopRole,
        match: IntermediaryMatch | None,
        offer: Token | None,
        ask: Token | None,
    ) -> HopPlan:
        token = ask if role is HopRole.ENTER else offer
        if token is None:
            return HopPlan(
                role=role,
                offer=offer,
                ask=ask,
                pool=None,
                error=f"{role.value.capitalize()} token could not be determined",
            )
        if match is None:
            return HopPlan(
                role=role,
                offer=offer,
                ask=ask,
                pool=None,
                error=(
                    f"{role.value.capitalize()} pool not found for "
                    f"{self.reference.symbol}/{token.symbol or token.address}"
                ),
            )
        return HopPlan(
            role=role,
            offer=offer,
            ask=ask,
            pool=match.pool,
            confidence=match.confidence,
        )


__all__ = ["NO_SHARED_TOKEN", "RoutePlanner"]
