"""Display route assembly.

Turns a PlannedRoute into the RouteObject shown on the swap-review screen.
The result always has one step per planned hop and an unbroken token chain
from the reference asset back to it; anything that could not be resolved is
replaced by a placeholder carrying an error rather than dropped.
"""

from __future__ import annotations

import structlog

from flashroute.config import DEFAULT_SCANNER_CONFIG, ScannerConfig
from flashroute.fees.oracle import FeeSource
from flashroute.models.route import RouteObject, RouteStep, RouteToken
from flashroute.models.types import (
    FEE_ERROR,
    FEE_INVALID_POOL,
    FEE_NOT_AVAILABLE,
    POOL_ID_UNKNOWN,
    is_numeric_pool_id,
)
from flashroute.routing.types import HopPlan, HopRole, PlannedRoute

logger = structlog.get_logger()

# Placeholder symbol for the token a hop produces, by the role of that hop
PLACEHOLDER_SYMBOLS = {
    HopRole.ENTER: "TOKEN_A",
    HopRole.BASELINE: "SHARED_B",
    HopRole.TARGET: "TOKEN_C",
    HopRole.EXIT: "OSMO",
}

FEE_ERRORS = {
    FEE_NOT_AVAILABLE: "Swap fee not available",
    FEE_ERROR: "Fee fetch error",
}


class RouteAssembler:
    """Builds structurally complete display routes.

    Args:
        fee_oracle: Source of the swap fee shown on each step
        config: Reference asset and default decimals
    """

    def __init__(
        self,
        fee_oracle: FeeSource,
        config: ScannerConfig = DEFAULT_SCANNER_CONFIG,
    ) -> None:
        self._fees = fee_oracle
        self._config = config
        self.reference = RouteToken.make(
            config.reference_symbol, config.reference_denom, config.reference_decimals
        )

    def error_route(self, message: str) -> RouteObject:
        """Route with no steps, used when there is nothing to plan at all."""
        return RouteObject(
            from_token=self.reference, to_token=self.reference, steps=[], error=message
        )

    async def assemble(self, route: PlannedRoute, error: str | None = None) -> RouteObject:
        """Render a planned route.

        Args:
            route: Planned route, possibly with unresolved hops
            error: Top-level annotation, e.g. why no plan could be built;
                defaults to the route's own error

        Returns:
            RouteObject with exactly `route.hop_count` chained steps
        """
        chain = self._token_chain(route.hops)

        fee_ids = [
            hop.pool.pool_id
            for hop in route.hops
            if hop.pool is not None and is_numeric_pool_id(hop.pool.pool_id)
        ]
        fees = await self._fees.get_fees(fee_ids) if fee_ids else {}

        steps = [
            self._step(hop, chain[i], chain[i + 1], fees)
            for i, hop in enumerate(route.hops)
        ]
        result = RouteObject(
            from_token=self.reference,
            to_token=self.reference,
            steps=steps,
            error=error or route.error,
        )
        logger.debug(
            "route_assembled",
            topology=route.topology,
            steps=result.hop_count,
            step_errors=sum(1 for s in steps if s.error),
            error=result.error,
        )
        return result

    def _token_chain(self, hops: list[HopPlan]) -> list[RouteToken]:
        """Tokens between hops, reference asset at both ends.

        Position k (0 < k < n) is the ask of hop k-1, else the offer of hop k,
        else a placeholder; both neighbouring steps share the same entry.
        """
        chain = [self.reference]
        for i, hop in enumerate(hops[:-1]):
            token = hop.ask or hops[i + 1].offer
            if token is not None:
                chain.append(RouteToken.from_token(token))
                continue
            chain.append(
                RouteToken.make(
                    PLACEHOLDER_SYMBOLS[hop.role],
                    None,
                    error=f"Output of the {hop.role.value} hop could not be determined",
                    default_decimals=self._config.default_decimals,
                )
            )
        chain.append(self.reference)
        return chain

    def _step(
        self,
        hop: HopPlan,
        from_token: RouteToken,
        to_token: RouteToken,
        fees: dict[str, str],
    ) -> RouteStep:
        pool = hop.pool
        if pool is None:
            return RouteStep(
                pool_id=POOL_ID_UNKNOWN,
                swap_fee=FEE_NOT_AVAILABLE,
                from_token=from_token,
                to_token=to_token.with_error(
                    f"Output token details may be incorrect due to missing {hop.role.value} pool"
                )
                if to_token.denom != self.reference.denom
                else to_token,
                pool_provider=hop.provider_label,
                error=hop.error or f"{hop.role.value.capitalize()} pool data missing",
            )

        if not is_numeric_pool_id(pool.pool_id):
            return RouteStep(
                pool_id=pool.pool_id,
                swap_fee=FEE_INVALID_POOL,
                from_token=from_token,
                to_token=to_token,
                pool_provider=hop.provider_label,
                error=hop.error or "Pool has invalid numeric ID",
            )

        fee = fees.get(pool.pool_id, FEE_NOT_AVAILABLE)
        return RouteStep(
            pool_id=pool.pool_id,
            swap_fee=fee,
            from_token=from_token,
            to_token=to_token,
            pool_provider=hop.provider_label,
            error=hop.error or FEE_ERRORS.get(fee),
        )


__all__ = ["RouteAssembler"]
