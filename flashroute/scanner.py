"""Arbitrage scanner that orchestrates discovery, routing and planning.

The ArbitrageScanner is the entry point for scanning a token: it fetches the
token's pools from both sources, unifies them, picks the baseline, and for
every over-priced target plans a route, builds the flash-loan plan and
renders the display route.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable

import httpx
import structlog

from flashroute.config import DEFAULT_SCANNER_CONFIG, ScannerConfig
from flashroute.execution.builder import ExecutionPlanBuilder
from flashroute.execution.errors import NotProfitableError, PlanError
from flashroute.fees.oracle import FeeOracle, FeeSource
from flashroute.models.pool import Pool
from flashroute.models.report import OpportunityResult, PoolSummary, TokenReport
from flashroute.pools.baseline import BaselineSelection, PoolQuote, select_baseline
from flashroute.pools.registry import PoolSet
from flashroute.pools.unifier import unify_pools
from flashroute.routing.assembler import RouteAssembler
from flashroute.routing.intermediary import IntermediaryResolver
from flashroute.routing.planner import RoutePlanner
from flashroute.sources.catalog import CatalogCache
from flashroute.sources.directory import PoolDirectory, TokenDataCache
from flashroute.sources.primary import PrimarySource

logger = structlog.get_logger()

REFERENCE_SCAN_ERROR = "The reference asset cannot be scanned against itself."
NO_DATA_ERROR = "No pool data available for this token."
NO_BASELINE_ERROR = "No pool above the liquidity threshold quotes this token."
EVALUATION_FAILED_ERROR = "Route evaluation failed unexpectedly; see server logs."


class ArbitrageScanner:
    """Scans watchlist tokens for cross-venue price gaps.

    Args:
        directory: Combined primary/catalog fetcher
        fee_oracle: Fee source shared by the plan builder and the assembler
        config: Thresholds, loan and slippage settings
        cache: Per-token data cache; a fresh one if None
        watchlist: Tokens to scan; the configured default if None
    """

    def __init__(
        self,
        directory: PoolDirectory,
        fee_oracle: FeeSource,
        config: ScannerConfig = DEFAULT_SCANNER_CONFIG,
        cache: TokenDataCache | None = None,
        watchlist: Iterable[str] | None = None,
    ) -> None:
        self.directory = directory
        self.fee_oracle = fee_oracle
        self.config = config
        self.cache = cache if cache is not None else TokenDataCache()
        self._watchlist = list(dict.fromkeys(watchlist or config.watchlist))

        self.builder = ExecutionPlanBuilder(fee_oracle, directory.catalog, config)
        self.assembler = RouteAssembler(fee_oracle, config)

    @classmethod
    def create(
        cls,
        config: ScannerConfig = DEFAULT_SCANNER_CONFIG,
        client: httpx.AsyncClient | None = None,
    ) -> ArbitrageScanner:
        """Build a scanner talking to the configured endpoints.

        Args:
            config: Scanner configuration
            client: Shared HTTP client; each source owns its own if None
        """
        directory = PoolDirectory(
            primary=PrimarySource(client, config),
            catalog=CatalogCache(client, config),
        )
        return cls(directory, FeeOracle(client, config), config)

    async def aclose(self) -> None:
        await self.directory.primary.aclose()
        await self.directory.catalog.aclose()
        if isinstance(self.fee_oracle, FeeOracle):
            await self.fee_oracle.aclose()

    @property
    def watchlist(self) -> list[str]:
        return list(self._watchlist)

    def set_watchlist(self, tokens: Iterable[str]) -> list[str]:
        """Replace the watchlist and drop cached token data."""
        self._watchlist = [t for t in dict.fromkeys(t.strip() for t in tokens) if t]
        self.cache.clear()
        logger.info("watchlist_updated", tokens=len(self._watchlist))
        return self.watchlist

    async def scan_watchlist(self) -> list[TokenReport]:
        """Scan every watchlist token concurrently."""
        return list(await asyncio.gather(*(self.scan_token(t) for t in self._watchlist)))

    async def scan_token(self, token: str) -> TokenReport:
        """Scan one token for arbitrage opportunities.

        Args:
            token: Token denom or contract address

        Returns:
            TokenReport with every candidate pool priced and one
            OpportunityResult per arbitrage target. Tokens that cannot be
            scanned at all yield an error-only report.
        """
        if token == self.config.reference_denom:
            return TokenReport.failed(token, self.assembler.error_route(REFERENCE_SCAN_ERROR))

        data = await self.cache.get_or_fetch(self.directory, token)
        if data.is_empty:
            logger.warning("token_data_unavailable", token=token)
            return TokenReport.failed(token, self.assembler.error_route(NO_DATA_ERROR))

        pools = PoolSet.from_mapping(
            unify_pools(data.primary_pairs, data.secondary, self.config)
        )
        selection = select_baseline(pools, token, self.config)
        if not selection.found:
            return TokenReport.failed(token, self.assembler.error_route(NO_BASELINE_ERROR))
        assert selection.baseline is not None

        quotes = selection.quotes(self.config.arbitrage_multiplier)
        targets = [q for q in quotes if q.is_target]
        logger.info(
            "token_scanned",
            token=token,
            candidates=len(quotes),
            targets=len(targets),
            min_price=selection.min_price,
        )

        resolver = IntermediaryResolver(
            pools,
            primary=self.directory.primary,
            catalog=self.directory.catalog,
            config=self.config,
        )
        planner = RoutePlanner(resolver, self.config)
        opportunities = await asyncio.gather(
            *(self.evaluate(planner, selection.baseline, q, token) for q in targets)
        )
        return self._report(token, selection, quotes, list(opportunities))

    async def evaluate(
        self,
        planner: RoutePlanner,
        baseline: Pool,
        quote: PoolQuote,
        token: str | None = None,
    ) -> OpportunityResult:
        """Plan, build and render the route for one target pool.

        Plan failures never propagate: they become the route's top-level
        error and the result carries no flash-loan message. Any other
        failure yields an error-only route for this target alone.
        """
        try:
            return await self._evaluate(planner, baseline, quote, token)
        except Exception:
            logger.exception("evaluation_failed", target=quote.pool.pool_id)
            return OpportunityResult(
                pool_id=quote.pool.pool_id,
                pair=quote.pool.name,
                pair_address=quote.pool.pair_address,
                price=quote.price,
                difference_pct=quote.difference_pct,
                route=self.assembler.error_route(EVALUATION_FAILED_ERROR),
                error=EVALUATION_FAILED_ERROR,
            )

    async def _evaluate(
        self,
        planner: RoutePlanner,
        baseline: Pool,
        quote: PoolQuote,
        token: str | None,
    ) -> OpportunityResult:
        route = await planner.plan(baseline, quote.pool, token)

        plan = None
        error = route.error
        expected_return: str | None = None
        profit: int | None = None
        if error is None:
            try:
                plan = await self.builder.build(route)
            except NotProfitableError as e:
                logger.info(
                    "opportunity_not_profitable",
                    target=quote.pool.pool_id,
                    expected_return=e.expected_return,
                    profit=e.profit,
                )
                error = str(e)
                expected_return = str(e.expected_return)
                profit = e.profit
            except PlanError as e:
                logger.warning("plan_failed", target=quote.pool.pool_id, error=str(e))
                error = f"Execution logic failed: {e}"

        route_object = await self.assembler.assemble(route, error)
        if plan is not None:
            expected_return = plan.expected_return
            profit = plan.profit

        return OpportunityResult(
            pool_id=quote.pool.pool_id,
            pair=quote.pool.name,
            pair_address=quote.pool.pair_address,
            topology=route.topology,
            price=quote.price,
            difference_pct=quote.difference_pct,
            flash_loan=plan.message if plan is not None else None,
            flash_loan_contract=plan.contract_address if plan is not None else None,
            route=route_object,
            error=error,
            expected_return=expected_return,
            profit=profit,
            low_confidence=route.low_confidence,
            fee_fallback=plan.used_fallback_fee if plan is not None else False,
        )

    def _report(
        self,
        token: str,
        selection: BaselineSelection,
        quotes: list[PoolQuote],
        opportunities: list[OpportunityResult],
    ) -> TokenReport:
        assert selection.baseline is not None
        scanned = selection.baseline.token_for(token)
        return TokenReport(
            token=token,
            symbol=scanned.symbol if scanned else None,
            baseline_pool_id=selection.baseline.pool_id,
            runner_up_pool_id=selection.runner_up.pool_id if selection.runner_up else None,
            min_price=selection.min_price,
            pools=[
                PoolSummary(
                    pool_id=q.pool.pool_id,
                    pair=q.pool.name,
                    pair_address=q.pool.pair_address,
                    provenance=q.pool.provenance.value,
                    liquidity_usd=q.pool.liquidity_usd,
                    price=q.price,
                    difference_pct=q.difference_pct,
                    is_baseline=q.is_baseline,
                    is_target=q.is_target,
                )
                for q in quotes
            ],
            opportunities=opportunities,
        )


_default_scanner: ArbitrageScanner | None = None


def get_default_scanner() -> ArbitrageScanner:
    """Process-wide scanner built from environment configuration."""
    global _default_scanner
    if _default_scanner is None:
        _default_scanner = ArbitrageScanner.create(ScannerConfig.from_env())
    return _default_scanner


__all__ = ["ArbitrageScanner", "get_default_scanner"]
