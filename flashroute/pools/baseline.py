"""Baseline (cheapest pool) selection for one token.

The baseline is the pool quoting the token at the lowest USD price, with one
deliberate exception: once a pool containing the reference asset sets the
running minimum it becomes the baseline and no later pool without the
reference asset can displace it, even at a lower price. The returned
baseline is therefore not always the global minimum of the candidates.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import structlog

from flashroute.config import DEFAULT_SCANNER_CONFIG, ScannerConfig
from flashroute.models.pool import Pool
from flashroute.pools.registry import PoolSet

logger = structlog.get_logger()


def holds_reference(pool: Pool, config: ScannerConfig = DEFAULT_SCANNER_CONFIG) -> bool:
    """True if either side of the pool is the chain's reference asset.

    Matches by denom, or by symbol for sources that report a wrapped denom.
    """
    return pool.contains(config.reference_denom, config.reference_symbol)


def token_price(pool: Pool, token: str) -> float | None:
    """USD price of `token` as quoted by `pool` (None if not in the pool)."""
    return pool.usd_price_of(token)


def is_arbitrage_target(price: float, min_price: float, multiplier: float) -> bool:
    """True if `price` exceeds the minimum by more than the multiplier."""
    return price > min_price * multiplier


def price_difference_pct(price: float, min_price: float) -> float:
    """Relative premium of `price` over the minimum, in percent."""
    if min_price <= 0:
        return 0.0
    return (price - min_price) / min_price * 100


@dataclass(frozen=True)
class PoolQuote:
    """A candidate pool with its computed price relative to the baseline."""

    pool: Pool
    price: float
    difference_pct: float
    is_baseline: bool
    is_target: bool


@dataclass(frozen=True)
class BaselineSelection:
    """Result of baseline selection for one token.

    Attributes:
        token: Address of the token being scanned
        baseline: Cheapest pool (subject to the reference-asset preference)
        runner_up: Plausible next-cheapest pool, or None
        min_price: Price quoted by the baseline, or None without candidates
        filtered: All unified pools above the liquidity threshold
        candidates: Filtered pools that contain the token
    """

    token: str
    baseline: Pool | None
    runner_up: Pool | None
    min_price: float | None
    filtered: PoolSet
    candidates: list[Pool] = field(default_factory=list)

    @property
    def found(self) -> bool:
        return self.baseline is not None and self.min_price is not None

    def quotes(self, multiplier: float) -> list[PoolQuote]:
        """Price every candidate and flag arbitrage targets.

        Args:
            multiplier: Ratio over the minimum price that marks a target

        Returns:
            One PoolQuote per candidate, in candidate order
        """
        if not self.found:
            return []
        assert self.baseline is not None and self.min_price is not None
        result: list[PoolQuote] = []
        for pool in self.candidates:
            price = token_price(pool, self.token)
            if price is None or price <= 0:
                continue
            is_baseline = pool.pool_id == self.baseline.pool_id
            result.append(
                PoolQuote(
                    pool=pool,
                    price=price,
                    difference_pct=price_difference_pct(price, self.min_price),
                    is_baseline=is_baseline,
                    is_target=(
                        not is_baseline
                        and is_arbitrage_target(price, self.min_price, multiplier)
                    ),
                )
            )
        return result

    def targets(self, multiplier: float) -> list[PoolQuote]:
        return [q for q in self.quotes(multiplier) if q.is_target]


def select_baseline(
    pools: PoolSet,
    token: str,
    config: ScannerConfig = DEFAULT_SCANNER_CONFIG,
) -> BaselineSelection:
    """Find the baseline pool and a runner-up for a token.

    Candidates are visited in pool-set order. For each one:
    - a reference-asset pool below the running minimum becomes the baseline
      (and the reference baseline), demoting the previous baseline to
      runner-up;
    - while no reference baseline exists, any pool below the running minimum
      becomes the baseline the same way;
    - while no reference baseline and no runner-up exist, a pool priced
      within `runner_up_tolerance` of the current minimum becomes runner-up.

    Pools whose USD price for the token is missing or not positive are skipped.

    Args:
        pools: Unified pools for the token query
        token: Address of the scanned token
        config: Liquidity threshold and runner-up tolerance

    Returns:
        BaselineSelection (baseline None when no pool qualifies)
    """
    filtered = pools.with_min_liquidity(config.min_liquidity_usd)
    candidates = filtered.containing(token)

    min_price = float("inf")
    baseline: Pool | None = None
    reference_baseline: Pool | None = None
    runner_up: Pool | None = None

    for pool in candidates:
        price = token_price(pool, token)
        if price is None or price <= 0:
            logger.warning("pool_price_invalid", token=token, pool_id=pool.pool_id, price=price)
            continue

        if holds_reference(pool, config) and price < min_price:
            min_price = price
            runner_up = baseline
            baseline = pool
            reference_baseline = pool
        elif reference_baseline is None and price < min_price:
            min_price = price
            runner_up = baseline
            baseline = pool
        elif (
            reference_baseline is None
            and runner_up is None
            and baseline is not None
            and price <= min_price * config.runner_up_tolerance
        ):
            runner_up = pool

    if baseline is None:
        logger.info("baseline_not_found", token=token, candidates=len(candidates))
        return BaselineSelection(
            token=token,
            baseline=None,
            runner_up=None,
            min_price=None,
            filtered=filtered,
            candidates=candidates,
        )

    logger.info(
        "baseline_selected",
        token=token,
        baseline=baseline.pool_id,
        runner_up=runner_up.pool_id if runner_up else None,
        min_price=min_price,
        reference=reference_baseline is not None,
        candidates=len(candidates),
    )
    return BaselineSelection(
        token=token,
        baseline=baseline,
        runner_up=runner_up,
        min_price=min_price,
        filtered=filtered,
        candidates=candidates,
    )
