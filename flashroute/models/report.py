"""Pydantic models for scan results returned to presentation collaborators."""

from __future__ import annotations

from pydantic import BaseModel, Field

from flashroute.models.execution import FlashLoanMessage
from flashroute.models.route import RouteObject


class PoolSummary(BaseModel):
    """One candidate pool of a scan, priced against the baseline."""

    pool_id: str
    pair: str
    pair_address: str
    provenance: str
    liquidity_usd: float
    price: float
    difference_pct: float
    is_baseline: bool = False
    is_target: bool = False


class OpportunityResult(BaseModel):
    """Outcome of evaluating one arbitrage target.

    `route` is always present for a planned target. `flash_loan` is set only
    when the plan is viable; otherwise `error` says why it was discarded.
    """

    pool_id: str
    pair: str
    pair_address: str
    topology: str | None = None
    price: float
    difference_pct: float
    flash_loan: FlashLoanMessage | None = None
    flash_loan_contract: str | None = Field(
        default=None, description="Contract the flash-loan message is sent to, when viable."
    )
    route: RouteObject
    error: str | None = None
    expected_return: str | None = None
    profit: int | None = None
    low_confidence: bool = False
    fee_fallback: bool = Field(
        default=False, description="True if any hop of the plan used the fallback fee."
    )

    @property
    def viable(self) -> bool:
        return self.flash_loan is not None


class TokenReport(BaseModel):
    """Scan result for one token."""

    token: str
    symbol: str | None = None
    baseline_pool_id: str | None = None
    runner_up_pool_id: str | None = None
    min_price: float | None = None
    pools: list[PoolSummary] = Field(default_factory=list)
    opportunities: list[OpportunityResult] = Field(default_factory=list)
    route: RouteObject | None = Field(
        default=None, description="Error-only route when the token could not be scanned."
    )
    error: str | None = None

    @property
    def viable_count(self) -> int:
        return sum(1 for o in self.opportunities if o.viable)

    @classmethod
    def failed(cls, token: str, route: RouteObject) -> TokenReport:
        """Report for a token that could not be scanned at all."""
        return cls(token=token, route=route, error=route.error)


__all__ = ["OpportunityResult", "PoolSummary", "TokenReport"]
