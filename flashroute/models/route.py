"""Pydantic models for the displayable arbitrage route.

The JSON shape (camelCase keys, `from`/`to`/`steps`) is what the swap-review
screen consumes, so field aliases follow it.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from flashroute.models.pool import Token
from flashroute.models.types import FEE_NOT_AVAILABLE, POOL_ID_UNKNOWN


class RouteToken(BaseModel):
    """Token as shown in a route step, possibly carrying a resolution error."""

    model_config = ConfigDict(populate_by_name=True)

    symbol: str
    denom: str
    decimals: int = Field(ge=0)
    logo: str
    error: str | None = None

    @classmethod
    def from_token(cls, token: Token, error: str | None = None) -> RouteToken:
        return cls.make(token.symbol, token.address, token.decimals, error)

    @classmethod
    def make(
        cls,
        symbol: str | None,
        denom: str | None,
        decimals: int | None = None,
        error: str | None = None,
        *,
        default_decimals: int = 6,
    ) -> RouteToken:
        """Build a route token, substituting placeholders for missing fields."""
        display = symbol.upper() if isinstance(symbol, str) and symbol else "UNKNOWN"
        return cls(
            symbol=display,
            denom=denom or "unknown_denom",
            decimals=decimals if isinstance(decimals, int) and decimals >= 0 else default_decimals,
            logo=f"/images/{display.lower()}.png",
            error=error,
        )

    def with_error(self, error: str) -> RouteToken:
        """Copy of this token annotated with an error (keeps an existing error)."""
        if self.error:
            return self
        return self.model_copy(update={"error": error})


class RouteStep(BaseModel):
    """One hop of the route, in execution order."""

    model_config = ConfigDict(populate_by_name=True)

    pool_id: str = Field(default=POOL_ID_UNKNOWN, alias="poolId")
    swap_fee: str = Field(
        default=FEE_NOT_AVAILABLE,
        alias="swapFee",
        description='Fee as decimal string, or the sentinels "N/A" / "Error" / "0".',
    )
    from_token: RouteToken = Field(alias="fromToken")
    to_token: RouteToken = Field(alias="toToken")
    pool_provider: str = Field(alias="poolProvider")
    error: str | None = None

    @property
    def resolved(self) -> bool:
        return self.error is None


class RouteObject(BaseModel):
    """Complete route from the reference asset back to the reference asset."""

    model_config = ConfigDict(populate_by_name=True)

    from_token: RouteToken = Field(alias="from")
    to_token: RouteToken = Field(alias="to")
    steps: list[RouteStep]
    error: str | None = None

    @property
    def hop_count(self) -> int:
        return len(self.steps)

    @property
    def is_chained(self) -> bool:
        """True if every step consumes the token the previous step produced."""
        if not self.steps:
            return True
        if self.steps[0].from_token.denom != self.from_token.denom:
            return False
        if self.steps[-1].to_token.denom != self.to_token.denom:
            return False
        return all(
            prev.to_token.denom == nxt.from_token.denom
            for prev, nxt in zip(self.steps, self.steps[1:], strict=False)
        )

    def to_json(self, indent: int | None = 2) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=indent)
