"""Pydantic models for tokens and canonical pools."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from flashroute.models.types import DecimalString, PoolId, parse_decimal


class Provenance(str, Enum):
    """Which data source(s) a canonical pool was built from."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    BOTH = "both"


class Token(BaseModel):
    """A token traded in a pool, keyed by its on-chain denom or contract address."""

    model_config = ConfigDict(frozen=True)

    symbol: str
    address: str = Field(min_length=1, description="Denom or contract address")
    # Most Osmosis assets use 6 decimals; sources that omit decimals get this default
    decimals: int = Field(default=6, ge=0, le=36)


class Pool(BaseModel):
    """A liquidity pool after unification of both data sources.

    `price_native` is the price of the base token expressed in quote token
    units, kept as the decimal string the source reported. `price_usd` is the
    USD price of the base token.
    """

    model_config = ConfigDict(frozen=True)

    pool_id: PoolId
    pair_address: str
    contract_address: str | None = Field(
        default=None,
        description="Executable pool contract; known when the secondary source lists the pool.",
    )
    base: Token
    quote: Token
    liquidity_usd: float = Field(default=0.0, ge=0)
    price_usd: float = 0.0
    price_native: DecimalString | None = None
    provenance: Provenance
    label: str | None = Field(default=None, description="Provider label, e.g. 'osmosis CL'")

    @model_validator(mode="after")
    def _distinct_tokens(self) -> Pool:
        if self.base.address == self.quote.address:
            raise ValueError(f"Pool {self.pool_id} has identical base and quote {self.base.address}")
        return self

    @property
    def name(self) -> str:
        return f"{self.base.symbol}/{self.quote.symbol}"

    @property
    def tokens(self) -> tuple[Token, Token]:
        return (self.base, self.quote)

    def has_token(self, address: str) -> bool:
        """True if either side of the pool is the given token."""
        return address in (self.base.address, self.quote.address)

    def token_for(self, address: str) -> Token | None:
        """Return the pool's Token for an address, or None if not in the pool."""
        if self.base.address == address:
            return self.base
        if self.quote.address == address:
            return self.quote
        return None

    def other_token(self, address: str) -> Token | None:
        """Return the token on the opposite side of `address`, or None."""
        if self.base.address == address:
            return self.quote
        if self.quote.address == address:
            return self.base
        return None

    def contains(self, address: str, symbol: str | None = None) -> bool:
        """True if the pool holds a token matching the address or, if given, the symbol."""
        if self.has_token(address):
            return True
        return symbol is not None and symbol in (self.base.symbol, self.quote.symbol)

    def usd_price_of(self, address: str) -> float | None:
        """USD price of one side of the pool.

        The base side is quoted directly. For the quote side the USD price is
        `price_usd / price_native`, falling back to `price_usd` when the native
        price is missing or non-positive.

        Returns:
            The price, or None if the token is not in the pool
        """
        if self.base.address == address:
            return self.price_usd
        if self.quote.address != address:
            return None
        native = parse_decimal(self.price_native)
        if native is None or native <= 0:
            return self.price_usd
        return (1 / float(native)) * self.price_usd

    def summary(self) -> dict[str, object]:
        """Compact representation for log events."""
        return {
            "pool_id": self.pool_id,
            "pair": self.name,
            "liquidity_usd": round(self.liquidity_usd, 2),
            "provenance": self.provenance.value,
        }
