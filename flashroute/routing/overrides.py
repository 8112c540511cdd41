"""Known-good reference pools for specific intermediary tokens.

Consulted before any generic search. Each entry pins the pool linking the
reference asset to one token, matched by denom or by symbol. Entries go stale
when pools migrate and need manual upkeep.
"""

from __future__ import annotations

from dataclasses import dataclass

from flashroute.constants import OM, WBTC
from flashroute.models.pool import Token


@dataclass(frozen=True)
class PoolOverride:
    """Pinned pool for one intermediary token.

    At least one of `denom` or `symbol` must be set; `pool_id` is optional
    when the contract address alone identifies the pool.
    """

    contract_address: str
    denom: str | None = None
    symbol: str | None = None
    pool_id: str | None = None

    def __post_init__(self) -> None:
        if self.denom is None and self.symbol is None:
            raise ValueError("PoolOverride needs a denom or a symbol to match")

    def matches(self, token: Token) -> bool:
        if self.denom is not None and token.address == self.denom:
            return True
        return self.symbol is not None and token.symbol == self.symbol


KNOWN_POOL_OVERRIDES: tuple[PoolOverride, ...] = (
    PoolOverride(
        denom=WBTC,
        contract_address="osmo13l9nyqrn2q5fce89hp4jymhsrmn6yh6m4xsjxp4p6pakp82z76nqv6vk7f",
    ),
    PoolOverride(
        denom=OM,
        contract_address="osmo1vzqw56gravz4npt5sxgm2uz7c0ny8fhuxvq9zwmtq26qp8m7mr5s2cac96",
    ),
    PoolOverride(
        symbol="TIA",
        pool_id="1248",
        contract_address="osmo1emr5hycqzrlrd9cdm9j3jxs66detx2j69mde2xxxsj8xhnl3dvmsgpudk6",
    ),
    PoolOverride(
        symbol="milkTIA",
        pool_id="1460",
        contract_address="osmo1n25j7fxdzzet52tkqqtyc04ruc6ffrmh4ytk0n5rpzeh0k0aar0sh3mch6",
    ),
)


def find_override(
    token: Token, overrides: tuple[PoolOverride, ...] = KNOWN_POOL_OVERRIDES
) -> PoolOverride | None:
    """First override matching the token, or None."""
    return next((o for o in overrides if o.matches(token)), None)


__all__ = ["KNOWN_POOL_OVERRIDES", "PoolOverride", "find_override"]
