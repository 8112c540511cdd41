"""Type definitions for routing module."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from flashroute.models.pool import Pool, Token


class HopRole(str, Enum):
    """Which pool of the arbitrage a hop trades through."""

    ENTER = "enter"
    BASELINE = "baseline"
    TARGET = "target"
    EXIT = "exit"


class Confidence(str, Enum):
    """How reliably a hop's pool was identified."""

    HIGH = "high"
    # Matched by symbol only; another token may share the symbol
    LOW = "low"


# Provider label shown when a hop has no pool
DEFAULT_PROVIDER_LABELS = {
    HopRole.ENTER: "Intermediary Enter Pool",
    HopRole.BASELINE: "Baseline Pair",
    HopRole.TARGET: "Target Pair",
    HopRole.EXIT: "Intermediary Exit Pool",
}


@dataclass(frozen=True)
class IntermediaryMatch:
    """A pool linking the reference asset to an intermediary token."""

    pool: Pool
    confidence: Confidence = Confidence.HIGH
    source: str = "unified"  # "override", "unified" or "search"


@dataclass
class HopPlan:
    """One planned swap of a route, in execution order."""

    role: HopRole
    offer: Token | None
    ask: Token | None
    pool: Pool | None
    error: str | None = None
    confidence: Confidence = Confidence.HIGH

    @property
    def resolved(self) -> bool:
        """True if the hop has a pool and both tokens, and no error."""
        return (
            self.pool is not None
            and self.offer is not None
            and self.ask is not None
            and self.error is None
        )

    @property
    def provider_label(self) -> str:
        if self.pool is None:
            return DEFAULT_PROVIDER_LABELS[self.role]
        if self.pool.label:
            return f"{self.pool.name} ({self.pool.label})"
        return self.pool.name


@dataclass
class PlannedRoute:
    """Hop sequence for one baseline/target pair.

    The number of hops always matches the topology, whether or not every
    hop could be resolved.
    """

    topology: str
    baseline: Pool
    target: Pool
    hops: list[HopPlan] = field(default_factory=list)
    error: str | None = None

    @property
    def hop_count(self) -> int:
        return len(self.hops)

    @property
    def is_complete(self) -> bool:
        """True if every hop resolved (the route can be executed)."""
        return self.error is None and all(h.resolved for h in self.hops)

    @property
    def low_confidence(self) -> bool:
        return any(h.confidence is Confidence.LOW for h in self.hops)

    @property
    def unresolved_hops(self) -> list[int]:
        """1-based positions of hops that did not resolve."""
        return [i for i, h in enumerate(self.hops, start=1) if not h.resolved]


__all__ = [
    "Confidence",
    "DEFAULT_PROVIDER_LABELS",
    "HopPlan",
    "HopRole",
    "IntermediaryMatch",
    "PlannedRoute",
]
