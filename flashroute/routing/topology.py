"""Route topology classification.

Which pools hold the reference asset decides the route shape:

| baseline | target | variant           | hops                                     |
|----------|--------|-------------------|------------------------------------------|
| yes      | yes    | Direct            | ref->B (baseline), B->ref (target)       |
| yes      | no     | BridgeViaBaseline | ref->B (baseline), B->C (target), C->ref |
| no       | yes    | BridgeViaTarget   | ref->A, A->B (baseline), B->ref (target) |
| no       | no     | FourHop           | ref->A, A->B, B->C, C->ref               |

B is the bridge token shared by both pools, A the baseline's other token and
C the target's other token. Each variant carries only the tokens its hops
need; a token that cannot be determined is None and surfaces later as an
annotated hop.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar

from flashroute.config import DEFAULT_SCANNER_CONFIG, ScannerConfig
from flashroute.models.pool import Pool, Token
from flashroute.pools.baseline import holds_reference


@dataclass(frozen=True)
class Direct:
    name: ClassVar[str] = "direct"
    hop_count: ClassVar[int] = 2

    baseline: Pool
    target: Pool
    bridge: Token | None


@dataclass(frozen=True)
class BridgeViaBaseline:
    name: ClassVar[str] = "bridge_via_baseline"
    hop_count: ClassVar[int] = 3

    baseline: Pool
    target: Pool
    bridge: Token | None
    exit_token: Token | None


@dataclass(frozen=True)
class BridgeViaTarget:
    name: ClassVar[str] = "bridge_via_target"
    hop_count: ClassVar[int] = 3

    baseline: Pool
    target: Pool
    bridge: Token | None
    enter_token: Token | None


@dataclass(frozen=True)
class FourHop:
    name: ClassVar[str] = "four_hop"
    hop_count: ClassVar[int] = 4

    baseline: Pool
    target: Pool
    bridge: Token | None
    enter_token: Token | None
    exit_token: Token | None


Topology = Direct | BridgeViaBaseline | BridgeViaTarget | FourHop


def is_reference(token: Token, config: ScannerConfig = DEFAULT_SCANNER_CONFIG) -> bool:
    return token.address == config.reference_denom or token.symbol == config.reference_symbol


def shared_token(
    baseline: Pool,
    target: Pool,
    config: ScannerConfig = DEFAULT_SCANNER_CONFIG,
    prefer: str | None = None,
) -> Token | None:
    """The non-reference token traded by both pools.

    `prefer` (the scanned token) wins when both pools trade it; otherwise the
    target base is checked first. Returns the target pool's Token object so
    decimals and symbol match the pool the bridge is sold into.
    """
    candidates = [target.base, target.quote]
    if prefer is not None:
        candidates.sort(key=lambda t: t.address != prefer)
    for token in candidates:
        if baseline.has_token(token.address) and not is_reference(token, config):
            return token
    return None


def classify(
    baseline: Pool,
    target: Pool,
    config: ScannerConfig = DEFAULT_SCANNER_CONFIG,
    token: str | None = None,
) -> Topology:
    """Classify a baseline/target pair into its route topology.

    Args:
        baseline: Cheapest pool for the token
        target: Over-priced pool for the token
        config: Reference asset settings
        token: Scanned token, preferred as the bridge when both pools trade it
    """
    bridge = shared_token(baseline, target, config, prefer=token)
    enter_token = baseline.other_token(bridge.address) if bridge else None
    exit_token = target.other_token(bridge.address) if bridge else None

    baseline_ref = holds_reference(baseline, config)
    target_ref = holds_reference(target, config)

    if baseline_ref and target_ref:
        return Direct(baseline=baseline, target=target, bridge=bridge)
    if baseline_ref:
        return BridgeViaBaseline(
            baseline=baseline, target=target, bridge=bridge, exit_token=exit_token
        )
    if target_ref:
        return BridgeViaTarget(
            baseline=baseline, target=target, bridge=bridge, enter_token=enter_token
        )
    return FourHop(
        baseline=baseline,
        target=target,
        bridge=bridge,
        enter_token=enter_token,
        exit_token=exit_token,
    )


__all__ = [
    "BridgeViaBaseline",
    "BridgeViaTarget",
    "Direct",
    "FourHop",
    "Topology",
    "classify",
    "is_reference",
    "shared_token",
]
