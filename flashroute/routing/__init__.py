"""Route planning and display assembly.

Module structure:
- topology.py: Direct / BridgeViaBaseline / BridgeViaTarget / FourHop variants
- planner.py: RoutePlanner dispatching one handler per topology
- intermediary.py: IntermediaryResolver for reference-asset entry/exit pools
- overrides.py: Known-pool override table
- assembler.py: RouteAssembler rendering a PlannedRoute as a RouteObject
- types.py: HopPlan, PlannedRoute and related enums
"""

from flashroute.routing.assembler import RouteAssembler
from flashroute.routing.intermediary import IntermediaryResolver
from flashroute.routing.overrides import KNOWN_POOL_OVERRIDES, PoolOverride, find_override
from flashroute.routing.planner import NO_SHARED_TOKEN, RoutePlanner
from flashroute.routing.topology import (
    BridgeViaBaseline,
    BridgeViaTarget,
    Direct,
    FourHop,
    Topology,
    classify,
    shared_token,
)
from flashroute.routing.types import (
    Confidence,
    HopPlan,
    HopRole,
    IntermediaryMatch,
    PlannedRoute,
)

__all__ = [
    "KNOWN_POOL_OVERRIDES",
    "NO_SHARED_TOKEN",
    "BridgeViaBaseline",
    "BridgeViaTarget",
    "Confidence",
    "Direct",
    "FourHop",
    "HopPlan",
    "HopRole",
    "IntermediaryMatch",
    "IntermediaryResolver",
    "PlannedRoute",
    "PoolOverride",
    "RouteAssembler",
    "RoutePlanner",
    "Topology",
    "classify",
    "find_override",
    "shared_token",
]
