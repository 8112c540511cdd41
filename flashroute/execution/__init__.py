"""Flash-loan execution planning.

Module structure:
- builder.py: ExecutionPlanBuilder turning a resolved route into a plan
- pricing.py: Per-hop output and belief price math
- encoding.py: Base64 JSON encoding of contract messages
- errors.py: PlanError hierarchy
"""

from flashroute.execution.builder import ExecutionPlanBuilder
from flashroute.execution.encoding import decode_swap_msg, encode_msg, encode_swap_msg
from flashroute.execution.errors import (
    MissingContractError,
    NotProfitableError,
    PlanError,
    PoolIdentifierError,
    PriceInvalidError,
    TokenMismatchError,
    UnresolvedHopError,
    ZeroAmountError,
)
from flashroute.execution.pricing import belief_price, swap_output

__all__ = [
    "ExecutionPlanBuilder",
    "MissingContractError",
    "NotProfitableError",
    "PlanError",
    "PoolIdentifierError",
    "PriceInvalidError",
    "TokenMismatchError",
    "UnresolvedHopError",
    "ZeroAmountError",
    "belief_price",
    "decode_swap_msg",
    "encode_msg",
    "encode_swap_msg",
    "swap_output",
]
