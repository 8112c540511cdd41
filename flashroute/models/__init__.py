"""Pydantic models for pools, routes and flash-loan messages."""

from flashroute.models.execution import (
    Asset,
    AssetInfo,
    Coin,
    ExecutionPlan,
    FlashLoan,
    FlashLoanMessage,
    HopQuote,
    Swap,
    SwapMsg,
    WasmExecute,
    WasmMsg,
)
from flashroute.models.pool import Pool, Provenance, Token
from flashroute.models.report import OpportunityResult, PoolSummary, TokenReport
from flashroute.models.route import RouteObject, RouteStep, RouteToken
from flashroute.models.types import Amount, DecimalString, PoolId

__all__ = [
    # Types
    "Amount",
    "DecimalString",
    "PoolId",
    # Pool models
    "Pool",
    "Provenance",
    "Token",
    # Route models
    "RouteObject",
    "RouteStep",
    "RouteToken",
    # Report models
    "OpportunityResult",
    "PoolSummary",
    "TokenReport",
    # Execution models
    "Asset",
    "AssetInfo",
    "Coin",
    "ExecutionPlan",
    "FlashLoan",
    "FlashLoanMessage",
    "HopQuote",
    "Swap",
    "SwapMsg",
    "WasmExecute",
    "WasmMsg",
]
