"""Errors raised while building an execution plan.

All of them abort only the plan of one route; the route itself still
renders, carrying the message as its top-level error.
"""

from __future__ import annotations


class PlanError(ValueError):
    """Base class for execution plan failures."""


class UnresolvedHopError(PlanError):
    """A hop of the route has no pool or token, so nothing can be executed."""

    def __init__(self, positions: list[int]) -> None:
        self.positions = positions
        joined = ", ".join(str(p) for p in positions)
        super().__init__(f"Route has unresolved hops ({joined}); no plan can be built")


class PoolIdentifierError(PlanError):
    """A hop's pool identifier is missing or not numeric."""


class PriceInvalidError(PlanError):
    """A hop's native price is missing, non-numeric or not positive."""


class TokenMismatchError(PlanError):
    """A hop's pool does not trade the token the previous hop produced."""


class ZeroAmountError(PlanError):
    """A hop's expected output rounds down to zero base units."""


class MissingContractError(PlanError):
    """A hop's pool contract address could not be determined."""


class NotProfitableError(PlanError):
    """The plan computed cleanly but does not return more than the loan."""

    def __init__(self, expected_return: int, loan_amount: int) -> None:
        self.expected_return = expected_return
        self.loan_amount = loan_amount
        self.profit = expected_return - loan_amount
        super().__init__("Path not profitable for execution after calculations.")


__all__ = [
    "MissingContractError",
    "NotProfitableError",
    "PlanError",
    "PoolIdentifierError",
    "PriceInvalidError",
    "TokenMismatchError",
    "UnresolvedHopError",
    "ZeroAmountError",
]
