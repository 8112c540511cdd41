"""Fee lookup result types."""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from flashroute.models.types import (
    FEE_ERROR,
    FEE_INVALID_POOL,
    FEE_NOT_AVAILABLE,
    parse_decimal,
)


class FeeStatus(Enum):
    """How a raw fee value should be interpreted."""

    FOUND = "found"
    NOT_AVAILABLE = "not_available"
    ERROR = "error"
    INVALID_POOL = "invalid_pool"


@dataclass(frozen=True)
class FeeLookup:
    """Interpretation of a raw fee value returned by the fee oracle.

    The oracle speaks in strings so that route steps can display its answer
    verbatim. This wrapper turns that string into a usable Decimal, applying
    a fallback when the oracle had no answer.

    Examples:
        FeeLookup("0.002").applied(Decimal("0.003"))   # Decimal("0.002")
        FeeLookup("N/A").applied(Decimal("0.002"))     # Decimal("0.002"), fallback
        FeeLookup("Error").is_fallback                 # True
    """

    raw: str

    @property
    def status(self) -> FeeStatus:
        if self.raw == FEE_NOT_AVAILABLE:
            return FeeStatus.NOT_AVAILABLE
        if self.raw == FEE_ERROR:
            return FeeStatus.ERROR
        if self.raw == FEE_INVALID_POOL:
            return FeeStatus.INVALID_POOL
        if self.value is None:
            return FeeStatus.NOT_AVAILABLE
        return FeeStatus.FOUND

    @property
    def value(self) -> Decimal | None:
        """The parsed fee, or None for sentinels and out-of-range values."""
        if self.raw in (FEE_NOT_AVAILABLE, FEE_ERROR, FEE_INVALID_POOL):
            return None
        parsed = parse_decimal(self.raw)
        if parsed is None or parsed < 0 or parsed >= 1:
            return None
        return parsed

    @property
    def is_fallback(self) -> bool:
        """True if a fallback fee has to be used in place of this value."""
        return self.status is not FeeStatus.FOUND

    def applied(self, fallback: Decimal) -> Decimal:
        """Fee to apply in amount calculations."""
        value = self.value
        return fallback if value is None else value
