"""Shared type definitions for pool and route models.

These types are used across pool, route and execution models.
"""

import re
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

# Native denoms (uosmo), IBC hashes, tokenfactory denoms and bech32 contracts
_DENOM_RE = re.compile(r"^[a-zA-Z][a-zA-Z0-9/:._-]{1,127}$")

# Sentinels used by the fee oracle and route steps
FEE_NOT_AVAILABLE = "N/A"
FEE_ERROR = "Error"
FEE_INVALID_POOL = "0"

# Route step placeholder for an unresolved pool identifier
POOL_ID_UNKNOWN = "N/A"

# Separator between the pool number and the rest of a primary-source pair address
PAIR_ADDRESS_SEPARATOR = "-"


def validate_pool_id(value: Any) -> str:
    """Validate that a value is a numeric pool identifier.

    Args:
        value: Value to validate (string or int)

    Returns:
        Pool identifier as a decimal string

    Raises:
        ValueError: If value is not a non-negative integer
    """
    if isinstance(value, bool):
        raise ValueError(f"Pool id must be string or int, got {type(value).__name__}")

    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"Pool id cannot be negative: {value}")
        return str(value)

    if not isinstance(value, str):
        raise ValueError(f"Pool id must be string or int, got {type(value).__name__}")

    if not is_numeric_pool_id(value):
        raise ValueError(f"Pool id must be a decimal integer string: '{value}'")

    return value


def validate_decimal_string(value: Any) -> str:
    """Validate that a value parses as a finite decimal and return it as a string.

    Floats are converted through str() so the textual form a source sent is kept.

    Raises:
        ValueError: If value is not a finite decimal
    """
    if isinstance(value, bool):
        raise ValueError("Decimal string cannot be a boolean")
    if isinstance(value, (int, float, Decimal)):
        value = str(value)
    if not isinstance(value, str):
        raise ValueError(f"Decimal string must be str or number, got {type(value).__name__}")
    if parse_decimal(value) is None:
        raise ValueError(f"Not a finite decimal: '{value}'")
    return value


# Numeric pool identifier as decimal string (validated)
PoolId = Annotated[
    str,
    BeforeValidator(validate_pool_id),
    Field(description="Numeric pool identifier as decimal string"),
]

# Decimal value kept in its textual form (prices, fees)
DecimalString = Annotated[
    str,
    BeforeValidator(validate_decimal_string),
    Field(description="Finite decimal number as string"),
]

# Integer amount in token base units as decimal string
Amount = Annotated[str, Field(pattern=r"^[0-9]+$")]


def is_numeric_pool_id(value: Any) -> bool:
    """Check if a value is a numeric pool identifier (digits only)."""
    return isinstance(value, str) and value.isascii() and value.isdigit()


def is_valid_denom(denom: str) -> bool:
    """Check if a string looks like a Cosmos denom or contract address."""
    if not isinstance(denom, str):
        return False
    return _DENOM_RE.match(denom) is not None


def parse_decimal(value: Any) -> Decimal | None:
    """Parse a value into a finite Decimal.

    Args:
        value: String, int, float or Decimal

    Returns:
        The Decimal, or None if the value is missing, malformed or not finite
    """
    if value is None or isinstance(value, bool):
        return None
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not parsed.is_finite():
        return None
    return parsed


def parse_float(value: Any, default: float = 0.0) -> float:
    """Parse a value into a float, falling back to default when malformed."""
    parsed = parse_decimal(value)
    return float(parsed) if parsed is not None else default


def format_decimal(value: Decimal) -> str:
    """Render a Decimal in plain notation without trailing zeros.

    Examples:
        Decimal("0.002000000000000000") -> "0.002"
        Decimal("1E-7") -> "0.0000001"
    """
    normalized = value.normalize()
    if normalized == 0:
        return "0"
    return format(normalized, "f")


def derive_pool_id(record: dict[str, Any]) -> str | None:
    """Derive the numeric pool identifier of a raw source record.

    Derivation order: explicit pool id field (pool_id, poolId, id), then the
    explicit pool address field, then the prefix of the pair address before
    the separator character.

    Args:
        record: Raw record from the primary or secondary source

    Returns:
        The identifier as a digits-only string, or None if it cannot be derived
    """
    candidate: Any = None
    for key in ("pool_id", "poolId", "id"):
        if record.get(key) not in (None, ""):
            candidate = record[key]
            break

    if candidate is None and record.get("poolAddress"):
        candidate = record["poolAddress"]

    if candidate is None and record.get("pairAddress"):
        candidate = str(record["pairAddress"]).split(PAIR_ADDRESS_SEPARATOR)[0]

    if candidate is None or isinstance(candidate, bool):
        return None

    identifier = str(candidate).strip()
    if not is_numeric_pool_id(identifier):
        return None
    return identifier
