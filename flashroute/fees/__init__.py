"""Swap fee lookups.

Provides the LCD-backed fee oracle and the FeeLookup interpretation of its
string answers.
"""

from flashroute.fees.oracle import FeeOracle, FeeSource, extract_fee
from flashroute.fees.result import FeeLookup, FeeStatus

__all__ = [
    "FeeLookup",
    "FeeOracle",
    "FeeSource",
    "FeeStatus",
    "extract_fee",
]
