# physconst/core/enums.py

from enum import Enum

class Precision(str, Enum):
    """Numeric representation requested from a constant accessor."""
    FIXED = "fixed"          # IEEE-754 binary64
    ARBITRARY = "arbitrary"  # mpmath mpf at the ambient working precision


class Kind(int, Enum):
    """Promotion strength of an arithmetic operand; the strongest operand wins."""
    FIXED = 0
    MEASURED = 1             # fixed precision with uncertainty
    ARBITRARY = 2
    ARBITRARY_MEASURED = 3   # arbitrary precision with uncertainty

__all__ = [
    "Precision",
    "Kind",
]
