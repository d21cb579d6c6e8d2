"""
physconst: physical constants with per-constant identity, fixed and arbitrary
precision accessors, and correlated-uncertainty measurements.

Example::

    from physconst.codata2019 import c_0, h
    from physconst import value, measurement, Precision

    value(c_0)                                # 299792458.0 meter / second
    measurement(h, Precision.ARBITRARY)       # mpf value with its uncertainty source
"""

__version__ = "0.1.0"

from physconst.core.logging import enable_logging, logger
from physconst.core.enums import Precision
from physconst.core.errors import (
    ConsistencyError,
    DimensionMismatchError,
    DuplicateNameError,
    PhysconstError,
    UnknownFieldError,
)
from physconst.core.precision import get_working_precision, working_precision
from physconst.core.measurement import Measurement, UncertaintySource
from physconst.core.constant import Constant
from physconst.core.registry import ConstantRegistry, get_registry, measurement, value
from physconst.core.display import describe

# Silent until enable_logging() is called
logger.disable("physconst")

__all__ = [
    "__version__",
    "Precision",
    "PhysconstError",
    "DuplicateNameError",
    "DimensionMismatchError",
    "ConsistencyError",
    "UnknownFieldError",
    "working_precision",
    "get_working_precision",
    "Measurement",
    "UncertaintySource",
    "Constant",
    "ConstantRegistry",
    "get_registry",
    "value",
    "measurement",
    "describe",
    "enable_logging",
]
