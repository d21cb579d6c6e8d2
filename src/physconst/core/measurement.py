"""
Correlated uncertainty backend: values with a sparse gradient over sources.

A ``Measurement`` stores its central value and, for every independent
``UncertaintySource`` it depends on, the partial derivative of the value with
respect to that source. The standard uncertainty is the root-sum-square of
``derivative * source.std_dev`` (first-order propagation), so two terms built
from the same source cancel or combine exactly instead of in quadrature.

Exports:
    - UncertaintySource: Tagged, independent uncertainty contribution.
    - Measurement: Value with linear uncertainty propagation.
    - next_tag: Atomically allocate a fresh, process-wide source tag.
"""

import itertools
import math
import numbers
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from physconst.core.precision import context, is_arbitrary

__all__ = [
    "UncertaintySource",
    "Measurement",
    "next_tag",
]

_tag_lock = threading.Lock()
_tags = itertools.count(1)


def next_tag() -> int:
    """Return a process-wide tag that has never been handed out before."""
    with _tag_lock:
        return next(_tags)


@dataclass(frozen=True)
class UncertaintySource:
    """An independent uncertainty contribution; identity is the tag alone."""
    tag: int
    std_dev: Any = field(compare=False)
    label: str = field(default="", compare=False)

    def __repr__(self):
        return f"UncertaintySource({self.label or self.tag}: u={self.std_dev})"


def _is_scalar(x) -> bool:
    return (isinstance(x, numbers.Real) and not isinstance(x, bool)) or is_arbitrary(x)


def _one(x):
    return type(x)(1)


def _zero(x):
    return type(x)(0)


class Measurement:
    """
    A value with standard uncertainty and per-source partial derivatives.

    The value may be a ``float`` or an mpmath ``mpf``; arithmetic keeps the
    stronger of the two, as plain number arithmetic does.
    """
    __slots__ = ("nominal_value", "derivatives")

    def __init__(self, value, source: Optional[UncertaintySource] = None,
                 derivatives: Optional[Dict[UncertaintySource, Any]] = None):
        self.nominal_value = value
        if derivatives is None:
            derivatives = {} if source is None else {source: _one(value)}
        self.derivatives = derivatives

    # --- Inspection ---

    @property
    def std_dev(self):
        """Combined standard uncertainty."""
        terms = [d * src.std_dev for src, d in self.derivatives.items() if d and src.std_dev]
        if not terms:
            return _zero(self.nominal_value)
        if len(terms) == 1:
            return abs(terms[0])
        if any(is_arbitrary(t) for t in terms):
            ctx = context()
            return ctx.sqrt(ctx.fsum(terms, squared=True))
        return math.hypot(*terms)

    @property
    def sources(self):
        """Uncertainty sources with a non-zero contribution."""
        return frozenset(src for src, d in self.derivatives.items() if d)

    def is_zero(self) -> bool:
        return self.nominal_value == 0 and self.std_dev == 0

    def is_one(self) -> bool:
        return self.nominal_value == 1 and self.std_dev == 0

    def __repr__(self):
        return f"{self.nominal_value}+/-{self.std_dev}"

    # --- Propagation helpers ---

    @staticmethod
    def _combine(a, ca, b, cb):
        out = {src: ca * d for src, d in a.items()}
        for src, d in b.items():
            out[src] = out[src] + cb * d if src in out else cb * d
        return out

    def propagate(self, value, derivative):
        """Return f(self) given f's value and its derivative at the nominal value."""
        return Measurement(value, derivatives={src: derivative * d for src, d in self.derivatives.items()})

    # --- Arithmetic ---

    def __add__(self, other):
        if isinstance(other, Measurement):
            return Measurement(self.nominal_value + other.nominal_value,
                               derivatives=self._combine(self.derivatives, 1, other.derivatives, 1))
        if _is_scalar(other):
            return Measurement(self.nominal_value + other, derivatives=dict(self.derivatives))
        return NotImplemented

    __radd__ = __add__

    def __sub__(self, other):
        if isinstance(other, Measurement):
            return Measurement(self.nominal_value - other.nominal_value,
                               derivatives=self._combine(self.derivatives, 1, other.derivatives, -1))
        if _is_scalar(other):
            return Measurement(self.nominal_value - other, derivatives=dict(self.derivatives))
        return NotImplemented

    def __rsub__(self, other):
        if _is_scalar(other):
            return self.propagate(other - self.nominal_value, -1)
        return NotImplemented

    def __mul__(self, other):
        if isinstance(other, Measurement):
            return Measurement(self.nominal_value * other.nominal_value,
                               derivatives=self._combine(self.derivatives, other.nominal_value,
                                                         other.derivatives, self.nominal_value))
        if _is_scalar(other):
            return self.propagate(self.nominal_value * other, other)
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, other):
        if isinstance(other, Measurement):
            q = self.nominal_value / other.nominal_value
            # d(a/b) = (da - q db) / b; exactly zero when a and b share every source
            numerator = self._combine(self.derivatives, 1, other.derivatives, -q)
            return Measurement(q, derivatives={src: d / other.nominal_value
                                               for src, d in numerator.items()})
        if _is_scalar(other):
            return Measurement(self.nominal_value / other,
                               derivatives={src: d / other for src, d in self.derivatives.items()})
        return NotImplemented

    def __rtruediv__(self, other):
        if _is_scalar(other):
            q = other / self.nominal_value
            return Measurement(q, derivatives={src: -(q * d) / self.nominal_value
                                               for src, d in self.derivatives.items()})
        return NotImplemented

    def __pow__(self, exponent):
        if isinstance(exponent, Measurement):
            return NotImplemented
        if not _is_scalar(exponent):
            return NotImplemented
        if exponent == 0:
            return Measurement(_one(self.nominal_value))
        value = self.nominal_value ** exponent
        return self.propagate(value, exponent * self.nominal_value ** (exponent - 1))

    def __neg__(self):
        return self.propagate(-self.nominal_value, -1)

    def __pos__(self):
        return self

    def __abs__(self):
        return -self if self.nominal_value < 0 else self

    # --- Comparison ---

    def __eq__(self, other):
        if not isinstance(other, Measurement) and not _is_scalar(other):
            return NotImplemented
        return (self - other).is_zero()

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    __hash__ = None
