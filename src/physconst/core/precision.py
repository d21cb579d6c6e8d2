"""
Precision backend: fixed (binary64) and arbitrary (mpmath) numbers.

Each thread owns one ``mpmath.MPContext``; its ``prec`` is the ambient
working precision for arbitrary-precision evaluation. ``working_precision``
scopes a change to the calling thread and restores the previous width on
every exit path.

Exports:
    - context: The calling thread's mpmath context.
    - working_precision: Context manager overriding the working width.
    - get_working_precision: Current working width in bits.
    - is_arbitrary: True for mpf-like numbers.
    - to_fixed: Round any supported number to the nearest float.
    - to_arbitrary: Convert a number to an mpf at the working precision.
    - rational: Correctly rounded p/q at the working precision.
"""

import threading
from contextlib import contextmanager
from fractions import Fraction

import mpmath
from mpmath.ctx_mp_python import _mpf
from mpmath.libmp import from_rational, round_nearest, to_float

from physconst.core.config import MIN_WORKING_BITS, get_settings

__all__ = [
    "context",
    "working_precision",
    "get_working_precision",
    "is_arbitrary",
    "to_fixed",
    "to_arbitrary",
    "rational",
]

_local = threading.local()


def context() -> mpmath.MPContext:
    """Return the calling thread's mpmath context, creating it on first use."""
    ctx = getattr(_local, "ctx", None)
    if ctx is None:
        ctx = mpmath.MPContext()
        ctx.prec = get_settings().default_precision
        _local.ctx = ctx
    return ctx


def get_working_precision() -> int:
    return context().prec


@contextmanager
def working_precision(bits: int):
    """
    Evaluate arbitrary-precision values at ``bits`` inside the block.

    Args:
        bits (int): Working precision, at least MIN_WORKING_BITS (64).

    Yields:
        mpmath.MPContext: The thread's context, set to ``bits``.
    """
    bits = int(bits)
    if bits < MIN_WORKING_BITS:
        raise ValueError(f"working precision must be >= {MIN_WORKING_BITS} bits, got {bits}")
    ctx = context()
    previous = ctx.prec
    ctx.prec = bits
    try:
        yield ctx
    finally:
        ctx.prec = previous


def is_arbitrary(x) -> bool:
    return isinstance(x, _mpf)


def to_fixed(x) -> float:
    """Round ``x`` to the nearest binary64 value."""
    if is_arbitrary(x):
        return to_float(x._mpf_, rnd=round_nearest)
    return float(x)


def to_arbitrary(x):
    """Convert ``x`` to an mpf of the calling thread's context."""
    if isinstance(x, Fraction):
        return rational(x.numerator, x.denominator)
    return context().mpf(x)


def rational(p: int, q: int):
    """Return p/q rounded once to the working precision."""
    ctx = context()
    return ctx.make_mpf(from_rational(int(p), int(q), ctx.prec, round_nearest))
