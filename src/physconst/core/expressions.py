"""
Closed-form expressions for exact values and derived-constant relations.

Exact values and relations are SymPy expressions. They are evaluated by
walking the expression tree with the arithmetic of the requested precision:
``float`` for the fixed kind, the calling thread's ``mpf`` for the arbitrary
kind. Leaves bound to other constants may be numbers, pint quantities or
``Measurement`` terms, so one relation serves value, dimension and
uncertainty evaluation alike.

Exports:
    - as_expression: Normalize an exact-value rule into a SymPy expression.
    - evaluate: Evaluate an expression at a precision with symbol bindings.
"""

import math
import operator
from fractions import Fraction
from functools import reduce
from typing import Any, Mapping, Optional

import sympy as sp

from physconst.core.enums import Precision
from physconst.core.measurement import Measurement
from physconst.core.precision import context, rational, to_arbitrary

__all__ = [
    "as_expression",
    "evaluate",
]

# mpmath context attribute for each named mathematical constant
_NAMED_CONSTANTS = {
    sp.pi: "pi",
    sp.E: "e",
    sp.EulerGamma: "euler",
    sp.Catalan: "catalan",
    sp.GoldenRatio: "phi",
}


def as_expression(value) -> sp.Expr:
    """
    Normalize an exact-value rule into a SymPy expression.

    Decimal strings and floats are taken exactly (``"6.626070040e-34"`` is the
    rational 6626070040/10**43, ``0.1`` is the binary fraction it stores);
    other strings are parsed, so ``"pi"`` or ``"4*pi/10**7"`` name a closed
    form evaluated at the caller's working precision.
    """
    if isinstance(value, sp.Basic):
        return value
    if isinstance(value, bool):
        raise TypeError(f"Unsupported exact value: {value!r}")
    if isinstance(value, (int, float, Fraction)):
        return sp.Rational(value)
    if isinstance(value, str):
        try:
            return sp.Rational(value)
        except (TypeError, ValueError):
            return sp.sympify(value)
    raise TypeError(f"Unsupported exact value: {value!r}")


def evaluate(expr: sp.Expr, precision: Precision = Precision.FIXED,
             bindings: Optional[Mapping[sp.Symbol, Any]] = None):
    """
    Evaluate ``expr`` with the arithmetic of ``precision``.

    Args:
        expr: SymPy expression built from rationals, named constants, symbols,
            ``+ * **`` and ``exp``/``log``.
        precision: Numeric kind of the literal parts of the expression.
        bindings: Values substituted for the free symbols.

    Raises:
        KeyError: If a free symbol has no binding.
        TypeError: If the expression uses an unsupported construct.
    """
    return _Evaluator(Precision(precision), bindings or {}).eval(expr)


class _Evaluator:

    def __init__(self, precision: Precision, bindings: Mapping[sp.Symbol, Any]):
        self.precision = precision
        self.bindings = bindings

    def number(self, p: int, q: int = 1):
        if self.precision is Precision.FIXED:
            return p / q
        return rational(p, q)

    def named(self, node):
        if self.precision is Precision.FIXED:
            return float(node)
        name = _NAMED_CONSTANTS.get(node)
        if name is None:
            raise TypeError(f"Unsupported named constant: {node}")
        return +getattr(context(), name)

    def function(self, name: str, x):
        if isinstance(x, Measurement):
            if name == "exp":
                value = self.function("exp", x.nominal_value)
                return x.propagate(value, value)
            return x.propagate(self.function("log", x.nominal_value), 1 / x.nominal_value)
        lib = math if self.precision is Precision.FIXED else context()
        return getattr(lib, name)(x)

    def eval(self, node):
        if node.is_Symbol:
            if node not in self.bindings:
                raise KeyError(f"No binding for symbol '{node}'")
            return self.bindings[node]
        if node.is_Rational:
            return self.number(int(node.p), int(node.q))
        if node.is_Float:
            return float(node) if self.precision is Precision.FIXED else to_arbitrary(node)
        if node.is_NumberSymbol:
            return self.named(node)

        if node.is_Mul or node.is_Pow:
            numer, denom = node.as_numer_denom()
            if denom != 1:
                return self.eval(numer) / self.eval(denom)

        if node.is_Add:
            return reduce(operator.add, (self.eval(arg) for arg in node.args))
        if node.is_Mul:
            return reduce(operator.mul, (self.eval(arg) for arg in node.args))
        if node.is_Pow:
            base, exponent = node.args
            if exponent.is_Integer:
                return self.eval(base) ** int(exponent)
            return self.eval(base) ** self.eval(exponent)
        if isinstance(node, sp.exp):
            return self.function("exp", self.eval(node.args[0]))
        if isinstance(node, sp.log) and len(node.args) == 1:
            return self.function("log", self.eval(node.args[0]))
        raise TypeError(f"Unsupported expression node: {node} ({type(node).__name__})")
