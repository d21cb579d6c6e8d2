"""
Constant identities, their immutable definitions, and arithmetic promotion.

Every registered constant gets its own subclass of ``Constant`` with a single,
slot-free instance: the class is the constant's identity, so two constants
with equal values are still distinct types. The handle exposes a fixed set of
accessors; any other attribute access raises ``UnknownFieldError``.

Exports:
    - ConstantDefinition: Pydantic model for a literal constant.
    - DerivedConstantDefinition: Pydantic model for a constant defined by a relation.
    - Constant: Base class of all constant identities.
    - kind_of: Promotion strength of an arithmetic operand.
"""

import operator
from typing import Any, ClassVar, Optional, Tuple

import pint
import sympy as sp
from pydantic import BaseModel, ConfigDict, Field, field_validator

from physconst.core.enums import Kind, Precision
from physconst.core.errors import DimensionMismatchError, UnknownFieldError
from physconst.core.expressions import as_expression
from physconst.core.measurement import Measurement
from physconst.core.precision import is_arbitrary
from physconst.core.units import Q_, is_quantity, parse_unit
from physconst.core.validators import non_negative, valid_identifier

__all__ = [
    "ConstantDefinition",
    "DerivedConstantDefinition",
    "Constant",
    "kind_of",
]


# --- Definitions ---

class ConstantDefinition(BaseModel):
    """Immutable metadata and value generators of one constant."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    # Core identification
    name: str = Field(..., description="Canonical name (registry key, class name)")
    symbol: str = Field(..., description="Short display token, exported as an alias")
    description: str = Field("", description="Human-readable description")

    # Value and units
    unit: pint.Unit = Field(..., description="Unit of every magnitude below")
    fixed_value: Optional[float] = Field(None, description="binary64 magnitude")
    exact_value: Optional[sp.Expr] = Field(None, description="Precision-independent magnitude")
    fixed_uncertainty: float = Field(0.0, description="binary64 standard uncertainty")
    exact_uncertainty: sp.Expr = Field(sp.Integer(0), description="Precision-independent uncertainty")

    # Provenance
    reference: str = Field("", description="Source of the value")

    @field_validator("name", "symbol")
    @classmethod
    def check_identifier(cls, v):
        return valid_identifier(cls, v)

    @field_validator("unit", mode="before")
    @classmethod
    def coerce_unit(cls, v):
        try:
            return parse_unit(v)
        except pint.errors.UndefinedUnitError as exc:
            raise ValueError(str(exc)) from exc

    @field_validator("exact_value", "exact_uncertainty", mode="before")
    @classmethod
    def coerce_expression(cls, v):
        return None if v is None else as_expression(v)

    @field_validator("fixed_uncertainty", "exact_uncertainty")
    @classmethod
    def check_uncertainty(cls, v):
        return non_negative(cls, v)

    @property
    def sympy_symbol(self) -> sp.Symbol:
        return sp.Symbol(self.name, positive=True)

    @property
    def is_derived(self) -> bool:
        return False


class DerivedConstantDefinition(ConstantDefinition):
    """A constant whose value and uncertainty follow from a relation over other constants."""
    relation: sp.Expr = Field(..., description="Closed form over other constants' symbols")
    dependencies: Tuple[str, ...] = Field((), description="Names of the constants in the relation")

    @field_validator("relation", mode="before")
    @classmethod
    def coerce_relation(cls, v):
        return as_expression(v)

    @property
    def is_derived(self) -> bool:
        return True


# --- Promotion ---

def kind_of(x) -> Kind:
    """Return the promotion strength of an arithmetic operand."""
    if isinstance(x, Constant):
        return Kind.FIXED
    if is_quantity(x):
        return kind_of(x.magnitude)
    if isinstance(x, Measurement):
        return Kind.ARBITRARY_MEASURED if is_arbitrary(x.nominal_value) else Kind.MEASURED
    if is_arbitrary(x):
        return Kind.ARBITRARY
    return Kind.FIXED


def _binary(op, reflected=False):
    def method(self, other):
        operand = self._resolve(kind_of(other))
        if isinstance(other, Constant):
            other = other.value()
        elif reflected and op is not operator.pow and not is_quantity(other):
            # a bare mpf on the left reads _mpf_ through the Quantity and drops its unit
            other = Q_(other)
        try:
            return op(other, operand) if reflected else op(operand, other)
        except pint.DimensionalityError as exc:
            raise DimensionMismatchError(str(exc)) from exc
    return method


def _unary(op):
    def method(self):
        return op(self.value())
    return method


# --- Identity ---

class Constant:
    """
    Base class of constant identities.

    Subclasses are minted by ``ConstantRegistry.define`` and carry the
    definition and owning registry as class attributes.
    """
    __slots__ = ()
    # numpy defers to our reflected operators instead of broadcasting over us
    __array_ufunc__ = None

    _definition: ClassVar[ConstantDefinition]
    _registry: ClassVar[Any]

    # --- Raw fields ---

    @property
    def definition(self) -> ConstantDefinition:
        return type(self)._definition

    @property
    def registry(self):
        return type(self)._registry

    @property
    def name(self) -> str:
        return self.definition.name

    @property
    def symbol(self) -> str:
        return self.definition.symbol

    @property
    def description(self) -> str:
        return self.definition.description

    @property
    def reference(self) -> str:
        return self.definition.reference

    @property
    def unit(self) -> pint.Unit:
        return self.definition.unit

    @property
    def dimension(self):
        return self.definition.unit.dimensionality

    @property
    def sympy_symbol(self) -> sp.Symbol:
        return self.definition.sympy_symbol

    @property
    def is_derived(self) -> bool:
        return self.definition.is_derived

    @property
    def is_exact(self) -> bool:
        if self.is_derived:
            return all(self.registry[dep].is_exact for dep in self.definition.dependencies)
        return self.definition.fixed_uncertainty == 0

    # --- Accessors ---

    def value(self, precision=Precision.FIXED):
        """Return the constant as a pint Quantity at the requested precision."""
        return self.registry.value(self, precision)

    def measurement(self, precision=Precision.FIXED):
        """Return the constant as a Quantity whose magnitude is a Measurement."""
        return self.registry.measurement(self, precision)

    def uncertainty(self, precision=Precision.FIXED):
        """Standard uncertainty as a Quantity in the constant's unit."""
        return Q_(self.measurement(precision).magnitude.std_dev, self.unit)

    def relative_uncertainty(self, precision=Precision.FIXED):
        m = self.measurement(precision).magnitude
        return m.std_dev / abs(m.nominal_value)

    def quantity(self):
        """Drop the identity: a plain fixed-precision Quantity."""
        return self.value()

    def to(self, unit):
        try:
            return self.value().to(unit)
        except pint.DimensionalityError as exc:
            raise DimensionMismatchError(str(exc)) from exc

    def _resolve(self, kind: Kind):
        if kind is Kind.ARBITRARY_MEASURED:
            return self.measurement(Precision.ARBITRARY)
        if kind is Kind.ARBITRARY:
            return self.value(Precision.ARBITRARY)
        if kind is Kind.MEASURED:
            return self.measurement(Precision.FIXED)
        return self.value(Precision.FIXED)

    def __getattr__(self, item):
        raise UnknownFieldError(type(self).__name__, item)

    # --- Arithmetic promotion ---

    __add__ = _binary(operator.add)
    __radd__ = _binary(operator.add, reflected=True)
    __sub__ = _binary(operator.sub)
    __rsub__ = _binary(operator.sub, reflected=True)
    __mul__ = _binary(operator.mul)
    __rmul__ = _binary(operator.mul, reflected=True)
    __truediv__ = _binary(operator.truediv)
    __rtruediv__ = _binary(operator.truediv, reflected=True)
    __pow__ = _binary(operator.pow)
    __rpow__ = _binary(operator.pow, reflected=True)

    __neg__ = _unary(operator.neg)
    __pos__ = _unary(operator.pos)
    __abs__ = _unary(operator.abs)

    def __float__(self):
        try:
            return float(self.value())
        except pint.DimensionalityError as exc:
            raise DimensionMismatchError(str(exc)) from exc

    def __reduce__(self):
        return (_lookup, (self.registry.name, self.name))

    def __repr__(self):
        return f"<{type(self).__name__} ({self.symbol})>"

    def __str__(self):
        from physconst.core.display import describe
        return describe(self)


def _lookup(registry_name: str, name: str):
    from physconst.core.registry import get_registry
    return get_registry(registry_name)[name]
