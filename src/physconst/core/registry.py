"""
Constant registry: definition, precision resolution and uncertainty materialization.

A ``ConstantRegistry`` mints one ``Constant`` subclass per definition, checks
the definition's renderings against each other before publishing it, and
answers every accessor of the constants it owns:

    registry.value(c)                          -> Quantity[float]
    registry.value(c, Precision.ARBITRARY)     -> Quantity[mpf] at the thread's working precision
    registry.measurement(c, precision)         -> Quantity[Measurement]

Literal constants return their stored float or evaluate their exact
expression; derived constants evaluate their relation over the dependencies'
own accessors at the same precision, so nothing derived is ever stored.

Exports:
    - ConstantRegistry: Registry of constants with its own name and alias maps.
    - get_registry: Look up a registry by name.
    - value: Value accessor dispatching to the constant's registry.
    - measurement: Measurement accessor dispatching to the constant's registry.
"""

import math
import threading
from typing import Dict, Iterator, Optional, Tuple

import numpy as np
import sympy as sp
from pydantic import ValidationError

from physconst.core.config import get_settings
from physconst.core.constant import Constant, ConstantDefinition, DerivedConstantDefinition
from physconst.core.enums import Precision
from physconst.core.errors import ConsistencyError, DimensionMismatchError, DuplicateNameError
from physconst.core.expressions import as_expression, evaluate
from physconst.core.logging import logger
from physconst.core.measurement import Measurement, UncertaintySource, next_tag
from physconst.core.precision import is_arbitrary, to_fixed, working_precision
from physconst.core.units import Q_, is_quantity, parse_unit, register_upcast_type

__all__ = [
    "ConstantRegistry",
    "get_registry",
    "value",
    "measurement",
]

# Derived constants are evaluated in binary64 step by step; their fixed rendering
# may differ from the rounded exact value by at most one unit in the last place.
DERIVED_ULP_TOLERANCE = 1

_registries: Dict[str, "ConstantRegistry"] = {}
_registries_lock = threading.Lock()


def get_registry(name: str) -> "ConstantRegistry":
    return _registries[name]


def _coerce_precision(precision) -> Precision:
    if precision is float:
        return Precision.FIXED
    return Precision(precision)


class ConstantRegistry:
    """Process-wide, append-only collection of constants."""

    def __init__(self, name: str = "default"):
        with _registries_lock:
            if name in _registries:
                raise DuplicateNameError(name, name)
            _registries[name] = self
        self.name = name
        self._constants: Dict[str, Constant] = {}
        self._aliases: Dict[str, str] = {}
        self._by_symbol: Dict[sp.Symbol, Constant] = {}
        self._tags: Dict[Tuple[str, Precision], int] = {}
        self._define_lock = threading.RLock()
        self._tag_lock = threading.Lock()

    # --- Lookup ---

    def __getitem__(self, key: str) -> Constant:
        if key in self._constants:
            return self._constants[key]
        if key in self._aliases:
            return self._constants[self._aliases[key]]
        raise KeyError(f"No constant named '{key}' in registry '{self.name}'")

    def get(self, key: str, default=None) -> Optional[Constant]:
        try:
            return self[key]
        except KeyError:
            return default

    def __contains__(self, key) -> bool:
        return key in self._constants or key in self._aliases

    def __iter__(self) -> Iterator[Constant]:
        return iter(list(self._constants.values()))

    def __len__(self) -> int:
        return len(self._constants)

    def names(self):
        return list(self._constants)

    def aliases(self) -> Dict[str, str]:
        """Map of symbol -> constant name."""
        return dict(self._aliases)

    def __repr__(self):
        return f"ConstantRegistry({self.name!r}, {len(self)} constants)"

    # --- Definition ---

    def define(self, name, symbol, description, fixed_value, exact_value, unit,
               fixed_uncertainty=0.0, exact_uncertainty=0, reference="") -> Constant:
        """
        Register a literal constant.

        Args:
            name: Unique key; also the name of the minted class.
            symbol: Short display token, published as an alias.
            description: Human-readable text.
            fixed_value: binary64 magnitude in ``unit``; ``None`` rounds the exact
                value at the default working precision.
            exact_value: Exact magnitude: a decimal string, int, Fraction or SymPy
                expression (``sympy.pi`` and friends are evaluated at the
                caller's working precision).
            unit: pint unit or unit string.
            fixed_uncertainty: binary64 standard uncertainty (0 for exact constants).
            exact_uncertainty: Exact standard uncertainty.
            reference: Provenance.

        Raises:
            DuplicateNameError: ``name`` or ``symbol`` is already registered.
            DimensionMismatchError: ``name`` is registered with another dimension.
            ConsistencyError: The renderings of the definition disagree.
        """
        with self._define_lock:
            self._check_available(name, symbol, unit)
            try:
                definition = ConstantDefinition(
                    name=name, symbol=symbol, description=description,
                    unit=unit, fixed_value=fixed_value, exact_value=exact_value,
                    fixed_uncertainty=fixed_uncertainty, exact_uncertainty=exact_uncertainty,
                    reference=reference,
                )
            except ValidationError as exc:
                raise ConsistencyError(name, "definition", str(exc)) from exc
            if definition.exact_value is None:
                if definition.fixed_value is None:
                    raise ConsistencyError(name, "definition", "no value given")
                definition = definition.model_copy(update={"exact_value": as_expression(definition.fixed_value)})
            elif definition.fixed_value is None:
                with working_precision(get_settings().default_precision):
                    rounded = to_fixed(evaluate(definition.exact_value, Precision.ARBITRARY))
                definition = definition.model_copy(update={"fixed_value": rounded})
            return self._register(definition)

    def define_derived(self, name, symbol, description, relation, unit, reference="") -> Constant:
        """
        Register a constant defined by a relation over other constants.

        ``relation`` is a SymPy expression over the ``sympy_symbol`` of
        constants of this registry, e.g. ``h.sympy_symbol / (2 * sympy.pi)``.
        Its value and uncertainty are evaluated on every access, at the
        precision the caller asks for.

        Raises:
            DuplicateNameError: ``name`` or ``symbol`` is already registered.
            DimensionMismatchError: The relation's dimension or scale disagrees with ``unit``.
            ConsistencyError: The relation names unknown constants, or its
                renderings disagree.
        """
        with self._define_lock:
            self._check_available(name, symbol, unit)
            try:
                definition = DerivedConstantDefinition(
                    name=name, symbol=symbol, description=description,
                    unit=unit, relation=relation, reference=reference,
                )
            except ValidationError as exc:
                raise ConsistencyError(name, "definition", str(exc)) from exc

            unknown = [str(s) for s in definition.relation.free_symbols if s not in self._by_symbol]
            if unknown:
                raise ConsistencyError(name, "relation", f"unknown constants {sorted(unknown)}")
            dependencies = tuple(sorted(self._by_symbol[s].name for s in definition.relation.free_symbols))
            definition = definition.model_copy(update={"dependencies": dependencies})
            self._check_relation_units(definition)
            return self._register(definition)

    def _check_available(self, name, symbol, unit):
        if name in self._constants:
            existing = self._constants[name]
            if parse_unit(unit).dimensionality != existing.dimension:
                raise DimensionMismatchError(
                    f"'{name}' is registered with dimension {existing.dimension}, "
                    f"not {parse_unit(unit).dimensionality}"
                )
            raise DuplicateNameError(name, name)
        if name in self._aliases:
            raise DuplicateNameError(name, self._aliases[name])
        if symbol != name and symbol in self:
            raise DuplicateNameError(symbol, self[symbol].name)

    def _check_relation_units(self, definition: DerivedConstantDefinition):
        bindings = {s: c.value() for s, c in self._by_symbol.items()
                    if s in definition.relation.free_symbols}
        result = evaluate(definition.relation, Precision.FIXED, bindings)
        if not is_quantity(result):
            result = Q_(result)
        if result.dimensionality != definition.unit.dimensionality:
            raise DimensionMismatchError(
                f"relation of '{definition.name}' has dimension {result.dimensionality}, "
                f"but unit {definition.unit} has {definition.unit.dimensionality}"
            )
        magnitudes = {s: q.magnitude for s, q in bindings.items()}
        expected = evaluate(definition.relation, Precision.FIXED, magnitudes)
        converted = result.to(definition.unit).magnitude
        if not math.isclose(converted, expected, rel_tol=1e-9):
            raise DimensionMismatchError(
                f"relation of '{definition.name}' is expressed in units scaled by "
                f"{converted / expected} relative to {definition.unit}"
            )

    def _register(self, definition: ConstantDefinition) -> Constant:
        cls = type(definition.name, (Constant,), {
            "__slots__": (),
            "__doc__": definition.description,
            "__module__": f"physconst.registries.{self.name}",
            "_definition": definition,
            "_registry": self,
        })
        constant = cls()
        try:
            self._verify(constant)
        except ConsistencyError:
            self._forget_tags(definition.name)
            raise

        self._constants[definition.name] = constant
        if definition.symbol != definition.name:
            self._aliases[definition.symbol] = definition.name
        self._by_symbol[definition.sympy_symbol] = constant
        register_upcast_type(cls, f"{cls.__module__}.{cls.__qualname__}")
        logger.debug(f"Registered {definition.name} ({definition.symbol}) in {self.name}")
        return constant

    # --- Self-consistency ---

    def _verify(self, constant: Constant):
        """Cross-check the fixed and arbitrary renderings of a new constant."""
        name = constant.definition.name
        derived = constant.definition.is_derived

        def agree(a, b):
            if derived:
                return abs(a - b) <= DERIVED_ULP_TOLERANCE * np.spacing(max(abs(a), abs(b)))
            return a == b

        with working_precision(get_settings().default_precision):
            fixed = self.value(constant, Precision.FIXED).magnitude
            exact = self.value(constant, Precision.ARBITRARY).magnitude
            m_fixed = self.measurement(constant, Precision.FIXED).magnitude
            m_exact = self.measurement(constant, Precision.ARBITRARY).magnitude

            if not isinstance(fixed, float):
                raise ConsistencyError(name, "fixed value type", type(fixed).__name__)
            if not is_arbitrary(exact):
                raise ConsistencyError(name, "arbitrary value type", type(exact).__name__)
            if not isinstance(m_fixed.nominal_value, float) or not is_arbitrary(m_exact.nominal_value):
                raise ConsistencyError(name, "measurement types")
            if not agree(fixed, to_fixed(exact)):
                raise ConsistencyError(name, "fixed == round(arbitrary)", f"{fixed!r} != {to_fixed(exact)!r}")
            if not agree(m_fixed.nominal_value, to_fixed(m_exact.nominal_value)):
                raise ConsistencyError(name, "measurement values")
            if not agree(m_fixed.std_dev, to_fixed(m_exact.std_dev)):
                raise ConsistencyError(
                    name, "measurement uncertainties",
                    f"{m_fixed.std_dev!r} != {to_fixed(m_exact.std_dev)!r}",
                )
            if exact != m_exact.nominal_value:
                raise ConsistencyError(name, "arbitrary value == arbitrary measurement value")

    # --- Dual-precision resolver ---

    def value(self, constant: Constant, precision=Precision.FIXED):
        """Return ``constant`` as a Quantity at the requested precision."""
        precision = _coerce_precision(precision)
        definition = constant.definition
        if definition.is_derived:
            magnitude = evaluate(definition.relation, precision, {
                self[dep].sympy_symbol: self.value(self[dep], precision).magnitude
                for dep in definition.dependencies
            })
        elif precision is Precision.FIXED:
            magnitude = definition.fixed_value
        else:
            magnitude = evaluate(definition.exact_value, Precision.ARBITRARY)
        return Q_(magnitude, definition.unit)

    # --- Uncertainty materializer ---

    def measurement(self, constant: Constant, precision=Precision.FIXED):
        """
        Return ``constant`` as a Quantity whose magnitude is a ``Measurement``.

        Every call for the same (constant, precision) pair is bound to the same
        uncertainty source, so repeated uses of a constant correlate exactly.
        Exact constants carry no source.
        """
        precision = _coerce_precision(precision)
        definition = constant.definition
        if definition.is_derived:
            magnitude = evaluate(definition.relation, precision, {
                self[dep].sympy_symbol: self.measurement(self[dep], precision).magnitude
                for dep in definition.dependencies
            })
        else:
            if precision is Precision.FIXED:
                central, std_dev = definition.fixed_value, definition.fixed_uncertainty
            else:
                central = evaluate(definition.exact_value, Precision.ARBITRARY)
                std_dev = evaluate(definition.exact_uncertainty, Precision.ARBITRARY)
            if std_dev == 0:
                magnitude = Measurement(central)
            else:
                source = UncertaintySource(self._tag(definition.name, precision), std_dev,
                                           label=f"{definition.name}[{precision.value}]")
                magnitude = Measurement(central, source=source)
        return Q_(magnitude, definition.unit)

    def _tag(self, name: str, precision: Precision) -> int:
        key = (name, precision)
        with self._tag_lock:
            tag = self._tags.get(key)
            if tag is None:
                tag = self._tags[key] = next_tag()
                logger.debug(f"Allocated uncertainty source {tag} for {name} ({precision.value})")
        return tag

    def _forget_tags(self, name: str):
        with self._tag_lock:
            for key in [k for k in self._tags if k[0] == name]:
                del self._tags[key]


def value(constant: Constant, precision=Precision.FIXED):
    """Return ``constant`` as a Quantity at the requested precision."""
    return constant.registry.value(constant, precision)


def measurement(constant: Constant, precision=Precision.FIXED):
    """Return ``constant`` as a Quantity with a correlated-uncertainty magnitude."""
    return constant.registry.measurement(constant, precision)
