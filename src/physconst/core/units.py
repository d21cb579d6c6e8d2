"""
Dimensional quantity backend built on a single pint registry.

Exports:
    - ureg: The package-wide pint UnitRegistry.
    - Q_: Shorthand for ``ureg.Quantity``.
    - parse_unit: Turn a unit string (or pint unit) into a registry unit.
    - unit_str: Short display form of a unit ("" for dimensionless).
    - is_quantity: True for pint quantities.
    - register_upcast_type: Let a wrapper type take precedence over Quantity operators.
"""

import pint
from pint import compat as pint_compat

__all__ = [
    "ureg",
    "Q_",
    "parse_unit",
    "unit_str",
    "is_quantity",
    "register_upcast_type",
]

ureg = pint.UnitRegistry()
Q_ = ureg.Quantity


def parse_unit(unit) -> pint.Unit:
    if isinstance(unit, ureg.Unit):
        return unit
    if isinstance(unit, pint.Unit):
        unit = str(unit)
    unit = (unit or "").strip()
    return ureg.parse_units(unit) if unit else ureg.dimensionless


def unit_str(unit: pint.Unit) -> str:
    """Short unit string (e.g. ``m / s``); empty for dimensionless units."""
    if unit.dimensionless and unit == ureg.dimensionless:
        return ""
    return f"{unit:~}"


def is_quantity(x) -> bool:
    return isinstance(x, pint.Quantity)


def register_upcast_type(cls: type, key: str) -> None:
    """
    Make pint's Quantity operators return NotImplemented for ``cls``.

    Python then falls through to the reflected operator of ``cls``, so
    ``quantity + wrapper`` is resolved by the wrapper, as ``wrapper + quantity`` is.
    """
    pint_compat.upcast_type_map[key] = cls

