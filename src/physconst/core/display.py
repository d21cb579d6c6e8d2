"""
Human-readable and machine-readable renderings of a constant.

Exports:
    - describe: Multi-line text block (description, value, uncertainty, reference).
    - as_dict: JSON-serializable summary of a constant at a precision.
"""

from physconst.core.enums import Precision
from physconst.core.precision import to_fixed
from physconst.core.units import unit_str

__all__ = [
    "describe",
    "as_dict",
]

_LABEL_WIDTH = 30


def _line(label: str, text: str) -> str:
    return f"{label.ljust(_LABEL_WIDTH)}= {text}"


def _with_unit(magnitude, unit) -> str:
    suffix = unit_str(unit)
    return f"{magnitude} {suffix}" if suffix else f"{magnitude}"


def describe(constant, precision=Precision.FIXED) -> str:
    """
    Render a constant as a block of text.

    Example (``str(c_0)``)::

        Speed of light in vacuum (c_0)
        Value                         = 299792458.0 m / s
        Standard uncertainty          = (exact)
        Relative standard uncertainty = (exact)
        Reference                     = CODATA 2019
    """
    m = constant.measurement(precision).magnitude
    lines = [
        f"{constant.description} ({constant.symbol})",
        _line("Value", _with_unit(m.nominal_value, constant.unit)),
    ]
    if m.std_dev == 0:
        lines.append(_line("Standard uncertainty", "(exact)"))
        lines.append(_line("Relative standard uncertainty", "(exact)"))
    else:
        relative = to_fixed(m.std_dev / abs(m.nominal_value))
        lines.append(_line("Standard uncertainty", _with_unit(m.std_dev, constant.unit)))
        lines.append(_line("Relative standard uncertainty", f"{relative:.2g}"))
    lines.append(_line("Reference", constant.reference))
    return "\n".join(lines)


def as_dict(constant, precision=Precision.FIXED) -> dict:
    m = constant.measurement(precision).magnitude
    return {
        "name": constant.name,
        "symbol": constant.symbol,
        "description": constant.description,
        "value": str(m.nominal_value),
        "uncertainty": str(m.std_dev),
        "unit": unit_str(constant.unit),
        "derived": constant.is_derived,
        "exact": m.std_dev == 0,
        "reference": constant.reference,
    }
