"""
Reusable validators for physconst Pydantic models.

Exports:
    - non_negative: Field validator (number or SymPy expression must be >= 0).
    - valid_identifier: Field validator (constant names are Python identifiers).
"""

__all__ = [
    "non_negative",
    "valid_identifier",
]

import sympy as sp


def non_negative(cls, v):
    """
    Ensure a field's value is zero or positive.

    Args:
        cls: The model class (required by Pydantic validator signature).
        v: The value to validate; a number or a SymPy expression.

    Returns:
        The validated value.

    Raises:
        ValueError: If the value is negative.
    """
    if isinstance(v, sp.Basic):
        if v.is_negative:
            raise ValueError(f"Value must be non-negative, got {v}")
        return v
    if v < 0:
        raise ValueError(f"Value must be non-negative, got {v}")
    return v


def valid_identifier(cls, v):
    """
    Ensure a name or symbol can be published as a module attribute.

    Raises:
        ValueError: If the string is not a valid Python identifier.
    """
    if not v.isidentifier():
        raise ValueError(f"'{v}' is not a valid identifier")
    return v
