"""
Error taxonomy for the constant framework.

Exports:
    - PhysconstError: Base class for every error raised by the package.
    - DuplicateNameError: A name or symbol alias is already registered.
    - DimensionMismatchError: Units disagree with a declared dimension.
    - ConsistencyError: A definition fails its cross-precision self-check.
    - UnknownFieldError: Access to an attribute outside a constant's accessor set.
"""

__all__ = [
    "PhysconstError",
    "DuplicateNameError",
    "DimensionMismatchError",
    "ConsistencyError",
    "UnknownFieldError",
]


class PhysconstError(Exception):
    """Base class for physconst errors."""


class DuplicateNameError(PhysconstError):
    """Raised when a constant name or symbol is registered twice."""

    def __init__(self, key: str, existing: str):
        self.key = key
        self.existing = existing
        super().__init__(f"'{key}' is already registered (by constant '{existing}')")


class DimensionMismatchError(PhysconstError):
    """Raised when a unit or an operation disagrees with a physical dimension."""


class ConsistencyError(PhysconstError):
    """Raised when a constant's renderings disagree at definition time."""

    def __init__(self, name: str, check: str, detail: str = ""):
        self.name = name
        self.check = check
        message = f"constant '{name}' failed consistency check '{check}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class UnknownFieldError(PhysconstError, AttributeError):
    """Raised on access to a field a constant handle does not expose."""

    def __init__(self, constant: str, field: str):
        self.constant = constant
        self.field = field
        super().__init__(f"constant '{constant}' has no field '{field}'")
