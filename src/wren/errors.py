"""Wren exception hierarchy.

Shared across fields, validation, forms, and the handler so every module
raises and catches the same types.

Bad *input* never raises — it degrades to an ``Invalid`` result. These
exceptions signal programming errors in form declarations.
"""

from dataclasses import dataclass


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when a form or field is declared illegally."""


@dataclass(frozen=True, slots=True)
class FieldConstraintError(ConfigurationError):
    """A field modifier was applied to a field that does not support it.

    Raised when the modifier is applied, e.g. calling ``required`` twice,
    ``with_min`` on a select, or ``required`` on a checkbox.
    """

    operation: str
    kind: str
    detail: str = ""

    def __str__(self) -> str:
        message = f"{self.operation}() is not allowed on this {self.kind} field"
        if self.detail:
            return f"{message}: {self.detail}"
        return message


@dataclass(frozen=True, slots=True)
class ArityError(ConfigurationError):
    """The combine function does not accept one argument per declared field."""

    expected: int
    names: tuple[str, ...] = ()

    def __str__(self) -> str:
        declared = ", ".join(self.names) or "no fields"
        return (
            f"Combine function must accept {self.expected} positional "
            f"argument(s), one per declared field ({declared})"
        )


class InvariantError(WrenError):
    """An internal invariant was violated.

    Typically asking a combined Validation for view metadata that only
    leaf field Validations carry.
    """
