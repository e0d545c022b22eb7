"""Validated — the top-level outcome of parsing a form.

Exactly one of:

- ``Valid(value)`` — parsed, and no field reported a problem.
- ``Invalid(parsed, errors)`` — errors exist, or nothing could be parsed.
  ``parsed`` is the best-effort value (or ``NOTHING``) for re-rendering.

The result is falsy when invalid, so you can write::

    result = handler.run(fields)
    if not result:
        return render(errors=result.errors)
"""

from dataclasses import dataclass, field
from typing import Any

from wren._internal.types import NOTHING, ErrorMap


@dataclass(frozen=True, slots=True)
class Valid:
    value: Any

    @property
    def is_valid(self) -> bool:
        return True

    @property
    def errors(self) -> ErrorMap:
        return {}

    @property
    def parsed(self) -> Any:
        return self.value

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Invalid:
    """``errors`` maps field names to lists of errors::

        {"checkin": ["Must be before checkout"]}
    """

    parsed: Any = NOTHING
    errors: ErrorMap = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return False

    def __bool__(self) -> bool:
        """Falsy — enables ``if not result:``."""
        return False


type Validated = Valid | Invalid


def to_validated(parsed: Any, errors: ErrorMap) -> Validated:
    """``Valid`` only when something parsed and *errors* is empty."""
    if parsed is not NOTHING and not errors:
        return Valid(parsed)
    return Invalid(parsed=parsed, errors=errors)
