"""Built-in client validation rules for text fields.

Each rule is a factory that takes the caller's error value and returns a
check for ``FieldSpec.with_client_validation``::

    def check(value: str | None) -> tuple[str | None, list[error]]:
        '''Return the value unchanged, plus errors.'''

Rules never discard the value — a failing email still decodes to what was
typed, so the field can be re-rendered. An empty optional field (``None``)
passes every rule; combine with ``required`` to reject it.

Usage::

    contact = text().required("Required").with_client_validation(
        email("Must be a valid email address")
    )

Custom rules follow the same protocol — any callable matching
``(value) -> (value, errors)`` works with ``with_client_validation()``.
"""

import re
from collections.abc import Callable, Iterable
from typing import Any

# Type alias for a client validation rule
type Rule = Callable[[Any], tuple[Any, list[Any]]]


def _rule(passes: Callable[[str], bool], error: Any) -> Rule:
    def check(value: Any) -> tuple[Any, list[Any]]:
        if value is None or passes(value):
            return value, []
        return value, [error]

    return check


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


def not_blank(error: Any) -> Rule:
    """Value must contain something other than whitespace."""
    return _rule(lambda value: bool(value.strip()), error)


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------

# Basic email pattern — checks structure, not deliverability
_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")


def email(error: Any) -> Rule:
    """Value must be a valid email address (basic format check)."""
    return _rule(lambda value: _EMAIL_RE.match(value) is not None, error)


# Basic URL pattern — checks scheme + host structure
_URL_RE = re.compile(r"^https?://[^\s/$.?#].\S*$", re.IGNORECASE)


def url(error: Any) -> Rule:
    """Value must be a valid URL (http/https)."""
    return _rule(lambda value: _URL_RE.match(value) is not None, error)


def matches(pattern: str, error: Any) -> Rule:
    """Value must match the given regex pattern."""
    compiled = re.compile(pattern)
    return _rule(lambda value: compiled.match(value) is not None, error)


# ---------------------------------------------------------------------------
# Choice
# ---------------------------------------------------------------------------


def one_of(choices: Iterable[str], error: Any) -> Rule:
    """Value must be one of the given choices."""
    allowed = frozenset(choices)
    return _rule(lambda value: value in allowed, error)
