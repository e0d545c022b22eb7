"""Assertion helpers for testing forms and handlers.

Each assertion produces a clear error message on failure::

    from wren.testing import assert_invalid, assert_valid, payload

    assert_valid(signup.run(payload(password="x", confirm="x")), "x")
    assert_invalid(
        signup.run(payload(password="x", confirm="y")),
        {"confirm": ["Must match password"]},
    )
"""

from typing import Any

from wren._internal.types import NOTHING
from wren.validation.result import Invalid, Valid, Validated

_UNSET: Any = object()


def payload(**fields: str) -> list[tuple[str, str]]:
    """Raw ``(name, value)`` pairs from keyword arguments, in order.

    Use ``payload_from`` for names that are not valid identifiers.
    """
    return list(fields.items())


def payload_from(pairs: dict[str, str] | list[tuple[str, str]]) -> list[tuple[str, str]]:
    if isinstance(pairs, dict):
        return list(pairs.items())
    return list(pairs)


def assert_valid(result: Validated, expected: Any = _UNSET) -> None:
    """Assert *result* is ``Valid`` (and optionally equals *expected*)."""
    assert isinstance(result, Valid), f"Expected Valid, got {result!r}"
    if expected is not _UNSET:
        assert result.value == expected, (
            f"Expected parsed value {expected!r}, got {result.value!r}"
        )


def assert_invalid(
    result: Validated,
    errors: dict[str, list[Any]] | None = None,
    *,
    parsed: Any = _UNSET,
) -> None:
    """Assert *result* is ``Invalid``, optionally checking errors and parsed value.

    Pass ``parsed=NOTHING`` to assert nothing could be parsed.
    """
    assert isinstance(result, Invalid), f"Expected Invalid, got {result!r}"
    if errors is not None:
        assert result.errors == errors, (
            f"Expected errors {errors!r}, got {result.errors!r}"
        )
    if parsed is NOTHING:
        assert result.parsed is NOTHING, f"Expected no parsed value, got {result.parsed!r}"
    elif parsed is not _UNSET:
        assert result.parsed == parsed, (
            f"Expected parsed value {parsed!r}, got {result.parsed!r}"
        )


def assert_errors_for(result: Validated, name: str, expected: list[Any]) -> None:
    """Assert the errors reported under one field name."""
    actual = result.errors.get(name, [])
    assert actual == expected, (
        f"Expected errors {expected!r} for {name!r}, got {actual!r}.\n"
        f"All errors: {result.errors!r}"
    )
