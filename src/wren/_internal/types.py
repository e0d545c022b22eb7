"""Shared type aliases and the ``NOTHING`` sentinel used across wren modules."""

from collections.abc import Callable, Sequence
from typing import Any, Final, TypeAlias

# Field name → non-empty list of errors
ErrorMap: TypeAlias = dict[str, list[Any]]

# Raw form payload, in submission order
RawFields: TypeAlias = Sequence[tuple[str, str]]

# Combine function — user-defined, one positional argument per declared field
CombineFn: TypeAlias = Callable[..., Any]


class _Nothing:
    """Marker for "no parsed value".

    Distinct from ``None``, which is a legitimate parsed value for optional
    fields that were left empty.
    """

    __slots__ = ()
    _instance: "_Nothing | None" = None

    def __new__(cls) -> "_Nothing":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOTHING"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        return "NOTHING"


NOTHING: Final = _Nothing()

type Maybe[T] = T | _Nothing


def is_nothing(value: object) -> bool:
    """True if *value* is the ``NOTHING`` sentinel."""
    return value is NOTHING
