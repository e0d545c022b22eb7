"""Error map helpers — merge and insert while keeping keys meaningful.

An error map is a plain ``dict[str, list[error]]``. Every helper here keeps
one invariant: a key is present if and only if its list is non-empty, so
``not errors`` is a correct global-validity check.

None of these functions mutate their arguments.
"""

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from wren._internal.types import ErrorMap


def merge_errors(left: Mapping[str, Sequence[Any]], right: Mapping[str, Sequence[Any]]) -> ErrorMap:
    """Union two error maps, concatenating lists for shared keys (left first)."""
    merged: ErrorMap = {}
    for key, entries in left.items():
        if entries:
            merged[key] = list(entries)
    for key, entries in right.items():
        if not entries:
            continue
        if key in merged:
            merged[key] = merged[key] + list(entries)
        else:
            merged[key] = list(entries)
    return merged


def merge_all(maps: Iterable[Mapping[str, Sequence[Any]]]) -> ErrorMap:
    """Fold ``merge_errors`` over *maps* in order."""
    merged: ErrorMap = {}
    for errors in maps:
        merged = merge_errors(merged, errors)
    return merged


def add_errors(errors: Mapping[str, Sequence[Any]], name: str, new: Sequence[Any]) -> ErrorMap:
    """Append *new* to the list under *name*; no-op for an empty *new*."""
    return merge_errors(errors, {name: new})


def prune(errors: Mapping[str, Sequence[Any]]) -> ErrorMap:
    """Copy of *errors* without empty entries."""
    return {key: list(entries) for key, entries in errors.items() if entries}
