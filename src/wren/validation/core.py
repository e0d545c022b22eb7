"""Validation — a best-effort parsed value plus an error map.

A ``Validation`` is what a form's combine function works with. Leaf
Validations come from declared fields and carry view metadata for
renderers; combinators build *combined* Validations without it.

Every combinator merges error maps (union, list concatenation on shared
keys) whether or not the parsed values combined, so errors are never
dropped because one side succeeded::

    def combine(password, confirmation):
        return and_then(
            lambda pair: succeed(pair[0])
            if pair[0] == pair[1]
            else fail("Must match password", confirmation),
            map2(lambda p, c: (p, c), password, confirmation),
        )

An absent parsed value is ``NOTHING`` (``None`` is a valid parsed value).
"""

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from wren._internal.errormap import add_errors, merge_all, merge_errors, prune
from wren._internal.types import NOTHING, ErrorMap
from wren.errors import ConfigurationError, InvariantError
from wren.fields.kinds import FieldKind
from wren.state import FieldStatus

GLOBAL_KEY = "$$global$$"


@dataclass(frozen=True, slots=True)
class ViewField:
    """What a renderer receives for one declared field."""

    value: str | None
    status: FieldStatus
    kind: FieldKind
    properties: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Validation:
    """Parsed value (or ``NOTHING``) plus errors keyed by field name.

    ``name`` is set on field Validations and survives ``map``, ``and_then``
    and ``with_error``; ``view`` is
    set on leaf field Validations only. ``errors`` never holds an empty list.
    """

    parsed: Any = NOTHING
    errors: ErrorMap = field(default_factory=dict)
    name: str | None = None
    view: ViewField | None = None

    def __post_init__(self) -> None:
        if any(not entries for entries in self.errors.values()):
            object.__setattr__(self, "errors", prune(self.errors))

    @property
    def is_parsed(self) -> bool:
        return self.parsed is not NOTHING

    # Fluent forms of the module-level combinators

    def map(self, fn: Callable[[Any], Any]) -> "Validation":
        return map(fn, self)

    def and_then(self, fn: Callable[[Any], "Validation"]) -> "Validation":
        return and_then(fn, self)

    def and_map(self, argument: "Validation") -> "Validation":
        """Pipeline form: *self* parses a function, applied to *argument*."""
        return and_map(argument, self)

    def with_error(self, target: "Validation", error: Any) -> "Validation":
        return with_error(target, error, self)

    def with_error_if(self, condition: bool, target: "Validation", error: Any) -> "Validation":
        return with_error_if(condition, target, error, self)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


def succeed(value: Any) -> Validation:
    return Validation(parsed=value)


def fail(error: Any, target: Validation) -> Validation:
    """No parsed value; *error* attached to *target*'s field name."""
    return Validation(parsed=NOTHING, errors={_key(target): [error]})


def from_maybe(value: Any) -> Validation:
    """Wrap a value that may be ``NOTHING``, with no errors."""
    return Validation(parsed=value)


@dataclass(frozen=True, slots=True)
class Ok:
    value: Any


@dataclass(frozen=True, slots=True)
class Err:
    error: Any


type Result = Ok | Err


def from_result(target: Validation) -> Validation:
    """Flatten a field whose parsed value is an ``Ok``/``Err`` result.

    ``Err(error)`` becomes ``fail(error, target)`` against that same field.
    """

    def flatten(result: Result) -> Validation:
        match result:
            case Ok(value=value):
                return succeed(value)
            case Err(error=error):
                return fail(error, target)
        msg = f"from_result expects Ok or Err, got {result!r}"
        raise TypeError(msg)

    return and_then(flatten, target)


# The reserved pseudo-field for form-wide errors
GLOBAL = Validation(parsed=None, name=GLOBAL_KEY)


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


def with_error(target: Validation, error: Any, validation: Validation) -> Validation:
    """Attach *error* to *target*'s key; parsed value untouched."""
    return Validation(
        parsed=validation.parsed,
        errors=add_errors(validation.errors, _key(target), [error]),
        name=validation.name,
    )


def with_error_if(condition: bool, target: Validation, error: Any, validation: Validation) -> Validation:
    key = _key(target)
    if condition:
        return Validation(
            parsed=validation.parsed,
            errors=add_errors(validation.errors, key, [error]),
            name=validation.name,
        )
    return Validation(parsed=validation.parsed, errors=validation.errors, name=validation.name)


def _key(target: Validation) -> str:
    if target.name is None:
        msg = (
            "Errors must target a field Validation (or GLOBAL); "
            f"got a combined Validation with parsed value {target.parsed!r}"
        )
        raise ConfigurationError(msg)
    return target.name


# ---------------------------------------------------------------------------
# Combinators
# ---------------------------------------------------------------------------


def map(fn: Callable[[Any], Any], validation: Validation) -> Validation:  # noqa: A001
    """Map the parsed value, if any. Errors and field name pass through."""
    parsed = validation.parsed
    return Validation(
        parsed=NOTHING if parsed is NOTHING else fn(parsed),
        errors=validation.errors,
        name=validation.name,
    )


def map_n(fn: Callable[..., Any], *validations: Validation) -> Validation:
    """Apply *fn* when every operand parsed; always union all errors."""
    errors = merge_all(v.errors for v in validations)
    if any(v.parsed is NOTHING for v in validations):
        return Validation(parsed=NOTHING, errors=errors)
    return Validation(parsed=fn(*(v.parsed for v in validations)), errors=errors)


def map2(fn: Callable[[Any, Any], Any], a: Validation, b: Validation) -> Validation:
    return map_n(fn, a, b)


def map3(fn: Callable[..., Any], a: Validation, b: Validation, c: Validation) -> Validation:
    return map_n(fn, a, b, c)


def map4(fn: Callable[..., Any], *vs: Validation) -> Validation:
    return _map_exact(4, fn, vs)


def map5(fn: Callable[..., Any], *vs: Validation) -> Validation:
    return _map_exact(5, fn, vs)


def map6(fn: Callable[..., Any], *vs: Validation) -> Validation:
    return _map_exact(6, fn, vs)


def map7(fn: Callable[..., Any], *vs: Validation) -> Validation:
    return _map_exact(7, fn, vs)


def map8(fn: Callable[..., Any], *vs: Validation) -> Validation:
    return _map_exact(8, fn, vs)


def map9(fn: Callable[..., Any], *vs: Validation) -> Validation:
    return _map_exact(9, fn, vs)


def _map_exact(arity: int, fn: Callable[..., Any], validations: Sequence[Validation]) -> Validation:
    if len(validations) != arity:
        msg = f"map{arity} takes {arity} validations, got {len(validations)}"
        raise TypeError(msg)
    return map_n(fn, *validations)


def and_map(validation: Validation, fn_validation: Validation) -> Validation:
    """Apply the function parsed by *fn_validation* to *validation*'s value.

    The method form reads left to right::

        succeed(lambda a: lambda b: (a, b)).and_map(first).and_map(second)
    """
    return map2(lambda value, fn: fn(value), validation, fn_validation)


def and_then(fn: Callable[[Any], Validation], validation: Validation) -> Validation:
    """Chain a dependent Validation, keeping the earlier errors in front."""
    if validation.parsed is NOTHING:
        return Validation(parsed=NOTHING, errors=validation.errors, name=validation.name)
    following = fn(validation.parsed)
    return Validation(
        parsed=following.parsed,
        errors=merge_errors(validation.errors, following.errors),
        name=validation.name,
    )


# ---------------------------------------------------------------------------
# Accessors
# ---------------------------------------------------------------------------


def value(validation: Validation) -> Any:
    """The parsed value, or ``NOTHING``."""
    return validation.parsed


def field_name(validation: Validation) -> str:
    return _key(validation)


def view_field(validation: Validation) -> ViewField:
    """View metadata of a leaf field Validation.

    Raises ``InvariantError`` for combined Validations, which have none.
    """
    if validation.view is None:
        name = validation.name or "<combined>"
        msg = f"Validation {name!r} has no view metadata; only declared fields carry it"
        raise InvariantError(msg)
    return validation.view


def field_status(validation: Validation) -> FieldStatus:
    return view_field(validation).status


def status_rank(validation: Validation) -> int:
    return int(field_status(validation))
