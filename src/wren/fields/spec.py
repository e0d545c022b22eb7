"""FieldSpec — the parsing/encoding contract for one form field.

A FieldSpec knows how to:

- ``decode`` a raw value (``None`` if never set) into a best-effort parsed
  value plus zero or more errors. A field can report *both*: a value below
  its minimum still decodes to that number so the UI can show it.
- ``encode_initial`` a typed default back into the raw string form.
- ``compare_raw`` a raw string against a typed bound, for min/max checks.
- carry declarative ``properties`` (``required``, ``min``, ``maxlength`` ...)
  for renderers.

Modifiers return a new FieldSpec and never mutate the receiver::

    quantity = (
        integer(invalid=lambda raw: f"{raw} is not a number")
        .required("Required")
        .with_min(1, "Must be at least 1")
        .with_max(99, "Must be 99 or less")
    )

Each modifier consumes a *capability*. Applying a modifier the field does not
support (``required`` twice, ``with_min`` on a select, ``required`` on a
checkbox) raises ``FieldConstraintError`` at declaration time.
"""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any

from wren._internal.types import NOTHING
from wren.errors import FieldConstraintError
from wren.fields.kinds import FieldKind, InputKind, InputType
from wren.selection import Formatter

# Decode result — (parsed value or NOTHING, errors)
type Decoded = tuple[Any, list[Any]]
type Decoder = Callable[[str | None], Decoded]


class Capability(StrEnum):
    REQUIRED = "required"
    MIN = "min"
    MAX = "max"
    MIN_LENGTH = "min_length"
    MAX_LENGTH = "max_length"
    STEP = "step"
    RANGE = "range"
    INITIAL = "initial"
    FORMAT = "format"


class OutsideRange(StrEnum):
    """Which side of a ``range`` field's bounds a value fell on."""

    BELOW_RANGE = "BelowRange"
    ABOVE_RANGE = "AboveRange"


def is_blank(raw: str | None) -> bool:
    """True for a field that was not filled in (absent or empty string)."""
    return raw is None or raw == ""


def _never_compare(raw: str, bound: Any) -> int:
    return 0


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """Decode/encode/compare/properties bundle for one declared field."""

    decode: Decoder
    kind: FieldKind = field(default_factory=InputKind)
    encode_initial: Callable[[Any], str] = str
    compare_raw: Callable[[str, Any], int] = _never_compare
    properties: tuple[tuple[str, Any], ...] = ()
    initial_value: Callable[[Any], str | None] | None = None
    formatter: Formatter | None = None
    capabilities: frozenset[Capability] = frozenset()

    @property
    def properties_dict(self) -> dict[str, Any]:
        """Properties as a dict (the latest modifier wins on repeats)."""
        return dict(reversed(self.properties))

    def _consume(self, operation: str, *needed: Capability, detail: str = "") -> frozenset[Capability]:
        missing = [cap for cap in needed if cap not in self.capabilities]
        if missing:
            raise FieldConstraintError(operation, self.kind.name, detail)
        return self.capabilities - set(needed)

    def _with_property(self, name: str, value: Any) -> tuple[tuple[str, Any], ...]:
        return ((name, value), *self.properties)

    # -- Presence --------------------------------------------------------

    def required(self, error: Any) -> "FieldSpec":
        """Blank raw values get *error* (prepended); "valid empty" becomes NOTHING."""
        capabilities = self._consume("required", Capability.REQUIRED, detail="already required or not nullable")
        inner = self.decode

        def decode(raw: str | None) -> Decoded:
            parsed, errors = inner(raw)
            if parsed is None:
                parsed = NOTHING
            if is_blank(raw):
                return parsed, [error, *errors]
            return parsed, errors

        return replace(
            self,
            decode=decode,
            properties=self._with_property("required", True),
            capabilities=capabilities - {Capability.RANGE},
        )

    # -- Bounds ----------------------------------------------------------

    def with_min(self, bound: Any, error: Any) -> "FieldSpec":
        """Prepend *error* when the raw value compares below *bound*; keep the parsed value."""
        capabilities = self._consume("with_min", Capability.MIN)
        return replace(
            self,
            decode=self._bounded(lambda raw: self.compare_raw(raw, bound) < 0, error),
            properties=self._with_property("min", self.encode_initial(bound)),
            capabilities=capabilities - {Capability.RANGE},
        )

    def with_max(self, bound: Any, error: Any) -> "FieldSpec":
        """Prepend *error* when the raw value compares above *bound*; keep the parsed value."""
        capabilities = self._consume("with_max", Capability.MAX)
        return replace(
            self,
            decode=self._bounded(lambda raw: self.compare_raw(raw, bound) > 0, error),
            properties=self._with_property("max", self.encode_initial(bound)),
            capabilities=capabilities - {Capability.RANGE},
        )

    def with_min_length(self, length: int, error: Any) -> "FieldSpec":
        capabilities = self._consume("with_min_length", Capability.MIN_LENGTH)
        return replace(
            self,
            decode=self._bounded(lambda raw: len(raw) < length, error),
            properties=self._with_property("minlength", str(length)),
            capabilities=capabilities,
        )

    def with_max_length(self, length: int, error: Any) -> "FieldSpec":
        capabilities = self._consume("with_max_length", Capability.MAX_LENGTH)
        return replace(
            self,
            decode=self._bounded(lambda raw: len(raw) > length, error),
            properties=self._with_property("maxlength", str(length)),
            capabilities=capabilities,
        )

    def _bounded(self, violates: Callable[[str], bool], error: Any) -> Decoder:
        inner = self.decode

        def decode(raw: str | None) -> Decoded:
            parsed, errors = inner(raw)
            # Bounds never apply to a field that was left empty
            if raw is None or raw == "" or not violates(raw):
                return parsed, errors
            return parsed, [error, *errors]

        return decode

    def range(
        self,
        *,
        min: Any,
        max: Any,
        missing: Any,
        invalid: Callable[[OutsideRange], Any],
        initial: Callable[[Any], Any] | None = None,
    ) -> "FieldSpec":
        """A required, bounded slider.

        Equivalent to ``required(missing).with_min(min, invalid(BELOW_RANGE))
        .with_max(max, invalid(ABOVE_RANGE))`` rendered as ``type="range"``.
        """
        self._consume("range", Capability.RANGE)
        ranged = (
            self.required(missing)
            .with_min(min, invalid(OutsideRange.BELOW_RANGE))
            .with_max(max, invalid(OutsideRange.ABOVE_RANGE))
        )
        ranged = replace(ranged, kind=InputKind(InputType.RANGE))
        if initial is not None:
            ranged = ranged.with_initial_value(initial)
        return ranged

    def with_step(self, step: int) -> "FieldSpec":
        capabilities = self._consume("with_step", Capability.STEP)
        return replace(self, properties=self._with_property("step", str(step)), capabilities=capabilities)

    def with_float_step(self, step: float) -> "FieldSpec":
        capabilities = self._consume("with_float_step", Capability.STEP)
        return replace(self, properties=self._with_property("step", repr(float(step))), capabilities=capabilities)

    # -- Transformation --------------------------------------------------

    def with_client_validation(self, check: Callable[[Any], Decoded]) -> "FieldSpec":
        """Run *check* on a successfully decoded value.

        *check* returns ``(mapped or NOTHING, errors)``; its errors are
        appended after the field's own. A failed decode passes through
        untouched. Optional fields hand ``None`` to *check* when empty.
        """
        inner = self.decode

        def decode(raw: str | None) -> Decoded:
            parsed, errors = inner(raw)
            if parsed is NOTHING:
                return parsed, errors
            mapped, extra = check(parsed)
            return mapped, [*errors, *extra]

        # Once the parsed type changes, nullability-based modifiers no longer apply
        return replace(
            self,
            decode=decode,
            capabilities=self.capabilities - {Capability.REQUIRED, Capability.RANGE},
        )

    def map(self, fn: Callable[[Any], Any]) -> "FieldSpec":
        """Transform a successfully decoded value with *fn* (no extra errors)."""
        return self.with_client_validation(lambda parsed: (fn(parsed), []))

    # -- Initial values --------------------------------------------------

    def with_initial_value(self, fn: Callable[[Any], Any]) -> "FieldSpec":
        """Seed the raw value from the form's typed input via ``encode_initial``."""
        capabilities = self._consume("with_initial_value", Capability.INITIAL)
        encode = self.encode_initial
        return replace(self, initial_value=lambda data: encode(fn(data)), capabilities=capabilities)

    def with_optional_initial_value(self, fn: Callable[[Any], Any | None]) -> "FieldSpec":
        """Like ``with_initial_value``; *fn* may return None for "no initial value"."""
        capabilities = self._consume("with_optional_initial_value", Capability.INITIAL)
        encode = self.encode_initial

        def initial(data: Any) -> str | None:
            value = fn(data)
            return None if value is None else encode(value)

        return replace(self, initial_value=initial, capabilities=capabilities)

    # -- Formatting ------------------------------------------------------

    def format_on_event(self, formatter: Formatter) -> "FieldSpec":
        """Rewrite the raw value on input/blur/focus before it is stored."""
        capabilities = self._consume("format_on_event", Capability.FORMAT)
        return replace(self, formatter=formatter, capabilities=capabilities)

    def with_properties(self, properties: Mapping[str, Any]) -> "FieldSpec":
        """Attach extra renderer properties (e.g. ``placeholder``)."""
        extra = tuple(reversed(list(properties.items())))
        return replace(self, properties=(*extra, *self.properties))
