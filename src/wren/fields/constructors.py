"""Base field constructors.

Every constructor treats an absent raw value and the empty string the same
way — "not filled in" — and decodes it to ``None`` (valid but empty).
Layer ``required`` on top to turn that into an error. The exceptions are
``checkbox`` (absent means unchecked, ``False``) and ``exact_value`` (the raw
value is compared literally).

Typed constructors take an ``invalid`` callback that turns the offending raw
string into the caller's error type::

    age = integer(invalid=lambda raw: f"{raw!r} is not a whole number")
"""

import datetime
import math
import re
from collections.abc import Callable, Sequence
from typing import Any

from wren._internal.types import NOTHING
from wren.fields.kinds import InputKind, InputType, RadioKind, SelectKind, TextareaKind
from wren.fields.spec import Capability, Decoded, FieldSpec, is_blank
from wren.fields.timeofday import parse_time

type Invalid = Callable[[str], Any]

_INT_RE = re.compile(r"[+-]?\d+", re.ASCII)
_FLOAT_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)

_TEXT_CAPABILITIES = frozenset(
    {
        Capability.REQUIRED,
        Capability.MIN_LENGTH,
        Capability.MAX_LENGTH,
        Capability.INITIAL,
        Capability.FORMAT,
    }
)

_NUMERIC_CAPABILITIES = frozenset(
    {
        Capability.REQUIRED,
        Capability.MIN,
        Capability.MAX,
        Capability.STEP,
        Capability.RANGE,
        Capability.INITIAL,
        Capability.FORMAT,
    }
)

_TEMPORAL_CAPABILITIES = frozenset(
    {
        Capability.REQUIRED,
        Capability.MIN,
        Capability.MAX,
        Capability.INITIAL,
        Capability.FORMAT,
    }
)


def _cmp(left: Any, right: Any) -> int:
    return (left > right) - (left < right)


def _decode_text(raw: str | None) -> Decoded:
    if is_blank(raw):
        return None, []
    return raw, []


def _typed(parse: Callable[[str], Any], invalid: Invalid) -> Callable[[str | None], Decoded]:
    """Tri-state decoder: blank → ``None``, parseable → value, otherwise an error."""

    def decode(raw: str | None) -> Decoded:
        if raw is None or raw == "":
            return None, []
        value = parse(raw)
        if value is None:
            return NOTHING, [invalid(raw)]
        return value, []

    return decode


def _compare_with(parse: Callable[[str], Any]) -> Callable[[str, Any], int]:
    def compare(raw: str, bound: Any) -> int:
        value = parse(raw)
        if value is None:
            # Unparseable input is reported by the decoder, not as a bound violation
            return 0
        return _cmp(value, bound)

    return compare


# ---------------------------------------------------------------------------
# Raw parsers — return None on failure
# ---------------------------------------------------------------------------


def _parse_int(raw: str) -> int | None:
    if not _INT_RE.fullmatch(raw):
        return None
    return int(raw)


def _parse_float(raw: str) -> float | None:
    if not _FLOAT_RE.fullmatch(raw):
        return None
    value = float(raw)
    if not math.isfinite(value):
        return None
    return value


def _parse_date(raw: str) -> datetime.date | None:
    if not _DATE_RE.fullmatch(raw):
        return None
    try:
        return datetime.date.fromisoformat(raw)
    except ValueError:
        return None


def _format_float(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


# ---------------------------------------------------------------------------
# Text
# ---------------------------------------------------------------------------


def _text_as(input_type: InputType) -> FieldSpec:
    return FieldSpec(
        decode=_decode_text,
        kind=InputKind(input_type),
        encode_initial=str,
        capabilities=_TEXT_CAPABILITIES,
    )


def text() -> FieldSpec:
    """Free-form text. Blank decodes to ``None``."""
    return _text_as(InputType.TEXT)


def email() -> FieldSpec:
    return _text_as(InputType.EMAIL)


def password() -> FieldSpec:
    return _text_as(InputType.PASSWORD)


def telephone() -> FieldSpec:
    return _text_as(InputType.TEL)


def search() -> FieldSpec:
    return _text_as(InputType.SEARCH)


def url() -> FieldSpec:
    return _text_as(InputType.URL)


def textarea(*, rows: int | None = None, cols: int | None = None) -> FieldSpec:
    return FieldSpec(
        decode=_decode_text,
        kind=TextareaKind(rows=rows, cols=cols),
        encode_initial=str,
        capabilities=_TEXT_CAPABILITIES,
    )


# ---------------------------------------------------------------------------
# Numbers, dates, times
# ---------------------------------------------------------------------------


def integer(invalid: Invalid) -> FieldSpec:
    """Whole numbers (``[+-]digits``)."""
    return FieldSpec(
        decode=_typed(_parse_int, invalid),
        kind=InputKind(InputType.NUMBER),
        encode_initial=str,
        compare_raw=_compare_with(_parse_int),
        capabilities=_NUMERIC_CAPABILITIES,
    )


def number(invalid: Invalid) -> FieldSpec:
    """Finite decimal numbers, decoded as ``float``."""
    return FieldSpec(
        decode=_typed(_parse_float, invalid),
        kind=InputKind(InputType.NUMBER),
        encode_initial=_format_float,
        compare_raw=_compare_with(_parse_float),
        capabilities=_NUMERIC_CAPABILITIES,
    )


def date(invalid: Invalid) -> FieldSpec:
    """ISO ``YYYY-MM-DD`` dates, decoded as ``datetime.date``."""
    return FieldSpec(
        decode=_typed(_parse_date, invalid),
        kind=InputKind(InputType.DATE),
        encode_initial=lambda value: value.isoformat(),
        compare_raw=_compare_with(_parse_date),
        capabilities=_TEMPORAL_CAPABILITIES,
    )


def time(invalid: Invalid) -> FieldSpec:
    """``H:MM`` or ``HH:MM:SS``, decoded as ``TimeOfDay``."""
    return FieldSpec(
        decode=_typed(parse_time, invalid),
        kind=InputKind(InputType.TIME),
        encode_initial=str,
        compare_raw=_compare_with(parse_time),
        capabilities=_TEMPORAL_CAPABILITIES,
    )


# ---------------------------------------------------------------------------
# Checkbox
# ---------------------------------------------------------------------------


def _decode_checkbox(raw: str | None) -> Decoded:
    return raw == "on", []


def checkbox() -> FieldSpec:
    """Checked boxes submit ``on``; anything else, including absence, is False."""
    return FieldSpec(
        decode=_decode_checkbox,
        kind=InputKind(InputType.CHECKBOX),
        encode_initial=lambda checked: "on" if checked else "",
        capabilities=frozenset({Capability.INITIAL}),
    )


# ---------------------------------------------------------------------------
# Choices
# ---------------------------------------------------------------------------


def _choice_decoder(options: Sequence[tuple[str, Any]], invalid: Invalid) -> Callable[[str | None], Decoded]:
    def decode(raw: str | None) -> Decoded:
        if raw is None or raw == "":
            return None, []
        for key, option in options:
            if key == raw:
                return option, []
        return None, [invalid(raw)]

    return decode


def _choice_encoder(options: Sequence[tuple[str, Any]]) -> Callable[[Any], str]:
    def encode(value: Any) -> str:
        for key, option in options:
            if option == value:
                return key
        return ""

    return encode


def select(options: Sequence[tuple[str, Any]], invalid: Invalid) -> FieldSpec:
    """One of *options*, given as ``(raw key, parsed value)`` pairs.

    An unknown key still decodes to ``None`` alongside ``invalid(raw)``, so
    the field stays renderable.
    """
    options = tuple(options)
    return FieldSpec(
        decode=_choice_decoder(options, invalid),
        kind=SelectKind(options=tuple(key for key, _ in options)),
        encode_initial=_choice_encoder(options),
        capabilities=frozenset({Capability.REQUIRED, Capability.INITIAL}),
    )


def radio(options: Sequence[tuple[str, Any]], invalid: Invalid) -> FieldSpec:
    """Same decoding as ``select``, rendered as a radio group."""
    options = tuple(options)
    return FieldSpec(
        decode=_choice_decoder(options, invalid),
        kind=RadioKind(options=tuple(key for key, _ in options)),
        encode_initial=_choice_encoder(options),
        capabilities=frozenset({Capability.REQUIRED, Capability.INITIAL}),
    )


# ---------------------------------------------------------------------------
# Exact value
# ---------------------------------------------------------------------------


def exact_value(literal: str, error: Any) -> FieldSpec:
    """A field whose raw value must equal *literal*.

    The raw value is returned as parsed either way; a mismatch (including
    absence) adds *error*. The field seeds itself with *literal*.
    """

    def decode(raw: str | None) -> Decoded:
        if raw == literal:
            return raw, []
        return (NOTHING if raw is None else raw), [error]

    return FieldSpec(
        decode=decode,
        kind=InputKind(InputType.HIDDEN),
        encode_initial=str,
        initial_value=lambda _data: literal,
        capabilities=frozenset(),
    )
