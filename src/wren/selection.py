"""Event-driven formatting — rewrite a raw value as the user types or leaves.

A field can carry a formatter (see ``FieldSpec.format_on_event``). The state
update routine calls it with a ``FormatEvent`` before storing a new raw value::

    def uppercase_code(event: FormatEvent) -> str | None:
        if event.trigger is FormatTrigger.INPUT and event.selection.cursor_at_end:
            return event.selection.value.upper()
        return None

    code = text().format_on_event(uppercase_code)

Returning ``None`` keeps the value unchanged.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum


@dataclass(frozen=True, slots=True)
class Selection:
    """A raw string plus the caret/selection range within it.

    ``start == end`` means a collapsed caret. Offsets are clamped into
    ``0..len(value)`` and ordered on construction.
    """

    value: str
    start: int
    end: int

    def __post_init__(self) -> None:
        length = len(self.value)
        start = min(max(self.start, 0), length)
        end = min(max(self.end, 0), length)
        if end < start:
            start, end = end, start
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "end", end)

    @classmethod
    def at_end(cls, value: str) -> "Selection":
        """A collapsed caret after the last character."""
        return cls(value, len(value), len(value))

    @property
    def cursor_at_end(self) -> bool:
        """True if the caret is collapsed at the end of the value."""
        return self.start == self.end == len(self.value)

    @property
    def selected(self) -> str:
        return self.value[self.start : self.end]

    def zipper(self) -> tuple[str, str, str]:
        """Split the value into (before, selected, after) the selection."""
        return (
            self.value[: self.start],
            self.value[self.start : self.end],
            self.value[self.end :],
        )


class FormatTrigger(StrEnum):
    INPUT = "input"
    BLUR = "blur"
    FOCUS = "focus"


@dataclass(frozen=True, slots=True)
class FormatEvent:
    trigger: FormatTrigger
    selection: Selection

    @property
    def value(self) -> str:
        return self.selection.value


type Formatter = Callable[[FormatEvent], str | None]


# ---------------------------------------------------------------------------
# Ready-made formatters
# ---------------------------------------------------------------------------


def trim_on_blur(event: FormatEvent) -> str | None:
    """Strip surrounding whitespace once the field loses focus."""
    if event.trigger is FormatTrigger.BLUR:
        return event.value.strip()
    return None


def uppercase_at_end(event: FormatEvent) -> str | None:
    """Upper-case while typing, but only when the caret is at the end."""
    if event.trigger is FormatTrigger.INPUT and event.selection.cursor_at_end:
        return event.value.upper()
    return None
