"""Field kinds — what a renderer needs to know to draw a field.

A tagged union of frozen dataclasses. Renderers dispatch with ``match``::

    match view.kind:
        case SelectKind(options=options):
            ...
        case TextareaKind(rows=rows, cols=cols):
            ...
        case InputKind(type=input_type):
            ...
"""

from dataclasses import dataclass
from enum import StrEnum


class InputType(StrEnum):
    """The ``type`` attribute of a plain input element."""

    TEXT = "text"
    NUMBER = "number"
    RANGE = "range"
    DATE = "date"
    TIME = "time"
    CHECKBOX = "checkbox"
    TEL = "tel"
    SEARCH = "search"
    PASSWORD = "password"
    EMAIL = "email"
    URL = "url"
    HIDDEN = "hidden"


@dataclass(frozen=True, slots=True)
class InputKind:
    type: InputType = InputType.TEXT

    @property
    def name(self) -> str:
        return str(self.type)


@dataclass(frozen=True, slots=True)
class TextareaKind:
    rows: int | None = None
    cols: int | None = None

    @property
    def name(self) -> str:
        return "textarea"


@dataclass(frozen=True, slots=True)
class SelectKind:
    """Options are the raw string keys, in declaration order."""

    options: tuple[str, ...] = ()

    @property
    def name(self) -> str:
        return "select"


@dataclass(frozen=True, slots=True)
class RadioKind:
    options: tuple[str, ...] = ()

    @property
    def name(self) -> str:
        return "radio"


type FieldKind = InputKind | TextareaKind | SelectKind | RadioKind
