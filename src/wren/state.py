"""Client state tracker — per-field raw values and visit status.

One ``Model`` backs any number of forms on a page, keyed by form id. Every
transition is an explicit ``update(event, model) -> model`` call that builds
new values; nothing here mutates its inputs::

    model = init()
    model = update(FocusEvent("signup", "email", ""), model)
    model = update(InputEvent("signup", "email", "a@example.com"), model)
    model = update(BlurEvent("signup", "email", "a@example.com"), model)
    model["signup"].fields["email"].status  # FieldStatus.BLURRED

Field status only ever increases: ``NOT_VISITED < FOCUSED < CHANGED < BLURRED``.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import TYPE_CHECKING, Any

from wren._internal.types import ErrorMap, RawFields
from wren.config import DEFAULT_CONFIG, FormsConfig
from wren.selection import FormatEvent, FormatTrigger, Selection

if TYPE_CHECKING:
    from wren.forms import Form
    from wren.submission import Method

logger = logging.getLogger("wren.state")


class FieldStatus(IntEnum):
    NOT_VISITED = 0
    FOCUSED = 1
    CHANGED = 2
    BLURRED = 3


def increase_status_to(current: FieldStatus, target: FieldStatus) -> FieldStatus:
    """Return *target* if it ranks higher than *current*, else *current*."""
    return max(current, target)


def status_rank(status: FieldStatus) -> int:
    return int(status)


@dataclass(frozen=True, slots=True)
class FieldState:
    value: str
    status: FieldStatus = FieldStatus.NOT_VISITED


@dataclass(frozen=True, slots=True)
class FormState:
    """Raw values and statuses for one form instance.

    ``server_errors`` holds errors computed by a server for the last
    submission (see ``wren.submission.hydrate``); the next client submit
    clears them.
    """

    fields: Mapping[str, FieldState] = field(default_factory=dict)
    submit_attempted: bool = False
    server_errors: ErrorMap = field(default_factory=dict)

    def get(self, name: str) -> FieldState | None:
        return self.fields.get(name)

    def with_field(self, name: str, state: FieldState) -> "FormState":
        return replace(self, fields={**self.fields, name: state})

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly representation for persisting state between renders."""
        return {
            "fields": {
                name: {"value": state.value, "status": int(state.status)}
                for name, state in self.fields.items()
            },
            "submit_attempted": self.submit_attempted,
            "server_errors": {name: list(errors) for name, errors in self.server_errors.items()},
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FormState":
        fields = {
            name: FieldState(value=str(raw["value"]), status=FieldStatus(int(raw.get("status", 0))))
            for name, raw in data.get("fields", {}).items()
        }
        errors = {name: list(entries) for name, entries in data.get("server_errors", {}).items() if entries}
        return cls(
            fields=fields,
            submit_attempted=bool(data.get("submit_attempted", False)),
            server_errors=errors,
        )


type Model = dict[str, FormState]


def init() -> Model:
    """An empty store. Forms get state lazily, on their first event."""
    return {}


def to_form_state(fields: RawFields, config: FormsConfig = DEFAULT_CONFIG) -> FormState:
    """Build a FormState from a raw payload, every field ``NOT_VISITED``.

    Repeated keys are collapsed according to ``config.duplicate_keys``.
    """
    collected: dict[str, FieldState] = {}
    for name, value in fields:
        if name in collected:
            logger.debug(
                "Duplicate key %r in payload; keeping the %s occurrence",
                name,
                config.duplicate_keys,
            )
            if config.duplicate_keys == "first":
                continue
        collected[name] = FieldState(value=value)
    return FormState(fields=collected)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class InputEvent:
    """The user changed a field's value. *selection* locates the caret, if known."""

    form_id: str
    name: str
    value: str
    selection: Selection | None = None


@dataclass(frozen=True, slots=True)
class FocusEvent:
    form_id: str
    name: str
    value: str


@dataclass(frozen=True, slots=True)
class BlurEvent:
    form_id: str
    name: str
    value: str


@dataclass(frozen=True, slots=True)
class SubmitEvent:
    form_id: str
    fields: tuple[tuple[str, str], ...]
    method: "Method | str" = "GET"
    action: str = ""


type Event = InputEvent | FocusEvent | BlurEvent | SubmitEvent


def update(event: Event, model: Mapping[str, FormState], form: "Form | None" = None) -> Model:
    """Apply one event and return the new model.

    Pass the *form* the event belongs to so fields declared with
    ``format_on_event`` can rewrite their raw value before it is stored.
    Fields of ``dynamic`` sub-forms are looked up in the sub-form the
    current state selects.
    """
    current = model.get(event.form_id, FormState())

    match event:
        case InputEvent(name=name, value=value, selection=selection):
            selection = selection if selection is not None else Selection.at_end(value)
            value = _format(form, current, name, FormatEvent(FormatTrigger.INPUT, selection))
            new_state = _touch(current, name, value, FieldStatus.CHANGED)
        case FocusEvent(name=name, value=value):
            value = _format(form, current, name, FormatEvent(FormatTrigger.FOCUS, Selection.at_end(value)))
            new_state = _touch(current, name, value, FieldStatus.FOCUSED)
        case BlurEvent(name=name, value=value):
            value = _format(form, current, name, FormatEvent(FormatTrigger.BLUR, Selection.at_end(value)))
            new_state = _touch(current, name, value, FieldStatus.BLURRED)
        case SubmitEvent():
            new_state = replace(current, submit_attempted=True, server_errors={})
        case _:
            msg = f"Unknown form event: {event!r}"
            raise TypeError(msg)

    return {**model, event.form_id: new_state}


def _touch(state: FormState, name: str, value: str, target: FieldStatus) -> FormState:
    previous = state.get(name)
    status = target if previous is None else increase_status_to(previous.status, target)
    if previous is None or previous.status != status:
        logger.debug("Field %r status -> %s", name, status.name)
    return state.with_field(name, FieldState(value=value, status=status))


def _format(form: "Form | None", state: FormState, name: str, event: FormatEvent) -> str:
    if form is None:
        return event.value
    spec = form.field_spec(name, state)
    if spec is None or spec.formatter is None:
        return event.value
    formatted = spec.formatter(event)
    if formatted is None:
        return event.value
    if formatted != event.value:
        logger.debug("Formatter rewrote %r on %s", name, event.trigger)
    return formatted
