"""Submissions and server-response hydration.

On submit, the host hands wren the raw ``(name, value)`` pairs exactly as
the browser would post them. ``submission_for`` parses them with a form or
handler and packages everything the host's submit callback needs::

    def on_submit(event: SubmitEvent) -> None:
        submission = submission_for(event, handler)
        if submission.parsed:
            dispatch(submission.parsed.value)

For pages submitted without JavaScript, ``hydrate`` re-seeds form state from
the server's response and overlays the server's errors until the next
client-side submit.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from wren._internal.errormap import merge_errors
from wren._internal.types import ErrorMap
from wren.config import DEFAULT_CONFIG, FormsConfig
from wren.state import FieldState, FormState, Model, SubmitEvent
from wren.validation.result import Validated

if TYPE_CHECKING:
    from wren.forms import Form
    from wren.handler import Handler

logger = logging.getLogger("wren.state")


class Method(StrEnum):
    GET = "GET"
    POST = "POST"

    @classmethod
    def parse(cls, value: str | None) -> "Method":
        """Case-insensitive; anything but ``post`` is ``GET``, like a browser."""
        if value is not None and value.strip().upper() == "POST":
            return cls.POST
        return cls.GET


@dataclass(frozen=True, slots=True)
class Submission:
    """What the host's submit callback receives."""

    fields: tuple[tuple[str, str], ...]
    method: Method
    action: str
    parsed: Validated


def submission_for(
    event: SubmitEvent,
    parser: "Form | Handler",
    config: FormsConfig = DEFAULT_CONFIG,
) -> Submission:
    """Parse *event*'s raw fields with a ``Form`` or ``Handler``."""
    fields = tuple(event.fields)
    return Submission(
        fields=fields,
        method=Method.parse(str(event.method)),
        action=event.action,
        parsed=parser.run(fields, config=config),
    )


# ---------------------------------------------------------------------------
# Server responses
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Persisted:
    fields: tuple[tuple[str, str], ...] | None = None
    client_side_errors: ErrorMap | None = None


@dataclass(frozen=True, slots=True)
class ServerResponse:
    """A server's answer to a non-JavaScript submission.

    ``persisted.fields`` echoes the raw submission so the page can be
    re-rendered with what the user typed; ``server_side_errors`` are errors
    only the server could compute (e.g. "username taken").
    """

    persisted: Persisted = field(default_factory=Persisted)
    server_side_errors: ErrorMap = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ServerResponse":
        persisted = data.get("persisted") or {}
        raw_fields = persisted.get("fields")
        return cls(
            persisted=Persisted(
                fields=None if raw_fields is None else tuple((str(k), str(v)) for k, v in raw_fields),
                client_side_errors=persisted.get("client_side_errors"),
            ),
            server_side_errors=dict(data.get("server_side_errors") or {}),
        )


def hydrate(model: Mapping[str, FormState], form_id: str, response: ServerResponse) -> Model:
    """Seed *form_id*'s state from a server response.

    Existing client state wins over persisted fields, so hydrating twice is
    harmless. Server errors replace any previous ones.
    """
    current = model.get(form_id)
    if current is None:
        fields: dict[str, FieldState] = {}
        for name, value in response.persisted.fields or ():
            fields[name] = FieldState(value=value)
        current = FormState(fields=fields, submit_attempted=response.persisted.fields is not None)
        logger.debug("Hydrated form %r with %d persisted field(s)", form_id, len(fields))

    errors = merge_errors(response.persisted.client_side_errors or {}, response.server_side_errors)
    hydrated = FormState(
        fields=current.fields,
        submit_attempted=current.submit_attempted,
        server_errors=errors,
    )
    return {**model, form_id: hydrated}


def visible_errors(state: FormState | None, client_errors: Mapping[str, Any]) -> ErrorMap:
    """Errors to display: the client's own, plus any server errors still in effect."""
    if state is None:
        return merge_errors(client_errors, {})
    return merge_errors(client_errors, state.server_errors)
