"""Handler — dispatch one raw payload to the first form that matches.

Several forms can post to the same endpoint. Each declares a
``hidden_kind`` discriminator; the handler tries them in order and picks
the first one whose discriminators all matched *and* that produced a
parsed value::

    handler = (
        Handler.init(lambda _: Signout(), signout_form)
        .add(lambda pair: SetQuantity(*pair), set_quantity_form)
    )

    handler.run([("kind", "signout")])
    # Valid(value=Signout())

When nothing matches, the result is ``Invalid(NOTHING, errors)`` where
*errors* are those of the first attempted form that reported any — not a
union across forms.
"""

import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any

from wren._internal.types import NOTHING, ErrorMap, RawFields
from wren.config import DEFAULT_CONFIG, FormsConfig
from wren.forms import Form
from wren.state import FormState, to_form_state
from wren.validation.result import Invalid, Valid, Validated

logger = logging.getLogger("wren.handler")


# ---------------------------------------------------------------------------
# Attempt outcomes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class NoMatch:
    """The form does not apply: a discriminator mismatched or nothing parsed."""

    errors: ErrorMap


@dataclass(frozen=True, slots=True)
class MatchWithErrors:
    """The form applies and parsed, but some field reported a problem."""

    parsed: Any
    errors: ErrorMap


@dataclass(frozen=True, slots=True)
class MatchValid:
    parsed: Any


type Attempt = NoMatch | MatchWithErrors | MatchValid


def attempt(form: Form, state: FormState, config: FormsConfig = DEFAULT_CONFIG) -> Attempt:
    """Parse *form* against *state* (no typed input) and classify the outcome."""
    parse = form.parse_state(NOTHING, state, config)
    combined = parse.combined
    errors = parse.errors

    if not parse.is_match_candidate or combined.parsed is NOTHING:
        return NoMatch(errors)
    if errors:
        return MatchWithErrors(combined.parsed, errors)
    return MatchValid(combined.parsed)


# ---------------------------------------------------------------------------
# Handler
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class HandlerEntry:
    form: Form
    mapper: Callable[[Any], Any]


@dataclass(frozen=True, slots=True)
class Handler:
    """An ordered list of candidate forms, each mapped to a common result type."""

    entries: tuple[HandlerEntry, ...] = ()

    @classmethod
    def init(cls, mapper: Callable[[Any], Any], form: Form) -> "Handler":
        return cls((HandlerEntry(form, mapper),))

    def add(self, mapper: Callable[[Any], Any], form: Form) -> "Handler":
        """Append a candidate; earlier candidates win ties."""
        return Handler((*self.entries, HandlerEntry(form, mapper)))

    def __len__(self) -> int:
        return len(self.entries)

    def attempts(self, state: FormState, config: FormsConfig = DEFAULT_CONFIG) -> Iterator[tuple[int, Attempt]]:
        """Lazily attempt every candidate in order, yielding ``(index, outcome)``."""
        for index, entry in enumerate(self.entries):
            yield index, attempt(entry.form, state, config)

    def run(self, fields: RawFields, config: FormsConfig = DEFAULT_CONFIG) -> Validated:
        """Parse *fields* with the first matching form."""
        return self.run_state(to_form_state(fields, config), config)

    def run_state(self, state: FormState, config: FormsConfig = DEFAULT_CONFIG) -> Validated:
        first_found_errors: ErrorMap | None = None

        for index, outcome in self.attempts(state, config):
            if config.log_attempts:
                logger.debug("Form #%d: %s", index, type(outcome).__name__)

            mapper = self.entries[index].mapper
            match outcome:
                case MatchValid(parsed=parsed):
                    logger.debug("Selected form #%d", index)
                    return Valid(mapper(parsed))
                case MatchWithErrors(parsed=parsed, errors=errors):
                    logger.debug("Selected form #%d with errors in %s", index, sorted(errors))
                    return Invalid(parsed=mapper(parsed), errors=errors)
                case NoMatch(errors=errors):
                    if first_found_errors is None and errors:
                        first_found_errors = errors

        logger.debug("No form matched among %d candidate(s)", len(self.entries))
        return Invalid(parsed=NOTHING, errors=first_found_errors or {})
