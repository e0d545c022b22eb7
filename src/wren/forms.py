"""Form builder — declare fields once, parse raw state into a Validated result.

A ``Form`` is an immutable definition: an ordered list of field
declarations plus a *combine* function that receives one ``Validation`` per
declared field, in declaration order, and returns the form's combined
Validation (optionally paired with a view)::

    def combine(password, confirmation):
        return Combined(
            combine=map2(lambda p, c: (p, c), password, confirmation).and_then(
                lambda pair: succeed(pair[0])
                if pair[0] == pair[1]
                else fail("Must match password", confirmation)
            ),
        )

    signup = (
        form(combine)
        .field("password", text().required("Required"))
        .field("password-confirmation", text().required("Required"))
    )

    signup.run([("password", "hunter2"), ("password-confirmation", "hunter2")])
    # Valid(value='hunter2')

``hidden_kind`` fields take no combine argument; they make the form a match
candidate only when their literal value is present, which is how a
``Handler`` tells forms sharing one payload apart.

Parsing is pure and total: it never raises for bad input, has no side
effects, and can be called speculatively.
"""

import inspect
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from wren._internal.errormap import add_errors, merge_errors
from wren._internal.types import NOTHING, CombineFn, ErrorMap, RawFields
from wren.config import DEFAULT_CONFIG, FormsConfig
from wren.errors import ArityError, ConfigurationError
from wren.fields.constructors import exact_value
from wren.fields.spec import FieldSpec
from wren.state import FieldStatus, FormState, to_form_state
from wren.validation.core import Validation, ViewField
from wren.validation.result import Validated, to_validated


class FieldRole(StrEnum):
    """How a renderer should treat a declared field.

    ``HIDDEN`` fields are injected as hidden inputs automatically instead of
    being rendered by the caller.
    """

    REGULAR = "regular"
    HIDDEN = "hidden"


@dataclass(frozen=True, slots=True)
class Combined:
    """The conventional return value of a combine function."""

    combine: Validation
    view: Any = None


@dataclass(frozen=True, slots=True)
class FormParse:
    """Raw output of a form's parse function.

    ``result`` holds the per-field decode errors; errors produced by the
    combine function live on ``combine_and_view``'s Validation. ``chosen``
    lists the sub-forms that ``dynamic`` declarations picked during the parse.
    """

    result: ErrorMap
    is_match_candidate: bool
    combine_and_view: Any
    chosen: tuple["Form", ...] = ()

    @property
    def combined(self) -> Validation:
        return combined_validation(self.combine_and_view)

    @property
    def errors(self) -> ErrorMap:
        """Field errors merged with the combined Validation's errors."""
        return merge_errors(self.result, self.combined.errors)

    def to_validated(self) -> Validated:
        return to_validated(self.combined.parsed, self.errors)


def combined_validation(combine_and_view: Any) -> Validation:
    """Extract the Validation from a combine function's return value.

    Accepts a ``Validation``, anything with a ``combine`` attribute (such as
    ``Combined``), or a mapping with a ``"combine"`` key.
    """
    if isinstance(combine_and_view, Validation):
        return combine_and_view
    candidate = getattr(combine_and_view, "combine", None)
    if candidate is None and isinstance(combine_and_view, Mapping):
        candidate = combine_and_view.get("combine")
    if isinstance(candidate, Validation):
        return candidate
    msg = (
        "Combine function must return a Validation, a Combined(combine=...), "
        f"or a mapping with a 'combine' Validation; got {type(combine_and_view).__name__}"
    )
    raise ConfigurationError(msg)


# ---------------------------------------------------------------------------
# Parse steps — one per declaration
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class _ParseContext:
    input: Any
    state: FormState
    config: FormsConfig
    choosers: list["_Chooser"] = field(default_factory=list)

    def raw_value(self, name: str, spec: FieldSpec) -> tuple[str | None, FieldStatus]:
        current = self.state.get(name)
        if current is not None:
            return current.value, current.status
        if self.input is NOTHING or spec.initial_value is None:
            return None, FieldStatus.NOT_VISITED
        return spec.initial_value(self.input), FieldStatus.NOT_VISITED


@dataclass(frozen=True, slots=True)
class _Outcome:
    errors: ErrorMap
    is_match_candidate: bool = True
    argument: Any = NOTHING


@dataclass(frozen=True, slots=True)
class _FieldStep:
    name: str
    spec: FieldSpec
    role: FieldRole

    @property
    def takes_argument(self) -> bool:
        return True

    def parse(self, ctx: _ParseContext) -> _Outcome:
        raw, status = ctx.raw_value(self.name, self.spec)
        parsed, errors = self.spec.decode(raw)
        view = ViewField(
            value=raw,
            status=status,
            kind=self.spec.kind,
            properties=self.spec.properties_dict,
        )
        leaf = Validation(parsed=parsed, name=self.name, view=view)
        return _Outcome(errors=add_errors({}, self.name, errors), argument=leaf)

    def initial_values(self, data: Any) -> list[tuple[str, str | None]]:
        if self.spec.initial_value is None:
            return [(self.name, None)]
        return [(self.name, self.spec.initial_value(data))]


@dataclass(frozen=True, slots=True)
class _KindStep:
    name: str
    literal: str
    spec: FieldSpec

    @property
    def role(self) -> FieldRole:
        return FieldRole.HIDDEN

    @property
    def takes_argument(self) -> bool:
        return False

    def parse(self, ctx: _ParseContext) -> _Outcome:
        raw, _ = ctx.raw_value(self.name, self.spec)
        parsed, errors = self.spec.decode(raw)
        return _Outcome(
            errors=add_errors({}, self.name, errors),
            is_match_candidate=parsed == self.literal,
        )

    def initial_values(self, data: Any) -> list[tuple[str, str | None]]:
        return [(self.name, self.literal)]


class _Chooser:
    """Argument handed to a combine function for a ``dynamic`` declaration.

    Calling it with a decider parses the chosen sub-form against the same
    state and returns that sub-form's combine-and-view value.
    """

    __slots__ = ("_choose", "_ctx", "parses")

    def __init__(self, choose: Callable[[Any], "Form"], ctx: _ParseContext) -> None:
        self._choose = choose
        self._ctx = ctx
        self.parses: list[tuple[Any, Form, FormParse]] = []

    def __call__(self, decider: Any) -> Any:
        for seen, _, parse in self.parses:
            if seen == decider:
                return parse.combine_and_view
        sub_form = self._choose(decider)
        parse = sub_form._parse(self._ctx.input, self._ctx.state, self._ctx.config)
        self.parses.append((decider, sub_form, parse))
        return parse.combine_and_view

    def __repr__(self) -> str:
        return f"<dynamic form chooser ({len(self.parses)} parsed)>"


@dataclass(frozen=True, slots=True)
class _DynamicStep:
    choose: Callable[[Any], "Form"]
    initial_decider: Callable[[Any], Any] | None = None

    @property
    def takes_argument(self) -> bool:
        return True

    def parse(self, ctx: _ParseContext) -> _Outcome:
        chooser = _Chooser(self.choose, ctx)
        ctx.choosers.append(chooser)
        return _Outcome(errors={}, argument=chooser)

    def initial_values(self, data: Any) -> list[tuple[str, str | None]]:
        if self.initial_decider is None:
            return []
        return self.choose(self.initial_decider(data)).initial_values(data)


type _Step = _FieldStep | _KindStep | _DynamicStep


# ---------------------------------------------------------------------------
# Form
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Form:
    """An immutable form definition. Build one with ``form()``."""

    combine_and_view: CombineFn
    steps: tuple[_Step, ...] = ()

    # -- Declaration -----------------------------------------------------

    @property
    def definitions(self) -> list[tuple[str, FieldRole]]:
        """Declared ``(name, role)`` pairs, in declaration order."""
        return [
            (step.name, step.role)
            for step in self.steps
            if isinstance(step, _FieldStep | _KindStep)
        ]

    @property
    def field_names(self) -> list[str]:
        return [name for name, _ in self.definitions]

    def field_spec(
        self,
        name: str,
        state: FormState | None = None,
        input: Any = NOTHING,
        config: FormsConfig = DEFAULT_CONFIG,
    ) -> FieldSpec | None:
        """The spec declared for *name*, or None.

        Fields of ``dynamic`` sub-forms depend on a decider, so they are
        found only when *state* is given: the form is parsed against it and
        the sub-forms chosen by that parse are searched in turn.
        """
        for step in self.steps:
            if isinstance(step, _FieldStep | _KindStep) and step.name == name:
                return step.spec
        if state is None or not any(isinstance(step, _DynamicStep) for step in self.steps):
            return None
        for sub_form in self._parse(input, state, config).chosen:
            spec = sub_form.field_spec(name, state, input, config)
            if spec is not None:
                return spec
        return None

    def _declare(self, step: _Step) -> "Form":
        if isinstance(step, _FieldStep | _KindStep) and step.name in self.field_names:
            msg = f"Field {step.name!r} is already declared on this form"
            raise ConfigurationError(msg)
        return Form(self.combine_and_view, (*self.steps, step))

    def field(self, name: str, spec: FieldSpec) -> "Form":
        """Declare a field; its Validation becomes the next combine argument."""
        return self._declare(_FieldStep(name, spec, FieldRole.REGULAR))

    def hidden_field(self, name: str, spec: FieldSpec) -> "Form":
        """Like ``field``, but renderers inject it as a hidden input."""
        return self._declare(_FieldStep(name, spec, FieldRole.HIDDEN))

    def hidden_kind(self, kind: tuple[str, str], error: Any) -> "Form":
        """Declare a hidden discriminator that must equal a literal value.

        No combine argument is added. A mismatch reports *error* under the
        field's name and makes the form a non-candidate for ``Handler``.
        """
        name, literal = kind
        return self._declare(_KindStep(name, literal, exact_value(literal, error)))

    def dynamic(
        self,
        choose: Callable[[Any], "Form"],
        initial_decider: Callable[[Any], Any] | None = None,
    ) -> "Form":
        """Let a parsed value pick a sub-form at parse time.

        The combine function receives a callable; call it with the decider
        (usually a parsed field value) to parse ``choose(decider)`` and get
        that sub-form's combine-and-view value. The chosen sub-form's errors
        and match flag are merged into this form's.

        *initial_decider* maps the ``initial_values`` input to a decider so
        the matching sub-form's fields are seeded too; without it, dynamic
        sub-forms contribute no initial values.
        """
        return self._declare(_DynamicStep(choose, initial_decider))

    # -- Parsing ---------------------------------------------------------

    def parse_state(
        self,
        input: Any = NOTHING,
        state: FormState | None = None,
        config: FormsConfig = DEFAULT_CONFIG,
    ) -> FormParse:
        """Run the parse function against *state*.

        Fields without state fall back to their initial value from *input*
        (skipped when *input* is ``NOTHING``).
        """
        return self._parse(input, state if state is not None else FormState(), config)

    def _parse(self, input: Any, state: FormState, config: FormsConfig) -> FormParse:
        ctx = _ParseContext(input=input, state=state, config=config)
        result: ErrorMap = {}
        is_match_candidate = True
        arguments: list[Any] = []

        for step in self.steps:
            outcome = step.parse(ctx)
            result = merge_errors(result, outcome.errors)
            is_match_candidate = is_match_candidate and outcome.is_match_candidate
            if step.takes_argument:
                arguments.append(outcome.argument)

        combine_and_view = self._call_combine(arguments, config)

        chosen: list[Form] = []
        for chooser in ctx.choosers:
            for _, sub_form, sub in chooser.parses:
                result = merge_errors(result, sub.result)
                is_match_candidate = is_match_candidate and sub.is_match_candidate
                chosen.append(sub_form)

        return FormParse(
            result=result,
            is_match_candidate=is_match_candidate,
            combine_and_view=combine_and_view,
            chosen=tuple(chosen),
        )

    def _call_combine(self, arguments: Sequence[Any], config: FormsConfig) -> Any:
        if config.check_arity:
            try:
                signature = inspect.signature(self.combine_and_view)
            except (TypeError, ValueError):
                signature = None
            if signature is not None:
                try:
                    signature.bind(*arguments)
                except TypeError:
                    names = tuple(
                        getattr(step, "name", "<dynamic>")
                        for step in self.steps
                        if step.takes_argument
                    )
                    raise ArityError(len(arguments), names) from None
        return self.combine_and_view(*arguments)

    def parse(
        self,
        form_id: str,
        model: Mapping[str, FormState],
        input: Any = NOTHING,
        config: FormsConfig = DEFAULT_CONFIG,
    ) -> Validated:
        """Parse this form's entry in *model* (empty state if absent)."""
        state = model.get(form_id) or FormState()
        return self._parse(input, state, config).to_validated()

    def run(
        self,
        fields: RawFields,
        input: Any = NOTHING,
        config: FormsConfig = DEFAULT_CONFIG,
    ) -> Validated:
        """Parse a raw ``(name, value)`` payload directly."""
        return self._parse(input, to_form_state(fields, config), config).to_validated()

    # -- Initial values --------------------------------------------------

    def initial_values(self, data: Any) -> list[tuple[str, str | None]]:
        """Seed ``(name, raw value)`` pairs for every declared field."""
        return [entry for step in self.steps for entry in step.initial_values(data)]

    def init_state(self, data: Any) -> FormState:
        """A FormState pre-populated from *data*'s initial values."""
        return to_form_state([(name, raw) for name, raw in self.initial_values(data) if raw is not None])


def form(combine_and_view: CombineFn) -> Form:
    """Start a form definition.

    *combine_and_view* receives one argument per subsequent ``field``,
    ``hidden_field`` or ``dynamic`` declaration, in order.
    """
    return Form(combine_and_view)
