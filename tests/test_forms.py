"""Tests for wren.forms — declaring fields and parsing raw state."""

import pytest

from wren import NOTHING, Combined, form, map2, succeed
from wren.config import FormsConfig
from wren.errors import ArityError, ConfigurationError
from wren.fields import InputKind, InputType, checkbox, integer, select, text
from wren.forms import FieldRole, combined_validation
from wren.state import FieldState, FieldStatus, FormState
from wren.testing import assert_invalid, assert_valid, payload


def _pair(a, b):
    return Combined(combine=map2(lambda x, y: (x, y), a, b))


def _not_a_number(raw: str) -> str:
    return f"{raw} is not a number"


name_form = (
    form(_pair)
    .field("first", text().required("First name required"))
    .field("last", text().with_optional_initial_value(lambda data: data.get("last")))
)


# ---------------------------------------------------------------------------
# Declaration
# ---------------------------------------------------------------------------


class TestDeclaration:
    def test_definitions_in_order(self) -> None:
        f = (
            form(lambda a, b: Combined(combine=succeed(None)))
            .hidden_kind(("kind", "signup"), "Wrong form")
            .field("email", text())
            .hidden_field("token", text())
        )
        assert f.definitions == [
            ("kind", FieldRole.HIDDEN),
            ("email", FieldRole.REGULAR),
            ("token", FieldRole.HIDDEN),
        ]
        assert f.field_names == ["kind", "email", "token"]

    def test_duplicate_name(self) -> None:
        with pytest.raises(ConfigurationError, match="already declared"):
            form(_pair).field("a", text()).field("a", text())

    def test_duplicate_kind_name(self) -> None:
        with pytest.raises(ConfigurationError):
            form(_pair).field("kind", text()).hidden_kind(("kind", "x"), "Wrong form")

    def test_field_spec_lookup(self) -> None:
        assert name_form.field_spec("first") is not None
        assert name_form.field_spec("missing") is None

    def test_declaration_is_immutable(self) -> None:
        base = form(_pair).field("a", text())
        base.field("b", text())
        assert base.field_names == ["a"]


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestRun:
    def test_valid(self) -> None:
        assert_valid(name_form.run(payload(first="Ada", last="Lovelace")), ("Ada", "Lovelace"))

    def test_optional_missing(self) -> None:
        assert_valid(name_form.run(payload(first="Ada")), ("Ada", None))

    def test_required_missing(self) -> None:
        assert_invalid(
            name_form.run(payload(last="Lovelace")),
            {"first": ["First name required"]},
            parsed=NOTHING,
        )

    def test_unknown_keys_ignored(self) -> None:
        assert_valid(name_form.run(payload(first="Ada", extra="x")), ("Ada", None))

    def test_duplicate_keys_last_wins(self) -> None:
        result = name_form.run([("first", "Ada"), ("first", "Grace")])
        assert_valid(result, ("Grace", None))

    def test_duplicate_keys_first_wins(self) -> None:
        config = FormsConfig(duplicate_keys="first")
        result = name_form.run([("first", "Ada"), ("first", "Grace")], config=config)
        assert_valid(result, ("Ada", None))

    def test_field_and_combine_errors_merge(self) -> None:
        def combine(quantity, note):
            return Combined(
                combine=quantity.map(lambda q: q).with_error(quantity, "Out of stock"),
            )

        f = (
            form(combine)
            .field("quantity", integer(_not_a_number).with_min(1, "At least one"))
            .field("note", text())
        )
        assert_invalid(f.run(payload(quantity="0")), {"quantity": ["At least one", "Out of stock"]}, parsed=0)

    def test_combine_may_return_validation(self) -> None:
        f = form(lambda a: a).field("a", text())
        assert_valid(f.run(payload(a="x")), "x")

    def test_combine_may_return_mapping(self) -> None:
        f = form(lambda a: {"combine": a, "view": "<input>"}).field("a", text())
        assert_valid(f.run(payload(a="x")), "x")

    def test_combine_bad_return(self) -> None:
        f = form(lambda a: "not a validation").field("a", text())
        with pytest.raises(ConfigurationError, match="must return a Validation"):
            f.run(payload(a="x"))


class TestArity:
    def test_too_few_parameters(self) -> None:
        f = form(lambda a: Combined(combine=a)).field("a", text()).field("b", text())
        with pytest.raises(ArityError) as exc_info:
            f.run([])
        assert exc_info.value.expected == 2
        assert exc_info.value.names == ("a", "b")

    def test_kind_takes_no_argument(self) -> None:
        f = form(lambda a: Combined(combine=a)).hidden_kind(("kind", "x"), "Wrong").field("a", text())
        assert_valid(f.run([("kind", "x"), ("a", "value")]), "value")

    def test_message_names_fields(self) -> None:
        f = form(lambda: Combined(combine=succeed(1))).field("email", text())
        with pytest.raises(ArityError, match="email"):
            f.run([])


class TestParseWithModel:
    def test_reads_model_entry(self) -> None:
        model = {"names": FormState(fields={"first": FieldState("Ada", FieldStatus.BLURRED)})}
        assert_valid(name_form.parse("names", model), ("Ada", None))

    def test_missing_entry_is_empty(self) -> None:
        assert_invalid(name_form.parse("names", {}), {"first": ["First name required"]})

    def test_view_metadata(self) -> None:
        f = form(lambda email: Combined(combine=email, view=email.view)).field(
            "email", text().required("Required")
        )
        state = FormState(fields={"email": FieldState("a@b.io", FieldStatus.CHANGED)})
        view = f.parse_state(state=state).combine_and_view.view
        assert view.value == "a@b.io"
        assert view.status is FieldStatus.CHANGED
        assert view.kind == InputKind(InputType.TEXT)
        assert view.properties == {"required": True}

    def test_unvisited_view(self) -> None:
        f = form(lambda email: Combined(combine=email, view=email.view)).field("email", text())
        view = f.parse_state().combine_and_view.view
        assert view.value is None
        assert view.status is FieldStatus.NOT_VISITED


class TestInitialValues:
    def test_input_seeds_unvisited_fields(self) -> None:
        result = name_form.run(payload(first="Ada"), input={"last": "Byron"})
        assert_valid(result, ("Ada", "Byron"))

    def test_state_overrides_input(self) -> None:
        result = name_form.run(payload(first="Ada", last="King"), input={"last": "Byron"})
        assert_valid(result, ("Ada", "King"))

    def test_no_input_no_initial(self) -> None:
        assert_valid(name_form.run(payload(first="Ada")), ("Ada", None))

    def test_parse_default_input_skips_initial_values(self) -> None:
        def initial(data):
            raise AssertionError(f"initial value read from {data!r}")

        f = form(lambda a: Combined(combine=a)).field("a", text().with_optional_initial_value(initial))
        assert f.parse("f", {}) == f.parse("f", {"f": FormState()})
        assert_valid(f.parse("f", {}), None)

    def test_parse_none_is_real_input(self) -> None:
        f = form(lambda a: Combined(combine=a)).field("a", text().with_optional_initial_value(lambda data: "x"))
        assert_valid(f.parse("f", {}, input=None), "x")

    def test_initial_values(self) -> None:
        f = (
            form(lambda subscribe, last: Combined(combine=succeed(None)))
            .hidden_kind(("kind", "profile"), "Wrong form")
            .field("subscribe", checkbox().with_initial_value(lambda data: data["subscribe"]))
            .field("last", text())
        )
        assert f.initial_values({"subscribe": True}) == [
            ("kind", "profile"),
            ("subscribe", "on"),
            ("last", None),
        ]

    def test_init_state(self) -> None:
        state = name_form.init_state({"last": "Byron"})
        assert state.fields == {"last": FieldState("Byron")}
        assert not state.submit_attempted


# ---------------------------------------------------------------------------
# Hidden kinds
# ---------------------------------------------------------------------------


class TestHiddenKind:
    f = form(lambda a: Combined(combine=a)).hidden_kind(("kind", "signout"), "Wrong form").field("a", text())

    def test_match_candidate(self) -> None:
        parse = self.f.parse_state(state=FormState(fields={"kind": FieldState("signout")}))
        assert parse.is_match_candidate

    def test_mismatch(self) -> None:
        parse = self.f.parse_state(state=FormState(fields={"kind": FieldState("other")}))
        assert not parse.is_match_candidate
        assert parse.errors == {"kind": ["Wrong form"]}

    def test_mismatch_still_parses(self) -> None:
        assert_invalid(self.f.run([("kind", "other"), ("a", "x")]), {"kind": ["Wrong form"]}, parsed="x")

    def test_initial_input_supplies_literal(self) -> None:
        parse = self.f.parse_state(input={})
        assert parse.is_match_candidate


# ---------------------------------------------------------------------------
# Dynamic sub-forms
# ---------------------------------------------------------------------------


card_form = form(lambda number: Combined(combine=number.map(lambda n: ("card", n)))).field(
    "card-number", text().required("Card number required")
)

invoice_form = form(lambda address: Combined(combine=address.map(lambda a: ("invoice", a)))).field(
    "billing-email", text().required("Email required")
)


def _payment_combine(method, choose):
    return Combined(combine=method.and_then(lambda m: choose(m).combine))


payment_form = (
    form(_payment_combine)
    .field(
        "method",
        select([("card", "card"), ("invoice", "invoice")], lambda raw: "Unknown method").required("Required"),
    )
    .dynamic(lambda method: card_form if method == "card" else invoice_form)
)


class TestDynamic:
    def test_card(self) -> None:
        result = payment_form.run([("method", "card"), ("card-number", "4242")])
        assert_valid(result, ("card", "4242"))

    def test_chosen_subform_errors(self) -> None:
        result = payment_form.run([("method", "invoice"), ("card-number", "4242")])
        assert_invalid(result, {"billing-email": ["Email required"]}, parsed=NOTHING)

    def test_subform_not_parsed_without_decider(self) -> None:
        result = payment_form.run([("card-number", "")])
        assert_invalid(result, {"method": ["Required"]}, parsed=NOTHING)

    def test_dynamic_not_in_definitions(self) -> None:
        assert payment_form.definitions == [("method", FieldRole.REGULAR)]

    def test_same_decider_parsed_once(self) -> None:
        calls = []

        def choose(method):
            calls.append(method)
            return card_form

        def combine(method, chooser):
            return Combined(
                combine=method.and_then(lambda m: map2(lambda a, b: a, chooser(m).combine, chooser(m).combine))
            )

        f = form(combine).field("method", text().required("Required")).dynamic(choose)
        assert_valid(f.run([("method", "card"), ("card-number", "1")]), ("card", "1"))
        assert calls == ["card"]

    def test_field_spec_needs_state_for_subform_fields(self) -> None:
        assert payment_form.field_spec("card-number") is None

    def test_field_spec_resolves_through_chosen_subform(self) -> None:
        card = FormState(fields={"method": FieldState("card")})
        invoice = FormState(fields={"method": FieldState("invoice")})
        assert payment_form.field_spec("card-number", card) is card_form.field_spec("card-number")
        assert payment_form.field_spec("card-number", invoice) is None
        assert payment_form.field_spec("billing-email", invoice) is invoice_form.field_spec("billing-email")

    def test_parse_lists_chosen_subforms(self) -> None:
        parse = payment_form.parse_state(state=FormState(fields={"method": FieldState("card")}))
        assert parse.chosen == (card_form,)
        assert payment_form.parse_state().chosen == ()

    def test_no_initial_values_without_decider(self) -> None:
        assert payment_form.initial_values({"method": "card"}) == [("method", None)]

    def test_initial_decider_seeds_subform(self) -> None:
        card_with_initial = form(lambda number: Combined(combine=number)).field(
            "card-number", text().with_initial_value(lambda data: data["number"])
        )
        f = (
            form(_payment_combine)
            .field("method", text().with_initial_value(lambda data: data["method"]))
            .dynamic(lambda method: card_with_initial, initial_decider=lambda data: data["method"])
        )
        data = {"method": "card", "number": "4242"}
        assert f.initial_values(data) == [("method", "card"), ("card-number", "4242")]
        assert f.init_state(data).fields == {
            "method": FieldState("card"),
            "card-number": FieldState("4242"),
        }


class TestCombinedValidation:
    def test_from_combined(self) -> None:
        v = succeed(1)
        assert combined_validation(Combined(combine=v)) is v

    def test_rejects_other(self) -> None:
        with pytest.raises(ConfigurationError):
            combined_validation(42)
