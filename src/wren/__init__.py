"""Wren — declarative form definitions that parse into typed values or errors.

Declare fields once; get a parser that folds raw ``(name, value)`` pairs
into either a parsed value or an error map keyed by field name, plus a
client state tracker for visited/focused/changed/blurred status.

Basic usage::

    from wren import Combined, form, map2, text

    def combine(first, last):
        return Combined(combine=map2(lambda f, l: f"{f} {l}", first, last))

    name_form = (
        form(combine)
        .field("first", text().required("Required"))
        .field("last", text().required("Required"))
    )

    name_form.run([("first", "Ada"), ("last", "Lovelace")])
    # Valid(value='Ada Lovelace')

Several forms sharing one endpoint::

    from wren import Handler

    handler = Handler.init(to_signout, signout_form).add(to_quantity, quantity_form)
    handler.run(fields)
"""

__version__ = "0.1.0-dev"
__all__ = [
    "DEFAULT_CONFIG",
    "GLOBAL",
    "NOTHING",
    "ArityError",
    "BlurEvent",
    "Combined",
    "ConfigurationError",
    "FieldConstraintError",
    "FieldSpec",
    "FieldStatus",
    "FocusEvent",
    "Form",
    "FormState",
    "FormsConfig",
    "Handler",
    "InputEvent",
    "Invalid",
    "InvariantError",
    "Method",
    "ServerResponse",
    "SubmitEvent",
    "Valid",
    "Validation",
    "WrenError",
    "and_map",
    "and_then",
    "checkbox",
    "date",
    "exact_value",
    "fail",
    "form",
    "integer",
    "map2",
    "number",
    "select",
    "succeed",
    "text",
    "time",
    "update",
    "with_error",
]

# Public name → defining module
_LAZY_IMPORTS: dict[str, str] = {
    "DEFAULT_CONFIG": "wren.config",
    "FormsConfig": "wren.config",
    "NOTHING": "wren._internal.types",
    "ArityError": "wren.errors",
    "ConfigurationError": "wren.errors",
    "FieldConstraintError": "wren.errors",
    "InvariantError": "wren.errors",
    "WrenError": "wren.errors",
    "FieldSpec": "wren.fields",
    "checkbox": "wren.fields",
    "date": "wren.fields",
    "exact_value": "wren.fields",
    "integer": "wren.fields",
    "number": "wren.fields",
    "select": "wren.fields",
    "text": "wren.fields",
    "time": "wren.fields",
    "GLOBAL": "wren.validation",
    "Invalid": "wren.validation",
    "Valid": "wren.validation",
    "Validation": "wren.validation",
    "and_map": "wren.validation",
    "and_then": "wren.validation",
    "fail": "wren.validation",
    "map2": "wren.validation",
    "succeed": "wren.validation",
    "with_error": "wren.validation",
    "Combined": "wren.forms",
    "Form": "wren.forms",
    "form": "wren.forms",
    "Handler": "wren.handler",
    "BlurEvent": "wren.state",
    "FieldStatus": "wren.state",
    "FocusEvent": "wren.state",
    "FormState": "wren.state",
    "InputEvent": "wren.state",
    "SubmitEvent": "wren.state",
    "update": "wren.state",
    "Method": "wren.submission",
    "ServerResponse": "wren.submission",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)

    from importlib import import_module

    return getattr(import_module(module_name), name)
