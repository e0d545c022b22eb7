"""Field declarations — base constructors plus chainable modifiers.

Usage::

    from wren.fields import date, integer, text

    name = text().required("Required").with_max_length(80, "Too long")
    guests = (
        integer(invalid=lambda raw: f"{raw} is not a number")
        .required("Required")
        .with_min(1, "At least one guest")
    )
    checkin = date(invalid=lambda raw: "Invalid date").required("Required")
"""

from wren.fields.constructors import (
    checkbox,
    date,
    email,
    exact_value,
    integer,
    number,
    password,
    radio,
    search,
    select,
    telephone,
    text,
    textarea,
    time,
    url,
)
from wren.fields.kinds import FieldKind, InputKind, InputType, RadioKind, SelectKind, TextareaKind
from wren.fields.spec import Capability, FieldSpec, OutsideRange, is_blank
from wren.fields.timeofday import TimeOfDay, parse_time

__all__ = [
    "Capability",
    "FieldKind",
    "FieldSpec",
    "InputKind",
    "InputType",
    "OutsideRange",
    "RadioKind",
    "SelectKind",
    "TextareaKind",
    "TimeOfDay",
    "checkbox",
    "date",
    "email",
    "exact_value",
    "integer",
    "is_blank",
    "number",
    "parse_time",
    "password",
    "radio",
    "search",
    "select",
    "telephone",
    "text",
    "textarea",
    "time",
    "url",
]
