"""Validation — combine field results, keep every error.

Usage::

    from wren.validation import fail, map2, succeed

    def combine(checkin, checkout):
        return map2(lambda a, b: (a, b), checkin, checkout).and_then(
            lambda dates: succeed(dates)
            if dates[0] < dates[1]
            else fail("Must be before checkout", checkin)
        )

Parsed values that are not available are ``NOTHING``; errors are a
``dict`` mapping field names to lists of errors, with no empty entries.
"""

from wren.validation.core import (
    GLOBAL,
    GLOBAL_KEY,
    Err,
    Ok,
    Result,
    Validation,
    ViewField,
    and_map,
    and_then,
    fail,
    field_name,
    field_status,
    from_maybe,
    from_result,
    map,
    map2,
    map3,
    map4,
    map5,
    map6,
    map7,
    map8,
    map9,
    map_n,
    status_rank,
    succeed,
    value,
    view_field,
    with_error,
    with_error_if,
)
from wren.validation.result import Invalid, Valid, Validated, to_validated
from wren.validation.rules import Rule, email, matches, not_blank, one_of, url

__all__ = [
    "GLOBAL",
    "GLOBAL_KEY",
    "Err",
    "Invalid",
    "Ok",
    "Result",
    "Rule",
    "Valid",
    "Validated",
    "Validation",
    "ViewField",
    "and_map",
    "and_then",
    "email",
    "fail",
    "field_name",
    "field_status",
    "from_maybe",
    "from_result",
    "map",
    "map2",
    "map3",
    "map4",
    "map5",
    "map6",
    "map7",
    "map8",
    "map9",
    "map_n",
    "matches",
    "not_blank",
    "one_of",
    "status_rank",
    "succeed",
    "to_validated",
    "url",
    "value",
    "view_field",
    "with_error",
    "with_error_if",
]
