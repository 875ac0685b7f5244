"""Request validation — composable rules, clean results.

Actions declare rules and the controller adapter validates request input
before ``handle()`` runs::

    from perch.validation import email, max_length, required

    class Subscribe(Action):
        def rules(self):
            return {"email": [required, email], "name": [max_length(80)]}

``validate()`` also works on its own with any mapping.
"""

from collections.abc import Mapping
from typing import Any

from perch.validation.result import ValidationResult
from perch.validation.rules import (
    Validator,
    boolean,
    email,
    integer,
    is_blank,
    matches,
    max_length,
    min_length,
    number,
    one_of,
    required,
    url,
)

__all__ = [
    "ValidationResult",
    "Validator",
    "boolean",
    "email",
    "integer",
    "matches",
    "max_length",
    "min_length",
    "number",
    "one_of",
    "required",
    "url",
    "validate",
]


def validate(
    data: Mapping[str, Any],
    rules: Mapping[str, list[Validator]],
) -> ValidationResult:
    """Validate *data* against *rules*.

    Rules receive each value as it arrived: text from query strings and
    forms, numbers, booleans and lists from JSON bodies. ``result.data``
    keeps those values unchanged. A field whose ``required`` check fails
    reports only that error; a blank field without ``required`` is not
    checked.

    Example::

        result = validate(form, {
            "title": [required, max_length(200)],
            "body": [required, min_length(10)],
        })
        # result.errors == {"body": ["Must be at least 10 characters"]}
    """
    errors: dict[str, list[str]] = {}
    cleaned: dict[str, Any] = {}

    for field_name, validators in rules.items():
        value = data.get(field_name)

        # Optional fields left blank skip their other rules
        if is_blank(value) and required not in validators:
            if value is not None:
                cleaned[field_name] = value
            continue

        field_errors: list[str] = []
        for validator in validators:
            error = validator(value)
            if error is None:
                continue
            field_errors.append(error)
            if validator is required:
                break

        if field_errors:
            errors[field_name] = field_errors
        else:
            cleaned[field_name] = value

    return ValidationResult(data=cleaned, errors=errors)
