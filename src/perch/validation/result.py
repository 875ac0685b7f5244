"""Validation result — immutable container for validated data or errors."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """The outcome of validating request data against a set of rules.

    The result is falsy when invalid, so you can write::

        result = validate(data, rules)
        if not result:
            raise ValidationFailed(result.errors)

    ``data`` holds the values of the fields that passed, keyed by field
    name. ``errors`` maps each failing field to its messages::

        {"title": ["This field is required"],
         "email": ["Must be a valid email address"]}
    """

    data: dict[str, Any]
    errors: dict[str, list[str]]

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def __bool__(self) -> bool:
        return self.is_valid
