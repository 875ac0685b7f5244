"""Built-in validation rules.

Request input mixes strings (query strings, URL-encoded forms) with JSON
values (numbers, booleans, lists, objects), so rules see the value as it
arrived and decide per type. A rule returns an error message, or ``None``
when the value is acceptable::

    def rule(value: Any) -> str | None: ...

Parameterized rules are factories returning a rule. Any callable with
the same shape works as a custom rule.
"""

import math
import re
from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypeAlias

Validator: TypeAlias = Callable[[Any], str | None]

_TRUE = frozenset({"true", "1", "yes", "on"})
_FALSE = frozenset({"false", "0", "no", "off"})


def is_blank(value: Any) -> bool:
    """``None``, whitespace-only text and empty collections count as blank."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (Sequence, Mapping)):
        return len(value) == 0
    return False


def required(value: Any) -> str | None:
    """Field must be present and non-blank. ``0`` and ``false`` are present."""
    if is_blank(value):
        return "This field is required"
    return None


def _size(value: Any) -> tuple[int, str]:
    if isinstance(value, str):
        return len(value), "characters"
    if isinstance(value, (Sequence, Mapping)):
        return len(value), "items"
    return len(str(value)), "characters"


def max_length(n: int) -> Validator:
    """Text of at most *n* characters, or a list of at most *n* items."""

    def check(value: Any) -> str | None:
        size, unit = _size(value)
        return f"Must be at most {n} {unit}" if size > n else None

    return check


def min_length(n: int) -> Validator:
    """Text of at least *n* characters, or a list of at least *n* items."""

    def check(value: Any) -> str | None:
        size, unit = _size(value)
        return f"Must be at least {n} {unit}" if size < n else None

    return check


_DOMAIN_LABEL = re.compile(r"[a-z0-9](?:[a-z0-9-]*[a-z0-9])?", re.IGNORECASE)


def email(value: Any) -> str | None:
    """``local@domain.tld`` shape; deliverability is not checked."""
    message = "Must be a valid email address"
    if not isinstance(value, str) or value.count("@") != 1 or any(c.isspace() for c in value):
        return message
    local, domain = value.split("@")
    labels = domain.split(".")
    if not local or len(labels) < 2 or not labels[-1].isalpha() or len(labels[-1]) < 2:
        return message
    if not all(_DOMAIN_LABEL.fullmatch(label) for label in labels):
        return message
    return None


def url(value: Any) -> str | None:
    """Absolute ``http`` or ``https`` URL with a host."""
    if not isinstance(value, str) or any(c.isspace() for c in value):
        return "Must be a valid URL"
    scheme, sep, rest = value.partition("://")
    host = rest.split("/", 1)[0].split("?", 1)[0].split("#", 1)[0]
    if not sep or scheme.lower() not in ("http", "https") or not host.strip("."):
        return "Must be a valid URL"
    return None


def matches(pattern: str, message: str | None = None) -> Validator:
    """Text matching *pattern* in full."""
    compiled = re.compile(pattern)

    def check(value: Any) -> str | None:
        if not isinstance(value, str) or compiled.fullmatch(value) is None:
            return message or f"Must match pattern: {pattern}"
        return None

    return check


def one_of(*choices: Any) -> Validator:
    """Value equal to one of *choices*.

    Text input is also compared against the string form of each choice,
    so ``one_of(1, 2)`` accepts both JSON ``1`` and a query string ``"1"``.
    """
    allowed = {str(choice): choice for choice in choices}
    message = f"Must be one of: {', '.join(allowed)}"

    def check(value: Any) -> str | None:
        if isinstance(value, str):
            return None if value in allowed else message
        if isinstance(value, bool):
            return None if any(c is value for c in choices) else message
        return None if value in allowed.values() else message

    return check


def integer(value: Any) -> str | None:
    """A whole number: JSON ``3`` or ``3.0``, or text such as ``"-12"``."""
    if isinstance(value, bool):
        return "Must be a whole number"
    if isinstance(value, int):
        return None
    if isinstance(value, float) and value.is_integer():
        return None
    if isinstance(value, str):
        try:
            int(value.strip())
        except ValueError:
            return "Must be a whole number"
        return None
    return "Must be a whole number"


def number(value: Any) -> str | None:
    """A finite number, as a JSON number or numeric text."""
    if isinstance(value, bool):
        return "Must be a number"
    if isinstance(value, (int, float)):
        return None if math.isfinite(value) else "Must be a number"
    if isinstance(value, str):
        try:
            parsed = float(value.strip())
        except ValueError:
            return "Must be a number"
        return None if math.isfinite(parsed) else "Must be a number"
    return "Must be a number"


def boolean(value: Any) -> str | None:
    """JSON ``true``/``false`` or ``true``/``false``/``1``/``0``/``on``/``off`` text."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str) and value.strip().lower() in _TRUE | _FALSE:
        return None
    return "Must be true or false"
