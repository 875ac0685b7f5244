"""Typed extraction of query parameters and form/JSON body data.

Populates dataclass instances from request data, converting string
values to the annotated field types. Used by handler argument
resolution when a parameter's annotation is a dataclass, and by the
scalar conversion of individually bound parameters.

Supported field types: ``str``, ``int``, ``float``, ``bool``.
Missing keys use the dataclass field default. Conversion failures keep
the raw value.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any, TypeVar

_BUILTIN_TYPES: dict[str, type] = {"str": str, "int": int, "float": float, "bool": bool}


def is_extractable_dataclass(annotation: Any) -> bool:
    """Return True if *annotation* is a user-defined dataclass type.

    Excludes perch's own dataclasses (``Request``, ``Response``, ...),
    which are never built from query or form data.
    """
    if not isinstance(annotation, type) or not dataclasses.is_dataclass(annotation):
        return False
    module = getattr(annotation, "__module__", "") or ""
    return not module.startswith("perch.")


T = TypeVar("T")


def extract_dataclass(cls: type[T], data: Mapping[str, Any]) -> T:
    """Create a dataclass instance from a mapping (query params, form, JSON)."""
    kwargs: dict[str, Any] = {}
    for f in dataclasses.fields(cls):  # type: ignore[arg-type]
        if f.name not in data:
            continue
        target_type = f.type
        if isinstance(target_type, str):
            target_type = _BUILTIN_TYPES.get(target_type, target_type)
        kwargs[f.name] = convert(data[f.name], target_type)
    return cls(**kwargs)


def convert(value: Any, target_type: Any) -> Any:
    """Convert *value* to *target_type*, returning *value* unchanged on failure."""
    if target_type is str:
        return value.strip() if isinstance(value, str) else str(value)

    if target_type is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ("true", "1", "yes", "on")
        return bool(value)

    if target_type in (int, float):
        try:
            return target_type(value)
        except (ValueError, TypeError):
            return value

    return value
