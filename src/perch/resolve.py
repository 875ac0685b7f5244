"""Handler argument resolution — bind request data to callable parameters.

Shared by plain ``@app.route`` handlers and action controllers. Each
parameter of the target callable is resolved from the first source that
can supply it:

1. ``request`` — the Request object (by name or annotation)
2. Path parameters — from the URL match, converted to the annotation
3. Extra values — e.g. fields validated by an action's ``rules()``
4. Service providers — registered via ``app.provide()``, by annotation
5. Extractable dataclasses — from query (GET/HEAD) or body input
6. Request input — query, form or JSON fields matched by name

Parameters none of these supply are left out, so their defaults apply.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from typing import Any

from perch.extraction import convert, extract_dataclass, is_extractable_dataclass
from perch.http.request import Request

_EMPTY = inspect.Parameter.empty
_BINDABLE = (inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.KEYWORD_ONLY)


async def resolve_kwargs(
    func: Callable[..., Any],
    request: Request,
    providers: Mapping[type, Callable[[], Any]] | None = None,
    *,
    extra: Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Build keyword arguments for *func* from *request*.

    Request input (query plus body) is read lazily, only when a
    parameter needs it.
    """
    sig = inspect.signature(func, eval_str=True)
    providers = providers or {}
    extra = extra or {}
    kwargs: dict[str, Any] = {}

    for name, param in sig.parameters.items():
        if param.kind not in _BINDABLE:
            continue
        annotation = param.annotation

        if name == "request" or annotation is Request:
            kwargs[name] = request
        elif name in request.path_params:
            value = request.path_params[name]
            kwargs[name] = convert(value, annotation) if annotation is not _EMPTY else value
        elif name in extra:
            kwargs[name] = extra[name]
        elif annotation is not _EMPTY and annotation in providers:
            kwargs[name] = providers[annotation]()
        elif is_extractable_dataclass(annotation):
            source = request.query if request.method in ("GET", "HEAD") else await request.input()
            kwargs[name] = extract_dataclass(annotation, source)
        else:
            data = await request.input()
            if name in data:
                value = data[name]
                kwargs[name] = convert(value, annotation) if annotation is not _EMPTY else value

    return kwargs
