"""Endpoints — the ``Request -> Response`` callables stored in the router.

Every registered target (plain function or action) is compiled into an
endpoint when the app freezes, so the request pipeline only ever calls
``await route.handler(request)``.
"""

import functools
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

from perch._internal.invoke import invoke
from perch.http.request import Request
from perch.http.response import Response
from perch.middleware.aliases import MiddlewareAliases
from perch.resolve import resolve_kwargs
from perch.server.negotiation import negotiate

Endpoint: TypeAlias = Callable[[Request], Awaitable[Response]]


@dataclass(frozen=True, slots=True)
class RouteContext:
    """App state endpoints need at request time. Built once at freeze."""

    providers: Mapping[type, Callable[[], Any]]
    middleware: MiddlewareAliases
    offload: bool = True


def function_endpoint(func: Callable[..., Any], context: RouteContext) -> Endpoint:
    """Compile a plain ``@app.route`` handler into an endpoint."""

    @functools.wraps(func)
    async def endpoint(request: Request) -> Response:
        kwargs = await resolve_kwargs(func, request, context.providers)
        result = await invoke(func, offload=context.offload, **kwargs)
        return negotiate(result)

    return endpoint
