"""Controller adapter — serve an action as a route endpoint.

For an action class the endpoint runs the conventions in order:

1. Build the action, injecting constructor dependencies from providers
2. Wrap the rest in the action's ``controller_middleware()``
3. ``authorize(...)`` — a falsy result is a 403
4. ``rules()`` — request input is validated, failures are a 422
5. ``as_controller(...)`` if defined, else ``handle(...)``
6. ``json_response(result, request)`` when the client wants JSON,
   ``html_response(result, request)`` otherwise, when defined

An explicit ``(Class, "method")`` target skips 3, 4 and 6 and calls the
named method directly. Controller middleware still applies.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from perch._internal.invoke import invoke
from perch.actions.action import build_action
from perch.errors import ConfigurationError, Forbidden, ValidationFailed
from perch.http.request import Request
from perch.http.response import Response
from perch.middleware.protocol import Middleware, chain
from perch.resolve import resolve_kwargs
from perch.server.endpoints import Endpoint, RouteContext
from perch.server.negotiation import negotiate
from perch.validation import validate

_ENTRY_POINTS = ("as_controller", "handle")


@dataclass(frozen=True, slots=True)
class ActionTarget:
    """An action class, and the method to call when given explicitly."""

    cls: type
    method: str | None = None

    @property
    def label(self) -> str:
        if self.method is None:
            return self.cls.__qualname__
        return f"{self.cls.__qualname__}.{self.method}"


def parse_target(target: Any) -> ActionTarget | Callable[..., Any]:
    """Normalize a route target.

    Accepts an action class, a ``(Class, "method")`` pair, or a plain
    callable, which is returned unchanged.

    Raises:
        ConfigurationError: The target is none of these, or names a
            method the class does not have.
    """
    if isinstance(target, (tuple, list)):
        if len(target) != 2 or not isinstance(target[0], type) or not isinstance(target[1], str):
            msg = f"Route target pair must be (Class, 'method'), got {target!r}."
            raise ConfigurationError(msg)
        cls, method = target
        if not callable(getattr(cls, method, None)):
            msg = f"{cls.__qualname__} has no method {method!r}."
            raise ConfigurationError(msg)
        return ActionTarget(cls, method)

    if isinstance(target, type):
        if not any(callable(getattr(target, name, None)) for name in _ENTRY_POINTS):
            msg = f"Action {target.__qualname__} defines neither handle() nor as_controller()."
            raise ConfigurationError(msg)
        return ActionTarget(target)

    if callable(target):
        return target

    msg = f"Route target must be an action class, a (Class, 'method') pair or a callable, got {target!r}."
    raise ConfigurationError(msg)


def action_endpoint(target: ActionTarget, context: RouteContext) -> Endpoint:
    """Compile an action target into a ``Request -> Response`` endpoint."""

    async def endpoint(request: Request) -> Response:
        action = build_action(target.cls, context.providers)
        middleware = context.middleware.resolve_all(_controller_middleware(action))

        async def call(req: Request) -> Response:
            if target.method is not None:
                method = getattr(action, target.method)
                kwargs = await resolve_kwargs(method, req, context.providers)
                return negotiate(await invoke(method, offload=context.offload, **kwargs))
            return await _run_conventions(action, req, context)

        return await chain(middleware, call)(request)

    endpoint.__name__ = target.cls.__name__
    endpoint.__qualname__ = target.label
    return endpoint


async def _run_conventions(action: Any, request: Request, context: RouteContext) -> Response:
    authorize = getattr(action, "authorize", None)
    if authorize is not None:
        kwargs = await resolve_kwargs(authorize, request, context.providers)
        if not await invoke(authorize, offload=context.offload, **kwargs):
            raise Forbidden()

    validated: dict[str, Any] = {}
    rules = getattr(action, "rules", None)
    if rules is not None:
        result = validate(await request.input(), await invoke(rules))
        if not result:
            raise ValidationFailed(result.errors)
        validated = result.data

    entry = getattr(action, "as_controller", None) or action.handle
    kwargs = await resolve_kwargs(entry, request, context.providers, extra=validated)
    value = await invoke(entry, offload=context.offload, **kwargs)

    if request.wants_json:
        formatter = getattr(action, "json_response", None)
    else:
        formatter = getattr(action, "html_response", None)
    if formatter is not None:
        value = await invoke(formatter, value, request, offload=context.offload)

    return negotiate(value)


def _controller_middleware(action: Any) -> Sequence[str | Middleware]:
    declared = getattr(action, "controller_middleware", None)
    if declared is None:
        return ()
    if callable(declared):
        declared = declared()
    return tuple(declared)
