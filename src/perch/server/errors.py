"""Error handling pipeline for perch requests.

Maps HTTPError exceptions and unexpected failures to Response objects,
using registered error handlers or defaults. Defaults answer in JSON
when the client prefers JSON and in plain text otherwise.
"""

import inspect
import logging
import traceback
from collections.abc import Callable
from typing import Any

from perch.errors import HTTPError, ValidationFailed
from perch.http.request import Request
from perch.http.response import Response
from perch.server.negotiation import negotiate

logger = logging.getLogger("perch.server")


async def call_error_handler(
    handler: Callable[..., Any],
    request: Request,
    exc: Exception,
) -> Response:
    """Invoke a user-registered error handler with introspected arguments.

    Error handlers may accept zero, one (request), or two (request, exc)
    args, and may be sync or async.
    """
    params = list(inspect.signature(handler).parameters.values())

    if len(params) >= 2:
        result = handler(request, exc)
    elif len(params) == 1:
        result = handler(request)
    else:
        result = handler()

    if inspect.isawaitable(result):
        result = await result
    return negotiate(result)


def _default_body(request: Request, status: int, detail: str, **extra: Any) -> Response:
    if request.wants_json:
        return Response.json({"status": status, "detail": detail, **extra}, status=status)
    return Response(body=detail, status=status, content_type="text/plain; charset=utf-8")


async def handle_http_error(
    exc: HTTPError,
    request: Request,
    error_handlers: dict[int | type, Callable[..., Any]],
    debug: bool,
) -> Response:
    """Map an HTTPError to a Response using registered error handlers."""
    logger.debug("%d %s %s — %s", exc.status, request.method, request.path, exc.detail)

    # Exact exception type first, then status code
    handler = error_handlers.get(type(exc)) or error_handlers.get(exc.status)
    if handler is not None:
        response = await call_error_handler(handler, request, exc)
        # Keep the exception's status unless the handler chose its own
        if response.status == 200:
            response = response.with_status(exc.status)
        return response

    detail = exc.detail or f"Error {exc.status}"
    if debug and exc.detail:
        detail = f"{exc.status}: {exc.detail}"

    if isinstance(exc, ValidationFailed):
        response = _default_body(request, exc.status, detail, errors=exc.errors)
    else:
        response = _default_body(request, exc.status, detail)
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


async def handle_internal_error(
    exc: Exception,
    request: Request,
    error_handlers: dict[int | type, Callable[..., Any]],
    debug: bool,
) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    logger.exception("500 %s %s", request.method, request.path)

    handler = error_handlers.get(500) or error_handlers.get(type(exc))
    if handler is not None:
        response = await call_error_handler(handler, request, exc)
        return response.with_status(500) if response.status == 200 else response

    if debug:
        trace = "".join(traceback.format_exception(exc))
        if request.wants_json:
            return _default_body(request, 500, str(exc) or type(exc).__name__, traceback=trace)
        return Response(body=trace, status=500, content_type="text/plain; charset=utf-8")

    return _default_body(request, 500, "Internal Server Error")
