"""ASGI handler — translates ASGI scope/messages to perch types.

The only component that touches raw ASGI HTTP messages. Converts the
scope to a Request, dispatches through global middleware and the
router, and sends the Response back through ASGI ``send()``.
"""

from collections.abc import Callable
from typing import Any

from perch._internal.asgi import Receive, Scope, Send
from perch.context import request_var
from perch.errors import HTTPError
from perch.http.request import Request
from perch.http.response import Response
from perch.middleware.protocol import Middleware, chain
from perch.routing.router import Router
from perch.server.errors import handle_http_error, handle_internal_error
from perch.server.sender import send_response


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    middleware: tuple[Middleware, ...],
    error_handlers: dict[int | type, Callable[..., Any]],
    debug: bool,
    max_content_length: int | None = None,
) -> None:
    """Process a single HTTP request through the full pipeline.

    Requests declaring a ``Content-Length`` above *max_content_length*
    are answered with 413 before routing.
    """
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)
    token = request_var.set(request)

    async def dispatch(req: Request) -> Response:
        if max_content_length is not None and (req.content_length or 0) > max_content_length:
            raise HTTPError(status=413, detail="Request body too large")
        match = router.match(req.method, req.path)
        matched = req.with_path_params(match.path_params)
        request_var.set(matched)
        return await match.route.handler(matched)

    try:
        response = await chain(middleware, dispatch)(request)
    except HTTPError as exc:
        response = await handle_http_error(exc, request, error_handlers, debug)
    except Exception as exc:
        response = await handle_internal_error(exc, request, error_handlers, debug)
    finally:
        request_var.reset(token)

    await send_response(response, send, head=request.method == "HEAD")
