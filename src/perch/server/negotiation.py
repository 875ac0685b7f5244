"""Content negotiation — maps return values to Response objects.

isinstance-based dispatch on whatever a handler or action returned.
No magic, fully predictable.
"""

import dataclasses
from typing import Any

from perch.http.response import HTML_CONTENT_TYPE, Redirect, Response


def negotiate(value: Any) -> Response:
    """Convert a handler's return value to a Response.

    Dispatch order:

    1. ``Response``            -> pass through
    2. ``Redirect``            -> 302 (or its status) with Location header
    3. ``None``                -> 204 No Content
    4. ``str``                 -> 200, text/html
    5. ``bytes``               -> 200, application/octet-stream
    6. ``dict`` / ``list``     -> 200, application/json
    7. dataclass instance      -> 200, application/json of its fields
    8. ``(value, int)``        -> negotiate value, override status
    9. ``(value, int, dict)``  -> negotiate value, override status + headers
    """
    match value:
        case Response():
            return value
        case Redirect():
            return (
                Response(body="")
                .with_status(value.status)
                .with_header("Location", value.url)
                .with_headers(dict(value.headers))
            )
        case None:
            return Response(body="", status=204)
        case str():
            return Response(body=value, content_type=HTML_CONTENT_TYPE)
        case bytes():
            return Response(body=value, content_type="application/octet-stream")
        case dict() | list():
            return Response.json(value)
        case (inner, int() as status):
            return negotiate(inner).with_status(status)
        case (inner, int() as status, dict() as headers):
            return negotiate(inner).with_status(status).with_headers(headers)
        case _ if dataclasses.is_dataclass(value) and not isinstance(value, type):
            return Response.json(dataclasses.asdict(value))
        case _:
            msg = (
                f"Cannot convert {type(value).__name__} to a response. "
                "Return str, bytes, dict, list, a dataclass, None, Response, or Redirect."
            )
            raise TypeError(msg)
