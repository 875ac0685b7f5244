"""Request-scoped context via ContextVar.

``request_var`` holds the current ``Request`` for this task. It is set
by the request pipeline before dispatch and reset afterwards, so code
deep inside an action can reach the request without threading it
through every call::

    from perch.context import get_request

    def handle(self, title: str) -> Post:
        author = get_request().headers.get("x-user")
"""

from contextvars import ContextVar

from perch.http.request import Request

request_var: ContextVar[Request] = ContextVar("perch_request")


def get_request() -> Request:
    """Return the current request.

    Raises ``LookupError`` if called outside a request context.
    """
    return request_var.get()
