"""perch exception hierarchy.

Shared across the router, the action registrar, the request pipeline and
middleware so every module raises and catches the same types.
"""

from collections.abc import Mapping
from dataclasses import dataclass


class PerchError(Exception):
    """Base for all perch-specific errors."""


class ConfigurationError(PerchError):
    """Raised when app or route configuration is invalid.

    Surfaces at setup time: bad path syntax, unknown middleware
    identifiers, routes registered after the app froze.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(PerchError):
    """An error that maps directly to an HTTP status code.

    Raised by the router, middleware, actions or plain handlers. The
    request pipeline catches these and dispatches to the matching
    ``@app.error()`` handler.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no route matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )


class Forbidden(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """403 — an action's ``authorize()`` check refused the request."""

    def __init__(self, detail: str = "This action is unauthorized.") -> None:
        super().__init__(status=403, detail=detail)


class ValidationFailed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """422 — request data failed an action's ``rules()``.

    ``errors`` maps field names to their error messages, in rule order.
    """

    errors: dict[str, list[str]]

    def __init__(
        self,
        errors: Mapping[str, list[str]],
        detail: str = "The given data was invalid.",
    ) -> None:
        super().__init__(status=422, detail=detail)
        object.__setattr__(self, "errors", dict(errors))
