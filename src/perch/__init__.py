"""Perch — an ASGI framework where actions register their own routes.

Each action is one class for one operation. Classes that declare a static
``routes`` hook are found by walking the actions directory, and each hook
is called once with a router handle.

Basic usage::

    # actions/posts/show_post.py
    from perch import Action

    class ShowPost(Action):
        @staticmethod
        def routes(router):
            router.get("/posts/{post_id:int}", ShowPost)

        def handle(self, post_id: int) -> dict:
            return {"id": post_id}

    # app.py
    from perch import App

    app = App()
    app.register_actions()  # scans ./actions
"""

__version__ = "0.1.0"
__all__ = [
    "Action",
    "ActionRouter",
    "App",
    "AppConfig",
    "ConfigurationError",
    "Forbidden",
    "HTTPError",
    "MethodNotAllowed",
    "Middleware",
    "Next",
    "NotFound",
    "PerchError",
    "Redirect",
    "Request",
    "Response",
    "ValidationFailed",
    "get_request",
    "register_routes",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast while providing a clean top-level API.
    """
    if name == "App":
        from perch.app import App

        return App

    if name == "AppConfig":
        from perch.config import AppConfig

        return AppConfig

    if name == "Request":
        from perch.http.request import Request

        return Request

    if name in ("Response", "Redirect"):
        from perch.http import response as _resp

        return getattr(_resp, name)

    if name in ("Action", "ActionRouter", "register_routes"):
        from perch import actions as _actions

        return getattr(_actions, name)

    if name in ("Middleware", "Next"):
        from perch.middleware import protocol as _mw

        return getattr(_mw, name)

    if name == "get_request":
        from perch.context import get_request

        return get_request

    if name in (
        "ConfigurationError",
        "Forbidden",
        "HTTPError",
        "MethodNotAllowed",
        "NotFound",
        "PerchError",
        "ValidationFailed",
    ):
        from perch import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
