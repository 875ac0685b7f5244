"""The router handle passed to ``routes`` hooks."""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from perch.app import App

_ALL_METHODS = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")


class ActionRouter:
    """Registers routes on an app on behalf of action classes.

    Targets are an action class, a ``(Class, "method")`` pair, or a plain
    handler function::

        @staticmethod
        def routes(router: ActionRouter) -> None:
            router.get("/posts", ListPosts)
            router.post("/posts", (ListPosts, "store"), name="posts.store")
    """

    __slots__ = ("_app",)

    def __init__(self, app: App) -> None:
        self._app = app

    @property
    def app(self) -> App:
        return self._app

    def match(
        self,
        methods: Iterable[str],
        path: str,
        target: Any,
        *,
        name: str | None = None,
    ) -> None:
        self._app._add_route(path, target, methods=[m.upper() for m in methods], name=name)

    def get(self, path: str, target: Any, *, name: str | None = None) -> None:
        self.match(["GET"], path, target, name=name)

    def post(self, path: str, target: Any, *, name: str | None = None) -> None:
        self.match(["POST"], path, target, name=name)

    def put(self, path: str, target: Any, *, name: str | None = None) -> None:
        self.match(["PUT"], path, target, name=name)

    def patch(self, path: str, target: Any, *, name: str | None = None) -> None:
        self.match(["PATCH"], path, target, name=name)

    def delete(self, path: str, target: Any, *, name: str | None = None) -> None:
        self.match(["DELETE"], path, target, name=name)

    def options(self, path: str, target: Any, *, name: str | None = None) -> None:
        self.match(["OPTIONS"], path, target, name=name)

    def head(self, path: str, target: Any, *, name: str | None = None) -> None:
        self.match(["HEAD"], path, target, name=name)

    def any(self, path: str, target: Any, *, name: str | None = None) -> None:
        self.match(_ALL_METHODS, path, target, name=name)
