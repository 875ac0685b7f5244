"""Perch application class.

Mutable during setup (routes, actions, middleware, providers).
Frozen at runtime when ``__call__()`` is first invoked.
"""

import inspect
import logging
import os
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from perch._internal.asgi import Receive, Scope, Send
from perch._internal.types import ErrorHandler, Handler, Provider
from perch.actions.controller import ActionTarget, action_endpoint, parse_target
from perch.actions.discovery import register_routes
from perch.actions.router import ActionRouter
from perch.actions.types import ActionReference
from perch.config import AppConfig
from perch.middleware.aliases import MiddlewareAliases
from perch.middleware.protocol import Middleware
from perch.routing.route import Route
from perch.routing.router import Router, parse_path
from perch.server.endpoints import RouteContext, function_endpoint
from perch.server.handler import handle_request

logger = logging.getLogger("perch.server")


@dataclass(slots=True)
class _PendingRoute:
    """A route waiting to be compiled."""

    path: str
    target: ActionTarget | Handler
    methods: list[str] | None
    name: str | None


class App:
    """The perch application.

    Mutable during setup: register routes with ``@app.route``, or let
    action classes register their own with ``app.register_actions()``.
    Frozen at runtime when ``__call__()`` is first invoked.

    Thread safety:
        The setup phase is single-threaded (decorators and discovery at
        import time). The freeze transition uses a Lock + double-check
        so exactly one thread compiles the app, even when several ASGI
        workers call ``__call__()`` concurrently on the first request.
    """

    __slots__ = (
        "_error_handlers",
        "_freeze_lock",
        "_frozen",
        "_middleware",
        "_middleware_aliases",
        "_middleware_list",
        "_pending_routes",
        # Service injection via providers
        "_providers",
        # Compiled state (populated by _freeze)
        "_router",
        "_shutdown_hooks",
        "_startup_hooks",
        "config",
    )

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config: AppConfig = config or AppConfig()
        self._pending_routes: list[_PendingRoute] = []
        self._middleware_list: list[Middleware] = []
        self._middleware_aliases: MiddlewareAliases = MiddlewareAliases()
        self._error_handlers: dict[int | type, ErrorHandler] = {}
        self._startup_hooks: list[Callable[..., Any]] = []
        self._shutdown_hooks: list[Callable[..., Any]] = []
        self._providers: dict[type, Provider] = {}
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

        # Compiled state — set during _freeze()
        self._router: Router | None = None
        self._middleware: tuple[Middleware, ...] = ()

    # -- Route registration --

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Register a route handler via decorator.

        Args:
            path: URL path pattern. Use ``{param}`` for path parameters.
            methods: HTTP methods. Defaults to ``["GET"]``.
            name: Optional route name.
        """

        def decorator(func: Handler) -> Handler:
            self._add_route(path, func, methods=methods, name=name)
            return func

        return decorator

    def _add_route(
        self,
        path: str,
        target: Any,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
    ) -> None:
        """Queue a route. Path and target are checked now, not at freeze."""
        self._check_not_frozen()
        parse_path(path)
        self._pending_routes.append(_PendingRoute(path, parse_target(target), methods, name))

    # -- Action discovery --

    def register_actions(self, *roots: str | os.PathLike[str]) -> list[ActionReference]:
        """Let every action class under *roots* register its routes.

        Scans ``config.actions_dir`` when no roots are given. Each class
        that declares a static ``routes(router)`` hook is called once with
        an ``ActionRouter`` bound to this app::

            app = App()
            app.register_actions()                     # ./actions
            app.register_actions("actions", "admin")   # in this order

        Returns:
            The classes whose hook ran, in the order they ran.
        """
        self._check_not_frozen()
        invoked = register_routes(
            ActionRouter(self),
            roots or None,
            default_root=self.config.actions_dir,
        )
        logger.debug("Registered routes for %d action(s)", len(invoked))
        return invoked

    # -- Service injection --

    def provide(self, annotation: type, factory: Provider) -> None:
        """Register a provider factory for dependency injection.

        When a handler parameter or an action constructor parameter is
        annotated with *annotation*, perch calls *factory* (with no
        arguments) and injects the result::

            app.provide(PostRepository, lambda: repo)

            class ShowPost(Action):
                def __init__(self, posts: PostRepository) -> None: ...
        """
        self._check_not_frozen()
        self._providers[annotation] = factory

    # -- Error handlers --

    def error(
        self,
        code_or_exception: int | type[Exception],
    ) -> Callable[[ErrorHandler], ErrorHandler]:
        """Register an error handler via decorator."""

        def decorator(func: ErrorHandler) -> ErrorHandler:
            self._check_not_frozen()
            self._error_handlers[code_or_exception] = func
            return func

        return decorator

    # -- Middleware --

    def add_middleware(self, middleware: Middleware) -> None:
        """Add a middleware to the global pipeline."""
        self._check_not_frozen()
        self._middleware_list.append(middleware)

    def middleware_alias(
        self,
        name: str,
        middleware: Callable[..., Any],
        *,
        factory: bool = False,
    ) -> None:
        """Name a middleware so actions can list it in ``controller_middleware()``.

        With ``factory=True`` the identifier may carry parameters, passed
        to *middleware* as strings: ``"throttle:10,60"`` calls
        ``middleware("10", "60")``.
        """
        self._check_not_frozen()
        self._middleware_aliases.register(name, middleware, factory=factory)

    # -- Introspection --

    @property
    def routes(self) -> list[Route]:
        """The route table, in registration order."""
        if self._router is not None:
            return self._router.routes
        return [self._compile_route(pending, self._route_context()) for pending in self._pending_routes]

    # -- Lifecycle hooks --

    def on_startup(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync startup hook via decorator.

        Hooks run in registration order during ASGI lifespan startup,
        before the server begins accepting HTTP requests.
        """
        self._check_not_frozen()
        self._startup_hooks.append(func)
        return func

    def on_shutdown(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Register an async or sync shutdown hook via decorator."""
        self._check_not_frozen()
        self._shutdown_hooks.append(func)
        return func

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()

        assert self._router is not None

        await handle_request(
            scope,
            receive,
            send,
            router=self._router,
            middleware=self._middleware,
            error_handlers=self._error_handlers,
            debug=self.config.debug,
            max_content_length=self.config.max_content_length,
        )

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Freezes the app at startup (before the first HTTP request), then
        runs registered startup/shutdown hooks.
        """
        self._ensure_frozen()

        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    for hook in self._startup_hooks:
                        result = hook()
                        if inspect.isawaitable(result):
                            await result
                    await send({"type": "lifespan.startup.complete"})
                except Exception as exc:
                    logger.exception("Startup hook failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return

            elif msg_type == "lifespan.shutdown":
                for hook in self._shutdown_hooks:
                    result = hook()
                    if inspect.isawaitable(result):
                        await result
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Internal --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile the app into its frozen runtime state.

        MUST only be called while holding _freeze_lock.
        """
        context = self._route_context()
        router = Router()
        for pending in self._pending_routes:
            router.add(self._compile_route(pending, context))
        router.compile()
        self._router = router
        self._middleware = tuple(self._middleware_list)
        self._frozen = True
        logger.debug("App frozen with %d route(s)", len(router))

    def _route_context(self) -> RouteContext:
        return RouteContext(
            providers=dict(self._providers),
            middleware=self._middleware_aliases,
            offload=self.config.offload_sync_handlers,
        )

    @staticmethod
    def _compile_route(pending: _PendingRoute, context: RouteContext) -> Route:
        methods = frozenset(m.upper() for m in (pending.methods or ["GET"]))
        target = pending.target
        if isinstance(target, ActionTarget):
            return Route(
                path=pending.path,
                handler=action_endpoint(target, context),
                methods=methods,
                name=pending.name,
                action=target.cls,
                action_method=target.method,
            )
        return Route(
            path=pending.path,
            handler=function_endpoint(target, context),
            methods=methods,
            name=pending.name,
        )

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = (
                "Cannot modify the app after it has started serving requests. "
                "Register routes, actions and middleware before the first request."
            )
            raise RuntimeError(msg)
