"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

Global middleware is added with ``app.add_middleware()``. Actions attach
per-route middleware by identifier through ``app.middleware_alias()``.
"""

from perch.middleware.aliases import MiddlewareAliases
from perch.middleware.protocol import Middleware, Next, chain

__all__ = ["Middleware", "MiddlewareAliases", "Next", "chain"]
