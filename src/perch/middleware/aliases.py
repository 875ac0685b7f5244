"""Named middleware — resolve identifiers like ``"auth"`` or ``"throttle:10,60"``.

Actions list their controller middleware as identifiers rather than
importing middleware objects, so the app decides what ``"auth"`` means::

    app.middleware_alias("auth", require_user)
    app.middleware_alias("throttle", Throttle, factory=True)

    class ExportReport(Action):
        def controller_middleware(self):
            return ["auth", "throttle:10,60"]

Text after the colon is split on commas and passed to the factory as
string arguments.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from perch.errors import ConfigurationError
from perch.middleware.protocol import Middleware


@dataclass(frozen=True, slots=True)
class _Alias:
    target: Callable[..., Any]
    factory: bool


class MiddlewareAliases:
    """Registry mapping identifiers to middleware.

    Resolved middleware is cached per identifier, so a factory runs once
    for each distinct parameter string.
    """

    __slots__ = ("_aliases", "_resolved")

    def __init__(self) -> None:
        self._aliases: dict[str, _Alias] = {}
        self._resolved: dict[str, Middleware] = {}

    def register(self, name: str, target: Callable[..., Any], *, factory: bool = False) -> None:
        if ":" in name:
            msg = f"Middleware alias {name!r} must not contain ':'."
            raise ConfigurationError(msg)
        self._aliases[name] = _Alias(target, factory)
        self._resolved = {k: v for k, v in self._resolved.items() if _alias_name(k) != name}

    def __contains__(self, name: object) -> bool:
        return name in self._aliases

    def resolve(self, identifier: str | Middleware) -> Middleware:
        """Return the middleware for *identifier*; callables pass through."""
        if not isinstance(identifier, str):
            return identifier
        if identifier in self._resolved:
            return self._resolved[identifier]

        name, _, raw_args = identifier.partition(":")
        alias = self._aliases.get(name)
        if alias is None:
            known = ", ".join(sorted(self._aliases)) or "none registered"
            msg = f"Unknown middleware {identifier!r} (known: {known})."
            raise ConfigurationError(msg)

        args = [arg.strip() for arg in raw_args.split(",")] if raw_args else []
        if alias.factory:
            middleware = alias.target(*args)
        elif args:
            msg = f"Middleware {name!r} takes no parameters, got {identifier!r}."
            raise ConfigurationError(msg)
        else:
            middleware = alias.target

        self._resolved[identifier] = middleware
        return middleware

    def resolve_all(self, identifiers: Iterable[str | Middleware]) -> tuple[Middleware, ...]:
        return tuple(self.resolve(identifier) for identifier in identifiers)


def _alias_name(identifier: str) -> str:
    return identifier.partition(":")[0]
