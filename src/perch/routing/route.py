"""Route and RouteMatch frozen dataclasses."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route path.

    Static:  ``/users``  (is_param=False)
    Param:   ``/{id}``   (is_param=True, param_name="id")
    Typed:   ``/{id:int}`` (is_param=True, param_name="id", param_type="int")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None
    param_type: str = "str"


@dataclass(frozen=True, slots=True)
class Route:
    """A frozen route definition.

    ``action`` and ``action_method`` record the handler reference when the
    route was registered for an action class (``action_method`` is set
    only for explicit ``(Action, "method")`` targets).
    """

    path: str
    handler: Callable[..., Any]
    methods: frozenset[str]
    name: str | None = None
    action: type | None = None
    action_method: str | None = None

    @property
    def handler_name(self) -> str:
        """Display name: ``Action``, ``Action.method`` or the function name."""
        if self.action is not None:
            base = self.action.__qualname__
            return f"{base}.{self.action_method}" if self.action_method else base
        return getattr(self.handler, "__qualname__", None) or repr(self.handler)


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    path_params: dict[str, str]
