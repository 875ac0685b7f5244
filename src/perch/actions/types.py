"""Data models for action discovery.

Immutable records describing what the registrar found on disk. Built
during traversal and discarded once the route hook has run.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

# Name of the static hook an action declares to register its own routes
ROUTES_HOOK = "routes"


@runtime_checkable
class RouteProvider(Protocol):
    """A class that registers its own routes.

    Declare the hook as a ``staticmethod`` (or ``classmethod``)::

        class ShowPost(Action):
            @staticmethod
            def routes(router: ActionRouter) -> None:
                router.get("/posts/{post_id:int}", ShowPost)
    """

    @staticmethod
    def routes(router: Any) -> None: ...


@dataclass(frozen=True, slots=True)
class ActionReference:
    """Identifies a discovered action class.

    Attributes:
        module_name: Name the source file was imported under.
        qualname: The class's qualified name within that module.
        source: Resolved path of the source file.
    """

    module_name: str
    qualname: str
    source: Path

    @property
    def name(self) -> str:
        return f"{self.module_name}.{self.qualname}"

    def __str__(self) -> str:
        return f"{self.qualname} ({self.source})"


@dataclass(frozen=True, slots=True)
class DiscoveredAction:
    """A class found during traversal, with whether it declares ``routes``."""

    reference: ActionReference
    cls: type
    has_routes: bool
