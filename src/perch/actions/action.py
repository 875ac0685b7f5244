"""Action base class — one class per operation.

An action is a plain class with a ``handle`` method. Subclassing
``Action`` is optional: discovery only cares about the ``routes`` hook.
The base class adds construction helpers::

    class CreatePost(Action):
        def __init__(self, db: Database) -> None:
            self.db = db

        def handle(self, title: str, body: str) -> Post:
            return self.db.insert(title=title, body=body)

    # As a job or from a test
    post = CreatePost.make(db=fake_db).handle("Hello", "...")
    post = CreatePost.run("Hello", "...")  # when db has a default

Everything else (``authorize``, ``rules``, ``as_controller``,
``json_response``, ``html_response``, ``controller_middleware``) is
looked up by name when the action serves a route, and only used when
the class defines it.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping
from typing import Any, Self, TypeVar

from perch.errors import ConfigurationError

_EMPTY = inspect.Parameter.empty


class Action:
    """Base class for actions."""

    @classmethod
    def make(cls, **overrides: Any) -> Self:
        """Construct an instance, with *overrides* for constructor arguments."""
        return build_action(cls, {}, overrides)

    @classmethod
    def run(cls, *args: Any, **kwargs: Any) -> Any:
        """Construct with defaults and call ``handle()`` in one go."""
        return cls.make().handle(*args, **kwargs)


T = TypeVar("T")


def build_action(
    cls: type[T],
    providers: Mapping[type, Callable[[], Any]],
    overrides: Mapping[str, Any] | None = None,
) -> T:
    """Instantiate *cls*, filling constructor parameters.

    Each parameter comes from *overrides* by name, then from *providers*
    by annotation. Parameters with neither keep their default.

    Raises:
        ConfigurationError: A required parameter has no value.
    """
    overrides = dict(overrides or {})
    if cls.__init__ is object.__init__:
        return cls(**overrides)

    sig = inspect.signature(cls.__init__, eval_str=True)
    kwargs: dict[str, Any] = {}
    for index, (name, param) in enumerate(sig.parameters.items()):
        if index == 0 or param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue
        if name in overrides:
            kwargs[name] = overrides.pop(name)
        elif param.annotation is not _EMPTY and param.annotation in providers:
            kwargs[name] = providers[param.annotation]()
        elif param.default is _EMPTY:
            msg = (
                f"Cannot construct {cls.__qualname__}: no value for {name!r}. "
                f"Pass it to make() or register a provider for its type."
            )
            raise ConfigurationError(msg)

    # Leftovers go through unchanged; a constructor without **kwargs rejects them
    kwargs.update(overrides)
    return cls(**kwargs)
