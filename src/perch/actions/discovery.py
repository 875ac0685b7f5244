"""Filesystem action discovery and route registration.

Walks one or more directory trees, imports every Python source file,
and lets each action class that declares a ``routes`` hook register its
own routes::

    # actions/posts/show_post.py
    class ShowPost(Action):
        @staticmethod
        def routes(router):
            router.get("/posts/{post_id:int}", ShowPost)

        def handle(self, post_id: int) -> dict: ...

    register_routes(router, ["actions"])

Traversal is depth-first and lexical within a directory; roots are
walked in the order given. Hidden and ``_``-prefixed entries
(``__init__.py``, ``_helpers.py``, ``__pycache__``) are not scanned.

Files that fail to import, including scripts that call ``sys.exit()``
at import time, are skipped: an actions directory may hold helpers and
half-finished code. ``KeyboardInterrupt`` still stops the run. A hook
that raises is a startup error and propagates.

Modules are registered in ``sys.modules`` under a name derived from
their resolved path, so a second run reuses the same class objects
instead of executing the files again. Running the registrar twice does
call every hook twice; route registration is not idempotent.
"""

from __future__ import annotations

import hashlib
import importlib.util
import inspect
import logging
import os
import sys
from collections.abc import Iterable, Iterator
from pathlib import Path
from types import ModuleType
from typing import Any, TypeAlias, TypeGuard

from perch.actions.types import ROUTES_HOOK, ActionReference, DiscoveredAction, RouteProvider
from perch.config import DEFAULT_ACTIONS_DIR

logger = logging.getLogger("perch.actions")

RootsArg: TypeAlias = str | os.PathLike[str] | Iterable[str | os.PathLike[str]] | None


def register_routes(
    router: Any,
    roots: RootsArg = None,
    *,
    default_root: str | os.PathLike[str] = DEFAULT_ACTIONS_DIR,
) -> list[ActionReference]:
    """Invoke the ``routes`` hook of every action class under *roots*.

    Args:
        router: Router handle passed to each hook (an ``ActionRouter``
            when called through ``App.register_actions``).
        roots: A directory or an ordered sequence of directories. When
            ``None``, *default_root* is scanned.
        default_root: Directory used when *roots* is omitted.

    Returns:
        References of the classes whose hook ran, in invocation order.

    Raises:
        Exception: Whatever a hook raises, unchanged, with a note naming
            the class and file. Classes later in traversal order are not
            processed.
    """
    invoked: list[ActionReference] = []
    for found in iter_actions(roots, default_root=default_root):
        provider = found.cls
        if not declares_routes(provider):
            continue
        try:
            provider.routes(router)
        except Exception as exc:
            _add_note(exc, f"raised while registering routes for {found.reference}")
            raise
        logger.debug("Registered routes for %s", found.reference.name)
        invoked.append(found.reference)
    return invoked


def iter_actions(
    roots: RootsArg = None,
    *,
    default_root: str | os.PathLike[str] = DEFAULT_ACTIONS_DIR,
) -> Iterator[DiscoveredAction]:
    """Yield every concrete class defined in the source files under *roots*.

    Each source file is visited at most once per call, even when roots
    overlap. Classes come out in traversal order, then definition order
    within a file.
    """
    seen_files: set[Path] = set()
    for root, explicit in _normalize_roots(roots, default_root):
        if not root.is_dir():
            log = logger.warning if explicit else logger.debug
            log("Action directory not found: %s", root)
            continue
        for path in iter_source_files(root):
            path = path.resolve()
            if path in seen_files:
                continue
            seen_files.add(path)
            module = load_module(path)
            if module is None:
                continue
            for cls in _defined_classes(module):
                yield DiscoveredAction(
                    reference=ActionReference(
                        module_name=module.__name__,
                        qualname=cls.__qualname__,
                        source=path,
                    ),
                    cls=cls,
                    has_routes=declares_routes(cls),
                )


def iter_source_files(directory: Path) -> Iterator[Path]:
    """Depth-first walk yielding ``.py`` files, lexical within each directory."""
    for item in sorted(directory.iterdir(), key=lambda p: p.name):
        if item.name.startswith((".", "_")):
            continue
        if item.is_dir():
            yield from iter_source_files(item)
        elif item.is_file() and item.suffix == ".py":
            yield item


def load_module(path: Path) -> ModuleType | None:
    """Import *path* as a module, or return ``None`` if it fails to load."""
    module_name = _module_name(path)
    existing = sys.modules.get(module_name)
    if existing is not None and getattr(existing, "__file__", None) == str(path):
        return existing

    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        return None

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except (Exception, SystemExit):
        # SystemExit: stray scripts calling sys.exit() or parse_args() at import
        del sys.modules[module_name]
        logger.debug("Skipping %s: failed to import", path, exc_info=True)
        return None
    return module


def declares_routes(cls: type) -> TypeGuard[type[RouteProvider]]:
    """True if *cls* itself (not a base class) declares a callable ``routes``."""
    return ROUTES_HOOK in vars(cls) and callable(getattr(cls, ROUTES_HOOK))


def _defined_classes(module: ModuleType) -> Iterator[type]:
    """Concrete classes defined in *module*, skipping imported ones."""
    seen: set[int] = set()
    for obj in list(vars(module).values()):
        if not isinstance(obj, type) or id(obj) in seen:
            continue
        if obj.__module__ != module.__name__ or inspect.isabstract(obj):
            continue
        seen.add(id(obj))
        yield obj


def _normalize_roots(
    roots: RootsArg,
    default_root: str | os.PathLike[str],
) -> list[tuple[Path, bool]]:
    """Resolve roots to unique absolute paths, keeping first-seen order."""
    if roots is None:
        candidates: list[tuple[str | os.PathLike[str], bool]] = [(default_root, False)]
    elif isinstance(roots, (str, os.PathLike)):
        candidates = [(roots, True)]
    else:
        candidates = [(root, True) for root in roots]

    result: list[tuple[Path, bool]] = []
    seen: set[Path] = set()
    for root, explicit in candidates:
        path = Path(root).resolve()
        if path not in seen:
            seen.add(path)
            result.append((path, explicit))
    return result


def _add_note(exc: BaseException, note: str) -> None:
    try:
        exc.add_note(note)
    except (AttributeError, TypeError):
        # Frozen dataclass exceptions (HTTPError) reject setattr; write the
        # instance dict directly, as their own __init__ does
        object.__setattr__(exc, "__notes__", [*getattr(exc, "__notes__", ()), note])


def _module_name(path: Path) -> str:
    digest = hashlib.sha1(str(path).encode("utf-8"), usedforsecurity=False).hexdigest()[:12]
    stem = "".join(ch if ch.isalnum() else "_" for ch in path.stem)
    return f"_perch_action_{stem}_{digest}"
