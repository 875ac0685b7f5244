"""Compiled router with trie-based path matching.

Routes are added during setup and matched after ``compile()``. The
router keeps every added route in registration order, duplicates
included, so the route table can be inspected exactly as it was built.

When two routes claim the same method and path, the first one added
wins at match time.
"""

import re
from dataclasses import dataclass, field

from perch.errors import ConfigurationError, MethodNotAllowed, NotFound
from perch.routing.route import PathSegment, Route, RouteMatch

_ANGLE_PARAM_RE = re.compile(r"<[^>]*>")

# Segment pattern per {name:converter}; values stay strings until a
# handler annotation converts them
SEGMENT_PATTERNS: dict[str, str] = {
    "str": r"[^/]+",
    "int": r"\d+",
    "float": r"\d+(?:\.\d+)?",
    "path": r".+",
}


def parse_path(path: str) -> list[PathSegment]:
    """Parse a route path string into segments.

    Examples::

        "/users"          -> [PathSegment("users")]
        "/users/{id}"     -> [PathSegment("users"), PathSegment("{id}", is_param=True, ...)]
        "/users/{id:int}" -> [..., PathSegment("{id:int}", is_param=True, param_type="int")]
        "/files/{path:path}" -> [..., PathSegment("{path:path}", param_type="path")]

    Raises:
        ConfigurationError: For ``<param>`` syntax, unknown converters,
            or a ``path`` parameter that is not the last segment.
    """
    if _ANGLE_PARAM_RE.search(path):
        msg = (
            f"Route path {path!r} uses <param> syntax. "
            "perch path parameters are written as {param} or {param:int}."
        )
        raise ConfigurationError(msg)

    segments: list[PathSegment] = []
    parts = [part for part in path.strip("/").split("/") if part]
    for index, part in enumerate(parts):
        if not (part.startswith("{") and part.endswith("}")):
            segments.append(PathSegment(value=part))
            continue

        param_name, _, param_type = part[1:-1].partition(":")
        param_type = param_type or "str"
        if param_type not in SEGMENT_PATTERNS:
            known = ", ".join(sorted(SEGMENT_PATTERNS))
            msg = f"Unknown converter {param_type!r} in {path!r}. Known converters: {known}."
            raise ConfigurationError(msg)
        if param_type == "path" and index != len(parts) - 1:
            msg = f"A {{{param_name}:path}} parameter must be the last segment of {path!r}."
            raise ConfigurationError(msg)
        segments.append(
            PathSegment(
                value=part,
                is_param=True,
                param_name=param_name,
                param_type=param_type,
            )
        )
    return segments


@dataclass(slots=True)
class _TrieNode:
    """A node in the route trie. Mutable during setup only."""

    # Static segment children: "users" -> node
    children: dict[str, "_TrieNode"] = field(default_factory=dict)
    # Single parameter child (only one param pattern per level)
    param_child: "_ParamEdge | None" = None
    # Catch-all routes ({name:path}) keyed by method
    catch_all_name: str | None = None
    catch_all_routes: dict[str, Route] = field(default_factory=dict)
    # Routes terminating at this node, keyed by HTTP method
    routes_by_method: dict[str, Route] = field(default_factory=dict)


@dataclass(slots=True)
class _ParamEdge:
    param_name: str
    regex: re.Pattern[str]
    node: _TrieNode


class Router:
    """Compiled router with trie-based path matching.

    Usage::

        router = Router()
        router.add(Route("/users", handler, frozenset({"GET"})))
        router.add(Route("/users/{id:int}", handler, frozenset({"GET"})))
        router.compile()
        match = router.match("GET", "/users/42")
    """

    __slots__ = ("_compiled", "_root", "_routes")

    def __init__(self) -> None:
        self._root = _TrieNode()
        self._routes: list[Route] = []
        self._compiled = False

    def add(self, route: Route) -> None:
        """Add a route. Must be called before ``compile()``."""
        if self._compiled:
            msg = "Cannot add routes after compilation."
            raise RuntimeError(msg)

        segments = parse_path(route.path)
        self._routes.append(route)
        node = self._root

        for seg in segments:
            if seg.param_type == "path" and seg.is_param:
                if node.catch_all_name is None:
                    node.catch_all_name = seg.param_name or "path"
                for method in route.methods:
                    node.catch_all_routes.setdefault(method, route)
                return

            if seg.is_param:
                if node.param_child is None:
                    pattern = SEGMENT_PATTERNS[seg.param_type]
                    node.param_child = _ParamEdge(
                        param_name=seg.param_name or "",
                        regex=re.compile(f"^{pattern}$"),
                        node=_TrieNode(),
                    )
                node = node.param_child.node
            else:
                node = node.children.setdefault(seg.value, _TrieNode())

        for method in route.methods:
            node.routes_by_method.setdefault(method, route)

    @property
    def routes(self) -> list[Route]:
        """Every added route, in registration order."""
        return list(self._routes)

    def __len__(self) -> int:
        return len(self._routes)

    def compile(self) -> None:
        """Freeze the router. No more routes can be added."""
        self._compiled = True

    def match(self, method: str, path: str) -> RouteMatch:
        """Match a request method and path.

        Raises ``NotFound`` if no route matches the path.
        Raises ``MethodNotAllowed`` if the path matches but the method doesn't.
        """
        parts = [p for p in path.strip("/").split("/") if p]
        result = self._match_node(self._root, parts, 0, {})

        if result is None:
            raise NotFound(f"No route matches {method} {path!r}")

        routes_by_method, params = result
        if method in routes_by_method:
            return RouteMatch(route=routes_by_method[method], path_params=params)
        if method == "HEAD" and "GET" in routes_by_method:
            return RouteMatch(route=routes_by_method["GET"], path_params=params)

        raise MethodNotAllowed(frozenset(routes_by_method))

    def _match_node(
        self,
        node: _TrieNode,
        parts: list[str],
        index: int,
        params: dict[str, str],
    ) -> tuple[dict[str, Route], dict[str, str]] | None:
        """Recursively match path parts: static first, then param, then catch-all."""
        if index == len(parts):
            if node.routes_by_method:
                return node.routes_by_method, params
            return None

        part = parts[index]

        if part in node.children:
            result = self._match_node(node.children[part], parts, index + 1, params)
            if result is not None:
                return result

        edge = node.param_child
        if edge is not None and edge.regex.match(part):
            result = self._match_node(
                edge.node, parts, index + 1, {**params, edge.param_name: part}
            )
            if result is not None:
                return result

        if node.catch_all_name is not None:
            remaining = "/".join(parts[index:])
            return node.catch_all_routes, {**params, node.catch_all_name: remaining}

        return None
