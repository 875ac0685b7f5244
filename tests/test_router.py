"""Tests for perch.routing.router — compiled trie-based router."""

import pytest

from perch.errors import ConfigurationError, MethodNotAllowed, NotFound
from perch.routing.route import Route
from perch.routing.router import Router, parse_path


def _handler() -> str:
    return "ok"


def _other() -> str:
    return "other"


def _route(path: str, methods: frozenset[str] | None = None, handler=_handler) -> Route:
    return Route(path=path, handler=handler, methods=methods or frozenset({"GET"}))


def _router(*routes: Route) -> Router:
    r = Router()
    for route in routes:
        r.add(route)
    r.compile()
    return r


class TestParsePath:
    def test_static(self) -> None:
        segments = parse_path("/api/v2/users")
        assert [s.value for s in segments] == ["api", "v2", "users"]
        assert not any(s.is_param for s in segments)

    def test_typed_param(self) -> None:
        segments = parse_path("/users/{id:int}")
        assert segments[1].is_param is True
        assert segments[1].param_name == "id"
        assert segments[1].param_type == "int"

    def test_root(self) -> None:
        assert parse_path("/") == []

    def test_rejects_angle_bracket_param(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            parse_path("/share/<slug>")
        assert "{param}" in str(exc_info.value)

    def test_rejects_unknown_converter(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown converter 'uuid'"):
            parse_path("/items/{id:uuid}")

    def test_path_param_must_be_last(self) -> None:
        with pytest.raises(ConfigurationError, match="last segment"):
            parse_path("/files/{rest:path}/edit")


class TestMatching:
    def test_static_and_param(self) -> None:
        r = _router(_route("/users"), _route("/users/{id:int}"))

        assert r.match("GET", "/users").path_params == {}
        assert r.match("GET", "/users/42").path_params == {"id": "42"}

    def test_static_beats_param(self) -> None:
        r = _router(_route("/users/{name}", handler=_other), _route("/users/me"))
        assert r.match("GET", "/users/me").route.handler is _handler
        assert r.match("GET", "/users/ada").route.handler is _other

    def test_int_converter_rejects_text(self) -> None:
        r = _router(_route("/users/{id:int}"))
        with pytest.raises(NotFound):
            r.match("GET", "/users/ada")

    def test_float_segment_stays_text(self) -> None:
        r = _router(_route("/prices/{amount:float}"))
        assert r.match("GET", "/prices/9.99").path_params == {"amount": "9.99"}
        with pytest.raises(NotFound):
            r.match("GET", "/prices/cheap")

    def test_catch_all(self) -> None:
        r = _router(_route("/files/{rest:path}"))
        assert r.match("GET", "/files/a/b/c.txt").path_params == {"rest": "a/b/c.txt"}

    def test_method_not_allowed_lists_methods(self) -> None:
        r = _router(_route("/posts", frozenset({"GET", "POST"})))
        with pytest.raises(MethodNotAllowed) as exc_info:
            r.match("DELETE", "/posts")
        assert dict(exc_info.value.headers)["Allow"] == "GET, POST"

    def test_head_falls_back_to_get(self) -> None:
        r = _router(_route("/"))
        assert r.match("HEAD", "/").route.handler is _handler

    def test_trailing_slash_is_ignored(self) -> None:
        r = _router(_route("/users"))
        assert r.match("GET", "/users/").route.path == "/users"


class TestRegistrationOrder:
    def test_routes_keep_registration_order(self) -> None:
        routes = [_route("/b"), _route("/a"), _route("/c/{x}")]
        r = _router(*routes)
        assert [route.path for route in r.routes] == ["/b", "/a", "/c/{x}"]
        assert len(r) == 3

    def test_duplicates_are_kept_and_first_wins(self) -> None:
        first = _route("/dup", handler=_handler)
        second = _route("/dup", handler=_other)
        r = _router(first, second)

        assert r.routes == [first, second]
        assert r.match("GET", "/dup").route is first

    def test_no_routes_after_compile(self) -> None:
        r = _router()
        with pytest.raises(RuntimeError):
            r.add(_route("/late"))


class TestRouteHandlerName:
    def test_function(self) -> None:
        assert _route("/").handler_name == "_handler"

    def test_action(self) -> None:
        class ShowPost:
            pass

        route = Route("/p", _handler, frozenset({"GET"}), action=ShowPost)
        assert route.handler_name.endswith("ShowPost")

    def test_action_method(self) -> None:
        class Posts:
            pass

        route = Route("/p", _handler, frozenset({"GET"}), action=Posts, action_method="store")
        assert route.handler_name.endswith("Posts.store")
