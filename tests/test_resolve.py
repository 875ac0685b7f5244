"""Tests for perch.resolve and perch._internal.invoke — calling user code."""

import functools
from dataclasses import dataclass

from perch._internal.invoke import invoke, is_async_callable
from perch.http.request import Request
from perch.resolve import resolve_kwargs


@dataclass
class Filters:
    status: str = "all"
    limit: int = 10


def _request(method: str = "GET", query: bytes = b"", body: bytes = b"", content_type: bytes = b"") -> Request:
    headers = [(b"content-type", content_type)] if content_type else []
    sent = False

    async def receive():
        nonlocal sent
        if sent:
            return {"type": "http.disconnect"}
        sent = True
        return {"type": "http.request", "body": body, "more_body": False}

    scope = {"type": "http", "method": method, "path": "/", "query_string": query, "headers": headers}
    return Request.from_asgi(scope, receive)


class TestResolveKwargs:
    async def test_request_by_name_and_annotation(self) -> None:
        def handler(request, req: Request):
            pass

        req = _request()
        assert await resolve_kwargs(handler, req) == {"request": req, "req": req}

    async def test_path_params_win_over_input(self) -> None:
        def handler(id: int):
            pass

        req = _request(query=b"id=1").with_path_params({"id": "7"})
        assert await resolve_kwargs(handler, req) == {"id": 7}

    async def test_extra_values(self) -> None:
        def handler(title: str):
            pass

        kwargs = await resolve_kwargs(handler, _request(query=b"title=raw"), extra={"title": "clean"})
        assert kwargs == {"title": "clean"}

    async def test_providers(self) -> None:
        class Repo:
            pass

        repo = Repo()

        def handler(repo: Repo):
            pass

        assert await resolve_kwargs(handler, _request(), {Repo: lambda: repo}) == {"repo": repo}

    async def test_dataclass_from_query(self) -> None:
        def handler(filters: Filters):
            pass

        kwargs = await resolve_kwargs(handler, _request(query=b"status=open&limit=5"))
        assert kwargs == {"filters": Filters(status="open", limit=5)}

    async def test_dataclass_from_json_body(self) -> None:
        def handler(filters: Filters):
            pass

        req = _request("POST", body=b'{"status": "closed"}', content_type=b"application/json")
        assert await resolve_kwargs(handler, req) == {"filters": Filters(status="closed")}

    async def test_missing_values_keep_defaults(self) -> None:
        def handler(page: int = 1, *args, **kwargs):
            pass

        assert await resolve_kwargs(handler, _request()) == {}


class TestInvoke:
    async def test_sync_and_async(self) -> None:
        def add(a, b):
            return a + b

        async def mul(a, b):
            return a * b

        assert await invoke(add, 2, 3) == 5
        assert await invoke(mul, 2, b=3) == 6
        assert await invoke(add, 2, 3, offload=True) == 5

    def test_is_async_callable(self) -> None:
        async def coro():
            pass

        class AsyncCallable:
            async def __call__(self):
                pass

        assert is_async_callable(coro)
        assert is_async_callable(functools.partial(coro))
        assert is_async_callable(AsyncCallable())
        assert not is_async_callable(lambda: None)
