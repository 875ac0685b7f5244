"""Immutable HTTP request.

Frozen metadata with async body access. The request is honest about
what it is: received data that doesn't change.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator
from dataclasses import dataclass, field, replace
from typing import Any

from perch._internal.asgi import Receive
from perch.errors import HTTPError
from perch.http.headers import Headers
from perch.http.query import QueryParams

_FORM_TYPE = "application/x-www-form-urlencoded"


def parse_accept(value: str) -> tuple[str, ...]:
    """Parse an ``Accept`` header into media types, best quality first.

    Types with equal quality keep their header order. Parameters other
    than ``q`` are dropped, and ``q=0`` entries are excluded.
    """
    weighted: list[tuple[float, int, str]] = []
    for index, part in enumerate(value.split(",")):
        media_type, *params = (piece.strip() for piece in part.split(";"))
        if not media_type:
            continue
        quality = 1.0
        for param in params:
            name, _, raw = param.partition("=")
            if name.strip().lower() == "q":
                try:
                    quality = float(raw)
                except ValueError:
                    quality = 0.0
        if quality > 0:
            weighted.append((-quality, index, media_type.lower()))
    return tuple(media_type for _, _, media_type in sorted(weighted))


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, etc.) is frozen at creation.
    Body is accessed asynchronously via ``.body()``, ``.json()``, ``.form()``.
    """

    method: str
    path: str
    headers: Headers
    query: QueryParams
    path_params: dict[str, str]
    http_version: str
    server: tuple[str, int] | None
    client: tuple[str, int] | None

    # Private: ASGI receive callable for body streaming
    _receive: Receive

    # Private: mutable cache for body and parsed data
    # (dict contents are mutable even though the field reference is frozen)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        return self.headers.get("content-type")

    @property
    def content_length(self) -> int | None:
        value = self.headers.get("content-length")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None

    @property
    def url(self) -> str:
        """Full request URL (path + query string)."""
        qs = self.query.raw
        if qs:
            return f"{self.path}?{qs.decode('latin-1')}"
        return self.path

    @property
    def accepted_types(self) -> tuple[str, ...]:
        """Media types from the ``Accept`` header, best quality first."""
        if "_accept" not in self._cache:
            self._cache["_accept"] = parse_accept(self.headers.get("accept", ""))
        return self._cache["_accept"]

    @property
    def wants_json(self) -> bool:
        """True when the client's preferred media type is JSON.

        Checks the first acceptable type for ``/json`` or ``+json``, so
        ``application/json`` and ``application/vnd.api+json`` both count
        while a browser's ``text/html, */*`` does not.
        """
        accepted = self.accepted_types
        if not accepted:
            return False
        first = accepted[0]
        return first.endswith("/json") or first.endswith("+json")

    # -- Async body access --

    async def body(self) -> bytes:
        """Read the full request body.

        Result is cached — the ASGI receive is consumed once, then
        the same bytes are returned on subsequent calls.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        chunks = [chunk async for chunk in self.stream()]
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes, None]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def json(self) -> Any:
        raw = await self.body()
        return json_module.loads(raw)

    async def text(self) -> str:
        raw = await self.body()
        return raw.decode("utf-8")

    async def form(self) -> QueryParams:
        """Parse an ``application/x-www-form-urlencoded`` body.

        Raises:
            HTTPError: 415 for any other content type (multipart
                uploads are not supported).
        """
        if "_form" in self._cache:
            return self._cache["_form"]

        content_type = (self.content_type or _FORM_TYPE).split(";")[0].strip().lower()
        if content_type != _FORM_TYPE:
            raise HTTPError(status=415, detail=f"Unsupported form encoding: {content_type}")

        result = QueryParams(await self.body(), encoding="utf-8")
        self._cache["_form"] = result
        return result

    async def input(self) -> dict[str, Any]:
        """All request input merged into one dict.

        Query parameters, then the body (JSON object or URL-encoded
        form, GET/HEAD excluded), then path parameters. Later sources
        win on key collisions.
        """
        if "_input" in self._cache:
            return {**self._cache["_input"], **self.path_params}

        data: dict[str, Any] = dict(self.query)
        if self.method not in ("GET", "HEAD"):
            content_type = (self.content_type or "").lower()
            if "json" in content_type:
                try:
                    payload = await self.json()
                except ValueError as exc:
                    raise HTTPError(status=400, detail="Malformed JSON body") from exc
                if isinstance(payload, dict):
                    data.update(payload)
            elif content_type.startswith(_FORM_TYPE):
                data.update(await self.form())
        # Path params are merged per call; middleware may read input before matching
        self._cache["_input"] = data
        return {**data, **self.path_params}

    # -- Factory --

    def with_path_params(self, path_params: dict[str, str]) -> Request:
        """Return a copy carrying matched path params.

        The body cache is shared, so data read by middleware is not lost.
        """
        return replace(self, path_params=path_params)

    @classmethod
    def from_asgi(
        cls,
        scope: dict[str, Any],
        receive: Receive,
        path_params: dict[str, str] | None = None,
    ) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query=QueryParams(scope.get("query_string", b"")),
            path_params=path_params or {},
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            _receive=receive,
        )
