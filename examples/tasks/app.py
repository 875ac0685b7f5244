"""Tasks — a small task tracker built from self-registering actions.

Every file under ``actions/`` holds one action. Each action that declares
a static ``routes`` hook registers its own routes when the app calls
``register_actions()``; nothing is listed here.

Demonstrates: directory discovery, provider injection into action
constructors, ``rules()`` validation, ``authorize()``, named controller
middleware, and JSON/HTML responses from the same action.

Inspect the route table:
    cd examples/tasks && perch routes app

Serve with any ASGI server pointed at ``app:app``.
"""

import time
from pathlib import Path

from taskstore import TaskStore

from perch import App, AppConfig, Request, Response
from perch.middleware import Next

app = App(AppConfig(actions_dir=Path(__file__).parent / "actions"))

store = TaskStore()
app.provide(TaskStore, lambda: store)

API_KEY = "let-me-in"


async def timing(request: Request, next: Next) -> Response:
    start = time.perf_counter()
    response = await next(request)
    return response.with_header("X-Response-Time", f"{time.perf_counter() - start:.4f}s")


async def require_api_key(request: Request, next: Next) -> Response:
    if request.headers.get("x-api-key") != API_KEY:
        return Response("Missing or invalid API key", status=401, content_type="text/plain")
    return await next(request)


app.add_middleware(timing)
app.middleware_alias("api_key", require_api_key)

app.register_actions()
