"""Invoke helpers — call sync or async handlers uniformly.

Route handlers and action methods can be ``def`` or ``async def``. Any
code that calls user code must handle both cases, so the sync/async
check lives here and nowhere else.

Usage::

    from perch._internal.invoke import invoke

    result = await invoke(handler, *args, **kwargs)
    result = await invoke(action.handle, offload=True, **kwargs)
"""

import functools
import inspect
from typing import Any

import anyio.to_thread


def is_async_callable(obj: Any) -> bool:
    """True for coroutine functions, including partials and callable objects."""
    while isinstance(obj, functools.partial):
        obj = obj.func
    return inspect.iscoroutinefunction(obj) or (
        callable(obj) and inspect.iscoroutinefunction(getattr(obj, "__call__", None))
    )


async def invoke(handler: Any, *args: Any, offload: bool = False, **kwargs: Any) -> Any:
    """Call a handler and await the result if it's awaitable.

    With ``offload=True`` a sync handler runs in an anyio worker thread,
    so a blocking ``handle()`` does not stall the event loop.
    """
    if offload and not is_async_callable(handler):
        result = await anyio.to_thread.run_sync(functools.partial(handler, *args, **kwargs))
    else:
        result = handler(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
