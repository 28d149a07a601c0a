"""Call sync or async callables uniformly.

Terminal handlers and collaborator methods (``Users.exists``) may be
plain functions or coroutines. The check lives here so every caller
awaits the same way::

    result = await invoke(handler, request)

Collaborator calls that do real work (password hashing) go through
``invoke_blocking`` instead, which moves a plain function onto an anyio
worker thread so the event loop keeps serving other requests.
"""

import inspect
from collections.abc import Callable
from typing import Any

import anyio.to_thread


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it is awaitable."""
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


async def invoke_blocking(func: Callable[..., Any], *args: Any) -> Any:
    """Await a coroutine function directly; run anything else in a worker thread."""
    if inspect.iscoroutinefunction(func):
        return await func(*args)
    return await anyio.to_thread.run_sync(func, *args)
