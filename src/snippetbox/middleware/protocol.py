"""Middleware protocol, Next type alias and the Chain builder.

A middleware is any callable matching::

    async def my_mw(request: Request, next: Next) -> Response: ...

No base class required. A stage may call ``next`` unchanged, call it
with a derived request (``request.with_context(...)``), rewrite the
response it gets back, or return a response of its own without calling
``next`` at all.

``Chain`` composes stages around a terminal handler::

    standard = Chain(recover_panic, log_request, SecurityHeadersMiddleware())
    dynamic = Chain(SessionMiddleware(manager), CSRFMiddleware(), AuthMiddleware(users))
    protected = dynamic.append(require_authentication)

    handler = protected.then_func(handlers.snippet_create)

Folding happens once, in ``then``; a request only walks already-built
closures.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeAlias

from snippetbox._internal.invoke import invoke
from snippetbox.errors import HTTPError
from snippetbox.http.request import Request
from snippetbox.http.response import Response

# The next handler in the middleware chain
Next: TypeAlias = Callable[[Request], Awaitable[Response]]

# A fully-built request handler: the terminal wrapped by zero or more stages
Handler: TypeAlias = Callable[[Request], Awaitable[Response]]


class Middleware(Protocol):
    """Protocol for pipeline stages.

    Accepts both functions and callable objects::

        # Function middleware
        async def timing(request: Request, next: Next) -> Response:
            start = time.monotonic()
            response = await next(request)
            elapsed = time.monotonic() - start
            return response.with_header("X-Time", f"{elapsed:.3f}")

        # Class middleware
        class Gate:
            async def __call__(self, request: Request, next: Next) -> Response:
                ...
    """

    async def __call__(self, request: Request, next: Next) -> Response: ...


class Chain:
    """An immutable, ordered sequence of middleware stages.

    ``Chain(a, b).then(h)`` behaves as ``a -> b -> h``. ``append``
    returns a new chain, so a base chain can be extended per route
    without affecting other routes that share it.
    """

    __slots__ = ("_stages",)

    def __init__(self, *stages: Middleware) -> None:
        self._stages: tuple[Middleware, ...] = stages

    def append(self, *stages: Middleware) -> Chain:
        """Return a new chain with *stages* after the existing ones."""
        return Chain(*self._stages, *stages)

    def then(self, handler: Handler) -> Handler:
        """Wrap *handler* in every stage, first stage outermost."""
        wrapped = handler
        for stage in reversed(self._stages):
            wrapped = _bind(stage, wrapped)
        return wrapped

    def then_func(self, func: Callable[..., Any]) -> Handler:
        """Wrap a terminal handler function.

        *func* takes the request and may be sync or async. Its return
        value is converted with ``negotiate``; an ``HTTPError`` it raises
        becomes the matching client-error response here, so every stage
        of the chain still sees a normal response on the way out.
        """
        return self.then(_terminal(func))

    def __repr__(self) -> str:
        names = ", ".join(getattr(s, "__name__", type(s).__name__) for s in self._stages)
        return f"Chain({names})"


def _bind(stage: Middleware, next: Handler) -> Handler:
    async def call(request: Request) -> Response:
        return await stage(request, next)

    return call


def _terminal(func: Callable[..., Any]) -> Handler:
    from snippetbox.server.errors import http_error_response
    from snippetbox.server.negotiation import negotiate

    async def call(request: Request) -> Response:
        try:
            result = await invoke(func, request)
        except HTTPError as exc:
            return http_error_response(exc, request)
        return negotiate(result)

    call.__name__ = getattr(func, "__name__", "handler")
    return call
