"""Authentication middleware — session-backed identity check.

Reads ``authenticatedUserId`` from the session and asks the user
collaborator whether that identity still exists:

- no id (or ``0``)       -> call through unauthenticated
- ``exists`` raises      -> 500, the handler is not called
- ``exists`` is False    -> call through unauthenticated; the stale id
                            stays in the session
- ``exists`` is True     -> call through with
                            ``request.context.is_authenticated`` set

Usage::

    dynamic = Chain(SessionMiddleware(manager), CSRFMiddleware(), AuthMiddleware(users))

    # Login/logout, from a terminal handler:
    login(request, user_id)
    logout(request)
"""

from typing import Protocol

from snippetbox._internal.invoke import invoke
from snippetbox.http.request import Request
from snippetbox.http.response import Response
from snippetbox.middleware.protocol import Next
from snippetbox.middleware.sessions import get_session
from snippetbox.server.errors import server_error

AUTHENTICATED_USER_ID = "authenticatedUserId"


class UserExistence(Protocol):
    """The one question the middleware asks about users.

    ``exists`` may be a plain method or a coroutine.
    """

    def exists(self, user_id: int) -> bool: ...


class AuthMiddleware:
    """Propagate authentication state into the request context."""

    __slots__ = ("users",)

    def __init__(self, users: UserExistence) -> None:
        self.users = users

    async def __call__(self, request: Request, next: Next) -> Response:
        user_id = get_session(request).get_int(AUTHENTICATED_USER_ID)
        if user_id == 0:
            return await next(request)

        try:
            exists = await invoke(self.users.exists, user_id)
        except Exception as exc:
            return server_error(exc, request)

        if exists:
            request = request.with_context(is_authenticated=True)
        return await next(request)


# ---------------------------------------------------------------------------
# Login / Logout helpers
# ---------------------------------------------------------------------------


def is_authenticated(request: Request) -> bool:
    """True if the authentication stage confirmed the visitor's identity."""
    return request.context.is_authenticated


def login(request: Request, user_id: int) -> None:
    """Rotate the session token, then record *user_id* in the session.

    Renewing first means a session token planted before login never
    carries the authenticated identity.
    """
    session = get_session(request)
    session.renew()
    session.put(AUTHENTICATED_USER_ID, user_id)


def logout(request: Request) -> None:
    """Rotate the session token and drop the user id.

    Other session values (the CSRF secret, a pending flash) survive.
    """
    session = get_session(request)
    session.renew()
    session.remove(AUTHENTICATED_USER_ID)
