"""Session middleware — load on the way in, save on the way out.

The loaded ``Session`` is exposed as ``request.context.session``. It is
saved after ``next`` returns, whatever kind of response that is
(handler output, a CSRF rejection, a guard redirect), so a flash set
before a redirect is never lost.

A store failure during load or save is a server error: it is logged and
answered with a 500.
"""

import logging

from snippetbox.http.request import Request
from snippetbox.http.response import Response
from snippetbox.log import SERVER_LOGGER
from snippetbox.middleware.protocol import Next
from snippetbox.server.errors import server_error
from snippetbox.sessions.session import Session, SessionManager

logger = logging.getLogger(SERVER_LOGGER)


def get_session(request: Request) -> Session:
    """Return the request's session.

    Raises ``LookupError`` on requests that did not pass through
    ``SessionMiddleware``.
    """
    session = request.context.session
    if session is None:
        msg = (
            "No active session. Ensure the route is wrapped in a chain "
            "that starts with SessionMiddleware."
        )
        raise LookupError(msg)
    return session


class SessionMiddleware:
    """Bind a ``SessionManager`` into the pipeline.

    Usage::

        manager = SessionManager(MemoryStore(), secret_key="...")
        dynamic = Chain(SessionMiddleware(manager), CSRFMiddleware(), ...)
    """

    __slots__ = ("manager",)

    def __init__(self, manager: SessionManager) -> None:
        self.manager = manager

    async def __call__(self, request: Request, next: Next) -> Response:
        try:
            session = self.manager.load(request)
        except Exception as exc:
            return server_error(exc, request)

        response = await next(request.with_context(session=session))

        try:
            return self.manager.save(request, session, response)
        except Exception as exc:
            return server_error(exc, request)
