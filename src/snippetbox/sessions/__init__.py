"""Server-side sessions keyed by an opaque, signed cookie token.

``SessionStore`` — where session data lives between requests
    (``MemoryStore`` is the built-in, lock-guarded implementation).
``SessionManager`` — loads a ``Session`` for a request and writes it
    back, together with the cookie, once the request is done.
``Session`` — the per-request key-value bag handed to middleware and
    handlers through ``request.context.session``.
"""

from snippetbox.sessions.session import (
    Session,
    SessionConfig,
    SessionManager,
    SessionStatus,
)
from snippetbox.sessions.store import MemoryStore, SessionStore

__all__ = [
    "MemoryStore",
    "Session",
    "SessionConfig",
    "SessionManager",
    "SessionStatus",
    "SessionStore",
]
