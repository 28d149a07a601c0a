"""Request-scoped state threaded through the pipeline.

``RequestContext`` is immutable. A middleware that learns something
about the request (its session, its CSRF token, whether the visitor is
authenticated) does not write it anywhere global; it calls
``request.with_context(...)`` and passes the *new* request to ``next``.
Only stages downstream of it ever see the change.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from snippetbox.sessions.session import Session


@dataclass(frozen=True, slots=True)
class RequestContext:
    """What the middleware stages have established about a request.

    Attributes:
        session: The loaded session. Set by the session stage; ``None``
            on routes outside the dynamic chain.
        csrf_token: Masked CSRF token for embedding in forms. Set by the
            CSRF stage.
        is_authenticated: True only once the authentication stage has
            confirmed the session's user still exists.
    """

    session: Session | None = None
    csrf_token: str | None = None
    is_authenticated: bool = False
