"""Pipeline stages and the chain builder.

Every stage has the shape ``async (request, next) -> Response``.
"""

from snippetbox.middleware.auth import (
    AUTHENTICATED_USER_ID,
    AuthMiddleware,
    is_authenticated,
    login,
    logout,
)
from snippetbox.middleware.csrf import CSRFConfig, CSRFMiddleware
from snippetbox.middleware.guards import require_authentication, require_unauthentication
from snippetbox.middleware.protocol import Chain, Handler, Middleware, Next
from snippetbox.middleware.recover import recover_panic
from snippetbox.middleware.request_log import log_request
from snippetbox.middleware.security_headers import (
    SecurityHeadersConfig,
    SecurityHeadersMiddleware,
)
from snippetbox.middleware.sessions import SessionMiddleware, get_session

__all__ = [
    "AUTHENTICATED_USER_ID",
    "AuthMiddleware",
    "CSRFConfig",
    "CSRFMiddleware",
    "Chain",
    "Handler",
    "Middleware",
    "Next",
    "SecurityHeadersConfig",
    "SecurityHeadersMiddleware",
    "SessionMiddleware",
    "get_session",
    "is_authenticated",
    "log_request",
    "login",
    "logout",
    "recover_panic",
    "require_authentication",
    "require_unauthentication",
]
