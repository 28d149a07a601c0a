"""CSRF protection middleware — token-based, session-backed.

Every session-aware request gets a per-session secret (generated on
first use and stored in the session). Forms embed a *masked* copy of
it: a fresh one-time pad XORed with the secret, so the token in the
page changes on every render while the secret stays put. That keeps
the token from being recovered by compression side-channels.

On unsafe methods (anything but GET, HEAD, OPTIONS, TRACE) the
submitted token, from the ``X-CSRF-Token`` header or the ``csrf_token``
form field, is unmasked and compared in constant time. Both masked and
raw tokens are accepted. A missing or wrong token is answered with 400
and the handler is not called.

Requires ``SessionMiddleware`` earlier in the chain. A session's secret
never validates against another session, since the secret only exists
inside the session it was issued to.

Templates::

    <form method="post">
        <input type="hidden" name="csrf_token" value="{{ csrf_token }}">
        ...
    </form>
"""

import base64
import binascii
import logging
import secrets
from dataclasses import dataclass

from snippetbox.errors import BadRequest
from snippetbox.http.request import Request
from snippetbox.http.response import Response
from snippetbox.log import SERVER_LOGGER
from snippetbox.middleware.protocol import Next
from snippetbox.middleware.sessions import get_session
from snippetbox.server.errors import client_error

logger = logging.getLogger(SERVER_LOGGER)

# Methods that never need a token
_SAFE_METHODS: frozenset[str] = frozenset({"GET", "HEAD", "OPTIONS", "TRACE"})


# -- Configuration --


@dataclass(frozen=True, slots=True)
class CSRFConfig:
    """CSRF middleware configuration.

    Attributes:
        field_name: Form field name for the token.
        header_name: HTTP header name for scripted requests.
        session_key: Key used to store the secret in the session.
        token_length: Length of the random secret in bytes.
    """

    field_name: str = "csrf_token"
    header_name: str = "X-CSRF-Token"
    session_key: str = "csrf_secret"
    token_length: int = 32


# -- Token masking --


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii")


def _b64decode(value: str) -> bytes | None:
    try:
        return base64.urlsafe_b64decode(value.encode("ascii"))
    except (binascii.Error, ValueError, UnicodeEncodeError):
        return None


def _xor(a: bytes, b: bytes) -> bytes:
    return bytes(x ^ y for x, y in zip(a, b, strict=True))


def mask_token(secret: bytes) -> str:
    """Return ``base64(pad || pad XOR secret)`` for a fresh random pad."""
    pad = secrets.token_bytes(len(secret))
    return _b64encode(pad + _xor(pad, secret))


def unmask_token(token: str, length: int) -> bytes | None:
    """Recover the secret from a masked or raw token, ``None`` if malformed."""
    raw = _b64decode(token)
    if raw is None:
        return None
    if len(raw) == length:
        return raw
    if len(raw) == 2 * length:
        return _xor(raw[:length], raw[length:])
    return None


def verify_token(secret: bytes, submitted: str | None) -> bool:
    """Constant-time check of *submitted* against the session *secret*."""
    if not submitted:
        return False
    candidate = unmask_token(submitted, len(secret))
    if candidate is None:
        return False
    return secrets.compare_digest(candidate, secret)


# -- Middleware --


class CSRFMiddleware:
    """Token-based CSRF protection middleware.

    On every request:
    1. Loads or generates the CSRF secret in the session.
    2. Exposes a masked token as ``request.context.csrf_token``.
    3. On unsafe methods, validates the submitted token.
    4. Rejects with 400 if the token is missing or invalid.
    """

    __slots__ = ("_config",)

    def __init__(self, config: CSRFConfig | None = None) -> None:
        self._config = config or CSRFConfig()

    async def __call__(self, request: Request, next: Next) -> Response:
        cfg = self._config
        session = get_session(request)

        secret = _load_secret(session.get_str(cfg.session_key), cfg.token_length)
        if secret is None:
            secret = secrets.token_bytes(cfg.token_length)
            session.put(cfg.session_key, _b64encode(secret))

        request.response_headers.set("Vary", "Cookie")

        if request.method not in _SAFE_METHODS:
            try:
                submitted = await self._submitted_token(request)
            except BadRequest:
                submitted = None
            if not verify_token(secret, submitted):
                logger.debug("CSRF check failed: %s %s", request.method, request.path)
                return client_error(400)

        return await next(request.with_context(csrf_token=mask_token(secret)))

    async def _submitted_token(self, request: Request) -> str | None:
        """Read the token from the header, falling back to the form body."""
        submitted = request.headers.get(self._config.header_name)
        if submitted:
            return submitted
        form = await request.form()
        return form.get(self._config.field_name)


def _load_secret(stored: str, length: int) -> bytes | None:
    if not stored:
        return None
    raw = _b64decode(stored)
    if raw is None or len(raw) != length:
        return None
    return raw
