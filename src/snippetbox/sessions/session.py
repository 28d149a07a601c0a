"""Per-request sessions and the manager that loads and saves them.

The cookie carries only an opaque token, signed with ``itsdangerous`` so
a forged or truncated value is rejected before the store is consulted.
The data itself lives in a ``SessionStore``.

Lifecycle of one request::

    session = manager.load(request)     # new and empty if no valid cookie
    ...                                  # stages and handler read/write it
    response = manager.save(request, session, response)

``save`` acts on ``session.status``:

- ``UNMODIFIED`` — nothing is written, no cookie is sent.
- ``MODIFIED`` — the data is committed under the (possibly renewed)
  token and the cookie is (re)issued.
- ``DESTROYED`` — the token is deleted from the store and the cookie is
  expired.
"""

import json
import secrets
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from itsdangerous import BadSignature, Signer

from snippetbox.errors import ConfigurationError
from snippetbox.http.request import Request
from snippetbox.http.response import Response
from snippetbox.sessions.store import SessionStore

_SIGNER_SALT = "snippetbox.session"
_TOKEN_BYTES = 32


class SessionStatus(Enum):
    """What ``SessionManager.save`` has to do with a session."""

    UNMODIFIED = "unmodified"
    MODIFIED = "modified"
    DESTROYED = "destroyed"


class Session:
    """Key-value state for one visitor, scoped to one in-flight request.

    Values must be JSON-serializable. Every write marks the session
    ``MODIFIED``; reads never do, except ``pop`` which removes the key.
    """

    __slots__ = ("_retired", "_status", "_values", "deadline", "token")

    def __init__(
        self,
        token: str | None = None,
        values: dict[str, Any] | None = None,
        deadline: float = 0.0,
    ) -> None:
        self.token = token
        self.deadline = deadline
        self._values: dict[str, Any] = dict(values or {})
        self._status = SessionStatus.UNMODIFIED
        self._retired: list[str] = []

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def retired_tokens(self) -> tuple[str, ...]:
        """Tokens given up by ``renew`` or ``destroy`` in this request."""
        return tuple(self._retired)

    # -- Reads --

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def get_int(self, key: str) -> int:
        """Return *key* as an int, ``0`` if absent or not an int."""
        value = self._values.get(key)
        return value if isinstance(value, int) and not isinstance(value, bool) else 0

    def get_str(self, key: str) -> str:
        """Return *key* as a string, ``""`` if absent or not a string."""
        value = self._values.get(key)
        return value if isinstance(value, str) else ""

    def exists(self, key: str) -> bool:
        return key in self._values

    def keys(self) -> Iterator[str]:
        return iter(sorted(self._values))

    def to_dict(self) -> dict[str, Any]:
        """Shallow copy of the stored values."""
        return dict(self._values)

    # -- Writes --

    def put(self, key: str, value: Any) -> None:
        self._values[key] = value
        self._status = SessionStatus.MODIFIED

    def pop(self, key: str, default: Any = None) -> Any:
        """Return *key* and remove it. Only a present key modifies the session."""
        if key not in self._values:
            return default
        self._status = SessionStatus.MODIFIED
        return self._values.pop(key)

    def pop_str(self, key: str) -> str:
        """Read-and-clear for string values such as flash messages."""
        value = self.pop(key)
        return value if isinstance(value, str) else ""

    def remove(self, key: str) -> None:
        if key in self._values:
            del self._values[key]
            self._status = SessionStatus.MODIFIED

    def renew(self) -> None:
        """Move the data to a fresh token.

        Called on every privilege change (login, logout) so a token
        planted before the change is worthless after it.
        """
        if self.token is not None:
            self._retired.append(self.token)
        self.token = _new_token()
        self._status = SessionStatus.MODIFIED

    def destroy(self) -> None:
        """Drop all data and the token. A later ``put`` starts a new session."""
        if self.token is not None:
            self._retired.append(self.token)
        self.token = None
        self._values.clear()
        self._status = SessionStatus.DESTROYED

    def __repr__(self) -> str:
        return f"Session(status={self._status.value}, keys={list(self.keys())!r})"


def _new_token() -> str:
    return secrets.token_urlsafe(_TOKEN_BYTES)


@dataclass(frozen=True, slots=True)
class SessionConfig:
    """Session cookie and lifetime settings.

    ``lifetime`` is absolute: a session expires that many seconds after
    it was created, however active it is.
    """

    lifetime: int = 12 * 60 * 60
    cookie_name: str = "session"
    path: str = "/"
    secure: bool = True
    httponly: bool = True
    samesite: str = "lax"


class SessionManager:
    """Loads sessions from a store and writes them back.

    Usage::

        manager = SessionManager(MemoryStore(), secret_key="...")
        session = manager.load(request)
        session.put("flash", "Saved!")
        response = manager.save(request, session, response)
    """

    __slots__ = ("_clock", "_signer", "config", "store")

    def __init__(
        self,
        store: SessionStore,
        secret_key: str,
        config: SessionConfig | None = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret_key:
            msg = "SessionManager requires a non-empty secret_key."
            raise ConfigurationError(msg)
        self.store = store
        self.config = config or SessionConfig()
        self._signer = Signer(secret_key, salt=_SIGNER_SALT)
        self._clock = clock

    def load(self, request: Request) -> Session:
        """Return the session named by the request cookie.

        A missing, tampered, unknown or expired cookie yields a new
        empty session. Store failures propagate to the caller.
        """
        now = self._clock()
        cookie = request.cookies.get(self.config.cookie_name)
        if not cookie:
            return self._new_session(now)

        try:
            token = self._signer.unsign(cookie).decode("ascii")
        except (BadSignature, UnicodeDecodeError):
            return self._new_session(now)

        payload = self.store.find(token)
        if payload is None:
            return self._new_session(now)

        deadline, values = _decode(payload)
        if now >= deadline:
            return self._new_session(now)
        return Session(token, values, deadline)

    def save(self, request: Request, session: Session, response: Response) -> Response:
        """Persist *session* according to its status and set the cookie."""
        cfg = self.config
        match session.status:
            case SessionStatus.UNMODIFIED:
                return response
            case SessionStatus.DESTROYED:
                for token in session.retired_tokens:
                    self.store.delete(token)
                return response.without_cookie(
                    cfg.cookie_name, cfg.path, secure=cfg.secure, samesite=cfg.samesite
                )
            case SessionStatus.MODIFIED:
                for token in session.retired_tokens:
                    self.store.delete(token)
                if session.token is None:
                    session.token = _new_token()
                if session.deadline <= 0:
                    session.deadline = self._clock() + cfg.lifetime
                self.store.commit(
                    session.token,
                    _encode(session.deadline, session.to_dict()),
                    session.deadline,
                )
                request.response_headers.set("Vary", "Cookie")
                max_age = max(0, int(session.deadline - self._clock()))
                return response.with_cookie(
                    cfg.cookie_name,
                    self._signer.sign(session.token).decode("ascii"),
                    max_age=max_age,
                    expires=datetime.fromtimestamp(session.deadline, UTC),
                    path=cfg.path,
                    secure=cfg.secure,
                    httponly=cfg.httponly,
                    samesite=cfg.samesite,
                )
        return response

    def _new_session(self, now: float) -> Session:
        return Session(deadline=now + self.config.lifetime)


def _encode(deadline: float, values: dict[str, Any]) -> bytes:
    return json.dumps({"deadline": deadline, "values": values}, separators=(",", ":")).encode(
        "utf-8"
    )


def _decode(payload: bytes) -> tuple[float, dict[str, Any]]:
    data = json.loads(payload)
    return float(data["deadline"]), dict(data["values"])
