"""Snippet and user storage.

Frozen dataclasses out, plain method calls in. Both models keep their
rows in memory behind a lock; they are the narrow persistence interface
the handlers and ``AuthMiddleware`` depend on, not a database layer.

Passwords are hashed with argon2id (``argon2-cffi``) and never stored
in the clear.
"""

import threading
from collections.abc import Callable
from typing import TypeAlias
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from snippetbox.errors import DuplicateEmailError, InvalidCredentialsError, NoRecordError

Clock: TypeAlias = Callable[[], datetime]

# Number of snippets shown on the home page
LATEST_LIMIT = 10


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True)
class Snippet:
    id: int
    title: str
    content: str
    created: datetime
    expires: datetime


@dataclass(frozen=True, slots=True)
class User:
    id: int
    name: str
    email: str
    hashed_password: str
    created: datetime


class SnippetModel:
    """Snippets, each visible until its expiry time."""

    __slots__ = ("_clock", "_lock", "_next_id", "_rows")

    def __init__(self, clock: Clock = _utcnow) -> None:
        self._rows: dict[int, Snippet] = {}
        self._next_id = 1
        self._lock = threading.Lock()
        self._clock = clock

    def insert(self, title: str, content: str, expires_days: int) -> int:
        """Store a new snippet and return its id."""
        now = self._clock()
        with self._lock:
            snippet_id = self._next_id
            self._next_id += 1
            self._rows[snippet_id] = Snippet(
                id=snippet_id,
                title=title,
                content=content,
                created=now,
                expires=now + timedelta(days=expires_days),
            )
        return snippet_id

    def get(self, snippet_id: int) -> Snippet:
        """Return an unexpired snippet.

        Raises:
            NoRecordError: If no such snippet exists or it has expired.
        """
        now = self._clock()
        with self._lock:
            snippet = self._rows.get(snippet_id)
        if snippet is None or snippet.expires <= now:
            raise NoRecordError(f"snippet {snippet_id}")
        return snippet

    def latest(self) -> list[Snippet]:
        """The most recently created unexpired snippets, newest first."""
        now = self._clock()
        with self._lock:
            rows = list(self._rows.values())
        live = [s for s in rows if s.expires > now]
        live.sort(key=lambda s: s.id, reverse=True)
        return live[:LATEST_LIMIT]


class UserModel:
    """User accounts keyed by id, unique by email address."""

    __slots__ = ("_by_email", "_clock", "_hasher", "_lock", "_next_id", "_rows")

    def __init__(self, hasher: PasswordHasher | None = None, clock: Clock = _utcnow) -> None:
        self._rows: dict[int, User] = {}
        self._by_email: dict[str, int] = {}
        self._next_id = 1
        self._lock = threading.Lock()
        self._hasher = hasher or PasswordHasher()
        self._clock = clock

    def insert(self, name: str, email: str, password: str) -> int:
        """Create a user and return its id.

        Raises:
            DuplicateEmailError: If *email* is already registered.
        """
        hashed = self._hasher.hash(password)
        key = email.lower()
        with self._lock:
            if key in self._by_email:
                raise DuplicateEmailError(email)
            user_id = self._next_id
            self._next_id += 1
            self._rows[user_id] = User(
                id=user_id,
                name=name,
                email=email,
                hashed_password=hashed,
                created=self._clock(),
            )
            self._by_email[key] = user_id
        return user_id

    def authenticate(self, email: str, password: str) -> int:
        """Return the id of the user with these credentials.

        Raises:
            InvalidCredentialsError: If the email is unknown or the
                password does not match.
        """
        with self._lock:
            user_id = self._by_email.get(email.lower())
            user = self._rows.get(user_id) if user_id is not None else None
        if user is None:
            raise InvalidCredentialsError(email)
        try:
            self._hasher.verify(user.hashed_password, password)
        except (VerificationError, InvalidHashError):
            raise InvalidCredentialsError(email) from None
        return user.id

    def exists(self, user_id: int) -> bool:
        with self._lock:
            return user_id in self._rows
