"""Session stores.

A store maps an opaque token to an encoded session payload and an
absolute expiry time. It is the only state shared between concurrent
requests, so implementations must be safe to call from many workers at
once. Each call is atomic; callers never hold a store-level lock across
calls.
"""

import threading
import time
from collections.abc import Callable
from typing import Protocol


class SessionStore(Protocol):
    """Persistence capability used by ``SessionManager``."""

    def find(self, token: str) -> bytes | None:
        """Return the payload for *token*, or ``None`` if unknown or expired."""
        ...

    def commit(self, token: str, payload: bytes, expiry: float) -> None:
        """Insert or replace *token* with *payload*, valid until *expiry*."""
        ...

    def delete(self, token: str) -> None:
        """Forget *token*. Unknown tokens are ignored."""
        ...


class MemoryStore:
    """In-process session store guarded by a single lock.

    Payloads are stored as bytes, so a request mutating its ``Session``
    never touches what other requests read until ``commit``.
    Expired entries are dropped lazily on ``find`` and in bulk by
    ``cleanup``.
    """

    __slots__ = ("_clock", "_items", "_lock")

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._items: dict[str, tuple[bytes, float]] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def find(self, token: str) -> bytes | None:
        with self._lock:
            item = self._items.get(token)
            if item is None:
                return None
            payload, expiry = item
            if self._clock() >= expiry:
                del self._items[token]
                return None
            return payload

    def commit(self, token: str, payload: bytes, expiry: float) -> None:
        with self._lock:
            self._items[token] = (payload, expiry)

    def delete(self, token: str) -> None:
        with self._lock:
            self._items.pop(token, None)

    def cleanup(self) -> int:
        """Drop every expired entry; return how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [token for token, (_, expiry) in self._items.items() if now >= expiry]
            for token in expired:
                del self._items[token]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
