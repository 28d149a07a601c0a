"""HTTP header collections.

``Headers`` — immutable, case-insensitive request headers. Implements
``Mapping[str, str]``; stores raw byte pairs from the ASGI scope and
decodes on access.

``ResponseHeaders`` — the outbound header set staged for one request.
Middleware writes to it *before* calling through, the way a handler
writes to a response header map before the body is committed. The
server merges it into whatever response the pipeline finally returns,
so staged headers survive redirects, client errors and recovered
failures alike.
"""

from collections.abc import Iterator, Mapping


class Headers(Mapping[str, str]):
    """Immutable, case-insensitive HTTP headers.

    ``__getitem__`` returns the first matching value.
    """

    __slots__ = ("_raw",)

    def __init__(self, raw: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        object.__setattr__(self, "_raw", raw)

    def __getitem__(self, key: str) -> str:
        key_lower = key.lower().encode("latin-1")
        for name, value in self._raw:
            if name.lower() == key_lower:
                return value.decode("latin-1")
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        key_lower = key.lower().encode("latin-1")
        return any(name.lower() == key_lower for name, _ in self._raw)

    def __iter__(self) -> Iterator[str]:
        seen: set[str] = set()
        for name, _ in self._raw:
            key = name.decode("latin-1").lower()
            if key not in seen:
                seen.add(key)
                yield key

    def __len__(self) -> int:
        return len(set(self))

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"Headers({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        try:
            return self[key]
        except KeyError:
            return default


class ResponseHeaders:
    """Mutable, case-insensitive outbound headers for one in-flight request.

    Owned by exactly one request; never shared across requests.
    ``set`` replaces every existing value for the name.
    """

    __slots__ = ("_items",)

    def __init__(self) -> None:
        self._items: list[tuple[str, str]] = []

    def set(self, name: str, value: str) -> None:
        """Replace all values of *name* with *value*."""
        self.delete(name)
        self._items.append((name, value))

    def delete(self, name: str) -> None:
        """Remove every value of *name*."""
        lower = name.lower()
        self._items = [(n, v) for n, v in self._items if n.lower() != lower]

    def get(self, name: str, default: str | None = None) -> str | None:
        """Return the first value for *name*, or *default*."""
        lower = name.lower()
        for n, v in self._items:
            if n.lower() == lower:
                return v
        return default

    def items(self) -> tuple[tuple[str, str], ...]:
        """Snapshot of all staged ``(name, value)`` pairs."""
        return tuple(self._items)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        return self.get(name) is not None

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        return f"ResponseHeaders({self._items!r})"
