"""Cookies in and out.

``parse_cookies`` reads the request ``Cookie`` header into a dict.
``SetCookie`` renders one ``Set-Cookie`` line; a cookie with a
non-positive ``Max-Age`` is rendered as a deletion, with an ``Expires``
date in 1970 for clients that ignore ``Max-Age``.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from email.utils import format_datetime

# Canonical attribute spelling for each SameSite mode
_SAMESITE = {"lax": "Lax", "strict": "Strict", "none": "None"}

_DELETED_EXPIRES = datetime(1970, 1, 1, 0, 0, 1, tzinfo=UTC)


def parse_cookies(header: str) -> dict[str, str]:
    """Map cookie names to values from a ``Cookie`` header.

    The first occurrence of a repeated name wins and a value wrapped in
    double quotes is unwrapped. Fragments with no ``=`` or an empty name
    are skipped.
    """
    cookies: dict[str, str] = {}
    for fragment in header.split(";"):
        name, sep, value = fragment.strip().partition("=")
        name = name.strip()
        if not sep or not name or name in cookies:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] == '"':
            value = value[1:-1]
        cookies[name] = value
    return cookies


def _http_date(moment: datetime) -> str:
    return format_datetime(moment.astimezone(UTC), usegmt=True)


@dataclass(frozen=True, slots=True)
class SetCookie:
    """One cookie the response asks the client to store or forget.

    ``expires`` is the absolute expiry sent next to ``Max-Age``.
    ``samesite`` is ``"lax"``, ``"strict"``, ``"none"`` or None to omit
    the attribute.
    """

    name: str
    value: str
    max_age: int | None = None
    expires: datetime | None = None
    path: str = "/"
    domain: str | None = None
    secure: bool = False
    httponly: bool = True
    samesite: str | None = "lax"

    def __post_init__(self) -> None:
        if self.samesite is not None and self.samesite.lower() not in _SAMESITE:
            msg = f"Invalid SameSite mode {self.samesite!r}"
            raise ValueError(msg)

    def to_header_value(self) -> str:
        """Render as a ``Set-Cookie`` header value."""
        deleting = self.max_age is not None and self.max_age <= 0
        attrs = [f"{self.name}={self.value}"]
        if self.path:
            attrs.append(f"Path={self.path}")
        if self.domain:
            attrs.append(f"Domain={self.domain}")
        expires = _DELETED_EXPIRES if deleting else self.expires
        if expires is not None:
            attrs.append(f"Expires={_http_date(expires)}")
        if self.max_age is not None:
            attrs.append(f"Max-Age={max(self.max_age, 0)}")
        if self.httponly:
            attrs.append("HttpOnly")
        if self.secure:
            attrs.append("Secure")
        if self.samesite is not None:
            attrs.append(f"SameSite={_SAMESITE[self.samesite.lower()]}")
        return "; ".join(attrs)
