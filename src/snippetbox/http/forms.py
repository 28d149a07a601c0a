"""Form data parsing and dataclass binding.

``parse_form_data`` turns an ``application/x-www-form-urlencoded`` body
into an immutable ``FormData`` mapping. ``decode_post_form`` binds that
mapping to a dataclass, coercing ``str``, ``int``, ``float`` and ``bool``
fields.

Two failure classes, handled differently:

- Malformed client input (bad percent-escapes, non-UTF-8 bytes, a
  non-numeric value for an ``int`` field) raises ``BadRequest``.
- Binding into something that is not a dataclass is a programming
  error: ``ConfigurationError`` is raised and left to escalate.
"""

import re
import types
from collections.abc import Iterator, Mapping
from dataclasses import MISSING, is_dataclass
from dataclasses import fields as dc_fields
from typing import Any, TypeVar, get_type_hints
from urllib.parse import parse_qs

from snippetbox.errors import BadRequest, ConfigurationError

T = TypeVar("T")

# A "%" not followed by two hex digits
_BAD_ESCAPE = re.compile(rb"%(?![0-9A-Fa-f]{2})")


class FormData(Mapping[str, str]):
    """Immutable parsed form data.

    ``__getitem__`` returns the first value for a key.
    """

    __slots__ = ("_data",)

    def __init__(self, data: dict[str, list[str]] | None = None) -> None:
        object.__setattr__(self, "_data", data or {})

    def __getitem__(self, key: str) -> str:
        return self._data[key][0]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {self[k]!r}" for k in self)
        return f"FormData({{{items}}})"

    def get(self, key: str, default: str | None = None) -> str | None:  # type: ignore[override]
        """Return the first value for *key*, or *default* if missing."""
        values = self._data.get(key)
        if values:
            return values[0]
        return default


def parse_form_data(body: bytes, content_type: str) -> FormData:
    """Parse a request body into FormData.

    Bodies with another content type yield an empty ``FormData``; the
    request simply carried no form fields.

    Raises:
        BadRequest: If an urlencoded body is malformed.
    """
    ct_lower = content_type.lower().split(";")[0].strip()
    if ct_lower not in ("", "application/x-www-form-urlencoded"):
        return FormData()
    if not body:
        return FormData()

    if _BAD_ESCAPE.search(body):
        raise BadRequest("Malformed form body")
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError:
        raise BadRequest("Malformed form body") from None
    return FormData(parse_qs(text, keep_blank_values=True))


# Type coercion map for decode_post_form()
_COERCIONS: dict[type, Any] = {
    str: lambda v: v.strip(),
    int: lambda v: int(v.strip()),
    float: lambda v: float(v.strip()),
    bool: lambda v: v.lower() in ("true", "1", "yes", "on"),
}


async def decode_post_form(request: Any, datacls: type[T]) -> T:
    """Bind the request's form body to a new ``datacls`` instance.

    Fields absent from the form keep their dataclass default, or the
    zero value of their type when they have none.

    Usage::

        @dataclass(slots=True)
        class LoginForm:
            email: str = ""
            password: str = ""

        form = await decode_post_form(request, LoginForm)

    Raises:
        ConfigurationError: If *datacls* is not a dataclass type.
        BadRequest: If the body is malformed or a value cannot be coerced.
    """
    if not (isinstance(datacls, type) and is_dataclass(datacls)):
        msg = f"decode_post_form() target must be a dataclass type, got {datacls!r}"
        raise ConfigurationError(msg)

    form = await request.form()
    hints = get_type_hints(datacls)
    values: dict[str, Any] = {}

    for f in dc_fields(datacls):
        if not f.init:
            continue
        base_type = _unwrap_optional(hints.get(f.name, str))
        raw = form.get(f.name)

        if raw is None:
            if f.default is MISSING and f.default_factory is MISSING:
                values[f.name] = base_type()
            continue

        coerce = _COERCIONS.get(base_type, base_type)
        try:
            values[f.name] = coerce(raw)
        except (ValueError, TypeError):
            raise BadRequest(f"Invalid value for {f.name}") from None

    return datacls(**values)


def _unwrap_optional(hint: Any) -> type:
    """Extract the base type from ``X | None`` or plain ``X``."""
    if isinstance(hint, types.UnionType):
        args = [a for a in hint.__args__ if a is not type(None)]
        if args:
            return args[0]
    return hint if isinstance(hint, type) else str
