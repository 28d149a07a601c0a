"""Built-in validation rules.

Each rule is a predicate: it returns ``True`` when the value passes.
Messages are chosen by the caller, per field, through
``FormErrors.check_field``::

    errors.check_field(not_blank(form.title), "title", "This field cannot be blank")
    errors.check_field(max_chars(form.title, 100), "title", "...")
"""

import re
from typing import TypeVar

T = TypeVar("T")

# Email structure as recommended by the WHATWG HTML living standard
EMAIL_RX = re.compile(
    r"^[a-zA-Z0-9.!#$%&'*+/=?^_`{|}~-]+@[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(?:\.[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


def not_blank(value: str) -> bool:
    """Value contains something other than whitespace."""
    return bool(value.strip())


# ---------------------------------------------------------------------------
# Length (in characters, not bytes)
# ---------------------------------------------------------------------------


def max_chars(value: str, n: int) -> bool:
    return len(value) <= n


def min_chars(value: str, n: int) -> bool:
    return len(value) >= n


# ---------------------------------------------------------------------------
# Format and choice
# ---------------------------------------------------------------------------


def matches(value: str, rx: re.Pattern[str]) -> bool:
    return rx.match(value) is not None


def permitted_value(value: T, *permitted: T) -> bool:
    """Value is one of *permitted*."""
    return value in permitted
