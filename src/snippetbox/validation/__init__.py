"""Form validation — predicate rules plus an error collector.

Usage::

    from snippetbox.validation import EMAIL_RX, FormErrors, matches, not_blank

    errors = FormErrors()
    errors.check_field(not_blank(form.email), "email", "This field cannot be blank")
    errors.check_field(matches(form.email, EMAIL_RX), "email", "This field must be a valid email address")
    if not errors:
        ...
"""

from snippetbox.validation.result import FormErrors
from snippetbox.validation.rules import (
    EMAIL_RX,
    matches,
    max_chars,
    min_chars,
    not_blank,
    permitted_value,
)

__all__ = [
    "EMAIL_RX",
    "FormErrors",
    "matches",
    "max_chars",
    "min_chars",
    "not_blank",
    "permitted_value",
]
