"""Validation state collected while checking one form submission."""

from dataclasses import dataclass, field


@dataclass(slots=True)
class FormErrors:
    """Field and non-field errors for one form.

    Field errors keep the first message recorded per field, so the
    cheapest check (presence) reports before the more specific ones.
    Non-field errors (``"Email or password is incorrect"``) describe the
    submission as a whole.

    The errors are falsy-when-invalid like a validation result::

        if not errors:
            return render_form(form, errors), 422
    """

    field_errors: dict[str, str] = field(default_factory=dict)
    non_field_errors: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        """True if no error of either kind was recorded."""
        return not self.field_errors and not self.non_field_errors

    def __bool__(self) -> bool:
        return self.valid

    def add_field_error(self, key: str, message: str) -> None:
        self.field_errors.setdefault(key, message)

    def add_non_field_error(self, message: str) -> None:
        self.non_field_errors.append(message)

    def check_field(self, ok: bool, key: str, message: str) -> None:
        """Record *message* for *key* unless *ok*."""
        if not ok:
            self.add_field_error(key, message)
