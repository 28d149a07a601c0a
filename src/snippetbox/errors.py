"""Snippetbox exception hierarchy.

Shared across the router, the middleware stages, the terminal handlers
and the models so every module raises and catches the same types.
"""

from dataclasses import dataclass


class SnippetboxError(Exception):
    """Base for all snippetbox-specific errors."""


class ConfigurationError(SnippetboxError):
    """Raised when the application is wired or configured incorrectly.

    A programming error, not user input: it is never converted into a
    client response and escalates to the recovery stage.
    """


@dataclass(frozen=True, slots=True)
class HTTPError(SnippetboxError):
    """An error that maps directly to an HTTP status code.

    Raised by the router or a terminal handler. The chain terminal and
    the dispatcher turn it into a plain-text response with that status.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class BadRequest(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """400 — the request could not be understood (malformed form, CSRF failure)."""

    def __init__(self, detail: str = "Bad Request") -> None:
        super().__init__(status=400, detail=detail)


class NotFound(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """404 — no route or resource matched the request."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818 — conventional name in web frameworks
    """405 — route exists but not for this HTTP method.

    Carries an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        super().__init__(
            status=405,
            detail=detail or "Method Not Allowed",
            headers=(("Allow", allow_value),),
        )


# -- Model errors --


class ModelError(SnippetboxError):
    """Base for errors raised by the storage collaborators."""


class NoRecordError(ModelError):
    """No matching record found."""


class InvalidCredentialsError(ModelError):
    """Email address unknown or password incorrect."""


class DuplicateEmailError(ModelError):
    """A user with this email address already exists."""
