"""Terminal handlers — the route-specific logic at the end of each chain.

Handlers take the request and return a ``Response``, a ``Redirect`` or a
string; the chain terminal converts the rest. A client error is raised
as an ``HTTPError`` (``NotFound``, ``BadRequest``) and becomes a
plain-text response before any stage sees it. Anything else that
escapes a handler is a server error for the recovery stage.

Form pages follow post/redirect/get: a valid submission stores its
result, sets a flash message and redirects with 303; an invalid one
re-renders the form with its errors and status 422.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Protocol

from jinja2 import Environment

from snippetbox._internal.invoke import invoke, invoke_blocking
from snippetbox.errors import (
    DuplicateEmailError,
    InvalidCredentialsError,
    NoRecordError,
    NotFound,
)
from snippetbox.http.forms import decode_post_form
from snippetbox.http.request import Request
from snippetbox.http.response import Redirect, Response
from snippetbox.middleware.auth import is_authenticated, login, logout
from snippetbox.middleware.sessions import get_session
from snippetbox.models import Snippet
from snippetbox.server.errors import not_found
from snippetbox.validation import (
    EMAIL_RX,
    FormErrors,
    matches,
    max_chars,
    min_chars,
    not_blank,
    permitted_value,
)

FLASH = "flash"


class Snippets(Protocol):
    def insert(self, title: str, content: str, expires_days: int) -> int: ...

    def get(self, snippet_id: int) -> Snippet: ...

    def latest(self) -> list[Snippet]: ...


class Users(Protocol):
    def insert(self, name: str, email: str, password: str) -> int: ...

    def authenticate(self, email: str, password: str) -> int: ...

    def exists(self, user_id: int) -> bool: ...


# -- Forms --


@dataclass(slots=True)
class SnippetCreateForm:
    title: str = ""
    content: str = ""
    expires: int = 365


@dataclass(slots=True)
class UserSignupForm:
    name: str = ""
    email: str = ""
    password: str = field(default="", repr=False)


@dataclass(slots=True)
class UserLoginForm:
    email: str = ""
    password: str = field(default="", repr=False)


# -- Handlers --


class Handlers:
    """Every terminal handler, bound to the collaborators it needs.

    Usage::

        handlers = Handlers(users=UserModel(), snippets=SnippetModel(), templates=env)
        router.add(Route("/", dynamic.then_func(handlers.home), GET))
    """

    __slots__ = ("_now", "snippets", "templates", "users")

    def __init__(
        self,
        *,
        users: Users,
        snippets: Snippets,
        templates: Environment,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self.users = users
        self.snippets = snippets
        self.templates = templates
        self._now = now or (lambda: datetime.now(UTC))

    # -- Rendering --

    def template_data(self, request: Request) -> dict[str, Any]:
        """Values every page needs.

        Reading the flash message clears it, so it is shown exactly once.
        """
        session = request.context.session
        return {
            "current_year": self._now().year,
            "flash": session.pop_str(FLASH) if session is not None else "",
            "is_authenticated": is_authenticated(request),
            "csrf_token": request.context.csrf_token or "",
        }

    def render(self, request: Request, page: str, status: int = 200, **data: Any) -> Response:
        context = self.template_data(request)
        context.update(data)
        body = self.templates.get_template(page).render(context)
        return Response(body=body, status=status)

    # -- Public pages --

    def ping(self, request: Request) -> Response:
        return Response(body="OK", content_type="text/plain; charset=utf-8")

    async def home(self, request: Request) -> Response:
        snippets = await invoke(self.snippets.latest)
        return self.render(request, "home.html", snippets=snippets)

    async def snippet_view(self, request: Request) -> Response:
        raw_id = request.path_params.get("id", "")
        if not (raw_id.isascii() and raw_id.isdigit()):
            raise NotFound()
        snippet_id = int(raw_id)
        if snippet_id < 1:
            raise NotFound()

        try:
            snippet = await invoke(self.snippets.get, snippet_id)
        except NoRecordError:
            raise NotFound() from None

        return self.render(request, "view.html", snippet=snippet)

    # -- Snippets (authenticated) --

    def snippet_create(self, request: Request) -> Response:
        return self.render(request, "create.html", form=SnippetCreateForm(), errors=FormErrors())

    async def snippet_create_post(self, request: Request) -> Response | Redirect:
        form = await decode_post_form(request, SnippetCreateForm)

        errors = FormErrors()
        errors.check_field(not_blank(form.title), "title", "This field cannot be blank")
        errors.check_field(
            max_chars(form.title, 100),
            "title",
            "This field cannot be more than 100 characters long",
        )
        errors.check_field(not_blank(form.content), "content", "This field cannot be blank")
        errors.check_field(
            permitted_value(form.expires, 1, 7, 365), "expires", "This field must equal 1, 7 or 365"
        )
        if not errors:
            return self.render(request, "create.html", 422, form=form, errors=errors)

        snippet_id = await invoke(self.snippets.insert, form.title, form.content, form.expires)

        get_session(request).put(FLASH, "Snippet successfully created!")
        return Redirect(f"/snippet/view/{snippet_id}")

    # -- Accounts --

    def user_signup(self, request: Request) -> Response:
        return self.render(request, "signup.html", form=UserSignupForm(), errors=FormErrors())

    async def user_signup_post(self, request: Request) -> Response | Redirect:
        form = await decode_post_form(request, UserSignupForm)

        errors = FormErrors()
        errors.check_field(not_blank(form.name), "name", "This field cannot be blank")
        errors.check_field(not_blank(form.email), "email", "This field cannot be blank")
        errors.check_field(
            matches(form.email, EMAIL_RX), "email", "This field must be a valid email address"
        )
        errors.check_field(not_blank(form.password), "password", "This field cannot be blank")
        errors.check_field(
            min_chars(form.password, 8), "password", "This field must be at least 8 characters long"
        )
        if not errors:
            return self.render(request, "signup.html", 422, form=form, errors=errors)

        try:
            await invoke_blocking(self.users.insert, form.name, form.email, form.password)
        except DuplicateEmailError:
            errors.add_field_error("email", "Email address is already in use")
            return self.render(request, "signup.html", 422, form=form, errors=errors)

        get_session(request).put(FLASH, "Your signup was successful. Please log in.")
        return Redirect("/user/login")

    def user_login(self, request: Request) -> Response:
        return self.render(request, "login.html", form=UserLoginForm(), errors=FormErrors())

    async def user_login_post(self, request: Request) -> Response | Redirect:
        form = await decode_post_form(request, UserLoginForm)

        errors = FormErrors()
        errors.check_field(not_blank(form.email), "email", "This field cannot be blank")
        errors.check_field(
            matches(form.email, EMAIL_RX), "email", "This field must be a valid email address"
        )
        errors.check_field(not_blank(form.password), "password", "This field cannot be blank")
        if not errors:
            return self.render(request, "login.html", 422, form=form, errors=errors)

        try:
            user_id = await invoke_blocking(self.users.authenticate, form.email, form.password)
        except InvalidCredentialsError:
            errors.add_non_field_error("Email or password is incorrect")
            return self.render(request, "login.html", 422, form=form, errors=errors)

        login(request, user_id)
        return Redirect("/snippet/create")

    def user_logout_post(self, request: Request) -> Redirect:
        logout(request)
        get_session(request).put(FLASH, "You've been logged out successfully!")
        return Redirect("/")

    # -- Fallback --

    def not_found(self, request: Request) -> Response:
        return not_found()
