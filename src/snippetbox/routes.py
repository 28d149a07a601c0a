"""The route table and the two middleware chains.

::

    standard = recover_panic -> log_request -> security headers -> router
    dynamic  = sessions -> CSRF -> authentication

    GET  /                        dynamic
    GET  /snippet/view/{id}       dynamic
    GET  /ping                    (standard only)
    GET  /user/signup             dynamic + require_unauthentication
    POST /user/signup             dynamic + require_unauthentication
    GET  /user/login              dynamic + require_unauthentication
    POST /user/login              dynamic + require_unauthentication
    POST /user/logout             dynamic + require_authentication
    GET  /snippet/create          dynamic + require_authentication
    POST /snippet/create          dynamic + require_authentication
    GET  /static/{filepath:path}  (standard only)

Built once at startup; nothing here runs per request.
"""

from pathlib import Path

from snippetbox.handlers import Handlers
from snippetbox.middleware import (
    AuthMiddleware,
    Chain,
    CSRFMiddleware,
    Handler,
    SecurityHeadersMiddleware,
    SessionMiddleware,
    log_request,
    recover_panic,
    require_authentication,
    require_unauthentication,
)
from snippetbox.middleware.auth import UserExistence
from snippetbox.routing import Route, Router
from snippetbox.sessions import SessionManager
from snippetbox.static import StaticFiles

GET = frozenset({"GET"})
POST = frozenset({"POST"})


def build_router(
    handlers: Handlers,
    sessions: SessionManager,
    users: UserExistence,
    static_dir: str | Path,
) -> Router:
    """Register every route, each wrapped in its chain, and compile."""
    router = Router(not_found=Chain().then_func(handlers.not_found))

    router.add(Route("/static/{filepath:path}", StaticFiles(static_dir), GET, name="static"))
    router.add(Route("/ping", Chain().then_func(handlers.ping), GET, name="ping"))

    dynamic = Chain(SessionMiddleware(sessions), CSRFMiddleware(), AuthMiddleware(users))
    router.add(Route("/", dynamic.then_func(handlers.home), GET, name="home"))
    router.add(
        Route("/snippet/view/{id}", dynamic.then_func(handlers.snippet_view), GET, name="snippet_view")
    )

    unauthenticated = dynamic.append(require_unauthentication)
    router.add(Route("/user/signup", unauthenticated.then_func(handlers.user_signup), GET))
    router.add(Route("/user/signup", unauthenticated.then_func(handlers.user_signup_post), POST))
    router.add(Route("/user/login", unauthenticated.then_func(handlers.user_login), GET))
    router.add(Route("/user/login", unauthenticated.then_func(handlers.user_login_post), POST))

    authenticated = dynamic.append(require_authentication)
    router.add(Route("/snippet/create", authenticated.then_func(handlers.snippet_create), GET))
    router.add(
        Route("/snippet/create", authenticated.then_func(handlers.snippet_create_post), POST)
    )
    router.add(Route("/user/logout", authenticated.then_func(handlers.user_logout_post), POST))

    router.compile()
    return router


def standard_chain() -> Chain:
    """Stages every request passes through, matched route or not."""
    return Chain(recover_panic, log_request, SecurityHeadersMiddleware())


def build_handler(
    handlers: Handlers,
    sessions: SessionManager,
    users: UserExistence,
    static_dir: str | Path,
) -> Handler:
    """The whole pipeline: standard chain around the router."""
    return standard_chain().then(build_router(handlers, sessions, users, static_dir))
