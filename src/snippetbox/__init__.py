"""Snippetbox — share and view text snippets.

An ASGI web application whose request pipeline is built from small,
composable middleware stages::

    standard:  recover -> log -> security headers -> router
    dynamic:   session -> CSRF -> authentication -> [guard] -> handler

Basic usage::

    from snippetbox import App, AppConfig

    app = App(AppConfig(secret_key="change-me"))
    app.run()
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "AppConfig",
    "BadRequest",
    "Chain",
    "ConfigurationError",
    "HTTPError",
    "MethodNotAllowed",
    "Middleware",
    "Next",
    "NotFound",
    "Redirect",
    "Request",
    "RequestContext",
    "Response",
    "SnippetboxError",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import snippetbox`` fast while providing a clean top-level API.
    """
    if name == "App":
        from snippetbox.app import App

        return App

    if name == "AppConfig":
        from snippetbox.config import AppConfig

        return AppConfig

    if name == "Request":
        from snippetbox.http.request import Request

        return Request

    if name == "RequestContext":
        from snippetbox.context import RequestContext

        return RequestContext

    if name in ("Response", "Redirect"):
        from snippetbox.http import response as _resp

        return getattr(_resp, name)

    if name in ("Chain", "Middleware", "Next"):
        from snippetbox.middleware import protocol as _mw

        return getattr(_mw, name)

    if name in (
        "BadRequest",
        "ConfigurationError",
        "HTTPError",
        "MethodNotAllowed",
        "NotFound",
        "SnippetboxError",
    ):
        from snippetbox import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
