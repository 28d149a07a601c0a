"""Snippetbox application class.

Collaborators are wired in at construction. The pipeline (chains,
route table, template environment) is built once, on the first ASGI
call or in ``run()``, and is immutable afterwards.
"""

import asyncio
import contextlib
import logging
import threading

from jinja2 import Environment

from snippetbox._internal.asgi import Receive, Scope, Send
from snippetbox.config import AppConfig
from snippetbox.errors import ConfigurationError
from snippetbox.handlers import Handlers, Snippets, Users
from snippetbox.log import SERVER_LOGGER, configure_logging, shutdown_logging
from snippetbox.middleware.protocol import Handler
from snippetbox.models import SnippetModel, UserModel
from snippetbox.routes import build_handler
from snippetbox.server.handler import handle_request
from snippetbox.sessions import MemoryStore, SessionConfig, SessionManager, SessionStore
from snippetbox.templating import create_environment

logger = logging.getLogger(SERVER_LOGGER)

# Seconds between sweeps of expired sessions
SESSION_CLEANUP_INTERVAL = 60.0


class App:
    """The snippetbox ASGI application.

    Usage::

        app = App(AppConfig(secret_key="..."))
        app.run()

    Or under any ASGI server: ``uvicorn 'snippetbox.app:create_app' --factory``.

    Thread safety:
        The freeze transition uses a Lock + double-check so exactly one
        thread builds the pipeline, even if several workers receive
        their first request at once.
    """

    __slots__ = (
        "_cleanup_task",
        "_freeze_lock",
        "_frozen",
        "_handler",
        "config",
        "session_store",
        "snippets",
        "templates",
        "users",
    )

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        users: Users | None = None,
        snippets: Snippets | None = None,
        session_store: SessionStore | None = None,
        templates: Environment | None = None,
    ) -> None:
        self.config: AppConfig = config or AppConfig()
        self.users: Users = users if users is not None else UserModel()
        self.snippets: Snippets = snippets if snippets is not None else SnippetModel()
        self.session_store: SessionStore = (
            session_store if session_store is not None else MemoryStore()
        )
        self.templates: Environment = templates or create_environment(
            auto_reload=self.config.debug
        )
        self._handler: Handler | None = None
        self._frozen = False
        self._freeze_lock = threading.Lock()
        self._cleanup_task: asyncio.Task[None] | None = None

    # -- Server --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Serve the app with uvicorn until interrupted."""
        import uvicorn

        self._ensure_frozen()
        cfg = self.config
        configure_logging(cfg.log_level)
        _host = host or cfg.host
        _port = port or cfg.port
        logger.info("starting server on %s:%d", _host, _port)
        try:
            uvicorn.run(
                self,
                host=_host,
                port=_port,
                log_level=cfg.log_level,
                access_log=False,
                ssl_certfile=cfg.ssl_certfile,
                ssl_keyfile=cfg.ssl_keyfile,
            )
        finally:
            shutdown_logging()

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._handle_lifespan(receive, send)
            return

        self._ensure_frozen()
        assert self._handler is not None
        await handle_request(scope, receive, send, handler=self._handler)

    async def _handle_lifespan(self, receive: Receive, send: Send) -> None:
        """Run the ASGI lifespan protocol.

        Builds the pipeline before the first request and, for stores
        that support it, sweeps expired sessions in the background.
        """
        while True:
            message = await receive()
            msg_type = message["type"]

            if msg_type == "lifespan.startup":
                try:
                    self._ensure_frozen()
                except Exception as exc:
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                if hasattr(self.session_store, "cleanup"):
                    self._cleanup_task = asyncio.create_task(self._sweep_sessions())
                await send({"type": "lifespan.startup.complete"})

            elif msg_type == "lifespan.shutdown":
                if self._cleanup_task is not None:
                    self._cleanup_task.cancel()
                    with contextlib.suppress(asyncio.CancelledError):
                        await self._cleanup_task
                    self._cleanup_task = None
                await send({"type": "lifespan.shutdown.complete"})
                return

    async def _sweep_sessions(self) -> None:
        while True:
            await asyncio.sleep(SESSION_CLEANUP_INTERVAL)
            removed = self.session_store.cleanup()  # type: ignore[attr-defined]
            if removed:
                logger.debug("removed %d expired sessions", removed)

    # -- Compilation --

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Build the pipeline. MUST only be called while holding _freeze_lock."""
        cfg = self.config
        if not cfg.secret_key:
            msg = (
                "AppConfig.secret_key must be set to sign session cookies. "
                "Pass --secret-key or set SNIPPETBOX_SECRET_KEY."
            )
            raise ConfigurationError(msg)

        sessions = SessionManager(
            self.session_store,
            cfg.secret_key,
            SessionConfig(
                lifetime=cfg.session_lifetime,
                cookie_name=cfg.session_cookie_name,
                secure=cfg.session_cookie_secure,
                samesite=cfg.session_cookie_samesite,
            ),
        )
        handlers = Handlers(users=self.users, snippets=self.snippets, templates=self.templates)
        self._handler = build_handler(handlers, sessions, self.users, cfg.static_dir)
        self._frozen = True


def create_app() -> App:
    """Factory for ASGI servers: configuration comes from the environment."""
    return App(AppConfig.from_env())
