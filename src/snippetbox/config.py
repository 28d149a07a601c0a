"""Application configuration.

AppConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups. ``SNIPPETBOX_*`` environment variables are read
and validated by a pydantic-settings model and layered onto the defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(port=4000, secret_key="s3cr3t")
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 4000
    debug: bool = False

    # Security
    secret_key: str = ""

    # Static files
    static_dir: str | Path = "./ui/static"

    # Sessions
    session_lifetime: int = 12 * 60 * 60  # 12 hours
    session_cookie_name: str = "session"
    session_cookie_secure: bool = True
    session_cookie_samesite: str = "lax"

    # Logging
    log_level: str = "info"

    # TLS (optional)
    ssl_certfile: str | None = None
    ssl_keyfile: str | None = None

    @classmethod
    def from_env(cls, **overrides: Any) -> AppConfig:
        """Build a config from ``SNIPPETBOX_*`` environment variables.

        ``SNIPPETBOX_PORT=4001`` sets ``port``, ``SNIPPETBOX_DEBUG=true``
        sets ``debug``, and so on. Keyword *overrides* that are not None
        win over the environment; anything left unset keeps its default.

        Raises:
            pydantic.ValidationError: If a variable does not parse as its
                field's type (a ``ValueError`` subclass).
        """
        given = {name: value for name, value in overrides.items() if value is not None}
        settings = EnvSettings(**given)
        return replace(cls(), **settings.model_dump(exclude_none=True))


class EnvSettings(BaseSettings):
    """The environment's view of :class:`AppConfig`.

    Every field is optional; only the ones present in the environment
    (or passed in) end up in the dump and replace a default.
    """

    model_config = SettingsConfigDict(env_prefix="SNIPPETBOX_", case_sensitive=False, extra="ignore")

    host: str | None = None
    port: int | None = None
    debug: bool | None = None
    secret_key: str | None = None
    static_dir: Path | None = None
    session_lifetime: int | None = None
    session_cookie_name: str | None = None
    session_cookie_secure: bool | None = None
    session_cookie_samesite: str | None = None
    log_level: str | None = None
    ssl_certfile: str | None = None
    ssl_keyfile: str | None = None
