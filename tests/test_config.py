"""Tests for AppConfig."""

from dataclasses import FrozenInstanceError
from pathlib import Path

import pytest
from pydantic import ValidationError

from snippetbox.config import AppConfig, EnvSettings


class TestAppConfig:
    def test_defaults(self) -> None:
        cfg = AppConfig()
        assert cfg.host == "127.0.0.1"
        assert cfg.port == 4000
        assert cfg.debug is False
        assert cfg.secret_key == ""
        assert cfg.session_lifetime == 12 * 60 * 60
        assert cfg.session_cookie_secure is True
        assert cfg.log_level == "info"

    def test_frozen(self) -> None:
        cfg = AppConfig()
        with pytest.raises(FrozenInstanceError):
            cfg.port = 1  # type: ignore[misc]


class TestFromEnv:
    def test_reads_prefixed_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SNIPPETBOX_PORT", "4001")
        monkeypatch.setenv("SNIPPETBOX_DEBUG", "true")
        monkeypatch.setenv("SNIPPETBOX_SECRET_KEY", "s3cr3t")
        monkeypatch.setenv("SNIPPETBOX_SESSION_COOKIE_SECURE", "0")
        monkeypatch.setenv("PORT", "9999")
        cfg = AppConfig.from_env()
        assert cfg.port == 4001
        assert cfg.debug is True
        assert cfg.secret_key == "s3cr3t"
        assert cfg.session_cookie_secure is False

    def test_unset_fields_keep_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("SNIPPETBOX_PORT", raising=False)
        monkeypatch.delenv("SNIPPETBOX_HOST", raising=False)
        cfg = AppConfig.from_env()
        assert cfg.port == 4000
        assert cfg.host == "127.0.0.1"

    def test_static_dir_is_path(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SNIPPETBOX_STATIC_DIR", "/srv/static")
        cfg = AppConfig.from_env()
        assert cfg.static_dir == Path("/srv/static")

    def test_overrides_beat_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SNIPPETBOX_PORT", "4001")
        cfg = AppConfig.from_env(port=5000)
        assert cfg.port == 5000

    def test_none_override_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SNIPPETBOX_SECRET_KEY", "env")
        cfg = AppConfig.from_env(secret_key=None)
        assert cfg.secret_key == "env"

    def test_bad_int_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SNIPPETBOX_PORT", "http")
        with pytest.raises(ValidationError):
            AppConfig.from_env()

    def test_validation_error_is_value_error(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SNIPPETBOX_DEBUG", "maybe")
        with pytest.raises(ValueError):
            AppConfig.from_env()


class TestEnvSettings:
    def test_only_present_variables_dumped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("HOST", "PORT", "DEBUG", "SECRET_KEY", "STATIC_DIR", "LOG_LEVEL"):
            monkeypatch.delenv(f"SNIPPETBOX_{name}", raising=False)
        monkeypatch.setenv("SNIPPETBOX_LOG_LEVEL", "debug")
        dumped = EnvSettings().model_dump(exclude_none=True)
        assert dumped.get("log_level") == "debug"
        assert "port" not in dumped
