"""Tests for snippetbox.cli — argument parsing and ``snippetbox run``."""

from unittest.mock import MagicMock, patch

import pytest

from snippetbox.cli import main
from snippetbox.cli._run import parse_addr


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("SNIPPETBOX_SECRET_KEY", "SNIPPETBOX_PORT", "SNIPPETBOX_HOST"):
        monkeypatch.delenv(name, raising=False)


class TestCLIHelp:
    def test_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0

    def test_run_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["run", "--help"])
        assert exc_info.value.code == 0


class TestCLINoCommand:
    def test_no_command_exits_zero(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "run" in capsys.readouterr().out


class TestParseAddr:
    def test_host_and_port(self) -> None:
        assert parse_addr("127.0.0.1:4000") == ("127.0.0.1", 4000)

    def test_empty_host_binds_all(self) -> None:
        assert parse_addr(":4000") == ("0.0.0.0", 4000)

    @pytest.mark.parametrize("addr", ["4000", "localhost:", "localhost:http"])
    def test_invalid(self, addr: str) -> None:
        with pytest.raises(ValueError, match="host:port"):
            parse_addr(addr)


@patch("snippetbox.app.configure_logging")
@patch("uvicorn.run")
class TestSnippetboxRun:
    def test_serves_with_flags(self, mock_run: MagicMock, _logging: MagicMock) -> None:
        main(["run", "--addr", ":4001", "--secret-key", "s3cr3t"])
        mock_run.assert_called_once()
        app = mock_run.call_args[0][0]
        kwargs = mock_run.call_args[1]
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 4001
        assert kwargs["access_log"] is False
        assert app.config.secret_key == "s3cr3t"
        assert app.config.session_cookie_secure is True

    def test_secret_key_from_environment(
        self, mock_run: MagicMock, _logging: MagicMock, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SNIPPETBOX_SECRET_KEY", "from-env")
        main(["run"])
        app = mock_run.call_args[0][0]
        assert app.config.secret_key == "from-env"
        assert mock_run.call_args[1]["port"] == 4000

    def test_insecure_cookies(self, mock_run: MagicMock, _logging: MagicMock) -> None:
        main(["run", "--secret-key", "k", "--insecure-cookies"])
        app = mock_run.call_args[0][0]
        assert app.config.session_cookie_secure is False

    def test_missing_secret_key_exits_one(
        self, mock_run: MagicMock, _logging: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["run"])
        assert exc_info.value.code == 1
        assert "secret_key" in capsys.readouterr().err
        mock_run.assert_not_called()

    def test_bad_addr_is_usage_error(
        self, mock_run: MagicMock, _logging: MagicMock, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["run", "--addr", "nope", "--secret-key", "k"])
        assert exc_info.value.code == 2
        assert "host:port" in capsys.readouterr().err
        mock_run.assert_not_called()
