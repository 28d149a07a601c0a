"""``snippetbox run`` — build the config and serve the app."""

import argparse
import sys

from snippetbox.config import AppConfig
from snippetbox.errors import ConfigurationError


def parse_addr(addr: str) -> tuple[str, int]:
    """Split ``host:port``. An empty host binds every interface.

    Raises:
        ValueError: If *addr* has no port or the port is not a number.
    """
    host, sep, port = addr.rpartition(":")
    if not sep or not port.isdigit():
        msg = f"invalid address {addr!r}, expected host:port"
        raise ValueError(msg)
    return host or "0.0.0.0", int(port)  # noqa: S104


def build_config(args: argparse.Namespace) -> AppConfig:
    """Environment first, then command-line flags on top."""
    overrides: dict[str, object] = {
        "static_dir": args.static_dir,
        "secret_key": args.secret_key,
        "log_level": args.log_level,
        "debug": args.debug,
    }
    if args.addr is not None:
        overrides["host"], overrides["port"] = parse_addr(args.addr)
    if args.insecure_cookies:
        overrides["session_cookie_secure"] = False
    return AppConfig.from_env(**overrides)


def run_server(args: argparse.Namespace, parser: argparse.ArgumentParser) -> None:
    from snippetbox.app import App

    try:
        config = build_config(args)
    except ValueError as exc:
        parser.error(str(exc))

    app = App(config)
    try:
        app.run()
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
