"""Snippetbox CLI.

Entry point registered as ``snippetbox`` in ``pyproject.toml``::

    [project.scripts]
    snippetbox = "snippetbox.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``snippetbox`` command."""
    parser = argparse.ArgumentParser(
        prog="snippetbox",
        description="Snippetbox — share and view text snippets.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- snippetbox run ---------------------------------------------------
    run_parser = subparsers.add_parser("run", help="Start the HTTP server")
    run_parser.add_argument(
        "--addr",
        default=None,
        help="HTTP network address, host:port (default 127.0.0.1:4000; ':4000' binds all)",
    )
    run_parser.add_argument("--static-dir", default=None, help="Directory served under /static/")
    run_parser.add_argument(
        "--secret-key",
        default=None,
        help="Key used to sign session cookies (or set SNIPPETBOX_SECRET_KEY)",
    )
    run_parser.add_argument("--log-level", default=None, help="Logging level (default info)")
    run_parser.add_argument(
        "--debug",
        action="store_true",
        default=None,
        help="Reload templates on change",
    )
    run_parser.add_argument(
        "--insecure-cookies",
        action="store_true",
        help="Send the session cookie over plain HTTP (local development only)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "run":
        from snippetbox.cli._run import run_server

        run_server(args, parser)
