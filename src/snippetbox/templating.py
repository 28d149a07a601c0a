"""Jinja2 environment setup.

One environment is created at startup and shared by every request; it
compiles each template once and caches it. Templates ship inside the
package (``snippetbox/templates``), so rendering does not depend on the
working directory.

Autoescaping is on for every ``.html`` template: snippet titles and
contents are user input.
"""

from datetime import UTC, datetime

from jinja2 import Environment, PackageLoader, select_autoescape


def human_date(value: datetime | None) -> str:
    """Format a timestamp as ``02 Jan 2026 at 15:04`` in UTC.

    Returns an empty string for ``None``.
    """
    if value is None:
        return ""
    return value.astimezone(UTC).strftime("%d %b %Y at %H:%M")


def create_environment(*, auto_reload: bool = False) -> Environment:
    """Create the template environment used by the handlers."""
    env = Environment(
        loader=PackageLoader("snippetbox", "templates"),
        autoescape=select_autoescape(["html"]),
        auto_reload=auto_reload,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["human_date"] = human_date
    return env
