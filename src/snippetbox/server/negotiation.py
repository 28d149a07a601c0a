"""Content negotiation — maps handler return values to Response objects.

isinstance-based dispatch, no magic, fully predictable.
"""

from typing import Any

from snippetbox.errors import ConfigurationError
from snippetbox.http.response import Redirect, Response


def negotiate(value: Any) -> Response:
    """Convert a terminal handler's return value to a Response.

    Dispatch order:

    1. ``Response``           -> pass through
    2. ``Redirect``           -> status (303) with Location header
    3. ``str``                -> 200, text/html
    4. ``bytes``              -> 200, application/octet-stream
    5. ``(value, int)``       -> negotiate value, override status
    """
    match value:
        case Response():
            return value
        case Redirect():
            return (
                Response(body="")
                .with_status(value.status)
                .with_header("Location", value.url)
                .with_headers(dict(value.headers))
            )
        case str():
            return Response(body=value)
        case bytes():
            return Response(body=value, content_type="application/octet-stream")
        case (inner, int() as status):
            return negotiate(inner).with_status(status)
        case _:
            msg = f"Cannot convert handler return value of type {type(value).__name__!r} to a response."
            raise ConfigurationError(msg)
