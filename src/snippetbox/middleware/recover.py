"""Panic recovery — the outermost stage.

Any exception escaping the rest of the pipeline is logged with its
stack trace and replaced by a generic 500. ``Connection: close`` is
staged so the server drops the connection after this response; the
worker itself keeps serving other requests.
"""

from snippetbox.http.request import Request
from snippetbox.http.response import Response
from snippetbox.middleware.protocol import Next
from snippetbox.server.errors import server_error


async def recover_panic(request: Request, next: Next) -> Response:
    try:
        return await next(request)
    except Exception as exc:
        request.response_headers.set("Connection", "close")
        return server_error(exc, request)
