"""Error responses for the pipeline.

Client errors are fixed-status plain-text responses and are logged at
debug level only. Server errors never leak detail to the client: the
body is the generic status text and the message plus stack trace go to
the ``snippetbox.server`` logger.
"""

import logging
from http import HTTPStatus

from snippetbox.errors import HTTPError
from snippetbox.http.request import Request
from snippetbox.http.response import Response

logger = logging.getLogger("snippetbox.server")

_TEXT_PLAIN = "text/plain; charset=utf-8"


def status_text(status: int) -> str:
    """Standard reason phrase for *status* (``"Not Found"`` for 404)."""
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return str(status)


def client_error(status: int) -> Response:
    """Plain-text response carrying only the status text."""
    return Response(body=status_text(status), status=status, content_type=_TEXT_PLAIN)


def not_found() -> Response:
    """404 response."""
    return client_error(404)


def server_error(exc: BaseException, request: Request | None = None) -> Response:
    """Log *exc* with its stack trace and return a generic 500 response."""
    if request is not None:
        logger.error(
            "%s %s %s", request.method, request.uri, exc, exc_info=(type(exc), exc, exc.__traceback__)
        )
    else:
        logger.error("%s", exc, exc_info=(type(exc), exc, exc.__traceback__))
    return client_error(500)


def http_error_response(exc: HTTPError, request: Request) -> Response:
    """Map an HTTPError to its plain-text response."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
    response = client_error(exc.status)
    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response
