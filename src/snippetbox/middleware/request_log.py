"""Access logging — one line per request, written before calling through."""

import logging

from snippetbox.http.request import Request
from snippetbox.http.response import Response
from snippetbox.log import ACCESS_LOGGER
from snippetbox.middleware.protocol import Next

logger = logging.getLogger(ACCESS_LOGGER)


async def log_request(request: Request, next: Next) -> Response:
    """Log ``<remote> - <proto> <method> <uri>`` and call through unchanged."""
    logger.info("%s - %s %s %s", request.remote_addr, request.proto, request.method, request.uri)
    return await next(request)
