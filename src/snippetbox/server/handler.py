"""ASGI handler — translates ASGI scope/messages to snippetbox types.

The only component besides the test client that touches raw ASGI. It
converts the scope to a typed ``Request``, runs the fully-built
pipeline, and sends the ``Response`` back with every header the stages
staged on the way.
"""

from snippetbox._internal.asgi import Receive, Scope, Send
from snippetbox.http.request import Request
from snippetbox.middleware.protocol import Handler
from snippetbox.server.errors import server_error
from snippetbox.server.sender import send_response


async def handle_request(scope: Scope, receive: Receive, send: Send, *, handler: Handler) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    try:
        response = await handler(request)
    except Exception as exc:
        # Only reached when the pipeline has no recovery stage
        request.response_headers.set("Connection", "close")
        response = server_error(exc, request)

    await send_response(
        response,
        send,
        staged=request.response_headers.items(),
        head=request.method == "HEAD",
    )
