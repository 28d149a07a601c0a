"""ASGI response sending — translates a Response into ASGI messages."""

from snippetbox._internal.asgi import Send
from snippetbox.http.response import Response


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


def merge_headers(
    staged: tuple[tuple[str, str], ...], response: Response
) -> list[tuple[str, str]]:
    """Combine staged headers with the response's own.

    A header the response sets itself replaces every staged value of the
    same name; all other staged headers are kept.
    """
    own = {name.lower() for name, _ in response.headers}
    merged = [(name, value) for name, value in staged if name.lower() not in own]
    merged.extend(response.headers)
    return merged


async def send_response(
    response: Response,
    send: Send,
    *,
    staged: tuple[tuple[str, str], ...] = (),
    head: bool = False,
) -> None:
    """Translate a Response into ASGI send() calls.

    *staged* are the headers middleware set on the request before the
    response existed. For ``HEAD`` requests the body is dropped but
    ``content-length`` still describes it.
    """
    raw_headers: list[tuple[bytes, bytes]] = [
        (b"content-type", response.content_type.encode("latin-1")),
    ]
    for name, value in merge_headers(staged, response):
        raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))
    raw_headers.extend(
        (b"set-cookie", cookie.to_header_value().encode("latin-1")) for cookie in response.cookies
    )

    body = response.body_bytes if _body_allowed(response.status) else b""

    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": b"" if head else body,
        }
    )
