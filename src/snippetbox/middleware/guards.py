"""Route guards — redirect visitors who are on the wrong side of login.

Both read only ``request.context.is_authenticated``; neither touches the
session. They belong after ``AuthMiddleware`` in a chain.
"""

from snippetbox.http.request import Request
from snippetbox.http.response import Redirect, Response
from snippetbox.middleware.protocol import Next
from snippetbox.server.negotiation import negotiate

LOGIN_URL = "/user/login"
HOME_URL = "/"


async def require_authentication(request: Request, next: Next) -> Response:
    """Send anonymous visitors to the login page.

    Pages behind this guard are marked ``Cache-Control: no-store`` so a
    shared browser cache never replays them after logout.
    """
    if not request.context.is_authenticated:
        return negotiate(Redirect(LOGIN_URL))
    request.response_headers.set("Cache-Control", "no-store")
    return await next(request)


async def require_unauthentication(request: Request, next: Next) -> Response:
    """Send logged-in visitors away from the signup and login pages."""
    if request.context.is_authenticated:
        return negotiate(Redirect(HOME_URL))
    return await next(request)
