"""Static asset serving.

``StaticFiles`` is a leaf handler for the ``/static/{filepath:path}``
route: it reads ``filepath`` from the path parameters and serves that
file from its directory. It sits behind the standard chain only, never
the session-aware one.

Directories are served only through their ``index.html``; a directory
without one is a 404, so directory listings never leak.

Security: resolves symlinks and verifies the final path is within the
configured directory to prevent path traversal.
"""

import logging
import mimetypes
from pathlib import Path

from snippetbox.http.request import Request
from snippetbox.http.response import Response
from snippetbox.log import SERVER_LOGGER
from snippetbox.server.errors import not_found

logger = logging.getLogger(SERVER_LOGGER)


class StaticFiles:
    """Serve files below *directory*.

    Usage::

        router.add(Route("/static/{filepath:path}", StaticFiles("./ui/static"), GET))
    """

    __slots__ = ("_cache_control", "_directory", "_index", "_param")

    def __init__(
        self,
        directory: str | Path,
        *,
        param: str = "filepath",
        index: str = "index.html",
        cache_control: str = "public, max-age=3600",
    ) -> None:
        self._directory = Path(directory).resolve()
        self._param = param
        self._index = index
        self._cache_control = cache_control

    @property
    def directory(self) -> Path:
        return self._directory

    async def __call__(self, request: Request) -> Response:
        relative = request.path_params.get(self._param, "").lstrip("/")
        file_path = (self._directory / relative).resolve() if relative else self._directory
        if not file_path.is_relative_to(self._directory):
            logger.debug("Static path escapes root: %r", relative)
            return not_found()

        if file_path.is_dir():
            file_path = file_path / self._index

        if not file_path.is_file():
            return not_found()

        return self._serve_file(file_path)

    def _serve_file(self, file_path: Path) -> Response:
        """Read a file and build a response."""
        content_type, _ = mimetypes.guess_type(str(file_path))
        if content_type is None:
            content_type = "application/octet-stream"
        elif content_type.startswith("text/"):
            content_type += "; charset=utf-8"

        body = file_path.read_bytes()

        return Response(body=body, content_type=content_type).with_header(
            "Cache-Control", self._cache_control
        )
