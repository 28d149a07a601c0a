"""Logging setup — info and error streams behind a queue.

Two named loggers carry everything the server reports:

- ``snippetbox.access`` — one line per request (INFO).
- ``snippetbox.server`` — lifecycle messages and server errors.

``configure_logging()`` routes both through a ``QueueHandler`` so that
emitting a record never blocks the request path on a slow stream. A
``QueueListener`` thread drains the queue into two stream handlers:
INFO and below to stdout, WARNING and above to stderr, each with a
Go-style level prefix.
"""

import logging
import queue
import sys
from logging.handlers import QueueHandler, QueueListener
from typing import TextIO

ACCESS_LOGGER = "snippetbox.access"
SERVER_LOGGER = "snippetbox.server"

_DATE_FORMAT = "%Y/%m/%d %H:%M:%S"

_listener: QueueListener | None = None


class _MaxLevelFilter(logging.Filter):
    """Pass records strictly below *level*."""

    def __init__(self, level: int) -> None:
        super().__init__()
        self._level = level

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < self._level


def _stream_handler(stream: TextIO, prefix: str) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        logging.Formatter(f"{prefix}\t%(asctime)s %(message)s", datefmt=_DATE_FORMAT)
    )
    return handler


def configure_logging(
    level: str = "info",
    *,
    info_stream: TextIO | None = None,
    error_stream: TextIO | None = None,
) -> None:
    """Install the queue-backed info/error handlers on the snippetbox loggers.

    Safe to call more than once: a previous listener is stopped and its
    handlers replaced.
    """
    global _listener
    shutdown_logging()

    info = _stream_handler(info_stream or sys.stdout, "INFO")
    info.addFilter(_MaxLevelFilter(logging.WARNING))
    error = _stream_handler(error_stream or sys.stderr, "ERROR")
    error.setLevel(logging.WARNING)

    records: queue.SimpleQueue[logging.LogRecord] = queue.SimpleQueue()
    _listener = QueueListener(records, info, error, respect_handler_level=True)

    queue_handler = QueueHandler(records)
    for name in (ACCESS_LOGGER, SERVER_LOGGER):
        logger = logging.getLogger(name)
        for old in list(logger.handlers):
            if isinstance(old, QueueHandler):
                logger.removeHandler(old)
        logger.addHandler(queue_handler)
        logger.setLevel(level.upper())
        logger.propagate = False

    _listener.start()


def shutdown_logging() -> None:
    """Flush and stop the queue listener, if one is running."""
    global _listener
    if _listener is not None:
        _listener.stop()
        _listener = None
