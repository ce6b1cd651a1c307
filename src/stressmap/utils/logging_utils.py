"""
Logging utilities.

- ``configure_logging``: console logging for scripts and hosts
- ``QueueLogHandler``: forwards engine log records to a queue so a GUI
  console can display them; records from the remote worker threads arrive
  through the same thread-safe queue
"""
from __future__ import annotations

import logging
from queue import Empty, Queue
from typing import List, Optional, Tuple

LOGGER_NAME = "stressmap"
DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

LogLine = Tuple[str, str]


def configure_logging(level: int = logging.INFO, fmt: str = DEFAULT_FORMAT) -> logging.Logger:
    """
    Attach a stream handler to the package logger.

    Calling it again only updates the level.

    Returns:
        The ``stressmap`` logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    if not any(getattr(h, "_stressmap_console", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt))
        handler._stressmap_console = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger


class QueueLogHandler(logging.Handler):
    """
    A logging handler that puts ``(message, level)`` tuples on a queue.

    DEBUG is reported as INFO, the console shows no finer level.
    """

    def __init__(self, log_queue: Queue, level: int = logging.INFO):
        super().__init__(level)
        self.log_queue = log_queue
        self.setFormatter(logging.Formatter("%(message)s"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = "INFO" if record.levelno <= logging.DEBUG else record.levelname
            self.log_queue.put((self.format(record), level))
        except Exception:
            self.handleError(record)


def attach_queue_handler(log_queue: Queue, logger_name: Optional[str] = LOGGER_NAME) -> QueueLogHandler:
    """
    Attach a QueueLogHandler to ``logger_name`` (the package logger by default).

    Returns:
        The attached handler (for later removal)
    """
    handler = QueueLogHandler(log_queue)
    logging.getLogger(logger_name).addHandler(handler)
    return handler


def detach_queue_handler(handler: QueueLogHandler, logger_name: Optional[str] = LOGGER_NAME) -> None:
    logging.getLogger(logger_name).removeHandler(handler)


def drain_queue(log_queue: Queue, limit: int = 200) -> List[LogLine]:
    """Pop up to ``limit`` pending lines without blocking (for a UI timer)."""
    lines: List[LogLine] = []
    while len(lines) < limit:
        try:
            lines.append(log_queue.get_nowait())
        except Empty:
            break
    return lines
