"""Logging and debug-visualization helpers."""

from .logging_utils import (
    QueueLogHandler,
    attach_queue_handler,
    configure_logging,
    detach_queue_handler,
    drain_queue,
)

__all__ = [
    "QueueLogHandler",
    "attach_queue_handler",
    "configure_logging",
    "detach_queue_handler",
    "drain_queue",
]
