"""Marker collection and its persistence (local cache slot, remote history)."""

from .cache import CACHE_FILENAME, LocalMarkerCache
from .marker_store import MarkerStore
from .persistence import CommitResult, SessionPersistence
from .remote import RemoteHistoryClient

__all__ = [
    "CACHE_FILENAME",
    "CommitResult",
    "LocalMarkerCache",
    "MarkerStore",
    "RemoteHistoryClient",
    "SessionPersistence",
]
