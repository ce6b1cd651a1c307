"""
Module: session.persistence

Purpose:
    Connects a MarkerStore to its two persistence targets:

    - the local cache slot, restored on attach and rewritten (write-through)
      after every store mutation
    - the remote history, appended to on commit and read on fetch

    Failures never propagate: cache problems are logged and the engine keeps
    working in memory; commit failures are reported through CommitResult;
    fetch failures return the last good history.

Key Classes:
    - CommitResult: Outcome of a commit
    - SessionPersistence: Cache + remote coordinator

Dependencies:
    - requests (via session.remote)
    - concurrent.futures: Background remote calls

Used By:
    - engine.StressMapEngine
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

import requests

from stressmap.core.models.history import HistoryEntry
from stressmap.core.models.markers import Marker
from stressmap.core.schemas.validator import ValidationError
from stressmap.core.utils.serialization import deserialize_history, markers_to_history_payload

from .cache import LocalMarkerCache
from .marker_store import MarkerStore
from .remote import RemoteHistoryClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommitResult:
    """
    Outcome of committing a marker snapshot to the remote history.

    Attributes:
        ok: True if the server accepted the entries
        status_code: HTTP status, None when no response was received
        error: Failure description, None on success
        count: Number of entries sent
    """

    ok: bool
    status_code: Optional[int] = None
    error: Optional[str] = None
    count: int = 0


class SessionPersistence:
    """
    Local cache and remote history coordinator.

    Usage:
        persistence = SessionPersistence(cache=LocalMarkerCache(path),
                                         remote=RemoteHistoryClient(url))
        persistence.attach(store)
        result = persistence.commit(store.markers)
        history = persistence.fetch_history()
        persistence.shutdown()

    Either target may be None; the corresponding operations then degrade to
    no-ops (restore nothing, commit fails with an explanatory error).
    """

    def __init__(
        self,
        cache: Optional[LocalMarkerCache] = None,
        remote: Optional[RemoteHistoryClient] = None,
        max_workers: int = 2,
    ) -> None:
        self.cache = cache
        self.remote = remote
        self._max_workers = max_workers
        self._executor: Optional[ThreadPoolExecutor] = None
        self._last_history: List[HistoryEntry] = []
        self._unsubscribe: Optional[Callable[[], None]] = None

    # ─────────────────────────────────────────────────────────────────────────
    # Local cache
    # ─────────────────────────────────────────────────────────────────────────

    def attach(self, store: MarkerStore) -> int:
        """
        Restore the cache slot into ``store`` and keep the slot in sync.

        Must run before any user interaction with the store.

        Returns:
            Number of markers restored
        """
        self.detach()
        restored = self.cache.read() if self.cache else []
        store.restore(restored)
        if restored:
            logger.info(f"Restored {len(restored)} cached markers")
        self._unsubscribe = store.subscribe(self._write_through)
        return len(restored)

    def detach(self) -> None:
        """Stop mirroring the attached store."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _write_through(self, markers: Sequence[Marker]) -> None:
        if self.cache is not None:
            self.cache.write(markers)

    # ─────────────────────────────────────────────────────────────────────────
    # Remote history
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def last_history(self) -> List[HistoryEntry]:
        """History from the most recent successful fetch."""
        return list(self._last_history)

    def commit(self, markers: Sequence[Marker], idempotency_key: Optional[str] = None) -> CommitResult:
        """
        Append a snapshot of ``markers`` to the remote history.

        Each call appends again; pass ``idempotency_key`` to let the server
        de-duplicate retries.

        Returns:
            CommitResult; never raises
        """
        snapshot = tuple(markers)
        if self.remote is None:
            return CommitResult(ok=False, error="No history endpoint configured")

        payload = markers_to_history_payload(snapshot)
        try:
            response = self.remote.post_entries(payload, idempotency_key=idempotency_key)
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.warning(f"History commit rejected (status {status}): {e}")
            return CommitResult(ok=False, status_code=status, error=str(e), count=len(snapshot))
        except requests.RequestException as e:
            logger.warning(f"History commit failed: {e}")
            return CommitResult(ok=False, error=str(e), count=len(snapshot))

        logger.info(f"Committed {len(snapshot)} entries to history")
        return CommitResult(ok=True, status_code=response.status_code, count=len(snapshot))

    def fetch_history(self) -> List[HistoryEntry]:
        """
        Read the remote history.

        Returns:
            Fetched entries, or the last good list if the fetch fails
        """
        if self.remote is None:
            return self.last_history
        try:
            entries = deserialize_history(self.remote.get_entries())
        except (requests.RequestException, ValueError, ValidationError) as e:
            logger.warning(f"History fetch failed, keeping {len(self._last_history)} cached rows: {e}")
            return self.last_history

        self._last_history = entries
        logger.info(f"Fetched {len(entries)} history entries")
        return list(entries)

    def commit_async(self, markers: Sequence[Marker], idempotency_key: Optional[str] = None) -> Future:
        """Run commit() on the worker pool; the snapshot is taken now."""
        return self._pool().submit(self.commit, tuple(markers), idempotency_key)

    def fetch_history_async(self) -> Future:
        """Run fetch_history() on the worker pool."""
        return self._pool().submit(self.fetch_history)

    def _pool(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self._max_workers,
                thread_name_prefix="stressmap-remote",
            )
        return self._executor

    def shutdown(self) -> None:
        """Wait for pending remote calls and release resources."""
        self.detach()
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        if self.remote is not None:
            self.remote.close()

    def __enter__(self) -> "SessionPersistence":
        return self

    def __exit__(self, *args) -> None:
        self.shutdown()
