"""
Module: session.marker_store

Purpose:
    Owns the mutable collection of diagnostic markers (both sides in one
    list) and the single-marker selection.

Key Classes:
    - MarkerStore

Key Functions:
    - create(side, region, board_point): Place a marker after a hit test
    - update(marker_id, patch): Merge quality/intensity/note
    - move(marker_id, board_point, region): Reposition (drag / nudge)
    - remove(marker_id), clear_all(): Deletion
    - query(side): Markers placed on one side
    - select(marker_id), deselect(): Selection
    - subscribe(listener): Observe every collection mutation

Dependencies:
    - core.models.markers
    - body.coordinates.CoordinateNormalizer

Used By:
    - engine.StressMapEngine
    - session.persistence.SessionPersistence (as a subscriber)

Mutation model:
    Mutations run synchronously on the caller's (UI event) thread. Markers
    are frozen; an update swaps a new instance into the same list position.
    Listeners receive an immutable snapshot (tuple) after each mutation.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple

from stressmap.body.coordinates import CoordinateNormalizer, clamp01
from stressmap.core.models.geometry import Point
from stressmap.core.models.markers import DEFAULT_INTENSITY, DEFAULT_QUALITY, Marker, Quality
from stressmap.core.models.regions import Region, Side, validate_side

logger = logging.getLogger(__name__)

MarkerListener = Callable[[Tuple[Marker, ...]], None]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def new_marker_id() -> str:
    return str(uuid.uuid4())


class MarkerStore:
    """
    In-memory marker collection with selection.

    Args:
        normalizer: Converts board points to normalized coordinates
        clock: Timestamp source for ``created_at``
        id_factory: Marker id source
        default_intensity: Intensity of new markers
        default_quality: Quality of new markers

    Example:
        >>> store = MarkerStore()
        >>> marker = store.create("front", chest_region, Point(160, 170))
        >>> store.selected_id == marker.id
        True
    """

    def __init__(
        self,
        normalizer: Optional[CoordinateNormalizer] = None,
        *,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_marker_id,
        default_intensity: int = DEFAULT_INTENSITY,
        default_quality: Quality = DEFAULT_QUALITY,
    ):
        self._normalizer = normalizer or CoordinateNormalizer()
        self._clock = clock
        self._id_factory = id_factory
        self._default_intensity = default_intensity
        self._default_quality = Quality(default_quality)
        self._markers: List[Marker] = []
        self._selected_id: Optional[str] = None
        self._listeners: List[MarkerListener] = []

    # ─────────────────────────────────────────────────────────────────────────
    # Read access
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def markers(self) -> Tuple[Marker, ...]:
        """Snapshot of every marker, both sides, in creation order."""
        return tuple(self._markers)

    @property
    def selected_id(self) -> Optional[str]:
        return self._selected_id

    @property
    def selected(self) -> Optional[Marker]:
        if self._selected_id is None:
            return None
        return self.get(self._selected_id)

    def get(self, marker_id: str) -> Optional[Marker]:
        for marker in self._markers:
            if marker.id == marker_id:
                return marker
        return None

    def query(self, side: Side) -> List[Marker]:
        """Markers placed on ``side``; a projection, storage is not partitioned."""
        validate_side(side)
        return [m for m in self._markers if m.side == side]

    def __len__(self) -> int:
        return len(self._markers)

    # ─────────────────────────────────────────────────────────────────────────
    # Mutations
    # ─────────────────────────────────────────────────────────────────────────

    def create(self, side: Side, region: Optional[Region], board_point: Point) -> Optional[Marker]:
        """
        Create a marker for a successful hit test and select it.

        Args:
            side: Side currently displayed
            region: Hit test result; None (a miss) makes this a no-op
            board_point: Pointer position in board space

        Returns:
            The new Marker, or None on a miss
        """
        if region is None:
            return None
        validate_side(side)

        norm = self._normalizer.to_normalized(board_point)
        marker = Marker(
            id=self._id_factory(),
            created_at=self._clock(),
            side=side,
            region_id=region.id,
            region_label=region.instance_label,
            x=clamp01(norm.x),
            y=clamp01(norm.y),
            intensity=self._default_intensity,
            quality=self._default_quality,
        )
        self._markers.append(marker)
        self._selected_id = marker.id
        logger.debug(f"Created {marker!r}")
        self._notify()
        return marker

    def update(self, marker_id: str, patch: Mapping[str, Any]) -> Optional[Marker]:
        """
        Merge ``patch`` (quality, intensity, note) into a marker.

        Returns:
            The updated Marker, or None if the id is unknown

        Raises:
            ValueError: Unknown patch key or invalid value (store unchanged)
        """
        index = self._index_of(marker_id)
        if index is None:
            return None
        current = self._markers[index]
        updated = current.with_patch(patch)
        if updated == current:
            return current
        self._markers[index] = updated
        self._notify()
        return updated

    def move(self, marker_id: str, board_point: Point, region: Optional[Region] = None) -> Optional[Marker]:
        """
        Reposition a marker.

        The marker keeps its previous region when ``region`` is None (the
        pointer was dragged off the body).

        Returns:
            The moved Marker, or None if the id is unknown
        """
        index = self._index_of(marker_id)
        if index is None:
            return None
        current = self._markers[index]
        norm = self._normalizer.to_normalized(board_point)
        updated = current.moved_to(
            x=clamp01(norm.x),
            y=clamp01(norm.y),
            region_id=region.id if region else current.region_id,
            region_label=region.instance_label if region else current.region_label,
        )
        if updated == current:
            return current
        self._markers[index] = updated
        self._notify()
        return updated

    def remove(self, marker_id: str) -> None:
        """Delete a marker; clears the selection if it was selected."""
        index = self._index_of(marker_id)
        if index is None:
            return
        del self._markers[index]
        if self._selected_id == marker_id:
            self._selected_id = None
        self._notify()

    def clear_all(self) -> None:
        """
        Remove every marker on both sides and clear the selection.

        Clears the front and back views alike, even when only one is shown.
        """
        had_markers = bool(self._markers)
        self._markers.clear()
        self._selected_id = None
        if had_markers:
            logger.info("Cleared all markers")
        self._notify()

    def restore(self, markers: Iterable[Marker]) -> None:
        """
        Replace the collection verbatim without notifying listeners.

        Used once at start-up to load the cache slot.
        """
        self._markers = list(markers)
        self._selected_id = None

    # ─────────────────────────────────────────────────────────────────────────
    # Selection
    # ─────────────────────────────────────────────────────────────────────────

    def select(self, marker_id: str) -> Optional[Marker]:
        """Select a marker (deselecting any other); unknown id is a no-op."""
        marker = self.get(marker_id)
        if marker is not None:
            self._selected_id = marker_id
        return marker

    def deselect(self) -> None:
        self._selected_id = None

    # ─────────────────────────────────────────────────────────────────────────
    # Observers
    # ─────────────────────────────────────────────────────────────────────────

    def subscribe(self, listener: MarkerListener) -> Callable[[], None]:
        """
        Register a callback run after every collection mutation.

        Returns:
            A function that unsubscribes the listener
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        snapshot = self.markers
        for listener in list(self._listeners):
            listener(snapshot)

    def _index_of(self, marker_id: str) -> Optional[int]:
        for i, marker in enumerate(self._markers):
            if marker.id == marker_id:
                return i
        return None
