"""
Module: engine

Purpose:
    Facade that wires the stress-map components together and exposes the
    operations a host UI drives: pointer events, selection edits, side and
    preset switches, commit/fetch and report export.

    Control flow of a pointer press:
        display point -> CoordinateNormalizer (board space)
        -> HitTester (region) -> MarkerStore.create (normalized position)
        -> SessionPersistence write-through to the local cache slot

Key Classes:
    - StressMapEngine: Orchestrator
    - EngineError: Misuse of the engine (e.g. export without exporter)

Dependencies:
    - body, session, protocols, report subpackages

Used By:
    - gui.body_map_widget.BodyMapWidget
    - Host applications
"""

from __future__ import annotations

import logging
from concurrent.futures import Future
from datetime import datetime
from typing import Any, Callable, List, Mapping, Optional, Tuple

from stressmap.body.coordinates import CoordinateNormalizer, clamp01
from stressmap.body.hit_testing import HitTester
from stressmap.body.model import BodyModel
from stressmap.body.presets import get_preset
from stressmap.config import EngineConfig
from stressmap.core.models.geometry import DisplayBounds, Point
from stressmap.core.models.history import HistoryEntry
from stressmap.core.models.markers import Marker, Quality, clamp_intensity
from stressmap.core.models.regions import Region, Side, validate_side
from stressmap.core.models.report import Insights, Report
from stressmap.core.models.suggestions import Suggestion
from stressmap.protocols.catalog import ProtocolCatalog, default_catalog
from stressmap.report.compositor import ReportCompositor, compute_insights
from stressmap.report.export import ExportPayload, ReportExporter, export_report
from stressmap.session.cache import LocalMarkerCache
from stressmap.session.marker_store import MarkerStore, new_marker_id, utc_now
from stressmap.session.persistence import CommitResult, SessionPersistence
from stressmap.session.remote import RemoteHistoryClient

logger = logging.getLogger(__name__)

NUDGE_STEP = 0.01
NUDGE_STEP_LARGE = 0.02


class EngineError(Exception):
    """Error raised when the engine is used incorrectly."""
    pass


class StressMapEngine:
    """
    Stress-map engine driven by host UI events.

    Args:
        config: Engine configuration (defaults if None)
        catalog: Protocol catalog (stock table if None)
        persistence: Persistence coordinator; built from config if None
        exporter: Default report exporter for export()
        clock: Timestamp source for markers and reports
        id_factory: Marker id source

    Usage:
        engine = StressMapEngine(EngineConfig(cache_path=slot))
        bounds = DisplayBounds(0, 0, 320, 640)
        marker = engine.pointer_down(Point(160, 170), bounds)
        engine.update_selected({"intensity": 7, "quality": "sharp"})
        report = engine.build_report()
        engine.shutdown()
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        *,
        catalog: Optional[ProtocolCatalog] = None,
        persistence: Optional[SessionPersistence] = None,
        exporter: Optional[ReportExporter] = None,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = new_marker_id,
    ) -> None:
        self.config = config or EngineConfig()
        self.catalog = catalog or default_catalog()
        self.exporter = exporter

        self.body = BodyModel(self.config.board_width, self.config.board_height)
        self.normalizer = CoordinateNormalizer(self.config.board_width, self.config.board_height)
        self.hit_tester = HitTester()
        self.compositor = ReportCompositor(clock=clock)
        self.store = MarkerStore(
            self.normalizer,
            clock=clock,
            id_factory=id_factory,
            default_intensity=self.config.default_intensity,
            default_quality=Quality(self.config.default_quality),
        )

        self.persistence = persistence or self._build_persistence(self.config)
        self.persistence.attach(self.store)

        self._preset = get_preset(self.config.preset)
        self._side: Side = validate_side(self.config.side)
        self._regions: Tuple[Region, ...] = ()
        self.last_session: Optional[Insights] = None
        self._regenerate()

    @staticmethod
    def _build_persistence(config: EngineConfig) -> SessionPersistence:
        cache = LocalMarkerCache(config.cache_path) if config.cache_path else None
        remote = (
            RemoteHistoryClient(config.history_url, timeout=config.request_timeout)
            if config.history_url else None
        )
        return SessionPersistence(cache=cache, remote=remote, max_workers=config.max_workers)

    # ─────────────────────────────────────────────────────────────────────────
    # Board state
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def side(self) -> Side:
        return self._side

    @property
    def preset(self) -> str:
        return self._preset.name

    @property
    def regions(self) -> Tuple[Region, ...]:
        """Regions of the displayed side, in z-order."""
        return self._regions

    def set_side(self, side: Side) -> None:
        """Switch the displayed side; markers are untouched."""
        self._side = validate_side(side)
        self.store.deselect()
        self._regenerate()

    def set_preset(self, preset: str) -> None:
        """Switch proportion preset; markers keep their normalized positions."""
        self._preset = get_preset(preset)
        self._regenerate()

    def _regenerate(self) -> None:
        self._regions = self.body.generate(self._preset, self._side)
        logger.debug(f"Generated {len(self._regions)} regions for preset {self._preset.name}/{self._side}")

    def _regions_for(self, side: Side) -> Tuple[Region, ...]:
        if side == self._side:
            return self._regions
        return self.body.generate(self._preset, side)

    # ─────────────────────────────────────────────────────────────────────────
    # Pointer input
    # ─────────────────────────────────────────────────────────────────────────

    def hover(self, display_point: Point, display_bounds: DisplayBounds) -> Optional[Region]:
        """Region under the pointer, for hover highlighting."""
        board = self.normalizer.to_board_space(display_point, display_bounds)
        return self.hit_tester.resolve(board, self._regions)

    def pointer_down(self, display_point: Point, display_bounds: DisplayBounds) -> Optional[Marker]:
        """
        Place a marker at a display point.

        Returns:
            The new (selected) marker, or None if the point misses the body
        """
        board = self.normalizer.to_board_space(display_point, display_bounds)
        region = self.hit_tester.resolve(board, self._regions)
        return self.store.create(self._side, region, board)

    def marker_at(
        self,
        display_point: Point,
        display_bounds: DisplayBounds,
        tolerance: float = 8.0,
    ) -> Optional[Marker]:
        """Topmost marker of the displayed side within ``tolerance`` display px."""
        for marker, pos in reversed(self.marker_positions(display_bounds)):
            if (pos.x - display_point.x) ** 2 + (pos.y - display_point.y) ** 2 <= tolerance ** 2:
                return marker
        return None

    def drag_selected(self, display_point: Point, display_bounds: DisplayBounds) -> Optional[Marker]:
        """
        Move the selected marker to a display point.

        The region is re-resolved; dragging off the body keeps the old region.
        """
        selected = self.store.selected
        if selected is None:
            return None
        board = self.normalizer.to_board_space(display_point, display_bounds)
        board = self._clamped_board(board)
        region = self.hit_tester.resolve(board, self._regions_for(selected.side))
        return self.store.move(selected.id, board, region)

    def nudge_selected(self, dx: int = 0, dy: int = 0, *, large: bool = False) -> Optional[Marker]:
        """Move the selected marker by whole nudge steps in normalized space."""
        selected = self.store.selected
        if selected is None:
            return None
        step = NUDGE_STEP_LARGE if large else NUDGE_STEP
        norm = Point(clamp01(selected.x + dx * step), clamp01(selected.y + dy * step))
        board = self.normalizer.to_board_from_normalized(norm)
        region = self.hit_tester.resolve(board, self._regions_for(selected.side))
        return self.store.move(selected.id, board, region)

    def _clamped_board(self, board: Point) -> Point:
        return Point(
            max(0.0, min(self.config.board_width, board.x)),
            max(0.0, min(self.config.board_height, board.y)),
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Markers and selection
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def selected(self) -> Optional[Marker]:
        return self.store.selected

    def markers(self, side: Optional[Side] = None) -> List[Marker]:
        """Markers of ``side`` (all markers when None)."""
        if side is None:
            return list(self.store.markers)
        return self.store.query(side)

    def marker_positions(
        self,
        display_bounds: DisplayBounds,
        side: Optional[Side] = None,
    ) -> List[Tuple[Marker, Point]]:
        """Display positions of the markers of ``side`` (displayed side by default)."""
        positions = []
        for marker in self.store.query(side or self._side):
            board = self.normalizer.to_board_from_normalized(Point(marker.x, marker.y))
            positions.append((marker, self.normalizer.to_display_space(board, display_bounds)))
        return positions

    def select(self, marker_id: str) -> Optional[Marker]:
        return self.store.select(marker_id)

    def deselect(self) -> None:
        self.store.deselect()

    def update_selected(self, patch: Mapping[str, Any]) -> Optional[Marker]:
        selected = self.store.selected
        if selected is None:
            return None
        return self.store.update(selected.id, patch)

    def remove_selected(self) -> None:
        selected = self.store.selected
        if selected is not None:
            self.store.remove(selected.id)

    def adjust_intensity(self, delta: int) -> Optional[Marker]:
        """Change the selected marker's intensity by ``delta``, clamped to 1..10."""
        selected = self.store.selected
        if selected is None:
            return None
        return self.store.update(selected.id, {"intensity": clamp_intensity(selected.intensity + delta)})

    def cycle_quality(self) -> Optional[Marker]:
        """Step the selected marker to the next quality."""
        selected = self.store.selected
        if selected is None:
            return None
        return self.store.update(selected.id, {"quality": selected.quality.next()})

    def suggestions_for_selected(self) -> List[Suggestion]:
        selected = self.store.selected
        if selected is None:
            return []
        return self.catalog.lookup(selected.region_id)

    def clear_all(self) -> None:
        """Remove every marker on both sides."""
        self.store.clear_all()

    # ─────────────────────────────────────────────────────────────────────────
    # Remote history
    # ─────────────────────────────────────────────────────────────────────────

    def commit(self, idempotency_key: Optional[str] = None) -> CommitResult:
        """
        Append the current markers to the remote history.

        A successful commit becomes the last saved session that later
        reports compare against.
        """
        snapshot = self.store.markers
        result = self.persistence.commit(snapshot, idempotency_key=idempotency_key)
        self._record_session(snapshot, result)
        return result

    def commit_async(self, idempotency_key: Optional[str] = None) -> Future:
        snapshot = self.store.markers
        future = self.persistence.commit_async(snapshot, idempotency_key=idempotency_key)
        future.add_done_callback(
            lambda f: None if f.exception() else self._record_session(snapshot, f.result())
        )
        return future

    def _record_session(self, snapshot: Tuple[Marker, ...], result: CommitResult) -> None:
        if result.ok:
            self.last_session = compute_insights(snapshot)

    def fetch_history(self) -> List[HistoryEntry]:
        return self.persistence.fetch_history()

    def fetch_history_async(self) -> Future:
        return self.persistence.fetch_history_async()

    # ─────────────────────────────────────────────────────────────────────────
    # Reporting
    # ─────────────────────────────────────────────────────────────────────────

    def build_report(self, now: Optional[datetime] = None) -> Report:
        return self.compositor.build(
            self.store.markers, self.catalog, now=now, previous=self.last_session
        )

    def export(self, exporter: Optional[ReportExporter] = None) -> ExportPayload:
        """
        Build a report and render it with ``exporter`` (or the default one).

        Raises:
            EngineError: No exporter available
        """
        exporter = exporter or self.exporter
        if exporter is None:
            raise EngineError("No report exporter configured")
        return export_report(self.build_report(), exporter)

    # ─────────────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────────────

    def shutdown(self) -> None:
        self.persistence.shutdown()

    def __enter__(self) -> "StressMapEngine":
        return self

    def __exit__(self, *args) -> None:
        self.shutdown()
