"""
Body map host widget.

Paints the body board of a StressMapEngine and forwards pointer and
keyboard input to it. The board keeps its 1:2 aspect ratio and is centred
in the widget; the widget rectangle it occupies is the display bounds
passed to the engine.

Input:
    - left click on the body: place a marker (or pick an existing one and
      start dragging it)
    - arrows: nudge the selection (Shift for a larger step)
    - +/-: intensity, Q: cycle quality, Delete/Backspace: remove,
      Escape: deselect
"""
from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import QPointF, QRectF, Qt, Signal
from PySide6.QtGui import QBrush, QColor, QKeyEvent, QMouseEvent, QPainter, QPen
from PySide6.QtWidgets import QSizePolicy, QWidget

from stressmap.core.models.geometry import CircleGeometry, DisplayBounds, Point
from stressmap.core.models.markers import Marker
from stressmap.core.models.regions import Region
from stressmap.engine import StressMapEngine
from stressmap.utils.visualizer import QUALITY_COLORS, marker_radius

BACKGROUND = QColor("#101010")
REGION_FILL = QColor(255, 255, 255, 18)
REGION_HOVER_FILL = QColor(16, 185, 129, 90)
REGION_OUTLINE = QColor(255, 255, 255, 90)
SELECTION_OUTLINE = QColor("#ffffff")


class BodyMapWidget(QWidget):
    """
    Interactive body board.

    Signals:
        markerCreated(object): A marker was placed
        selectionChanged(object): Selected marker (or None)
        hoverChanged(str): Instance label under the pointer ("" when none)
        markersChanged(): The marker collection was mutated
    """

    markerCreated = Signal(object)
    selectionChanged = Signal(object)
    hoverChanged = Signal(str)
    markersChanged = Signal()

    def __init__(self, engine: StressMapEngine, parent=None):
        super().__init__(parent)
        self.engine = engine
        self._hovered: Optional[Region] = None
        self._dragging = False

        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Expanding)
        self.setMinimumSize(160, 320)

        self._unsubscribe: Optional[Callable[[], None]] = engine.store.subscribe(
            lambda _markers: self._on_markers_changed()
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Geometry
    # ─────────────────────────────────────────────────────────────────────────

    def board_bounds(self) -> DisplayBounds:
        """Largest rect with the board aspect ratio, centred in the widget."""
        bw, bh = self.engine.config.board_width, self.engine.config.board_height
        scale = min(max(self.width(), 1) / bw, max(self.height(), 1) / bh)
        w, h = bw * scale, bh * scale
        return DisplayBounds((self.width() - w) / 2, (self.height() - h) / 2, w, h)

    @staticmethod
    def _to_point(pos: QPointF) -> Point:
        return Point(pos.x(), pos.y())

    # ─────────────────────────────────────────────────────────────────────────
    # Engine actions
    # ─────────────────────────────────────────────────────────────────────────

    def set_side(self, side: str) -> None:
        self.engine.set_side(side)
        self.selectionChanged.emit(None)
        self.update()

    def set_preset(self, preset: str) -> None:
        self.engine.set_preset(preset)
        self.update()

    def detach(self) -> None:
        """Stop listening to the engine's marker store."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_markers_changed(self) -> None:
        self.markersChanged.emit()
        self.update()

    # ─────────────────────────────────────────────────────────────────────────
    # Input
    # ─────────────────────────────────────────────────────────────────────────

    def mousePressEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        if event.button() != Qt.MouseButton.LeftButton:
            return
        point = self._to_point(event.position())
        bounds = self.board_bounds()

        existing = self.engine.marker_at(point, bounds)
        if existing is not None:
            self.engine.select(existing.id)
            self._dragging = True
            self.selectionChanged.emit(existing)
            self.update()
            return

        marker = self.engine.pointer_down(point, bounds)
        if marker is not None:
            self.markerCreated.emit(marker)
            self.selectionChanged.emit(marker)

    def mouseMoveEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        point = self._to_point(event.position())
        bounds = self.board_bounds()
        if self._dragging:
            self.engine.drag_selected(point, bounds)
            return

        region = self.engine.hover(point, bounds)
        if region != self._hovered:
            self._hovered = region
            self.hoverChanged.emit(region.instance_label if region else "")
            self.update()

    def mouseReleaseEvent(self, event: QMouseEvent) -> None:  # noqa: N802
        if event.button() == Qt.MouseButton.LeftButton:
            self._dragging = False

    def leaveEvent(self, event) -> None:  # noqa: N802
        if self._hovered is not None:
            self._hovered = None
            self.hoverChanged.emit("")
            self.update()
        super().leaveEvent(event)

    def keyPressEvent(self, event: QKeyEvent) -> None:  # noqa: N802
        if self.engine.selected is None:
            super().keyPressEvent(event)
            return

        key = event.key()
        large = bool(event.modifiers() & Qt.KeyboardModifier.ShiftModifier)
        nudges = {
            Qt.Key.Key_Left: (-1, 0),
            Qt.Key.Key_Right: (1, 0),
            Qt.Key.Key_Up: (0, -1),
            Qt.Key.Key_Down: (0, 1),
        }
        if key in nudges:
            dx, dy = nudges[key]
            self.engine.nudge_selected(dx, dy, large=large)
        elif key in (Qt.Key.Key_Plus, Qt.Key.Key_Equal):
            self.engine.adjust_intensity(1)
        elif key == Qt.Key.Key_Minus:
            self.engine.adjust_intensity(-1)
        elif key == Qt.Key.Key_Q:
            self.engine.cycle_quality()
        elif key in (Qt.Key.Key_Delete, Qt.Key.Key_Backspace):
            self.engine.remove_selected()
            self.selectionChanged.emit(None)
        elif key == Qt.Key.Key_Escape:
            self.engine.deselect()
            self.selectionChanged.emit(None)
            self.update()
        else:
            super().keyPressEvent(event)
            return
        event.accept()

    # ─────────────────────────────────────────────────────────────────────────
    # Painting
    # ─────────────────────────────────────────────────────────────────────────

    def paintEvent(self, _event) -> None:  # noqa: N802
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing, on=True)
        painter.fillRect(self.rect(), BACKGROUND)

        bounds = self.board_bounds()
        scale = bounds.width / self.engine.config.board_width
        painter.save()
        painter.translate(bounds.x, bounds.y)
        painter.scale(scale, scale)
        for region in self.engine.regions:
            self._draw_region(painter, region)
        painter.restore()

        selected = self.engine.selected
        for marker, pos in self.engine.marker_positions(bounds):
            self._draw_marker(painter, marker, pos, scale, marker == selected)
        painter.end()

    def _draw_region(self, painter: QPainter, region: Region) -> None:
        fill = REGION_HOVER_FILL if region == self._hovered else REGION_FILL
        painter.setBrush(QBrush(fill))
        painter.setPen(QPen(REGION_OUTLINE, 1))

        geom = region.geometry
        if isinstance(geom, CircleGeometry):
            painter.drawEllipse(QPointF(geom.center_x, geom.center_y), geom.radius, geom.radius)
            return

        painter.save()
        c = geom.center
        painter.translate(c.x, c.y)
        if geom.rotation_degrees:
            painter.rotate(geom.rotation_degrees)
        rect = QRectF(-geom.width / 2, -geom.height / 2, geom.width, geom.height)
        painter.drawRoundedRect(rect, geom.corner_radius, geom.corner_radius)
        painter.restore()

    def _draw_marker(
        self,
        painter: QPainter,
        marker: Marker,
        pos: Point,
        scale: float,
        selected: bool,
    ) -> None:
        r, g, b, a = QUALITY_COLORS[marker.quality]
        radius = marker_radius(marker.intensity, scale)
        painter.setBrush(QBrush(QColor(r, g, b, a)))
        painter.setPen(QPen(SELECTION_OUTLINE, 2) if selected else Qt.PenStyle.NoPen)
        painter.drawEllipse(QPointF(pos.x, pos.y), radius, radius)
