"""Unit tests for BodyMapWidget input handling (pytest-qt)."""

import pytest
from PySide6.QtCore import QPoint, Qt

from conftest import SequentialIds, SteppingClock
from stressmap.engine import StressMapEngine
from stressmap.gui.body_map_widget import BodyMapWidget


@pytest.fixture
def engine():
    eng = StressMapEngine(clock=SteppingClock(), id_factory=SequentialIds())
    yield eng
    eng.shutdown()


@pytest.fixture
def widget(qtbot, engine):
    """Widget sized so the board maps 1:1 onto it."""
    w = BodyMapWidget(engine)
    qtbot.addWidget(w)
    w.resize(320, 640)
    w.show()
    qtbot.waitExposed(w)
    return w


class TestBodyMapWidgetGeometry:

    def test_board_bounds_when_board_aspect_then_fill_widget(self, widget):
        bounds = widget.board_bounds()
        assert (bounds.x, bounds.y, bounds.width, bounds.height) == (0, 0, 320, 640)

    def test_board_bounds_when_wide_widget_then_centred_horizontally(self, widget):
        widget.resize(600, 640)
        bounds = widget.board_bounds()
        assert bounds.width == pytest.approx(320)
        assert bounds.x == pytest.approx(140)


class TestBodyMapWidgetInput:

    def test_click_on_chest_creates_marker_and_emits(self, qtbot, widget, engine):
        with qtbot.waitSignal(widget.markerCreated) as blocker:
            qtbot.mouseClick(widget, Qt.MouseButton.LeftButton, pos=QPoint(160, 170))
        assert blocker.args[0].region_id == "chest"
        assert len(engine.markers()) == 1

    def test_click_off_body_creates_nothing(self, qtbot, widget, engine):
        qtbot.mouseClick(widget, Qt.MouseButton.LeftButton, pos=QPoint(5, 5))
        assert engine.markers() == []

    def test_click_on_existing_marker_selects_instead_of_creating(self, qtbot, widget, engine):
        qtbot.mouseClick(widget, Qt.MouseButton.LeftButton, pos=QPoint(160, 170))
        qtbot.mouseClick(widget, Qt.MouseButton.LeftButton, pos=QPoint(150, 160))
        first = engine.markers()[0]
        qtbot.mouseClick(widget, Qt.MouseButton.LeftButton, pos=QPoint(161, 171))
        assert len(engine.markers()) == 2
        assert engine.selected == first

    def test_arrow_key_nudges_selected_marker(self, qtbot, widget, engine):
        qtbot.mouseClick(widget, Qt.MouseButton.LeftButton, pos=QPoint(160, 170))
        before = engine.selected.x
        qtbot.keyClick(widget, Qt.Key.Key_Right)
        assert engine.selected.x == pytest.approx(before + 0.01)

    def test_delete_key_removes_selected_marker(self, qtbot, widget, engine):
        qtbot.mouseClick(widget, Qt.MouseButton.LeftButton, pos=QPoint(160, 170))
        with qtbot.waitSignal(widget.markersChanged):
            qtbot.keyClick(widget, Qt.Key.Key_Delete)
        assert engine.markers() == []

    def test_q_key_cycles_quality(self, qtbot, widget, engine):
        qtbot.mouseClick(widget, Qt.MouseButton.LeftButton, pos=QPoint(160, 170))
        qtbot.keyClick(widget, Qt.Key.Key_Q)
        assert engine.selected.quality.value == "sharp"

    def test_set_side_switches_engine_side(self, widget, engine):
        widget.set_side("back")
        assert engine.side == "back"

    def test_detach_stops_markers_changed(self, qtbot, widget, engine):
        widget.detach()
        with qtbot.assertNotEmitted(widget.markersChanged):
            qtbot.mouseClick(widget, Qt.MouseButton.LeftButton, pos=QPoint(160, 170))
