"""
Unit Tests for Report Composition and Export

Tests for ReportCompositor.build, insights and the export helpers.
"""

import json
from datetime import datetime, timezone

import pytest

from stressmap.core.models.geometry import Point
from stressmap.core.models.markers import Quality
from stressmap.core.models.regions import Region
from stressmap.protocols.catalog import ProtocolCatalog, default_catalog
from stressmap.report.compositor import ReportCompositor, compute_insights
from stressmap.report.export import (
    ReportExporter,
    build_visual_template,
    export_report,
    report_to_dict,
    report_to_text,
    save_report_json,
)

GENERATED = datetime(2025, 3, 14, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def compositor() -> ReportCompositor:
    return ReportCompositor(clock=lambda: GENERATED)


@pytest.fixture
def catalog() -> ProtocolCatalog:
    return default_catalog()


class TestReportCompositorBuild:
    """Tests for ReportCompositor.build."""

    def test_build_when_two_markers_then_load_is_intensity_sum(self, compositor, catalog, make_marker):
        report = compositor.build([make_marker(intensity=7), make_marker(intensity=3)], catalog)
        assert report.aggregate_load == 10
        assert len(report.entries) == 2
        assert report.generated_at == GENERATED

    def test_build_when_no_markers_then_empty_report(self, compositor, catalog):
        report = compositor.build([], catalog)
        assert report.is_empty
        assert report.aggregate_load == 0
        assert report.top_suggestions_by_region == ()
        assert report.insights.count == 0

    def test_build_after_quality_update_then_entry_shows_new_quality(self, compositor, catalog, store):
        chest = Region.rect("chest", "Chest", 105, 140, 110, 60)
        marker = store.create("front", chest, Point(160, 170))
        store.update(marker.id, {"quality": "sharp"})
        report = compositor.build(store.markers, catalog)
        assert report.entries[0].quality is Quality.SHARP

    def test_build_tracks_load_through_create_update_remove(self, compositor, catalog, store):
        chest = Region.rect("chest", "Chest", 105, 140, 110, 60)
        a = store.create("front", chest, Point(160, 170))
        b = store.create("front", chest, Point(150, 160))
        store.update(a.id, {"intensity": 9})
        assert compositor.build(store.markers, catalog).aggregate_load == 14
        store.remove(b.id)
        assert compositor.build(store.markers, catalog).aggregate_load == 9

    def test_build_when_now_given_then_overrides_clock(self, compositor, catalog):
        now = datetime(2030, 1, 1, tzinfo=timezone.utc)
        assert compositor.build([], catalog, now=now).generated_at == now

    def test_build_when_no_previous_session_then_no_delta(self, compositor, catalog, make_marker):
        report = compositor.build([make_marker(intensity=4)], catalog)
        assert report.previous_insights is None
        assert report.average_delta is None

    def test_build_when_previous_session_then_average_delta(self, compositor, catalog, make_marker):
        previous = compute_insights([make_marker(intensity=3), make_marker(intensity=4)])
        report = compositor.build([make_marker(intensity=6)], catalog, previous=previous)
        assert report.previous_insights == previous
        assert report.average_delta == pytest.approx(2.5)

    # ─────────────────────────────────────────────────────────────────────────
    # Top Suggestion Tests
    # ─────────────────────────────────────────────────────────────────────────

    def test_top_suggestions_take_first_three_distinct_regions(self, compositor, catalog, make_marker):
        markers = [
            make_marker(region_id="neck", region_label="Neck"),
            make_marker(region_id="neck", region_label="Neck"),
            make_marker(region_id="arms", region_label="L-Arm"),
            make_marker(region_id="arms", region_label="R-Arm"),
            make_marker(region_id="feet", region_label="L-Foot"),
            make_marker(region_id="head", region_label="Head"),
        ]
        top = compositor.build(markers, catalog).top_suggestions_by_region
        assert [t.region_id for t in top] == ["neck", "arms", "feet"]
        assert top[0].suggestion == catalog.lookup("neck")[0]

    def test_top_suggestions_omit_regions_without_catalog_entry(self, compositor, make_marker):
        catalog = ProtocolCatalog({"neck": [("Chin Tucks", "Hold 5s.")]})
        markers = [
            make_marker(region_id="elbow", region_label="Elbow"),
            make_marker(region_id="neck", region_label="Neck"),
        ]
        top = compositor.build(markers, catalog).top_suggestions_by_region
        assert [t.region_id for t in top] == ["neck"]

    def test_top_suggestions_do_not_backfill_past_third_region(self, compositor, make_marker):
        """An uncatalogued region still uses up one of the three slots."""
        catalog = ProtocolCatalog({
            "neck": [("A", "a")], "arms": [("B", "b")], "head": [("C", "c")],
        })
        markers = [
            make_marker(region_id="elbow", region_label="Elbow"),
            make_marker(region_id="neck", region_label="Neck"),
            make_marker(region_id="arms", region_label="L-Arm"),
            make_marker(region_id="head", region_label="Head"),
        ]
        top = compositor.build(markers, catalog).top_suggestions_by_region
        assert [t.region_id for t in top] == ["neck", "arms"]


class TestComputeInsights:
    """Tests for compute_insights."""

    def test_insights_when_empty_then_defaults(self):
        insights = compute_insights([])
        assert insights.count == 0
        assert insights.lr_bias == "balanced"
        assert sum(insights.histogram) == 0

    def test_insights_counts_left_right_by_label_prefix(self, make_marker):
        insights = compute_insights([
            make_marker(region_id="arms", region_label="L-Arm"),
            make_marker(region_id="hands", region_label="L-Hand"),
            make_marker(region_id="arms", region_label="R-Arm"),
            make_marker(region_id="neck", region_label="Neck"),
        ])
        assert (insights.left, insights.right) == (2, 1)
        assert insights.lr_bias == "left"

    def test_insights_front_back_bias(self, make_marker):
        insights = compute_insights([
            make_marker(side="back", region_id="lowerBack", region_label="Lower Back"),
            make_marker(side="back", region_id="lowerBack", region_label="Lower Back"),
            make_marker(side="front"),
        ])
        assert (insights.front, insights.back) == (1, 2)
        assert insights.fb_bias == "back"

    def test_insights_region_heat_sorted_by_count_then_first_seen(self, make_marker):
        insights = compute_insights([
            make_marker(region_id="neck", region_label="Neck", intensity=2),
            make_marker(region_id="feet", region_label="L-Foot", intensity=4),
            make_marker(region_id="feet", region_label="R-Foot", intensity=8),
            make_marker(region_id="head", region_label="Head", intensity=1),
        ])
        assert [h.region_id for h in insights.region_heat] == ["feet", "neck", "head"]
        assert insights.region_heat[0].average == pytest.approx(6.0)

    def test_insights_histogram_and_average(self, make_marker):
        insights = compute_insights([
            make_marker(intensity=1), make_marker(intensity=10), make_marker(intensity=10),
        ])
        assert insights.histogram[0] == 1
        assert insights.histogram[9] == 2
        assert insights.average_intensity == pytest.approx(7.0)


class RecordingExporter:
    def __init__(self):
        self.templates = []

    def render(self, template):
        self.templates.append(template)
        return b"\x89PNG"


class TestReportExport:
    """Tests for templates and export helpers."""

    @pytest.fixture
    def report(self, compositor, catalog, make_marker):
        return compositor.build([
            make_marker(region_id="neck", region_label="Neck", intensity=6, note="monitor height"),
            make_marker(region_id="arms", region_label="L-Arm", intensity=3, quality="tingle"),
        ], catalog)

    def test_build_visual_template_sections(self, report):
        template = build_visual_template(report)
        assert template["header"]["title"] == "DIAGNOSTIC REPORT"
        assert template["system_load"]["value"] == 9
        assert template["anomalies"]["rows"][0] == {
            "label": "Neck", "quality": "ACHE", "intensity": "6/10", "note": "monitor height",
        }
        assert template["anomalies"]["rows"][1]["note"] is None
        assert [p["region"] for p in template["protocols"]["rows"]] == ["neck", "arms"]
        assert template["footer"]["text"] == "End of Report"

    def test_build_visual_template_when_empty_then_has_empty_texts(self, compositor, catalog):
        template = build_visual_template(compositor.build([], catalog))
        assert template["anomalies"]["empty_text"] == "No anomalies recorded."
        assert template["protocols"]["rows"] == []

    def test_report_to_dict_is_json_serializable(self, report):
        data = json.loads(json.dumps(report_to_dict(report)))
        assert data["aggregateLoad"] == 9
        assert data["entries"][1]["quality"] == "tingle"
        assert data["insights"]["asymmetry"] == {"left": 1, "right": 0, "bias": "left"}

    def test_report_to_text_lists_points_and_protocols(self, report):
        text = report_to_text(report)
        assert "Points: 2" in text
        assert "Left vs Right: 1L / 0R (left)" in text
        assert ">> Cervical Realignment" in text
        assert "Vs last session" not in text
        assert report_to_dict(report)["averageDelta"] is None

    def test_report_to_text_when_previous_session_then_shows_delta(self, compositor, catalog, make_marker):
        previous = compute_insights([make_marker(intensity=8)])
        report = compositor.build([make_marker(intensity=5)], catalog, previous=previous)
        assert "Vs last session: -3.0 avg intensity" in report_to_text(report)
        assert report_to_dict(report)["averageDelta"] == -3.0

    def test_export_report_passes_template_to_exporter(self, report):
        exporter = RecordingExporter()
        assert isinstance(exporter, ReportExporter)
        assert export_report(report, exporter) == b"\x89PNG"
        assert exporter.templates[0]["system_load"]["value"] == 9

    def test_save_report_json_writes_file(self, report, tmp_path):
        path = save_report_json(report, tmp_path / "out" / "report.json")
        assert json.loads(path.read_text(encoding="utf-8"))["aggregateLoad"] == 9
