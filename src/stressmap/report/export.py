"""
Report export.

Turns a Report into the structures handed to collaborators:

- ``build_visual_template``: section layout consumed by an external raster
  renderer (the ``ReportExporter`` protocol)
- ``report_to_dict``: JSON-ready export
- ``report_to_text``: plain-text summary for sharing or logs

Rasterization itself happens outside this package.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol, Union, runtime_checkable

from stressmap.core.models.report import Report

logger = logging.getLogger(__name__)

TEMPLATE_VERSION = 1
REPORT_TITLE = "Diagnostic Report"
TOP_REGIONS_IN_TEXT = 5

ExportPayload = Union[bytes, str]


@runtime_checkable
class ReportExporter(Protocol):
    """Renders a visual template into image bytes or a URI."""

    def render(self, template: dict[str, Any]) -> ExportPayload:
        ...


def build_visual_template(report: Report) -> dict[str, Any]:
    """
    Section layout of the shareable report image.

    Sections, top to bottom: header, anomalies (one row per marker),
    system load, recommended protocols, footer.
    """
    anomalies = [
        {
            "label": entry.region_label,
            "quality": entry.quality.value.upper(),
            "intensity": f"{entry.intensity}/10",
            "note": entry.note or None,
        }
        for entry in report.entries
    ]
    protocols = [
        {
            "region": top.region_id,
            "name": top.suggestion.name,
            "description": top.suggestion.description,
        }
        for top in report.top_suggestions_by_region
    ]
    return {
        "version": TEMPLATE_VERSION,
        "header": {
            "title": REPORT_TITLE.upper(),
            "timestamp": report.generated_at.isoformat(),
        },
        "anomalies": {
            "heading": "Detected Anomalies",
            "rows": anomalies,
            "empty_text": "No anomalies recorded." if report.is_empty else None,
        },
        "system_load": {
            "heading": "System Load",
            "value": report.aggregate_load,
            "caption": "Cumulative Stress Index",
        },
        "protocols": {
            "heading": "Recommended Protocol",
            "rows": protocols,
            "empty_text": "No protocols required." if report.is_empty else None,
        },
        "footer": {"text": "End of Report"},
    }


def report_to_dict(report: Report) -> dict[str, Any]:
    """JSON-ready representation of the complete report, insights included."""
    insights = report.insights
    return {
        "generatedAt": report.generated_at.isoformat(),
        "aggregateLoad": report.aggregate_load,
        "entries": [
            {
                "region": e.region,
                "regionLabel": e.region_label,
                "intensity": e.intensity,
                "quality": e.quality.value,
                "note": e.note,
            }
            for e in report.entries
        ],
        "topSuggestionsByRegion": [
            {"regionId": t.region_id, **t.suggestion.to_dict()}
            for t in report.top_suggestions_by_region
        ],
        "insights": {
            "count": insights.count,
            "averageIntensity": round(insights.average_intensity, 2),
            "asymmetry": {"left": insights.left, "right": insights.right, "bias": insights.lr_bias},
            "frontBack": {"front": insights.front, "back": insights.back, "bias": insights.fb_bias},
            "regionHeat": [
                {"regionId": h.region_id, "count": h.count, "average": round(h.average, 2)}
                for h in insights.region_heat
            ],
            "histogram": list(insights.histogram),
        },
        "averageDelta": report.average_delta,
    }


def report_to_text(report: Report) -> str:
    """Human readable multi-line summary."""
    i = report.insights
    lines = [
        f"Stress Map - {report.generated_at:%Y-%m-%d %H:%M}",
        f"Points: {i.count} | Avg intensity: {i.average_intensity:.1f}/10 | Load: {report.aggregate_load}",
        f"Left vs Right: {i.left}L / {i.right}R ({i.lr_bias})",
        f"Front vs Back: {i.front}F / {i.back}B ({i.fb_bias})",
    ]
    top = ", ".join(f"{h.region_id}({h.count})" for h in i.region_heat[:TOP_REGIONS_IN_TEXT])
    lines.append(f"Top regions: {top or '-'}")
    if report.average_delta is not None:
        lines.append(f"Vs last session: {report.average_delta:+.1f} avg intensity")
    for t in report.top_suggestions_by_region:
        lines.append(f">> {t.suggestion.name}: {t.suggestion.description}")
    return "\n".join(lines)


def export_report(report: Report, exporter: ReportExporter) -> ExportPayload:
    """Hand the visual template to ``exporter`` and return its payload."""
    payload = exporter.render(build_visual_template(report))
    logger.info(f"Exported report with {len(report.entries)} entries")
    return payload


def save_report_json(report: Report, path: Path) -> Path:
    """Write report_to_dict() as pretty JSON."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(report_to_dict(report), indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info(f"Saved report JSON to {path}")
    return path
