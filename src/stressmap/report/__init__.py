"""Report composition and export."""

from .compositor import ReportCompositor, compute_insights
from .export import (
    ReportExporter,
    build_visual_template,
    export_report,
    report_to_dict,
    report_to_text,
    save_report_json,
)

__all__ = [
    "ReportCompositor",
    "ReportExporter",
    "build_visual_template",
    "compute_insights",
    "export_report",
    "report_to_dict",
    "report_to_text",
    "save_report_json",
]
