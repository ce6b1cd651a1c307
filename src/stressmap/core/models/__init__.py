"""
Core Models Package

Immutable, validated data models shared by every other subpackage.

All models are frozen dataclasses: a change (marker edit, move) produces a
new instance which the owning store swaps in by id. Serialization helpers
(`to_dict` / `from_dict`) live on the models; collection-level helpers live
in `core.utils.serialization`.
"""

from .geometry import CircleGeometry, DisplayBounds, Point, RectGeometry
from .regions import Region, ShapeKind, Side, SideAffinity
from .markers import Marker, Quality
from .suggestions import Suggestion
from .history import HistoryEntry
from .report import Insights, RegionHeat, RegionSuggestion, Report, ReportEntry

__all__ = [
    "CircleGeometry",
    "DisplayBounds",
    "Point",
    "RectGeometry",
    "Region",
    "ShapeKind",
    "Side",
    "SideAffinity",
    "Marker",
    "Quality",
    "Suggestion",
    "HistoryEntry",
    "Insights",
    "RegionHeat",
    "RegionSuggestion",
    "Report",
    "ReportEntry",
]
