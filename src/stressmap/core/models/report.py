"""
Module: report

Purpose:
    Provides the derived, non-persisted report types built by the
    ReportCompositor: one entry per marker, the aggregate load, the top
    suggestions and the descriptive insights.

Key Classes:
    - ReportEntry: One marker as it appears in the report
    - RegionSuggestion: First catalog suggestion for a region
    - RegionHeat: Marker count and mean intensity per region
    - Insights: Counts, biases and intensity histogram
    - Report: The complete report

Used By:
    - report.compositor, report.export
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Optional

from .markers import Quality
from .suggestions import Suggestion

LeftRightBias = Literal["left", "right", "balanced"]
FrontBackBias = Literal["front", "back", "balanced"]

HISTOGRAM_BINS = 10


@dataclass(frozen=True, slots=True)
class ReportEntry:
    region: str
    region_label: str
    intensity: int
    quality: Quality
    note: str = ""


@dataclass(frozen=True, slots=True)
class RegionSuggestion:
    region_id: str
    suggestion: Suggestion


@dataclass(frozen=True, slots=True)
class RegionHeat:
    region_id: str
    count: int
    average: float


@dataclass(frozen=True, slots=True)
class Insights:
    """
    Descriptive statistics over a marker set.

    Attributes:
        count: Number of markers
        average_intensity: Mean intensity (0.0 when empty)
        left: Markers on left-side region instances
        right: Markers on right-side region instances
        lr_bias: Side with more markers, or "balanced"
        front: Markers placed on the front view
        back: Markers placed on the back view
        fb_bias: View with more markers, or "balanced"
        region_heat: Per-region counts, most marked first
        histogram: Marker count per intensity 1..10 (index 0 is intensity 1)
    """

    count: int = 0
    average_intensity: float = 0.0
    left: int = 0
    right: int = 0
    lr_bias: LeftRightBias = "balanced"
    front: int = 0
    back: int = 0
    fb_bias: FrontBackBias = "balanced"
    region_heat: tuple[RegionHeat, ...] = ()
    histogram: tuple[int, ...] = (0,) * HISTOGRAM_BINS


@dataclass(frozen=True, slots=True)
class Report:
    """
    Aggregation of markers and suggestions prepared for export.

    Attributes:
        generated_at: Build timestamp
        entries: One entry per marker, in marker order
        aggregate_load: Sum of all marker intensities
        top_suggestions_by_region: At most three, one per distinct region
        insights: Descriptive statistics
        previous_insights: Insights of the last saved session, if any
    """

    generated_at: datetime
    entries: tuple[ReportEntry, ...]
    aggregate_load: int
    top_suggestions_by_region: tuple[RegionSuggestion, ...]
    insights: Insights = field(default_factory=Insights)
    previous_insights: Optional[Insights] = None

    @property
    def is_empty(self) -> bool:
        return not self.entries

    @property
    def average_delta(self) -> Optional[float]:
        """Change in average intensity since the last saved session (1 dp)."""
        if self.previous_insights is None:
            return None
        delta = self.insights.average_intensity - self.previous_insights.average_intensity
        return round(delta, 1)
