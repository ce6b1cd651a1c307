"""
Module: report.compositor

Purpose:
    Builds the derived Report for a marker snapshot: one entry per marker,
    the aggregate load (sum of intensities), the first suggestion for each
    of the first three distinct regions, and descriptive insights.

Key Classes:
    - ReportCompositor

Key Functions:
    - compute_insights(markers): Counts, left/right and front/back bias,
      per-region heat and the intensity histogram

Dependencies:
    - protocols.catalog.ProtocolCatalog

Used By:
    - engine.StressMapEngine
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Sequence

from stressmap.body.model import side_affinity_for_label
from stressmap.core.models.markers import Marker
from stressmap.core.models.regions import SideAffinity
from stressmap.core.models.report import (
    HISTOGRAM_BINS,
    Insights,
    RegionHeat,
    RegionSuggestion,
    Report,
    ReportEntry,
)
from stressmap.protocols.catalog import ProtocolCatalog

logger = logging.getLogger(__name__)

TOP_REGION_LIMIT = 3


def _bias(first: int, second: int, first_name: str, second_name: str) -> str:
    if first == second:
        return "balanced"
    return first_name if first > second else second_name


def compute_insights(markers: Sequence[Marker]) -> Insights:
    """
    Descriptive statistics over ``markers``.

    Left/right comes from the instance label prefix ("L-Arm"), so centre
    regions count towards neither side.
    """
    if not markers:
        return Insights()

    left = right = front = back = 0
    histogram = [0] * HISTOGRAM_BINS
    # Insertion order keeps ties in first-seen order after the stable sort
    per_region: Dict[str, List[int]] = {}

    for marker in markers:
        per_region.setdefault(marker.region_id, []).append(marker.intensity)

        affinity = side_affinity_for_label(marker.region_label)
        if affinity == SideAffinity.LEFT:
            left += 1
        elif affinity == SideAffinity.RIGHT:
            right += 1

        if marker.side == "front":
            front += 1
        else:
            back += 1

        histogram[min(HISTOGRAM_BINS - 1, max(0, marker.intensity - 1))] += 1

    heat = [
        RegionHeat(region_id=rid, count=len(values), average=sum(values) / len(values))
        for rid, values in per_region.items()
    ]
    heat.sort(key=lambda h: h.count, reverse=True)

    total = sum(m.intensity for m in markers)
    return Insights(
        count=len(markers),
        average_intensity=total / len(markers),
        left=left,
        right=right,
        lr_bias=_bias(left, right, "left", "right"),
        front=front,
        back=back,
        fb_bias=_bias(front, back, "front", "back"),
        region_heat=tuple(heat),
        histogram=tuple(histogram),
    )


class ReportCompositor:
    """
    Pure report builder.

    Args:
        clock: Source of ``generated_at`` (UTC now by default)

    Example:
        >>> report = ReportCompositor().build(store.markers, default_catalog())
        >>> report.aggregate_load
        12
    """

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def build(
        self,
        markers: Sequence[Marker],
        catalog: ProtocolCatalog,
        *,
        now: Optional[datetime] = None,
        previous: Optional[Insights] = None,
    ) -> Report:
        """
        Compose a report.

        Args:
            markers: Markers in report order (typically creation order)
            catalog: Suggestion lookup
            now: Override for ``generated_at``
            previous: Insights of the last saved session, for the delta

        Returns:
            Report; an empty marker list yields an empty report with load 0
        """
        entries = tuple(
            ReportEntry(
                region=m.region_id,
                region_label=m.region_label,
                intensity=m.intensity,
                quality=m.quality,
                note=m.note,
            )
            for m in markers
        )
        report = Report(
            generated_at=now or self._clock(),
            entries=entries,
            aggregate_load=sum(m.intensity for m in markers),
            top_suggestions_by_region=self._top_suggestions(markers, catalog),
            insights=compute_insights(markers),
            previous_insights=previous,
        )
        logger.debug(
            f"Built report: {len(entries)} entries, load {report.aggregate_load}, "
            f"{len(report.top_suggestions_by_region)} suggestions"
        )
        return report

    @staticmethod
    def _top_suggestions(markers: Sequence[Marker], catalog: ProtocolCatalog) -> tuple[RegionSuggestion, ...]:
        # First three distinct regions in marker order; uncatalogued ones are
        # dropped afterwards, not replaced by a later region
        distinct: List[str] = []
        for marker in markers:
            if marker.region_id not in distinct:
                distinct.append(marker.region_id)
            if len(distinct) == TOP_REGION_LIMIT:
                break

        top: List[RegionSuggestion] = []
        for region_id in distinct:
            suggestions = catalog.lookup(region_id)
            if suggestions:
                top.append(RegionSuggestion(region_id=region_id, suggestion=suggestions[0]))
        return tuple(top)
