"""
Module: body.hit_testing

Purpose:
    Resolve a board-space point to the topmost region containing it.

    Regions are scanned in reverse declaration order so the last-declared
    (topmost) region wins where shapes overlap. Rotated rectangles are tested
    by un-rotating the point about the rectangle centre (see
    RectGeometry.contains). A linear scan over ~20 regions needs no spatial
    index.

Key Classes:
    - HitTester
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from stressmap.core.models.geometry import Point
from stressmap.core.models.regions import Region

logger = logging.getLogger(__name__)


class HitTester:
    """Point to region resolver."""

    def resolve(self, board_point: Point, regions: Sequence[Region]) -> Optional[Region]:
        """
        Return the topmost region containing the point, or None on a miss.

        Args:
            board_point: Point in board space
            regions: Regions in declaration (z) order

        Returns:
            Containing Region, or None
        """
        for region in reversed(regions):
            if region.contains(board_point):
                logger.debug(f"Hit {region.instance_label} at ({board_point.x:.1f}, {board_point.y:.1f})")
                return region
        return None

