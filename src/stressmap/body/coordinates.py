"""
Module: body.coordinates

Purpose:
    Converts between the three coordinate spaces used by the engine:

    - display space: host pixels, for the board drawn at some on-screen rect
    - board space: the fixed canonical W x H canvas all geometry lives in
    - normalized space: fractions (0..1) of the board, used for persistence

    Normalized coordinates do not depend on display size, so a persisted
    marker re-renders at the same relative body position on any viewport.

Key Classes:
    - CoordinateNormalizer
"""

from __future__ import annotations

from stressmap.core.models.geometry import DisplayBounds, Point

from .model import BOARD_HEIGHT, BOARD_WIDTH


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))


class CoordinateNormalizer:
    """
    Linear mapping between display, board and normalized coordinates.

    Example:
        >>> n = CoordinateNormalizer()
        >>> n.to_board_space(Point(80, 160), DisplayBounds(0, 0, 160, 320))
        Point(x=160.0, y=320.0)
        >>> n.to_normalized(Point(160, 320))
        Point(x=0.5, y=0.5)
    """

    def __init__(self, board_width: float = BOARD_WIDTH, board_height: float = BOARD_HEIGHT):
        if board_width <= 0 or board_height <= 0:
            raise ValueError(f"board size must be positive: {board_width}x{board_height}")
        self.board_width = board_width
        self.board_height = board_height

    def to_board_space(self, display_point: Point, display_bounds: DisplayBounds) -> Point:
        """Map a display pixel to board units."""
        sx = self.board_width / display_bounds.width
        sy = self.board_height / display_bounds.height
        return Point(
            x=(display_point.x - display_bounds.x) * sx,
            y=(display_point.y - display_bounds.y) * sy,
        )

    def to_display_space(self, board_point: Point, display_bounds: DisplayBounds) -> Point:
        """Inverse of to_board_space()."""
        sx = display_bounds.width / self.board_width
        sy = display_bounds.height / self.board_height
        return Point(
            x=display_bounds.x + board_point.x * sx,
            y=display_bounds.y + board_point.y * sy,
        )

    def to_normalized(self, board_point: Point) -> Point:
        return Point(board_point.x / self.board_width, board_point.y / self.board_height)

    def to_board_from_normalized(self, norm_point: Point) -> Point:
        return Point(norm_point.x * self.board_width, norm_point.y * self.board_height)
