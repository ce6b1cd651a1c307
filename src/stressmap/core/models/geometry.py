"""
Module: geometry

Purpose:
    Provides the geometric primitives shared by the body model, the
    coordinate normalizer and the hit tester. All region geometry lives in
    board space (a fixed W x H canvas), never in display pixels.

Key Classes:
    - Point: A 2D point (board, display or normalized space)
    - DisplayBounds: The on-screen rectangle a board is drawn into
    - CircleGeometry: Circle with containment test
    - RectGeometry: Rounded rectangle with optional rotation and containment test

Dependencies:
    - dataclasses (std)
    - math (std)

Used By:
    - core.models.regions.Region
    - body.model, body.coordinates, body.hit_testing
    - utils.visualizer
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

MAX_ROTATION_DEGREES = 10.0


@dataclass(frozen=True, slots=True)
class Point:
    """
    A point in some 2D coordinate space.

    The space is implied by the caller: display pixels, board units or
    normalized fractions (0..1) of the board.
    """

    x: float
    y: float

    def rotated_about(self, cx: float, cy: float, degrees: float) -> Point:
        """
        Rotate this point about (cx, cy).

        Uses the screen convention (y grows downwards), so a positive angle
        turns clockwise on screen, matching SVG/Qt ``rotate()``.

        Args:
            cx: X of the pivot
            cy: Y of the pivot
            degrees: Rotation angle in degrees

        Returns:
            New rotated Point
        """
        theta = math.radians(degrees)
        cos_t = math.cos(theta)
        sin_t = math.sin(theta)
        dx = self.x - cx
        dy = self.y - cy
        return Point(
            x=cx + dx * cos_t - dy * sin_t,
            y=cy + dx * sin_t + dy * cos_t,
        )

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass(frozen=True, slots=True)
class DisplayBounds:
    """
    Rectangle of the host display the board is currently rendered into.

    Attributes:
        x: Left edge of the board on screen
        y: Top edge of the board on screen
        width: Rendered width in pixels (> 0)
        height: Rendered height in pixels (> 0)
    """

    x: float
    y: float
    width: float
    height: float

    def __post_init__(self) -> None:
        if self.width <= 0:
            raise ValueError(f"display width must be > 0: {self.width}")
        if self.height <= 0:
            raise ValueError(f"display height must be > 0: {self.height}")

    @property
    def origin(self) -> Point:
        return Point(self.x, self.y)


@dataclass(frozen=True, slots=True)
class CircleGeometry:
    """Circle in board space."""

    center_x: float
    center_y: float
    radius: float

    def __post_init__(self) -> None:
        if self.radius <= 0:
            raise ValueError(f"radius must be > 0: {self.radius}")

    @property
    def center(self) -> Point:
        return Point(self.center_x, self.center_y)

    def contains(self, point: Point) -> bool:
        """True if the point lies inside or on the circle."""
        dx = point.x - self.center_x
        dy = point.y - self.center_y
        return dx * dx + dy * dy <= self.radius * self.radius


@dataclass(frozen=True, slots=True)
class RectGeometry:
    """
    Rounded rectangle in board space, optionally rotated about its centre.

    The corner radius is cosmetic: containment treats the rectangle as
    square-cornered.

    Attributes:
        origin_x: Left edge before rotation
        origin_y: Top edge before rotation
        width: Width (> 0)
        height: Height (> 0)
        corner_radius: Cosmetic corner rounding
        rotation_degrees: Rotation about the centre, |r| <= 10, or None

    Invariants:
        - width > 0 and height > 0
        - corner_radius >= 0
        - rotation_degrees is None or within +/- MAX_ROTATION_DEGREES
    """

    origin_x: float
    origin_y: float
    width: float
    height: float
    corner_radius: float = 0.0
    rotation_degrees: Optional[float] = None

    def __post_init__(self) -> None:
        if self.width <= 0:
            raise ValueError(f"width must be > 0: {self.width}")
        if self.height <= 0:
            raise ValueError(f"height must be > 0: {self.height}")
        if self.corner_radius < 0:
            raise ValueError(f"corner_radius must be >= 0: {self.corner_radius}")
        if self.rotation_degrees is not None and abs(self.rotation_degrees) > MAX_ROTATION_DEGREES:
            raise ValueError(
                f"rotation must be within +/-{MAX_ROTATION_DEGREES}: {self.rotation_degrees}"
            )

    @property
    def center(self) -> Point:
        return Point(self.origin_x + self.width / 2, self.origin_y + self.height / 2)

    def contains(self, point: Point) -> bool:
        """
        True if the point lies inside or on the (possibly rotated) rectangle.

        A rotated rectangle is tested by rotating the point the opposite way
        about the centre and then doing the axis-aligned bounds test.
        """
        if self.rotation_degrees:
            c = self.center
            point = point.rotated_about(c.x, c.y, -self.rotation_degrees)
        return (
            self.origin_x <= point.x <= self.origin_x + self.width
            and self.origin_y <= point.y <= self.origin_y + self.height
        )

    def corners(self) -> tuple[Point, Point, Point, Point]:
        """Corner points after rotation, clockwise from top-left."""
        raw = (
            Point(self.origin_x, self.origin_y),
            Point(self.origin_x + self.width, self.origin_y),
            Point(self.origin_x + self.width, self.origin_y + self.height),
            Point(self.origin_x, self.origin_y + self.height),
        )
        if not self.rotation_degrees:
            return raw
        c = self.center
        return tuple(p.rotated_about(c.x, c.y, self.rotation_degrees) for p in raw)  # type: ignore[return-value]
