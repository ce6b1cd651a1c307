"""
Module: regions

Purpose:
    Provides the Region dataclass - a named area of the body schematic.
    Mirrored instances (left/right arm) share one canonical ``id`` and are
    told apart by ``instance_label``.

Key Functions:
    - Region.circle(...): Build a circular region
    - Region.rect(...): Build a (rotated) rectangular region
    - Region.contains(point): Containment test in board space

Dependencies:
    - dataclasses (std)
    - enum (std)
    - .geometry

Used By:
    - body.model.BodyModel
    - body.hit_testing.HitTester
    - session.marker_store.MarkerStore
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal, Optional, Union

from .geometry import CircleGeometry, Point, RectGeometry

Side = Literal["front", "back"]
SIDES: tuple[Side, ...] = ("front", "back")


class ShapeKind(str, Enum):
    """Geometry kind of a region."""
    CIRCLE = "circle"
    RECT = "rect"


class SideAffinity(str, Enum):
    """Which half of the body a region instance belongs to."""
    LEFT = "left"
    RIGHT = "right"
    CENTER = "center"


Geometry = Union[CircleGeometry, RectGeometry]


def validate_side(side: str) -> Side:
    """Return ``side`` if it is a known body side, else raise ValueError."""
    if side not in SIDES:
        raise ValueError(f"side must be one of {SIDES}: {side!r}")
    return side  # type: ignore[return-value]


@dataclass(frozen=True, slots=True)
class Region:
    """
    A named, possibly mirrored, geometric area of the body schematic.

    Attributes:
        id: Canonical region id shared by mirrored instances ("arms")
        instance_label: Display label of this instance ("L-Arm")
        shape_kind: circle or rect
        geometry: CircleGeometry or RectGeometry matching shape_kind
        side_affinity: left, right or center

    Invariants:
        - id and instance_label are non-empty
        - geometry type matches shape_kind

    Example:
        >>> head = Region.circle("head", "Head", 160, 50, 35)
        >>> head.contains(Point(160, 50))
        True
    """

    id: str
    instance_label: str
    shape_kind: ShapeKind
    geometry: Geometry
    side_affinity: SideAffinity = SideAffinity.CENTER

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("region id cannot be empty")
        if not self.instance_label:
            raise ValueError(f"region {self.id!r} needs an instance label")
        expected = CircleGeometry if self.shape_kind == ShapeKind.CIRCLE else RectGeometry
        if not isinstance(self.geometry, expected):
            raise ValueError(
                f"region {self.id!r}: {ShapeKind(self.shape_kind).value} needs {expected.__name__}, "
                f"got {type(self.geometry).__name__}"
            )

    # ─────────────────────────────────────────────────────────────────────────
    # Factory Methods
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def circle(
        cls,
        region_id: str,
        label: str,
        center_x: float,
        center_y: float,
        radius: float,
        side_affinity: SideAffinity = SideAffinity.CENTER,
    ) -> Region:
        return cls(
            id=region_id,
            instance_label=label,
            shape_kind=ShapeKind.CIRCLE,
            geometry=CircleGeometry(center_x, center_y, radius),
            side_affinity=side_affinity,
        )

    @classmethod
    def rect(
        cls,
        region_id: str,
        label: str,
        origin_x: float,
        origin_y: float,
        width: float,
        height: float,
        *,
        corner_radius: float = 0.0,
        rotation_degrees: Optional[float] = None,
        side_affinity: SideAffinity = SideAffinity.CENTER,
    ) -> Region:
        return cls(
            id=region_id,
            instance_label=label,
            shape_kind=ShapeKind.RECT,
            geometry=RectGeometry(
                origin_x, origin_y, width, height,
                corner_radius=corner_radius,
                rotation_degrees=rotation_degrees,
            ),
            side_affinity=side_affinity,
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Query Methods
    # ─────────────────────────────────────────────────────────────────────────

    def contains(self, point: Point) -> bool:
        """True if the board-space point lies inside this region."""
        return self.geometry.contains(point)

    @property
    def center(self) -> Point:
        return self.geometry.center

    def __repr__(self) -> str:
        return f"Region({self.id!r}, {self.instance_label!r}, {self.shape_kind.value})"
