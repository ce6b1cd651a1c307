"""
Module: body.model

Purpose:
    Deterministic generator of the named body regions for a
    (proportion preset, side) pair. The layout constants below are in the
    canonical BOARD_WIDTH x BOARD_HEIGHT space; a model built for another
    board size scales every generated region onto it, so the body always
    fills the board the same way.

Key Classes:
    - BodyModel: Region generator

Key Functions:
    - BodyModel.generate(preset, side): Fresh tuple of regions in z-order
    - side_affinity_for_label(label): left/right/center from an instance label

Dependencies:
    - core.models.regions
    - body.presets

Used By:
    - engine.StressMapEngine
    - utils.visualizer, gui.body_map_widget

Z-order:
    Emission order is z-order. Later regions sit on top for hit testing:
    neck, head, shoulders, torso, arms, forearms, hands, thighs, calves, feet.
"""

from __future__ import annotations

from dataclasses import replace
from typing import List, Union

from stressmap.core.models.geometry import CircleGeometry, RectGeometry
from stressmap.core.models.regions import Region, SideAffinity, Side, validate_side

from .presets import ProportionPreset, get_preset

BOARD_WIDTH = 320
BOARD_HEIGHT = 640

# Fixed vertical layout (board units)
TORSO_TOP = 140
SHOULDER_TOP = 100
ARM_TOP = 125
FOREARM_TOP = 210
HAND_CENTER_Y = 305
THIGH_TOP = 325
CALF_TOP = 420
FOOT_TOP = 505

ARM_WIDTH = 32
LEG_WIDTH = 38
CORNER_RADIUS = 4

# Canonical region ids
HEAD = "head"
NECK = "neck"
SHOULDERS = "shoulders"
CHEST = "chest"
ABDOMEN = "abdomen"
UPPER_BACK = "upperBack"
LOWER_BACK = "lowerBack"
HIPS = "hips"
ARMS = "arms"
FOREARMS = "forearms"
HANDS = "hands"
THIGHS = "thighs"
CALVES = "calves"
FEET = "feet"

FRONT_ONLY = frozenset({CHEST, ABDOMEN})
BACK_ONLY = frozenset({UPPER_BACK, LOWER_BACK})


def side_affinity_for_label(label: str) -> SideAffinity:
    """Left/right instance labels carry an ``L-`` / ``R-`` prefix."""
    if label.startswith("L-"):
        return SideAffinity.LEFT
    if label.startswith("R-"):
        return SideAffinity.RIGHT
    return SideAffinity.CENTER


class BodyModel:
    """
    Parametric body schematic.

    The generator is pure: no randomness, no I/O, no cached state. Every call
    returns freshly built (immutable) regions.

    Example:
        >>> regions = BodyModel().generate("a", "front")
        >>> [r.instance_label for r in regions][:3]
        ['Neck', 'Head', 'L-Shoulder']
    """

    def __init__(self, board_width: float = BOARD_WIDTH, board_height: float = BOARD_HEIGHT):
        if board_width <= 0 or board_height <= 0:
            raise ValueError(f"board size must be positive: {board_width}x{board_height}")
        self.board_width = board_width
        self.board_height = board_height

    @property
    def center_x(self) -> float:
        """Centre line in canonical board units."""
        return BOARD_WIDTH / 2

    def generate(self, preset: Union[str, ProportionPreset], side: Side) -> tuple[Region, ...]:
        """
        Generate the regions for a preset and side.

        Args:
            preset: ProportionPreset or its name ("a", "b")
            side: "front" (chest + abdomen) or "back" (upper + lower back)

        Returns:
            Regions in declaration (z) order

        Raises:
            ValueError: Unknown preset or side
        """
        p = get_preset(preset)
        side = validate_side(side)

        regions: List[Region] = []
        regions.extend(self._head_and_neck())
        regions.extend(self._mirrored(self._left_shoulder(p)))
        regions.extend(self._torso(p, side))
        for left in self._left_arm(p):
            regions.extend(self._mirrored(left))
        for left in self._left_leg(p):
            regions.extend(self._mirrored(left))
        return tuple(self._scaled(r) for r in regions)

    def region_ids(self, side: Side) -> frozenset[str]:
        """Canonical ids valid for a side (identical for both presets)."""
        excluded = BACK_ONLY if validate_side(side) == "front" else FRONT_ONLY
        all_ids = {
            HEAD, NECK, SHOULDERS, CHEST, ABDOMEN, UPPER_BACK, LOWER_BACK,
            HIPS, ARMS, FOREARMS, HANDS, THIGHS, CALVES, FEET,
        }
        return frozenset(all_ids - excluded)

    # ─────────────────────────────────────────────────────────────────────────
    # Region groups
    # ─────────────────────────────────────────────────────────────────────────

    def _head_and_neck(self) -> List[Region]:
        cx = self.center_x
        return [
            Region.rect(NECK, "Neck", cx - 15, 75, 30, 40),
            Region.circle(HEAD, "Head", cx, 50, 35),
        ]

    def _left_shoulder(self, p: ProportionPreset) -> Region:
        return Region.rect(
            SHOULDERS, "L-Shoulder",
            self.center_x - p.shoulder_width / 2, SHOULDER_TOP, 40, 40,
            corner_radius=CORNER_RADIUS,
            side_affinity=SideAffinity.LEFT,
        )

    def _torso(self, p: ProportionPreset, side: Side) -> List[Region]:
        cx = self.center_x
        if side == "front":
            upper = Region.rect(CHEST, "Chest", cx - p.chest_width / 2, TORSO_TOP,
                                p.chest_width, 60, corner_radius=CORNER_RADIUS)
            lower = Region.rect(ABDOMEN, "Abdomen", cx - p.waist_width / 2, TORSO_TOP + 65,
                                p.waist_width, 65, corner_radius=CORNER_RADIUS)
            hips_label = "Pelvis"
        else:
            upper = Region.rect(UPPER_BACK, "Upper Back", cx - p.chest_width / 2, TORSO_TOP,
                                p.chest_width, 80, corner_radius=CORNER_RADIUS)
            lower = Region.rect(LOWER_BACK, "Lower Back", cx - p.waist_width / 2, TORSO_TOP + 85,
                                p.waist_width, 45, corner_radius=CORNER_RADIUS)
            hips_label = "Hips"
        hips = Region.rect(HIPS, hips_label, cx - p.hip_width / 2, TORSO_TOP + 135,
                           p.hip_width, 50, corner_radius=CORNER_RADIUS)
        return [upper, lower, hips]

    def _left_arm(self, p: ProportionPreset) -> List[Region]:
        arm_x = self.center_x - p.shoulder_width / 2 - ARM_WIDTH + p.arm_x_offset
        left = SideAffinity.LEFT
        return [
            Region.rect(ARMS, "L-Arm", arm_x - 10, ARM_TOP, ARM_WIDTH, 90,
                        corner_radius=CORNER_RADIUS, rotation_degrees=5, side_affinity=left),
            Region.rect(FOREARMS, "L-Forearm", arm_x - 25, FOREARM_TOP, 30, 80,
                        corner_radius=CORNER_RADIUS, rotation_degrees=8, side_affinity=left),
            Region.circle(HANDS, "L-Hand", arm_x - 28, HAND_CENTER_Y, 16, side_affinity=left),
        ]

    def _left_leg(self, p: ProportionPreset) -> List[Region]:
        leg_x = self.center_x - p.hip_width / 2 - p.leg_x_offset
        left = SideAffinity.LEFT
        return [
            Region.rect(THIGHS, "L-Thigh", leg_x, THIGH_TOP, LEG_WIDTH, 100,
                        corner_radius=CORNER_RADIUS, rotation_degrees=3, side_affinity=left),
            Region.rect(CALVES, "L-Calf", leg_x + 2, CALF_TOP, 34, 90,
                        corner_radius=CORNER_RADIUS, rotation_degrees=1, side_affinity=left),
            Region.rect(FEET, "L-Foot", leg_x - 8, FOOT_TOP, 40, 20,
                        corner_radius=2, side_affinity=left),
        ]

    # ─────────────────────────────────────────────────────────────────────────
    # Mirroring
    # ─────────────────────────────────────────────────────────────────────────

    def _mirrored(self, left: Region) -> tuple[Region, Region]:
        """Return (left, right) where right mirrors left about the centre line."""
        geom = left.geometry
        if isinstance(geom, CircleGeometry):
            mirrored_geom = replace(geom, center_x=BOARD_WIDTH - geom.center_x)
        else:
            assert isinstance(geom, RectGeometry)
            mirrored_geom = replace(
                geom,
                origin_x=BOARD_WIDTH - (geom.origin_x + geom.width),
                rotation_degrees=-geom.rotation_degrees if geom.rotation_degrees else None,
            )
        right = replace(
            left,
            instance_label="R-" + left.instance_label[2:],
            geometry=mirrored_geom,
            side_affinity=SideAffinity.RIGHT,
        )
        return left, right

    def _scaled(self, region: Region) -> Region:
        """Map a canonical region onto this model's board size."""
        sx = self.board_width / BOARD_WIDTH
        sy = self.board_height / BOARD_HEIGHT
        if sx == 1 and sy == 1:
            return region
        geom = region.geometry
        # Circles stay round
        s = min(sx, sy)
        if isinstance(geom, CircleGeometry):
            scaled = CircleGeometry(geom.center_x * sx, geom.center_y * sy, geom.radius * s)
        else:
            scaled = replace(
                geom,
                origin_x=geom.origin_x * sx,
                origin_y=geom.origin_y * sy,
                width=geom.width * sx,
                height=geom.height * sy,
                corner_radius=geom.corner_radius * s,
            )
        return replace(region, geometry=scaled)
