"""
Module: body.presets

Purpose:
    Proportion presets for the body schematic. A preset is a handful of
    explicit widths and offsets; the body model derives every region from
    them, so switching preset regenerates the whole region set.

Key Classes:
    - ProportionPreset: Frozen set of proportion constants

Key Functions:
    - get_preset(name): Resolve a preset by name
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class ProportionPreset:
    """
    Proportion constants in board units.

    Attributes:
        name: Preset key ("a" or "b")
        shoulder_width: Outer distance between the two shoulder blocks
        hip_width: Width of the hips/pelvis block
        chest_width: Width of chest (front) and upper back (back)
        waist_width: Width of abdomen (front) and lower back (back)
        arm_x_offset: Inward shift of the arms relative to the shoulder edge
        leg_x_offset: Outward shift of the legs relative to the hip edge
    """

    name: str
    shoulder_width: float
    hip_width: float
    chest_width: float
    waist_width: float
    arm_x_offset: float
    leg_x_offset: float

    def __post_init__(self) -> None:
        for attr in ("shoulder_width", "hip_width", "chest_width", "waist_width"):
            if getattr(self, attr) <= 0:
                raise ValueError(f"{attr} must be positive: {getattr(self, attr)}")


# Preset A: broad shoulders, narrow hips
PRESET_A = ProportionPreset(
    name="a",
    shoulder_width=120,
    hip_width=75,
    chest_width=110,
    waist_width=85,
    arm_x_offset=10,
    leg_x_offset=10,
)

# Preset B: narrow shoulders, broad hips
PRESET_B = ProportionPreset(
    name="b",
    shoulder_width=90,
    hip_width=100,
    chest_width=90,
    waist_width=70,
    arm_x_offset=5,
    leg_x_offset=0,
)

PRESETS: dict[str, ProportionPreset] = {p.name: p for p in (PRESET_A, PRESET_B)}


def get_preset(preset: Union[str, ProportionPreset]) -> ProportionPreset:
    """
    Resolve a preset by name (case-insensitive) or pass one through.

    Raises:
        ValueError: Unknown preset name
    """
    if isinstance(preset, ProportionPreset):
        return preset
    try:
        return PRESETS[str(preset).strip().lower()]
    except KeyError:
        raise ValueError(f"Unknown proportion preset: {preset!r} (expected one of {sorted(PRESETS)})")
