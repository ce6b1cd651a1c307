"""
Body Package

Parametric body schematic: proportion presets, region generation, the
display/board/normalized coordinate model and hit testing.
"""

from .presets import PRESET_A, PRESET_B, PRESETS, ProportionPreset, get_preset
from .model import BOARD_HEIGHT, BOARD_WIDTH, BodyModel, side_affinity_for_label
from .coordinates import CoordinateNormalizer
from .hit_testing import HitTester

__all__ = [
    "PRESET_A",
    "PRESET_B",
    "PRESETS",
    "ProportionPreset",
    "get_preset",
    "BOARD_HEIGHT",
    "BOARD_WIDTH",
    "BodyModel",
    "side_affinity_for_label",
    "CoordinateNormalizer",
    "HitTester",
]
