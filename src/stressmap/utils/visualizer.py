"""
Module: utils.visualizer

Purpose:
    Debug visualization of the body board. Draws every region outline
    (rotated rectangles as polygons) with its instance label, and markers as
    dots sized by intensity and coloured by quality. Useful for checking
    preset geometry and hit-test results outside the GUI.

Key Functions:
    - render_debug_board(): Create the overlay image
    - save_debug_board(): Render and save to disk

Dependencies:
    - PIL: Image drawing

Used By:
    - Developer scripts and tests
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, Optional, Sequence, Tuple

from PIL import Image, ImageDraw, ImageFont

from stressmap.body.model import BOARD_HEIGHT, BOARD_WIDTH
from stressmap.core.models.geometry import CircleGeometry, RectGeometry
from stressmap.core.models.markers import Marker, Quality
from stressmap.core.models.regions import Region

logger = logging.getLogger(__name__)

RGBA = Tuple[int, int, int, int]

# Marker colours per quality
QUALITY_COLORS: dict[Quality, RGBA] = {
    Quality.TIGHT: (33, 150, 243, 200),    # Blue
    Quality.ACHE: (255, 152, 0, 200),      # Orange
    Quality.SHARP: (244, 67, 54, 200),     # Red
    Quality.NUMB: (156, 39, 176, 200),     # Purple
    Quality.TINGLE: (76, 175, 80, 200),    # Green
    Quality.BURN: (255, 87, 34, 200),      # Deep orange
}

BACKGROUND_COLOR = (16, 16, 16, 255)
REGION_OUTLINE = (200, 200, 200, 220)
REGION_HIGHLIGHT = (16, 185, 129, 120)
LABEL_TEXT_COLOR = (255, 255, 255, 255)
OUTLINE_WIDTH = 1
FONT_SIZE = 9


def marker_radius(intensity: int, scale: float = 1.0) -> float:
    """Dot radius in pixels: 4 at intensity 1 up to 13 at intensity 10."""
    return (3 + intensity) * scale


def render_debug_board(
    regions: Sequence[Region],
    markers: Iterable[Marker] = (),
    *,
    scale: float = 1.0,
    highlight: Optional[Region] = None,
    board_size: Tuple[float, float] = (BOARD_WIDTH, BOARD_HEIGHT),
    show_labels: bool = True,
) -> Image.Image:
    """
    Draw regions and markers onto a new image.

    Args:
        regions: Regions in z-order
        markers: Markers to draw (normalized positions)
        scale: Pixels per board unit
        highlight: Region to fill (e.g. the hover target)
        board_size: Board dimensions in board units
        show_labels: Draw instance labels at region centres

    Returns:
        RGB image of size board_size * scale

    Example:
        >>> img = render_debug_board(BodyModel().generate("a", "front"), store.markers, scale=2)
        >>> img.size
        (640, 1280)
    """
    width = max(1, round(board_size[0] * scale))
    height = max(1, round(board_size[1] * scale))
    image = Image.new("RGBA", (width, height), BACKGROUND_COLOR)
    overlay = Image.new("RGBA", image.size, (0, 0, 0, 0))
    draw = ImageDraw.Draw(overlay)

    try:
        font = ImageFont.truetype("DejaVuSans.ttf", max(6, round(FONT_SIZE * scale)))
    except (IOError, OSError):
        font = ImageFont.load_default()

    for region in regions:
        fill = REGION_HIGHLIGHT if highlight is not None and region == highlight else None
        _draw_region(draw, region, scale, fill)

    if show_labels:
        for region in regions:
            c = region.center
            draw.text((c.x * scale, c.y * scale), region.instance_label,
                      fill=LABEL_TEXT_COLOR, font=font, anchor="mm")

    count = 0
    for marker in markers:
        cx = marker.x * board_size[0] * scale
        cy = marker.y * board_size[1] * scale
        r = marker_radius(marker.intensity, scale)
        draw.ellipse((cx - r, cy - r, cx + r, cy + r),
                     fill=QUALITY_COLORS[marker.quality], outline=LABEL_TEXT_COLOR)
        count += 1

    logger.debug(f"Rendered {len(regions)} regions and {count} markers at scale {scale}")
    return Image.alpha_composite(image, overlay).convert("RGB")


def _draw_region(
    draw: ImageDraw.ImageDraw,
    region: Region,
    scale: float,
    fill: Optional[RGBA],
) -> None:
    geom = region.geometry
    if isinstance(geom, CircleGeometry):
        r = geom.radius * scale
        cx, cy = geom.center_x * scale, geom.center_y * scale
        draw.ellipse((cx - r, cy - r, cx + r, cy + r),
                     outline=REGION_OUTLINE, fill=fill, width=OUTLINE_WIDTH)
    elif isinstance(geom, RectGeometry) and geom.rotation_degrees:
        points = [(p.x * scale, p.y * scale) for p in geom.corners()]
        draw.polygon(points, outline=REGION_OUTLINE, fill=fill)
    else:
        box = (
            geom.origin_x * scale,
            geom.origin_y * scale,
            (geom.origin_x + geom.width) * scale,
            (geom.origin_y + geom.height) * scale,
        )
        draw.rounded_rectangle(box, radius=geom.corner_radius * scale,
                               outline=REGION_OUTLINE, fill=fill, width=OUTLINE_WIDTH)


def save_debug_board(
    output_path: Path,
    regions: Sequence[Region],
    markers: Iterable[Marker] = (),
    *,
    scale: float = 1.0,
) -> Optional[Path]:
    """
    Render the debug board and save it as PNG.

    Returns:
        The written path, or None if saving failed (logged)
    """
    image = render_debug_board(regions, markers, scale=scale)
    output_path = Path(output_path)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        image.save(output_path, format="PNG")
    except OSError as e:
        logger.warning(f"Failed to save debug board to {output_path}: {e}")
        return None
    logger.info(f"Saved debug board: {output_path}")
    return output_path
