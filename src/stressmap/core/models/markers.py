"""
Module: markers

Purpose:
    Provides the Marker dataclass - a user-placed diagnostic annotation
    attached to a body region at a normalized board position - and the
    Quality enumeration describing the character of the sensation.

Key Functions:
    - Marker.with_patch(patch): Copy with quality/intensity/note merged in
    - Marker.to_dict(): Serialize for the local cache slot
    - Marker.from_dict(data): Deserialize from the local cache slot

Dependencies:
    - dataclasses (std)
    - datetime (std)
    - enum (std)

Used By:
    - session.marker_store.MarkerStore
    - session.persistence.SessionPersistence
    - report.compositor.ReportCompositor
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any, Mapping

from .regions import Side, validate_side

MIN_INTENSITY = 1
MAX_INTENSITY = 10
DEFAULT_INTENSITY = 5

# Fields a caller may change through MarkerStore.update()
PATCHABLE_FIELDS = frozenset({"quality", "intensity", "note"})


class Quality(str, Enum):
    """Categorical character of a sensation."""
    TIGHT = "tight"
    ACHE = "ache"
    SHARP = "sharp"
    NUMB = "numb"
    TINGLE = "tingle"
    BURN = "burn"

    def next(self) -> Quality:
        """The following quality, wrapping around (used by "cycle quality")."""
        members = list(Quality)
        return members[(members.index(self) + 1) % len(members)]


DEFAULT_QUALITY = Quality.ACHE


def clamp_intensity(value: int) -> int:
    return max(MIN_INTENSITY, min(MAX_INTENSITY, int(value)))


@dataclass(frozen=True, slots=True)
class Marker:
    """
    User-created diagnostic annotation.

    Position is stored normalized against the canonical board size so the
    marker re-renders at the same relative body position on any display.

    Attributes:
        id: Unique marker id
        created_at: Creation timestamp (timezone-aware)
        side: "front" or "back", the side it was placed on
        region_id: Canonical region id ("arms")
        region_label: Instance label at creation ("L-Arm")
        x: Normalized x in [0, 1]
        y: Normalized y in [0, 1]
        intensity: Integer 1..10
        quality: Sensation quality
        note: Optional free text

    Invariants:
        - 0 <= x <= 1 and 0 <= y <= 1
        - MIN_INTENSITY <= intensity <= MAX_INTENSITY, integer
        - side is a known side, region_id non-empty
    """

    id: str
    created_at: datetime
    side: Side
    region_id: str
    region_label: str
    x: float
    y: float
    intensity: int = DEFAULT_INTENSITY
    quality: Quality = DEFAULT_QUALITY
    note: str = ""

    def __post_init__(self) -> None:
        """Validate marker on construction."""
        if not self.id:
            raise ValueError("marker id cannot be empty")
        validate_side(self.side)
        if not self.region_id:
            raise ValueError("marker region_id cannot be empty")
        if not 0.0 <= self.x <= 1.0:
            raise ValueError(f"x must be normalized to [0, 1]: {self.x}")
        if not 0.0 <= self.y <= 1.0:
            raise ValueError(f"y must be normalized to [0, 1]: {self.y}")
        if isinstance(self.intensity, bool) or not isinstance(self.intensity, int):
            raise ValueError(f"intensity must be an integer: {self.intensity!r}")
        if not MIN_INTENSITY <= self.intensity <= MAX_INTENSITY:
            raise ValueError(
                f"intensity must be within {MIN_INTENSITY}..{MAX_INTENSITY}: {self.intensity}"
            )
        if not isinstance(self.quality, Quality):
            # Accept plain strings, store the enum
            object.__setattr__(self, "quality", Quality(self.quality))
        if self.note is None:
            object.__setattr__(self, "note", "")

    # ─────────────────────────────────────────────────────────────────────────
    # Updates
    # ─────────────────────────────────────────────────────────────────────────

    def with_patch(self, patch: Mapping[str, Any]) -> Marker:
        """
        Return a copy with the patch merged in.

        Args:
            patch: Any of quality, intensity, note

        Returns:
            New Marker (self is unchanged)

        Raises:
            ValueError: Unknown patch key or invalid value
        """
        unknown = set(patch) - PATCHABLE_FIELDS
        if unknown:
            raise ValueError(f"cannot patch marker fields: {sorted(unknown)}")
        return replace(self, **dict(patch))

    def moved_to(self, x: float, y: float, region_id: str, region_label: str) -> Marker:
        """Return a copy at a new normalized position and region."""
        return replace(self, x=x, y=y, region_id=region_id, region_label=region_label)

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict:
        """
        Serialize to the cache slot format.

        Keys are camelCase because the slot is shared with other clients.
        """
        return {
            "id": self.id,
            "createdAt": self.created_at.isoformat(),
            "side": self.side,
            "regionId": self.region_id,
            "regionLabel": self.region_label,
            "x": self.x,
            "y": self.y,
            "intensity": self.intensity,
            "quality": self.quality.value,
            "note": self.note,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Marker:
        """
        Deserialize from the cache slot format.

        Raises:
            KeyError: Required key missing
            ValueError: Invalid value
        """
        return cls(
            id=data["id"],
            created_at=datetime.fromisoformat(data["createdAt"]),
            side=data["side"],
            region_id=data["regionId"],
            region_label=data.get("regionLabel") or data["regionId"],
            x=float(data["x"]),
            y=float(data["y"]),
            intensity=data.get("intensity", DEFAULT_INTENSITY),
            quality=Quality(data.get("quality", DEFAULT_QUALITY.value)),
            note=data.get("note") or "",
        )

    def __repr__(self) -> str:
        return (
            f"Marker({self.id[:8]}, {self.side}/{self.region_label}, "
            f"{self.intensity}, {self.quality.value})"
        )
