"""
Module: protocols.catalog

Purpose:
    Static lookup from canonical region id to an ordered list of
    remediation suggestions. The catalog is an injected, read-only value;
    nothing in the engine reaches for a module-level singleton.

Key Classes:
    - ProtocolCatalog

Key Functions:
    - default_catalog(): Catalog built from DEFAULT_PROTOCOLS
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping, Sequence, Tuple, Union

from stressmap.core.models.suggestions import Suggestion

SuggestionLike = Union[Suggestion, Tuple[str, str]]

DEFAULT_PROTOCOLS: dict[str, tuple[tuple[str, str], ...]] = {
    "head": (
        ("Cranial Decompression", "Gentle temple massage. 30s circular motion."),
        ("Optic Reset", "Close eyes. Palming technique for 60s."),
    ),
    "neck": (
        ("Cervical Realignment", "Chin tucks. Retract head horizontally. Hold 5s. Repeat x10."),
        ("Trapezius Release", "Ear to shoulder stretch. Apply gentle manual overpressure."),
    ),
    "shoulders": (
        ("Scapular Retraction", "Squeeze shoulder blades together. Hold 5s. Release. x15."),
        ("Joint Mobilization", "Full range arm circles. 10 clockwise, 10 counter-clockwise."),
    ),
    "chest": (
        ("Pectoral Opener", "Doorway stretch. Arms at 90 degrees. Step through. Hold 30s."),
        ("Thoracic Extension", "Foam roll the upper back or use a chair extension."),
    ),
    "upperBack": (
        ("Cat-Cow Protocol", "Spinal flexion/extension cycle. 20 reps."),
        ("T-Spine Rotation", "Quadruped position. Rotate arm to ceiling. Follow with eyes."),
    ),
    "lowerBack": (
        ("Lumbar Decompression", "Child's pose. Knees wide. Reach forward. Breathe into back."),
        ("Pelvic Tilts", "Supine. Flatten back to floor. Hold 3s. Release."),
    ),
    "abdomen": (
        ("Diaphragmatic Reset", "Deep belly breathing. 4s in, 4s hold, 4s out."),
        ("Cobra Maneuver", "Prone press-up. Keep hips down. Gentle extension."),
    ),
    "hips": (
        ("Hip Flexor Release", "Half-kneeling lunge. Squeeze glute of trailing leg."),
        ("Piriformis Stretch", "Figure-4 stretch. Supine or seated."),
    ),
    "thighs": (
        ("Quadriceps Lengthening", "Standing heel to glute. Keep knees together."),
        ("Hamstring Flossing", "Supine leg raise with strap. Dynamic active stretch."),
    ),
    "calves": (
        ("Gastrocnemius Stretch", "Wall push. Back leg straight. Heel down."),
        ("Soleus Isolation", "Wall push. Back leg bent. Heel down."),
    ),
    "arms": (
        ("Triceps Release", "Overhead elbow pull. Keep neck neutral."),
        ("Biceps Extension", "Wall arm extension. Palm flat against wall. Rotate away."),
    ),
    "forearms": (
        ("Wrist Extensor Stretch", "Elbow straight. Palm down. Pull fingers towards underside."),
        ("Wrist Flexor Stretch", "Elbow straight. Palm up. Pull fingers towards floor."),
    ),
    "hands": (
        ("Tendon Glides", "Open palm, hook fist, full fist, tabletop."),
        ("Opposition Drills", "Touch thumb to each fingertip rapidly."),
    ),
    "feet": (
        ("Plantar Fascia Roll", "Roll foot over a ball or bottle for 60s."),
        ("Toe Articulation", "Splay toes wide. Hold. Then curl."),
    ),
}


def _as_suggestion(item: SuggestionLike) -> Suggestion:
    if isinstance(item, Suggestion):
        return item
    name, description = item
    return Suggestion(name=name, description=description)


class ProtocolCatalog:
    """
    Read-only region id to suggestions mapping.

    Example:
        >>> catalog = ProtocolCatalog({"neck": [("Chin Tucks", "Hold 5s.")]})
        >>> catalog.lookup("neck")[0].name
        'Chin Tucks'
        >>> catalog.lookup("elbow")
        []
    """

    def __init__(self, table: Mapping[str, Iterable[SuggestionLike]]):
        self._table: Mapping[str, Tuple[Suggestion, ...]] = MappingProxyType({
            region_id: tuple(_as_suggestion(item) for item in items)
            for region_id, items in table.items()
        })

    def lookup(self, region_id: str) -> list[Suggestion]:
        """Ordered suggestions for a region; [] if the region has none."""
        return list(self._table.get(region_id, ()))

    def has_entry(self, region_id: str) -> bool:
        return bool(self._table.get(region_id))

    @property
    def region_ids(self) -> Sequence[str]:
        return tuple(self._table)

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, region_id: object) -> bool:
        return region_id in self._table


def default_catalog() -> ProtocolCatalog:
    """Catalog of the stock protocols (two per region)."""
    return ProtocolCatalog(DEFAULT_PROTOCOLS)
