import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# Add src to sys.path so we can import stressmap
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

# Widget tests run without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from stressmap.body.model import BodyModel  # noqa: E402
from stressmap.core.models.geometry import DisplayBounds  # noqa: E402
from stressmap.core.models.markers import Marker  # noqa: E402
from stressmap.session.marker_store import MarkerStore  # noqa: E402

FIXED_TIME = datetime(2025, 3, 14, 9, 30, tzinfo=timezone.utc)


class SequentialIds:
    """Deterministic id factory: m1, m2, m3, ..."""

    def __init__(self, prefix: str = "m"):
        self.prefix = prefix
        self.count = 0

    def __call__(self) -> str:
        self.count += 1
        return f"{self.prefix}{self.count}"


class SteppingClock:
    """Deterministic clock advancing one second per call."""

    def __init__(self, start: datetime = FIXED_TIME):
        self.current = start - timedelta(seconds=1)

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


# Common test fixtures
@pytest.fixture
def body_model() -> BodyModel:
    return BodyModel()


@pytest.fixture
def front_regions_a(body_model):
    return body_model.generate("a", "front")


@pytest.fixture
def board_bounds() -> DisplayBounds:
    """Display bounds matching the board 1:1."""
    return DisplayBounds(0, 0, 320, 640)


@pytest.fixture
def store() -> MarkerStore:
    return MarkerStore(clock=SteppingClock(), id_factory=SequentialIds())


@pytest.fixture
def make_marker():
    """Factory for valid markers with overridable fields."""
    ids = SequentialIds("k")

    def _make(**overrides) -> Marker:
        fields = {
            "id": ids(),
            "created_at": FIXED_TIME,
            "side": "front",
            "region_id": "chest",
            "region_label": "Chest",
            "x": 0.5,
            "y": 0.25,
        }
        fields.update(overrides)
        return Marker(**fields)

    return _make
