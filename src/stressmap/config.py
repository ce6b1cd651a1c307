"""
Module: config

Purpose:
    Engine configuration. Immutable configuration with validation on
    construction, plus a JSON settings loader that falls back to defaults
    on malformed data.

Key Classes:
    - EngineConfig: Configuration for StressMapEngine

Key Functions:
    - load_config(path): Read EngineConfig from a JSON settings file

Dependencies:
    - dataclasses (std)
    - pathlib (std)

Used By:
    - engine.StressMapEngine
    - gui.body_map_widget
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Optional

from stressmap.body.model import BOARD_HEIGHT, BOARD_WIDTH
from stressmap.body.presets import PRESETS
from stressmap.core.models.markers import MAX_INTENSITY, MIN_INTENSITY, Quality
from stressmap.core.models.regions import SIDES

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineConfig:
    """
    Configuration for the stress-map engine (immutable).

    Attributes:
        board_width: Board width in board units (regions scale to it)
        board_height: Board height in board units (regions scale to it)
        preset: Initial proportion preset ("a" or "b")
        side: Initial displayed side ("front" or "back")
        cache_path: Local cache slot file; None disables the cache
        history_url: Remote history endpoint; None disables commit/fetch
        request_timeout: Per-request timeout in seconds
        max_workers: Threads for background remote calls
        default_intensity: Intensity of newly placed markers
        default_quality: Quality of newly placed markers

    Example:
        >>> config = EngineConfig(cache_path=Path("~/.stressmap/slot.json"))
    """

    # Board
    board_width: float = BOARD_WIDTH
    board_height: float = BOARD_HEIGHT
    preset: str = "a"
    side: str = "front"

    # Persistence
    cache_path: Optional[Path] = None
    history_url: Optional[str] = None
    request_timeout: float = 10.0
    max_workers: int = 2

    # Marker defaults
    default_intensity: int = 5
    default_quality: str = "ache"

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if self.board_width <= 0 or self.board_height <= 0:
            raise ValueError(f"board size must be positive: {self.board_width}x{self.board_height}")
        if self.preset not in PRESETS:
            raise ValueError(f"preset must be one of {sorted(PRESETS)}: {self.preset!r}")
        if self.side not in SIDES:
            raise ValueError(f"side must be one of {list(SIDES)}: {self.side!r}")
        if self.request_timeout <= 0:
            raise ValueError(f"request_timeout must be positive: {self.request_timeout}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1: {self.max_workers}")
        if not MIN_INTENSITY <= self.default_intensity <= MAX_INTENSITY:
            raise ValueError(f"default_intensity must be within 1..10: {self.default_intensity}")
        Quality(self.default_quality)
        if self.cache_path is not None and not isinstance(self.cache_path, Path):
            object.__setattr__(self, "cache_path", Path(self.cache_path))

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["cache_path"] = str(self.cache_path) if self.cache_path else None
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> EngineConfig:
        """
        Build from a settings mapping; unknown keys are ignored.

        Raises:
            ValueError: Invalid value
        """
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


def load_config(path: Path) -> EngineConfig:
    """
    Load EngineConfig from a JSON settings file.

    A missing, corrupted or invalid file falls back to defaults (logged).
    """
    path = Path(path)
    if not path.exists():
        return EngineConfig()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object, got {type(data).__name__}")
        return EngineConfig.from_dict(data)
    except json.JSONDecodeError as e:
        logger.warning(f"Settings file {path} is corrupted, using defaults: {e}")
    except (ValueError, TypeError) as e:
        logger.warning(f"Invalid settings in {path}, using defaults: {e}")
    except OSError as e:
        logger.warning(f"Failed to read settings {path}, using defaults: {e}")
    return EngineConfig()
