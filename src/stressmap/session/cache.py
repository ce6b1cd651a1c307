"""
Module: session.cache

Purpose:
    Single-slot local marker cache. The slot is one JSON file holding the
    full marker array; every write overwrites it atomically.

    Any malformed or unreadable slot results in a graceful fallback to an
    empty list, never an exception.

Key Classes:
    - LocalMarkerCache

Dependencies:
    - core.utils.serialization

Used By:
    - session.persistence.SessionPersistence
"""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path
from typing import List, Sequence

from stressmap.core.models.markers import Marker
from stressmap.core.schemas.validator import ValidationError
from stressmap.core.utils.serialization import deserialize_markers, dump_markers

logger = logging.getLogger(__name__)

CACHE_FILENAME = "stressmap.diagnostic.v1.json"


class LocalMarkerCache:
    """
    JSON file backed cache slot.

    Usage:
        cache = LocalMarkerCache(Path("~/.stressmap").expanduser() / CACHE_FILENAME)
        markers = cache.read()
        cache.write(markers)
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def read(self) -> List[Marker]:
        """
        Read the slot.

        Returns:
            Cached markers (malformed rows skipped); [] if the slot is
            missing, unreadable or not a marker array
        """
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            markers = deserialize_markers(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Marker cache {self.path} is corrupted: {e}")
            return []
        except ValidationError as e:
            logger.warning(f"Marker cache {self.path} has unexpected shape: {e}")
            return []
        except OSError as e:
            logger.warning(f"Failed to read marker cache {self.path}: {e}")
            return []
        logger.debug(f"Read {len(markers)} markers from {self.path}")
        return markers

    def write(self, markers: Sequence[Marker]) -> bool:
        """
        Overwrite the slot with ``markers``.

        Returns:
            True on success, False if the write failed (logged)
        """
        temp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                suffix=".tmp",
                dir=self.path.parent,
                delete=False,
            ) as f:
                temp_path = Path(f.name)
                f.write(dump_markers(markers))
            temp_path.replace(self.path)
        except OSError as e:
            logger.warning(f"Failed to write marker cache {self.path}: {e}")
            # Clean up temp file if it exists
            if temp_path is not None:
                try:
                    temp_path.unlink(missing_ok=True)
                except OSError as cleanup_error:
                    logger.debug(f"Could not remove temp file {temp_path}: {cleanup_error}")
            return False
        logger.debug(f"Wrote {len(markers)} markers to {self.path}")
        return True

    def clear(self) -> None:
        """Delete the slot file if present."""
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to delete marker cache {self.path}: {e}")
