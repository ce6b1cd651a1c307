"""
Serialization Utilities

Collection-level JSON helpers for markers (local cache slot) and history
entries (remote API).

- ``serialize_*`` / ``deserialize_*`` work on Python structures
- ``dump_markers`` / ``load_markers`` work on JSON text
- Per-item parsing is lenient: a malformed marker is skipped with a warning
  so one bad row never discards the rest of the slot
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable, Sequence

from ..models.history import HistoryEntry
from ..models.markers import Marker
from ..schemas.validator import (
    ValidationError,
    validate_history_entry,
    validate_marker,
)

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Marker Serialization
# ─────────────────────────────────────────────────────────────────────────────

def serialize_markers(markers: Iterable[Marker]) -> list[dict[str, Any]]:
    """Serialize markers to a list of cache-slot dictionaries."""
    return [marker.to_dict() for marker in markers]


def deserialize_markers(
    data: Any,
    *,
    validate: bool = True,
    strict: bool = False,
) -> list[Marker]:
    """
    Deserialize markers from a cache-slot payload.

    Args:
        data: Parsed JSON (expected: list of marker dictionaries)
        validate: Whether to validate each item against the schema first
        strict: Use full JSON Schema validation

    Returns:
        Markers that parsed successfully, in payload order

    Raises:
        ValidationError: If the payload itself is not a list
    """
    if not isinstance(data, list):
        raise ValidationError(
            f"Marker cache must be a list, got {type(data).__name__}",
            path="",
        )

    markers: list[Marker] = []
    for i, item in enumerate(data):
        try:
            if validate:
                validate_marker(item, strict=strict, path=f"[{i}]")
            markers.append(Marker.from_dict(item))
        except (ValidationError, KeyError, ValueError, TypeError) as e:
            logger.warning(f"Skipping malformed cached marker [{i}]: {e}")
    return markers


def dump_markers(markers: Sequence[Marker]) -> str:
    """Serialize markers to JSON text for the cache slot."""
    return json.dumps(serialize_markers(markers), ensure_ascii=False)


def load_markers(text: str, *, validate: bool = True) -> list[Marker]:
    """
    Parse cache-slot JSON text.

    Raises:
        json.JSONDecodeError: If text is not JSON
        ValidationError: If the payload is not a list
    """
    return deserialize_markers(json.loads(text), validate=validate)


# ─────────────────────────────────────────────────────────────────────────────
# History Serialization
# ─────────────────────────────────────────────────────────────────────────────

def markers_to_history_payload(markers: Iterable[Marker]) -> dict[str, Any]:
    """Build the POST body for a commit: ``{"entries": [...]}``."""
    return {
        "entries": [HistoryEntry.from_marker(m).to_payload() for m in markers],
    }


def deserialize_history(data: Any, *, validate: bool = True) -> list[HistoryEntry]:
    """
    Parse the history API response.

    Accepts a bare list or an object wrapping it under ``entries``. Rows that
    fail validation are skipped with a warning.

    Raises:
        ValidationError: If the response is neither shape
    """
    if isinstance(data, dict) and isinstance(data.get("entries"), list):
        data = data["entries"]
    if not isinstance(data, list):
        raise ValidationError(
            f"History response must be a list, got {type(data).__name__}",
            path="",
        )

    entries: list[HistoryEntry] = []
    for i, item in enumerate(data):
        try:
            if validate:
                validate_history_entry(item, path=f"[{i}]")
            entries.append(HistoryEntry.from_payload(item))
        except (ValidationError, KeyError, ValueError, TypeError) as e:
            logger.warning(f"Skipping malformed history row [{i}]: {e}")
    return entries
