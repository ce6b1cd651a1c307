"""
Module: history

Purpose:
    Provides the HistoryEntry dataclass - one row of the append-only remote
    history. Produced from markers on commit, read back on fetch.

Key Functions:
    - HistoryEntry.from_marker(marker): Build the outgoing row for a marker
    - HistoryEntry.to_payload(): Body of one POSTed entry
    - HistoryEntry.from_payload(data): Parse one row returned by the server

Dependencies:
    - dataclasses (std)
    - datetime (std)

Used By:
    - session.remote.RemoteHistoryClient
    - session.persistence.SessionPersistence
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from .markers import Marker, Quality


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """
    Remote history row.

    Attributes:
        region: Canonical region id
        x: Normalized x
        y: Normalized y
        intensity: 1..10
        quality: Sensation quality
        side: "front" or "back"
        note: Free text
        server_timestamp: Assigned by the server, None before submission
        entry_id: Assigned by the server, None before submission
    """

    region: str
    x: float
    y: float
    intensity: int
    quality: Quality
    side: str
    note: str = ""
    server_timestamp: Optional[datetime] = None
    entry_id: Optional[str] = None

    @classmethod
    def from_marker(cls, marker: Marker) -> HistoryEntry:
        return cls(
            region=marker.region_id,
            x=marker.x,
            y=marker.y,
            intensity=marker.intensity,
            quality=marker.quality,
            side=marker.side,
            note=marker.note,
        )

    def to_payload(self) -> dict:
        """Outgoing entry; server-assigned fields are never sent."""
        return {
            "region": self.region,
            "x": self.x,
            "y": self.y,
            "intensity": self.intensity,
            "quality": self.quality.value,
            "side": self.side,
            "note": self.note,
        }

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> HistoryEntry:
        """
        Parse a row returned by the history API.

        The server timestamp arrives as ``createdAt`` (older rows may use
        ``serverTimestamp``); a trailing ``Z`` is accepted. Optional fields
        that are null get the same defaults as missing ones.
        """
        raw_ts = data.get("createdAt") or data.get("serverTimestamp")
        timestamp = None
        if raw_ts:
            timestamp = datetime.fromisoformat(str(raw_ts).replace("Z", "+00:00"))
        entry_id = data.get("id")
        x, y = data.get("x"), data.get("y")
        return cls(
            region=str(data["region"]),
            x=float(x) if x is not None else 0.0,
            y=float(y) if y is not None else 0.0,
            intensity=int(data["intensity"]),
            quality=Quality(data.get("quality") or Quality.ACHE.value),
            side=str(data.get("side") or "front"),
            note=data.get("note") or "",
            server_timestamp=timestamp,
            entry_id=str(entry_id) if entry_id is not None else None,
        )
