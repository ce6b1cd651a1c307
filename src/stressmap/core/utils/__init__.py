"""
Core Utilities Package

Serialization helpers shared by the session and report subpackages.
"""

from .serialization import (
    serialize_markers,
    deserialize_markers,
    dump_markers,
    load_markers,
    markers_to_history_payload,
    deserialize_history,
)

__all__ = [
    "serialize_markers",
    "deserialize_markers",
    "dump_markers",
    "load_markers",
    "markers_to_history_payload",
    "deserialize_history",
]
