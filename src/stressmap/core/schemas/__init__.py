"""
Schemas Package

JSON schema definitions and validation utilities for cached markers and
remote history rows.
"""

from .validator import (
    validate_marker,
    validate_marker_list,
    validate_history_entry,
    ValidationError,
)

__all__ = [
    "validate_marker",
    "validate_marker_list",
    "validate_history_entry",
    "ValidationError",
]
