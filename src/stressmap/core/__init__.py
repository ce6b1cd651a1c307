"""
Stress Map Core Package

Shared data models, payload schemas and serialization utilities. Nothing in
this package performs I/O beyond reading its own schema files.
"""

from .models import Marker, Point, Quality, Region, Suggestion

__all__ = [
    "Marker",
    "Point",
    "Quality",
    "Region",
    "Suggestion",
]
