"""PySide6 host widgets."""

from .body_map_widget import BodyMapWidget

__all__ = ["BodyMapWidget"]
