"""
Schema Validation Utilities

Validates JSON payloads read from the local cache slot and returned by the
remote history API before they are turned into models.

Two levels:
- basic (``strict=False``): required keys and value ranges, hand-checked
- strict (``strict=True``): full JSON Schema validation via ``jsonschema``
  against the ``*.schema.json`` files shipped next to this module
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema


QUALITIES = ("tight", "ache", "sharp", "numb", "tingle", "burn")
SIDES = ("front", "back")

# Load schemas lazily
_SCHEMAS: dict[str, dict] = {}


def _load_schema(name: str) -> dict:
    """Load a schema from the schemas directory."""
    if name not in _SCHEMAS:
        schema_path = Path(__file__).parent / f"{name}.schema.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")
        with open(schema_path, "r", encoding="utf-8") as f:
            _SCHEMAS[name] = json.load(f)
    return _SCHEMAS[name]


class ValidationError(Exception):
    """Raised when data fails schema validation."""

    def __init__(self, message: str, path: str = "", errors: list[str] | None = None):
        super().__init__(message)
        self.path = path
        self.errors = errors or []


def _require(data: Any, required: list[str], path: str) -> None:
    if not isinstance(data, dict):
        raise ValidationError(f"Expected an object, got {type(data).__name__}", path=path)
    missing = [f for f in required if f not in data]
    if missing:
        raise ValidationError(
            f"Missing required fields: {missing}",
            path=path,
            errors=[f"Missing field: {f}" for f in missing],
        )


def _check_strict(data: Any, schema_name: str) -> None:
    schema = _load_schema(schema_name)
    try:
        jsonschema.validate(data, schema)
    except jsonschema.ValidationError as e:
        raise ValidationError(
            f"Schema validation failed: {e.message}",
            path=".".join(str(p) for p in e.absolute_path),
            errors=[e.message],
        )


def validate_marker(data: dict[str, Any], *, strict: bool = False, path: str = "") -> None:
    """
    Validate one marker object from the cache slot.

    Args:
        data: Marker dictionary
        strict: If True, also run full JSON Schema validation
        path: Location prefix for error messages

    Raises:
        ValidationError: If data is invalid
    """
    _require(data, ["id", "createdAt", "side", "regionId", "x", "y"], path)

    if data["side"] not in SIDES:
        raise ValidationError(f"Invalid side: {data['side']!r}", path=f"{path}.side")

    for axis in ("x", "y"):
        value = data[axis]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not 0 <= value <= 1:
            raise ValidationError(
                f"Invalid {axis}: {value!r} (must be normalized to 0..1)",
                path=f"{path}.{axis}",
            )

    intensity = data.get("intensity", 5)
    if isinstance(intensity, bool) or not isinstance(intensity, int) or not 1 <= intensity <= 10:
        raise ValidationError(
            f"Invalid intensity: {intensity!r} (must be integer 1-10)",
            path=f"{path}.intensity",
        )

    quality = data.get("quality", "ache")
    if quality not in QUALITIES:
        raise ValidationError(f"Invalid quality: {quality!r}", path=f"{path}.quality")

    if strict:
        _check_strict(data, "marker")


def validate_marker_list(data: Any, *, strict: bool = False) -> None:
    """
    Validate the complete cache slot payload (a JSON array of markers).

    Raises:
        ValidationError: If the payload or any marker is invalid
    """
    if not isinstance(data, list):
        raise ValidationError(
            f"Marker cache must be a list, got {type(data).__name__}",
            path="",
        )
    for i, item in enumerate(data):
        validate_marker(item, strict=strict, path=f"[{i}]")


def validate_history_entry(data: dict[str, Any], *, strict: bool = False, path: str = "") -> None:
    """
    Validate one history row returned by the remote API.

    Raises:
        ValidationError: If data is invalid
    """
    _require(data, ["region", "intensity"], path)

    intensity = data["intensity"]
    if isinstance(intensity, bool) or not isinstance(intensity, (int, float)):
        raise ValidationError(f"Invalid intensity: {intensity!r}", path=f"{path}.intensity")

    quality = data.get("quality")
    if quality is not None and quality not in QUALITIES:
        raise ValidationError(f"Invalid quality: {quality!r}", path=f"{path}.quality")

    if strict:
        _check_strict(data, "history_entry")
