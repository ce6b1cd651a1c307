"""
Unit Tests for Schema Validation and Serialization

Tests for the validator module and collection-level JSON helpers.
"""

import json

import pytest

from stressmap.core.models.markers import Quality
from stressmap.core.schemas.validator import (
    ValidationError,
    validate_history_entry,
    validate_marker,
    validate_marker_list,
)
from stressmap.core.utils.serialization import (
    deserialize_history,
    deserialize_markers,
    dump_markers,
    load_markers,
    markers_to_history_payload,
)


@pytest.fixture
def valid_marker_data(make_marker) -> dict:
    return make_marker(intensity=6, quality="numb").to_dict()


class TestValidateMarker:
    """Tests for validate_marker function."""

    def test_validate_when_valid_then_passes(self, valid_marker_data):
        validate_marker(valid_marker_data)
        validate_marker(valid_marker_data, strict=True)

    def test_validate_when_missing_field_then_raises_error(self, valid_marker_data):
        del valid_marker_data["regionId"]
        with pytest.raises(ValidationError, match="Missing required fields") as exc:
            validate_marker(valid_marker_data)
        assert "Missing field: regionId" in exc.value.errors

    def test_validate_when_coordinate_not_normalized_then_raises_error(self, valid_marker_data):
        valid_marker_data["y"] = 320
        with pytest.raises(ValidationError, match="Invalid y") as exc:
            validate_marker(valid_marker_data, path="[3]")
        assert exc.value.path == "[3].y"

    def test_validate_when_intensity_is_bool_then_raises_error(self, valid_marker_data):
        valid_marker_data["intensity"] = True
        with pytest.raises(ValidationError, match="Invalid intensity"):
            validate_marker(valid_marker_data)

    def test_validate_when_strict_and_id_wrong_type_then_raises_error(self, valid_marker_data):
        """Basic checks only look at presence; strict mode checks types."""
        valid_marker_data["id"] = 17
        validate_marker(valid_marker_data)
        with pytest.raises(ValidationError, match="Schema validation failed"):
            validate_marker(valid_marker_data, strict=True)

    def test_validate_list_when_not_a_list_then_raises_error(self):
        with pytest.raises(ValidationError, match="must be a list"):
            validate_marker_list({"markers": []})


class TestValidateHistoryEntry:

    def test_validate_when_quality_unknown_then_raises_error(self):
        with pytest.raises(ValidationError, match="Invalid quality"):
            validate_history_entry({"region": "neck", "intensity": 3, "quality": "itchy"})

    def test_validate_when_minimal_then_passes(self):
        validate_history_entry({"region": "neck", "intensity": 3}, strict=True)


class TestMarkerSerialization:
    """Tests for marker (de)serialization helpers."""

    def test_load_markers_when_dumped_then_restores_equal_markers(self, make_marker):
        markers = [make_marker(), make_marker(side="back", region_id="upperBack", region_label="Upper Back")]
        assert load_markers(dump_markers(markers)) == markers

    def test_deserialize_when_one_item_malformed_then_skips_it(self, make_marker, caplog):
        good = make_marker().to_dict()
        bad = dict(good, id="bad", x=4.0)
        result = deserialize_markers([bad, good])
        assert [m.id for m in result] == [good["id"]]
        assert "Skipping malformed cached marker [0]" in caplog.text

    def test_deserialize_when_timestamp_unparseable_then_skips_it(self, make_marker):
        bad = dict(make_marker().to_dict(), createdAt="yesterday")
        assert deserialize_markers([bad]) == []

    def test_deserialize_when_region_unknown_then_kept_verbatim(self, make_marker):
        """Region ids are not checked against the body model."""
        data = dict(make_marker().to_dict(), regionId="elbow", regionLabel="Elbow")
        [marker] = deserialize_markers([data])
        assert marker.region_id == "elbow"

    def test_load_markers_when_not_json_then_raises_decode_error(self):
        with pytest.raises(json.JSONDecodeError):
            load_markers("{not json")


class TestHistorySerialization:

    @pytest.mark.parametrize("strict", [False, True])
    def test_deserialize_history_when_optional_fields_null_then_defaults(self, strict):
        row = {"region": "neck", "intensity": 3, "quality": None, "side": None, "x": None, "y": None}
        validate_history_entry(row, strict=strict)
        [entry] = deserialize_history([row])
        assert entry.quality is Quality.ACHE
        assert entry.side == "front"
        assert (entry.x, entry.y) == (0.0, 0.0)

    def test_markers_to_history_payload_wraps_entries(self, make_marker):
        payload = markers_to_history_payload([make_marker(), make_marker()])
        assert list(payload) == ["entries"]
        assert len(payload["entries"]) == 2

    def test_deserialize_history_when_wrapped_object_then_unwraps(self):
        rows = deserialize_history({"entries": [{"region": "neck", "intensity": 2}]})
        assert rows[0].region == "neck"

    def test_deserialize_history_when_string_then_raises_error(self):
        with pytest.raises(ValidationError, match="History response must be a list"):
            deserialize_history("oops")
