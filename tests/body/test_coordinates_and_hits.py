"""
Unit Tests for CoordinateNormalizer and HitTester

Tests for the display/board/normalized mapping and topmost-region resolution.
"""

import pytest

from stressmap.body.coordinates import CoordinateNormalizer, clamp01
from stressmap.body.hit_testing import HitTester
from stressmap.core.models.geometry import DisplayBounds, Point
from stressmap.core.models.regions import Region


class TestCoordinateNormalizer:
    """Tests for coordinate conversions."""

    @pytest.fixture
    def normalizer(self) -> CoordinateNormalizer:
        return CoordinateNormalizer()

    def test_to_board_space_when_half_size_display_then_doubles(self, normalizer):
        p = normalizer.to_board_space(Point(80, 160), DisplayBounds(0, 0, 160, 320))
        assert p == Point(160, 320)

    def test_to_board_space_when_offset_bounds_then_subtracts_origin(self, normalizer):
        p = normalizer.to_board_space(Point(330, 360), DisplayBounds(10, 20, 640, 1280))
        assert p.x == pytest.approx(160)
        assert p.y == pytest.approx(170)

    def test_to_normalized_returns_board_fractions(self, normalizer):
        assert normalizer.to_normalized(Point(160, 320)) == Point(0.5, 0.5)

    def test_to_display_space_inverts_to_board_space(self, normalizer):
        bounds = DisplayBounds(12, 7, 250, 500)
        board = normalizer.to_board_space(Point(100, 300), bounds)
        back = normalizer.to_display_space(board, bounds)
        assert back.x == pytest.approx(100)
        assert back.y == pytest.approx(300)

    @pytest.mark.parametrize("point,bounds", [
        (Point(0, 0), DisplayBounds(0, 0, 320, 640)),
        (Point(123.4, 567.8), DisplayBounds(3, 9, 211, 377)),
        (Point(-40, 900), DisplayBounds(-5, 2.5, 1000, 90)),
    ])
    def test_normalized_round_trip_returns_board_point(self, normalizer, point, bounds):
        board = normalizer.to_board_space(point, bounds)
        again = normalizer.to_board_from_normalized(normalizer.to_normalized(board))
        assert again.x == pytest.approx(board.x)
        assert again.y == pytest.approx(board.y)

    def test_normalized_position_independent_of_display_size(self, normalizer):
        small = normalizer.to_normalized(normalizer.to_board_space(Point(40, 85), DisplayBounds(0, 0, 160, 320)))
        large = normalizer.to_normalized(normalizer.to_board_space(Point(80, 170), DisplayBounds(0, 0, 320, 640)))
        assert small.x == pytest.approx(large.x)
        assert small.y == pytest.approx(large.y)

    def test_init_when_board_size_zero_then_raises_error(self):
        with pytest.raises(ValueError, match="board size must be positive"):
            CoordinateNormalizer(0, 640)

    def test_clamp01(self):
        assert clamp01(-0.2) == 0.0
        assert clamp01(1.7) == 1.0
        assert clamp01(0.3) == 0.3


class TestHitTester:
    """Tests for HitTester.resolve."""

    @pytest.fixture
    def tester(self) -> HitTester:
        return HitTester()

    def test_resolve_when_chest_centre_then_returns_chest(self, tester, front_regions_a):
        region = tester.resolve(Point(160, 170), front_regions_a)
        assert region.id == "chest"

    def test_resolve_when_head_overlaps_neck_then_later_head_wins(self, tester, front_regions_a):
        """(160, 80) is inside both; head is declared after neck."""
        assert tester.resolve(Point(160, 80), front_regions_a).id == "head"
        assert tester.resolve(Point(160, 100), front_regions_a).id == "neck"

    def test_resolve_when_right_foot_then_returns_right_instance(self, tester, front_regions_a):
        region = tester.resolve(Point(195.5, 515), front_regions_a)
        assert region.id == "feet"
        assert region.instance_label == "R-Foot"

    def test_resolve_when_left_hand_centre_then_returns_hand(self, tester, front_regions_a):
        assert tester.resolve(Point(50, 305), front_regions_a).instance_label == "L-Hand"

    @pytest.mark.parametrize("point", [Point(5, 5), Point(160, 620), Point(315, 300)])
    def test_resolve_when_outside_every_region_then_none(self, tester, front_regions_a, point):
        assert tester.resolve(point, front_regions_a) is None

    def test_resolve_when_rotated_rect_then_uses_rotated_bounds(self, tester):
        tilted = Region.rect("arms", "L-Arm", 0, 0, 20, 100, rotation_degrees=5)
        assert tester.resolve(Point(-2.8, 94.0), [tilted]) is tilted
        assert tester.resolve(Point(1, 1), [tilted]) is None

    def test_resolve_when_no_regions_then_none(self, tester):
        assert tester.resolve(Point(0, 0), []) is None
