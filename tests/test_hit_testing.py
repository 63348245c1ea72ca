"""Tests for pointer hit testing."""

import pytest

from constellation_viewer.catalog import StarRecord
from constellation_viewer.hit_testing import HitResult, find_hit, hit_test


@pytest.fixture
def catalog():
    """Small catalog with optional fields filled for one star."""
    return {
        "A": StarRecord("A", ra=10.0, dec=5.0, magnitude=1.2, color_index=0.4),
        "B": StarRecord("B", ra=11.0, dec=6.0),
        "C": StarRecord("C", ra=12.0, dec=7.0),
    }


class TestFindHit:
    """Tests for the linear scan."""

    def test_no_hit_outside_radius(self):
        """Test that a far query returns None."""
        points = {"A": (10.0, 10.0), "B": (50.0, 50.0)}

        assert find_hit(points, 100.0, 100.0, radius=5.0) is None

    def test_hit_within_radius(self):
        """Test that a point within the radius is found."""
        points = {"A": (10.0, 10.0), "B": (50.0, 50.0)}

        assert find_hit(points, 52.0, 53.0, radius=5.0) == "B"

    def test_radius_boundary_inclusive(self):
        """Test that a point exactly at the radius counts."""
        assert find_hit({"A": (0.0, 0.0)}, 3.0, 4.0, radius=5.0) == "A"

    def test_close_neighbours_only_one_in_range(self):
        """Test the right star is picked when neighbours are near each other."""
        points = {"A": (10.0, 10.0), "B": (16.0, 10.0)}

        assert find_hit(points, 19.0, 10.0, radius=4.0) == "B"
        assert find_hit(points, 7.0, 10.0, radius=4.0) == "A"

    def test_first_match_wins(self):
        """Test that scan order breaks ties even if a later star is closer."""
        points = {"A": (10.0, 10.0), "B": (12.0, 10.0)}

        assert find_hit(points, 11.5, 10.0, radius=5.0) == "A"

    def test_touch_radius_reaches_further(self):
        """Test that a larger radius can find a star a small one misses."""
        points = {"A": (0.0, 0.0)}

        assert find_hit(points, 8.0, 0.0, radius=5.0) is None
        assert find_hit(points, 8.0, 0.0, radius=10.0) == "A"


class TestHitTest:
    """Tests for resolving hits into catalog data."""

    def test_hit_result_fields(self, catalog):
        """Test that the result carries catalog data and screen position."""
        result = hit_test({"A": (40.0, 30.0)}, catalog, 41.0, 31.0, radius=5.0)

        assert result == HitResult(
            star_id="A",
            ra=10.0,
            dec=5.0,
            magnitude=1.2,
            color_index=0.4,
            screen_pos=(40.0, 30.0),
        )

    def test_no_hit(self, catalog):
        """Test that a miss returns None."""
        assert hit_test({"A": (40.0, 30.0)}, catalog, 0.0, 0.0, radius=5.0) is None

    def test_describe(self, catalog):
        """Test tooltip lines with and without optional fields."""
        full = hit_test({"A": (0.0, 0.0)}, catalog, 0.0, 0.0, radius=1.0)
        bare = hit_test({"B": (0.0, 0.0)}, catalog, 0.0, 0.0, radius=1.0)

        assert full.describe() == [
            "ID: A",
            "RA: 10.000°, Dec: 5.000°",
            "Vmag: 1.20",
            "B−V: 0.40",
        ]
        assert bare.describe() == ["ID: B", "RA: 11.000°, Dec: 6.000°"]
