"""Tests for geo shapes."""

import math

import pytest

from factual_query.errors import InvalidArgumentError
from factual_query.query.models.geo import Circle, Rectangle


class TestCircle:
    def test_filter(self):
        row_filter = Circle(34.06018, -118.41835, 5000).to_filter()

        assert row_filter.key == "geo"
        assert row_filter.to_wire() == {
            "geo": {"$circle": {"$center": [34.06018, -118.41835], "$meters": 5000}}
        }

    @pytest.mark.parametrize("meters", [0, -1, math.inf, math.nan, "100", True])
    def test_rejects_bad_radius(self, meters):
        with pytest.raises(InvalidArgumentError):
            Circle(34.06, -118.42, meters)

    @pytest.mark.parametrize(
        "latitude, longitude",
        [(90.5, 0), (-91, 0), (0, 180.1), (0, -181), (math.nan, 0), (0, math.inf), (None, 0)],
    )
    def test_rejects_bad_center(self, latitude, longitude):
        with pytest.raises(InvalidArgumentError):
            Circle(latitude, longitude, 100)

    def test_bounds_are_inclusive(self):
        Circle(90, 180, 1)
        Circle(-90, -180, 1)

    def test_invalid_argument_is_a_value_error(self):
        with pytest.raises(ValueError):
            Circle(0, 0, 0)


class TestRectangle:
    def test_filter(self):
        row_filter = Rectangle(34.06110, -118.42283, 34.05771, -118.41718).to_filter()

        assert row_filter.to_wire() == {
            "geo": {"$rect": [[34.06110, -118.42283], [34.05771, -118.41718]]}
        }

    @pytest.mark.parametrize(
        "corners",
        [
            (95, 0, 0, 0),
            (0, 200, 0, 0),
            (0, 0, -95, 0),
            (0, 0, 0, math.nan),
        ],
    )
    def test_rejects_bad_corners(self, corners):
        with pytest.raises(InvalidArgumentError):
            Rectangle(*corners)

    def test_is_frozen(self):
        rect = Rectangle(1, 1, 0, 2)

        with pytest.raises(AttributeError):
            rect.top_left_lat = 5
