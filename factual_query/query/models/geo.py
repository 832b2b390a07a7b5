"""
Geo shapes that bound results to an area.

Each shape validates its coordinates on construction and produces a row
filter under the ``geo`` key:

    Circle(34.06, -118.42, 5000).to_filter()
    # {"geo": {"$circle": {"$center": [34.06, -118.42], "$meters": 5000}}}

    Rectangle(34.1, -118.5, 34.0, -118.4).to_filter()
    # {"geo": {"$rect": [[34.1, -118.5], [34.0, -118.4]]}}
"""

import math
from dataclasses import dataclass

from factual_query.errors import InvalidArgumentError
from factual_query.query.models.filters import FieldFilter
from factual_query.query.params import GEO_KEY, GeoOperator


def _check_coordinate(name: str, value: float, bound: float) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError(
            f"{name} must be a number, got {value!r}",
            details={name: value},
        )
    if not math.isfinite(value) or abs(value) > bound:
        raise InvalidArgumentError(
            f"{name} must be a finite value within [-{bound:g}, {bound:g}], got {value!r}",
            details={name: value},
        )


def _check_latitude(name: str, value: float) -> None:
    _check_coordinate(name, value, 90.0)


def _check_longitude(name: str, value: float) -> None:
    _check_coordinate(name, value, 180.0)


@dataclass(frozen=True)
class Circle:
    """A circle of ``meters`` radius around a latitude/longitude center."""

    latitude: float
    longitude: float
    meters: float

    def __post_init__(self):
        _check_latitude("latitude", self.latitude)
        _check_longitude("longitude", self.longitude)
        if (
            isinstance(self.meters, bool)
            or not isinstance(self.meters, (int, float))
            or not math.isfinite(self.meters)
            or self.meters <= 0
        ):
            raise InvalidArgumentError(
                f"meters must be a positive finite number, got {self.meters!r}",
                details={"meters": self.meters},
            )

    def to_filter(self) -> FieldFilter:
        return FieldFilter(
            key=GEO_KEY,
            operator=GeoOperator.CIRCLE,
            value={
                GeoOperator.CENTER.value: [self.latitude, self.longitude],
                GeoOperator.METERS.value: self.meters,
            },
        )


@dataclass(frozen=True)
class Rectangle:
    """A box given by its top-left and bottom-right corners."""

    top_left_lat: float
    top_left_lon: float
    bottom_right_lat: float
    bottom_right_lon: float

    def __post_init__(self):
        _check_latitude("top_left_lat", self.top_left_lat)
        _check_longitude("top_left_lon", self.top_left_lon)
        _check_latitude("bottom_right_lat", self.bottom_right_lat)
        _check_longitude("bottom_right_lon", self.bottom_right_lon)

    def to_filter(self) -> FieldFilter:
        return FieldFilter(
            key=GEO_KEY,
            operator=GeoOperator.RECT,
            value=[
                [self.top_left_lat, self.top_left_lon],
                [self.bottom_right_lat, self.bottom_right_lon],
            ],
        )


__all__ = ["Circle", "Rectangle"]
