"""
Wire parameter names and enumerations for the Read API.

Provides the fixed parameter keys the query string is built from, the
operator/combinator vocabulary of row filters, and normalization of enum
values to the plain strings the API expects.

Design Principles:
- API-compatible: values are the exact wire tokens
- Pass-through: unknown values are never rejected (the API decides)
- Type-safe: enums prevent typos in builder code
"""

import math
from enum import Enum
from typing import Any, Optional


class ParamKey:
    """Fixed query string parameter names."""

    LIMIT = "limit"
    OFFSET = "offset"
    SEARCH = "q"
    SORT = "sort"
    SELECT = "select"
    INCLUDE_COUNT = "include_count"
    THRESHOLD = "threshold"
    FILTERS = "filters"


# Row filter key used by geo shapes
GEO_KEY = "geo"

# Wrapped around a search term to request exact matching
QUOTES = '"'


class Operator(str, Enum):
    """Field predicate operators"""

    EQ = "$eq"
    NEQ = "$neq"
    IN = "$in"
    NIN = "$nin"
    BW = "$bw"
    NBW = "$nbw"
    BWIN = "$bwin"
    NBWIN = "$nbwin"
    BLANK = "$blank"
    GT = "$gt"
    GTE = "$gte"
    LT = "$lt"
    LTE = "$lte"
    SEARCH = "$search"
    INCLUDES = "$includes"
    INCLUDES_ANY = "$includes_any"


class Combinator(str, Enum):
    """Boolean combinators for filter groups"""

    AND = "$and"
    OR = "$or"


class GeoOperator(str, Enum):
    """Geo shape operators"""

    CIRCLE = "$circle"
    RECT = "$rect"
    CENTER = "$center"
    METERS = "$meters"


class SortDirection(str, Enum):
    """Sort token suffixes"""

    ASC = "asc"
    DESC = "desc"


class Threshold(str, Enum):
    """Existence thresholds documented by the Read API"""

    CONFIDENT = "confident"
    DEFAULT = "default"
    COMPREHENSIVE = "comprehensive"


# Keys of the blended rank/distance sort token
BLEND_RANK = "placerank"
BLEND_DISTANCE = "distance"


def normalize_param(value: Any) -> Any:
    """
    Reduce enum members to their wire value.

    Examples:
        normalize_param(Threshold.CONFIDENT)
        # Returns: "confident"

        normalize_param("anything")
        # Returns: "anything"
    """
    if isinstance(value, Enum):
        return value.value
    return value


def is_finite_value(value: Any) -> bool:
    """
    True unless ``value`` is, or contains, a NaN or infinite float.

    Lists, tuples and dict values are checked recursively; JSON has no
    encoding for non-finite numbers.
    """
    if isinstance(value, float):
        return math.isfinite(value)
    if isinstance(value, (list, tuple)):
        return all(is_finite_value(item) for item in value)
    if isinstance(value, dict):
        return all(is_finite_value(item) for item in value.values())
    return True


def get_valid_values(param_name: str) -> Optional[list]:
    """
    Get documented values for a parameter.

    Returns None for parameters without a fixed vocabulary. Documented values
    are advisory only: other values are passed through untouched.
    """
    if param_name == ParamKey.THRESHOLD:
        return [e.value for e in Threshold]
    elif param_name == ParamKey.SORT:
        return [e.value for e in SortDirection]
    return None


__all__ = [
    "ParamKey",
    "GEO_KEY",
    "QUOTES",
    "Operator",
    "Combinator",
    "GeoOperator",
    "SortDirection",
    "Threshold",
    "BLEND_RANK",
    "BLEND_DISTANCE",
    "normalize_param",
    "is_finite_value",
    "get_valid_values",
]
