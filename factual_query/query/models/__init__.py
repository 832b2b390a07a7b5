"""
Row filter and geo shape models.

Filters are immutable pydantic models; geo shapes validate their coordinates
on construction and turn into a geo row filter.
"""

from factual_query.query.models.filters import (
    FieldFilter,
    FilterGroup,
    RowFilter,
    parse_row_filter,
)
from factual_query.query.models.geo import Circle, Rectangle

__all__ = [
    "FieldFilter",
    "FilterGroup",
    "RowFilter",
    "parse_row_filter",
    "Circle",
    "Rectangle",
]
