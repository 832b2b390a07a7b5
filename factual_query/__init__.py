"""
factual-query: query construction for the Factual Read API.

Usage:
    from factual_query import Query, Circle

    q = Query().search("pizza").within(Circle(34.06, -118.42, 1000)).limit(10)
    q.to_url_query()
"""

from factual_query.errors import (
    FactualQueryError,
    FilterParseError,
    InvalidArgumentError,
    ParameterConflictError,
)
from factual_query.query import (
    Circle,
    FieldFilter,
    FilterGroup,
    Query,
    Rectangle,
    Threshold,
    decode_query_string,
    read_url,
)

__version__ = "0.1.0"

__all__ = [
    "Query",
    "FieldFilter",
    "FilterGroup",
    "Circle",
    "Rectangle",
    "Threshold",
    "decode_query_string",
    "read_url",
    "FactualQueryError",
    "InvalidArgumentError",
    "FilterParseError",
    "ParameterConflictError",
]
