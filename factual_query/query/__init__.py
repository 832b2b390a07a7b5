"""
Query construction and serialization for the Read API.

Modules:
    - builder: Query fluent builder and FieldBuilder
    - store: ParameterStore accumulating parameters and row filters
    - serializer: query string rendering and decoding
    - params: wire parameter names and enumerations
    - models: row filters and geo shapes
    - urls: read paths and URLs
"""

from factual_query.query.builder import FieldBuilder, Query
from factual_query.query.models import (
    Circle,
    FieldFilter,
    FilterGroup,
    Rectangle,
    RowFilter,
    parse_row_filter,
)
from factual_query.query.params import Combinator, Operator, ParamKey, Threshold
from factual_query.query.serializer import decode_query_string, to_query_string
from factual_query.query.store import ParameterStore
from factual_query.query.urls import read_path, read_url

__all__ = [
    # Builder
    "Query",
    "FieldBuilder",
    # Models
    "FieldFilter",
    "FilterGroup",
    "RowFilter",
    "parse_row_filter",
    "Circle",
    "Rectangle",
    # Parameters
    "ParameterStore",
    "ParamKey",
    "Operator",
    "Combinator",
    "Threshold",
    # Serialization
    "to_query_string",
    "decode_query_string",
    "read_path",
    "read_url",
]
