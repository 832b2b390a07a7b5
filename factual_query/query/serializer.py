"""
Query string serialization.

Renders a ParameterStore into the form-encoded query string the Read API
expects, and decodes such a string back into parameters.

Rendering rules:
- booleans render as lowercase true/false
- floats render with two decimals
- dict/list scalars and row filters render as compact JSON
- comma lists join their values with ',' in append order
- row filters always render as a JSON array, even with a single element
"""

import json
import logging
from typing import Any, Dict, Iterable, List, Union
from urllib.parse import parse_qsl, urlencode

from factual_query.errors import FilterParseError
from factual_query.query.models.filters import FieldFilter, FilterGroup
from factual_query.query.params import ParamKey
from factual_query.query.store import ParameterStore

logger = logging.getLogger(__name__)

JSON_SEPARATORS = (",", ":")


def to_json(value: Any) -> str:
    """
    Compact JSON, non-ASCII kept as-is (it is percent-encoded later).

    Raises:
        ValueError: If the value contains NaN or infinity
    """
    return json.dumps(value, separators=JSON_SEPARATORS, ensure_ascii=False, allow_nan=False)


def render_scalar(value: Any) -> str:
    """
    Render one parameter value as text.

    Examples:
        render_scalar(True)   # "true"
        render_scalar(0.5)    # "0.50"
        render_scalar(20)     # "20"
        render_scalar({"a": 1})  # '{"a":1}'
    """
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        return f"{value:.2f}"
    if isinstance(value, (dict, list)):
        return to_json(value)
    return str(value)


def render_comma_list(values: Iterable[Any]) -> str:
    return ",".join(render_scalar(value) for value in values)


def row_filters_to_wire(filters: Iterable[Union[FieldFilter, FilterGroup]]) -> List[Dict[str, Any]]:
    return [row_filter.to_wire() for row_filter in filters]


def render_entry(entry) -> str:
    if entry.kind == "scalar":
        return render_scalar(entry.value)
    if entry.kind == "comma_list":
        return render_comma_list(entry.values)
    if entry.kind == "row_filters":
        return to_json(row_filters_to_wire(entry.filters))
    raise TypeError(f"Unknown parameter entry kind: {entry.kind!r}")


def to_query_string(store: ParameterStore) -> str:
    """
    Render every store entry as key=value, in store order.

    Args:
        store: Parameters to render

    Returns:
        URL-encoded query string, empty for an empty store
    """
    pairs = [(key, render_entry(entry)) for key, entry in store.items()]
    query_string = urlencode(pairs)
    logger.debug(
        f"Serialized {len(pairs)} parameters",
        extra={"params": len(pairs), "row_filters": len(store.row_filters)},
    )
    return query_string


def decode_query_string(query_string: str, filters_key: str = ParamKey.FILTERS) -> Dict[str, Any]:
    """
    Decode a query string into an ordered dict of parameters.

    The row filter parameter is JSON-parsed; every other value is returned
    as the decoded text.

    Raises:
        FilterParseError: If the row filter parameter is not a JSON array
    """
    decoded: Dict[str, Any] = {}
    for key, value in parse_qsl(query_string.lstrip("?"), keep_blank_values=True):
        if key == filters_key:
            try:
                value = json.loads(value)
            except ValueError as e:
                raise FilterParseError(
                    f"Parameter '{key}' is not valid JSON: {e}",
                    details={"value": value},
                ) from e
            if not isinstance(value, list):
                raise FilterParseError(
                    f"Parameter '{key}' must be a JSON array",
                    details={"value": value},
                )
        decoded[key] = value
    return decoded


__all__ = [
    "to_query_string",
    "decode_query_string",
    "render_scalar",
    "render_comma_list",
    "row_filters_to_wire",
    "to_json",
]
