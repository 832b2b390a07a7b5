"""
Read paths and URLs for queries.

    read_path("places", Query().limit(3))
    # "t/places?limit=3"

    read_url(Query().limit(3))
    # "https://api.v3.factual.com/t/places?limit=3"
"""

from typing import Optional
from urllib.parse import quote

from factual_query.config import settings
from factual_query.errors import InvalidArgumentError
from factual_query.query.builder import Query


def read_path(table: str, query: Query) -> str:
    """Path of a read request against ``table``, with the query string attached."""
    if not table:
        raise InvalidArgumentError("table must be a non-empty string")
    path = f"t/{quote(table, safe='')}"
    query_string = query.to_url_query()
    return f"{path}?{query_string}" if query_string else path


def read_url(
    query: Query,
    table: Optional[str] = None,
    base_url: Optional[str] = None,
) -> str:
    """
    Absolute URL of a read request.

    Args:
        query: Query to attach
        table: Table name (defaults to settings.FACTUAL_DEFAULT_TABLE)
        base_url: API root (defaults to settings.FACTUAL_API_BASE_URL)
    """
    base = (base_url or settings.FACTUAL_API_BASE_URL).rstrip("/")
    return f"{base}/{read_path(table or settings.FACTUAL_DEFAULT_TABLE, query)}"


__all__ = ["read_path", "read_url"]
