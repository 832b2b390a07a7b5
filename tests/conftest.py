"""
Global pytest configuration for factual-query tests.

Provides:
- logging configured for debugging failed tests
- shared query and filter fixtures
- a decoder turning a Query back into its parameters
"""

import logging

import pytest

from factual_query.query import FieldFilter, Query, decode_query_string

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


# ============================================================================
# QUERY FIXTURES
# ============================================================================


@pytest.fixture
def query() -> Query:
    """An empty query."""
    return Query()


@pytest.fixture
def locality_filter() -> FieldFilter:
    return FieldFilter(key="locality", operator="$eq", value="los angeles")


@pytest.fixture
def region_filter() -> FieldFilter:
    return FieldFilter(key="region", operator="$in", value=["CA", "NV"])


@pytest.fixture
def decode():
    """
    Decode a Query (or query string) into its parameters.

    Usage:
        def test_something(decode):
            params = decode(Query().limit(3))
            assert params == {"limit": "3"}
    """

    def _decode(query_or_string):
        if isinstance(query_or_string, Query):
            query_or_string = query_or_string.to_url_query()
        return decode_query_string(query_or_string)

    return _decode


# ============================================================================
# LOGGING ISOLATION
# ============================================================================


@pytest.fixture
def restore_root_logger():
    """Put the root logger's handlers and level back after a test."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level

    yield root

    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


# ============================================================================
# PYTEST HOOKS
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers",
        "cli: mark test as exercising the command line interface",
    )
