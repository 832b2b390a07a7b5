"""
Exception hierarchy for factual-query.

All errors raised by the query layer derive from FactualQueryError so callers
can catch a single type. Each error carries an optional machine-readable
``code`` and a ``details`` dict, which ``factual_query.logging.log_error``
attaches to structured log records.
"""

from typing import Any, Dict, Optional


class FactualQueryError(Exception):
    """Base class for query construction errors."""

    code = "query_error"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


class InvalidArgumentError(FactualQueryError, ValueError):
    """A caller passed a value the query layer cannot represent."""

    code = "invalid_argument"


class FilterParseError(InvalidArgumentError):
    """A wire-format row filter element could not be parsed."""

    code = "filter_parse_error"


class ParameterConflictError(FactualQueryError):
    """A parameter key was reused with a different kind of entry."""

    code = "parameter_conflict"


__all__ = [
    "FactualQueryError",
    "InvalidArgumentError",
    "FilterParseError",
    "ParameterConflictError",
]
