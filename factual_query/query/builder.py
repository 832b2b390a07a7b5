"""
Fluent query builder for the Read API.

Every configuring method writes to the query's ParameterStore and returns
the same Query, so calls chain:

    q = (
        Query()
        .search("coffee")
        .within(Circle(34.06, -118.42, 5000))
        .sort_desc("rating")
        .only("name", "address")
        .limit(20)
    )
    q.to_url_query()

Nested predicates are built by folding row filters into groups:

    q = Query()
    q.or_(
        q.field("name").begins_with("Coffee"),
        q.field("name").begins_with("Star"),
    )
    # filters=[{"$or":[{"name":{"$bw":"Coffee"}},{"name":{"$bw":"Star"}}]}]
"""

import logging
from typing import Any, Iterable, List, Tuple, Union

from factual_query.errors import InvalidArgumentError
from factual_query.query.models.filters import FieldFilter, FilterGroup
from factual_query.query.models.geo import Circle, Rectangle
from factual_query.query.params import (
    BLEND_DISTANCE,
    BLEND_RANK,
    QUOTES,
    Combinator,
    Operator,
    ParamKey,
    SortDirection,
    Threshold,
    is_finite_value,
)
from factual_query.query.serializer import render_scalar, to_query_string
from factual_query.query.store import ParameterStore

logger = logging.getLogger(__name__)


def _whole_number(name: str, value: Any) -> int:
    # 10.0 is accepted as 10; 10.5, True and "10" are not
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidArgumentError(f"{name} must be an integer, got {value!r}", details={name: value})
    if isinstance(value, float) and not value.is_integer():
        raise InvalidArgumentError(f"{name} must be a whole number, got {value!r}", details={name: value})
    return int(value)


def _flatten(items: Tuple[Any, ...]) -> List[Any]:
    # only("a", "b") and only(["a", "b"]) are equivalent
    if len(items) == 1 and not isinstance(items[0], (str, bytes, Query)):
        try:
            return list(items[0])
        except TypeError:
            pass
    return list(items)


class Query:
    """
    A Read API query. Knows how to represent itself as URL encoded key/value
    pairs, ready for the query string of a GET request.
    """

    def __init__(self):
        self._parameters = ParameterStore()

    def __repr__(self) -> str:
        return f"Query({self.to_url_query()!r})"

    @property
    def parameters(self) -> ParameterStore:
        return self._parameters

    @property
    def row_filters(self) -> Tuple[Union[FieldFilter, FilterGroup], ...]:
        return self._parameters.row_filters

    def limit(self, limit: int) -> "Query":
        """Sets the maximum number of records to return."""
        self._parameters.set(ParamKey.LIMIT, _whole_number("limit", limit))
        return self

    def offset(self, offset: int) -> "Query":
        """Sets how many records in to start returning results (page offset)."""
        self._parameters.set(ParamKey.OFFSET, _whole_number("offset", offset))
        return self

    def search(self, term: str) -> "Query":
        """
        Sets a full text search. The API matches the term against various
        attributes of the table, such as name and address.
        """
        self._parameters.set(ParamKey.SEARCH, term)
        return self

    def search_exact(self, term: str) -> "Query":
        """
        Sets an exact text search by wrapping the term in double quotes.
        Quotes already inside the term are left untouched.
        """
        self._parameters.set(ParamKey.SEARCH, f"{QUOTES}{term}{QUOTES}")
        return self

    def within(self, shape: Union[Circle, Rectangle]) -> "Query":
        """Restricts results to (roughly) within a geo circle or rectangle."""
        if not isinstance(shape, (Circle, Rectangle)):
            raise InvalidArgumentError(
                f"within() expects a Circle or Rectangle, got {type(shape).__name__}",
                details={"type": type(shape).__name__},
            )
        return self.add_filter(shape.to_filter())

    def sort_asc(self, field: str) -> "Query":
        """Adds an ascending sort on ``field``. Sorts apply in call order."""
        return self._sort(field, SortDirection.ASC)

    def sort_desc(self, field: str) -> "Query":
        """Adds a descending sort on ``field``. Sorts apply in call order."""
        return self._sort(field, SortDirection.DESC)

    def sort_blend_rank_and_distance(
        self,
        rank_weight: Union[int, float],
        distance_weight: Union[int, float],
    ) -> "Query":
        """
        Adds a blended sort on place rank and distance with the given weights.
        Only has an effect together with a geo filter.
        """
        for name, weight in (("rank_weight", rank_weight), ("distance_weight", distance_weight)):
            if isinstance(weight, bool) or not isinstance(weight, (int, float)) or not is_finite_value(weight):
                raise InvalidArgumentError(
                    f"{name} must be a finite number, got {weight!r}",
                    details={name: weight},
                )
        token = (
            f'{{"{BLEND_RANK}":{render_scalar(rank_weight)},'
            f'"{BLEND_DISTANCE}":{render_scalar(distance_weight)}}}'
        )
        self._parameters.append_to_comma_list(ParamKey.SORT, token)
        return self

    def only(self, *fields: Union[str, Iterable[str]]) -> "Query":
        """
        Selects the fields to return. Optional; by default all fields in the
        schema are returned.
        """
        for field in _flatten(fields):
            self._parameters.append_to_comma_list(ParamKey.SELECT, field)
        return self

    def include_row_count(self, include: bool = True) -> "Query":
        """
        Asks for the total number of matching rows in the response. This
        makes the request slower; the API default is not to count.
        """
        self._parameters.set(ParamKey.INCLUDE_COUNT, bool(include))
        return self

    def threshold(self, threshold: Union[Threshold, str]) -> "Query":
        """
        Chooses an existence threshold. The value is passed through to the
        API as given; see Threshold for the documented values.
        """
        self._parameters.set(ParamKey.THRESHOLD, threshold)
        return self

    def field(self, name: str) -> "FieldBuilder":
        """Begins a row filter on ``name``."""
        return FieldBuilder(self, name)

    def add_filter(self, row_filter: Union[FieldFilter, FilterGroup]) -> "Query":
        """Adds any row filter, including geo and pre-built groups."""
        self._parameters.add_row_filter(row_filter)
        return self

    def and_(self, *queries: Union["Query", Iterable["Query"]]) -> "Query":
        """
        Nests this query's row filters and those of ``queries`` under $and.

        The given queries are read, not modified.
        """
        return self._fold(Combinator.AND, queries)

    def or_(self, *queries: Union["Query", Iterable["Query"]]) -> "Query":
        """
        Nests this query's row filters and those of ``queries`` under $or.

        The given queries are read, not modified.
        """
        return self._fold(Combinator.OR, queries)

    def to_url_query(self) -> str:
        """
        Returns the URL encoded query string representing this query.
        """
        return to_query_string(self._parameters)

    def _sort(self, field: str, direction: SortDirection) -> "Query":
        self._parameters.append_to_comma_list(ParamKey.SORT, f"{field}:{direction.value}")
        return self

    def _fold(self, combinator: Combinator, queries: Tuple[Any, ...]) -> "Query":
        sources = []
        for query in _flatten(queries):
            if not isinstance(query, Query):
                raise InvalidArgumentError(
                    f"Expected Query instances, got {type(query).__name__}",
                    details={"type": type(query).__name__},
                )
            sources.append(query._parameters)
        self._parameters.fold_row_filters_into_group(combinator, sources)
        return self


class FieldBuilder:
    """
    Partial row filter bound to a query and a field name.

    Each operator adds the finished filter to the query and returns the query.

    Examples:
        Query().field("region").in_(["CA", "NV"])
        Query().field("rating").greater_than_or_equal(4)
        Query().field("tel").blank()
    """

    def __init__(self, query: Query, key: str):
        self.query = query
        self.key = key

    def equal(self, value: Any) -> Query:
        return self._add(Operator.EQ, value)

    def not_equal(self, value: Any) -> Query:
        return self._add(Operator.NEQ, value)

    def in_(self, *values: Any) -> Query:
        return self._add(Operator.IN, _flatten(values))

    def not_in(self, *values: Any) -> Query:
        return self._add(Operator.NIN, _flatten(values))

    def begins_with(self, prefix: str) -> Query:
        return self._add(Operator.BW, prefix)

    def not_begins_with(self, prefix: str) -> Query:
        return self._add(Operator.NBW, prefix)

    def begins_with_any(self, *prefixes: str) -> Query:
        return self._add(Operator.BWIN, _flatten(prefixes))

    def not_begins_with_any(self, *prefixes: str) -> Query:
        return self._add(Operator.NBWIN, _flatten(prefixes))

    def blank(self) -> Query:
        return self._add(Operator.BLANK, True)

    def not_blank(self) -> Query:
        return self._add(Operator.BLANK, False)

    def greater_than(self, value: Any) -> Query:
        return self._add(Operator.GT, value)

    def greater_than_or_equal(self, value: Any) -> Query:
        return self._add(Operator.GTE, value)

    def less_than(self, value: Any) -> Query:
        return self._add(Operator.LT, value)

    def less_than_or_equal(self, value: Any) -> Query:
        return self._add(Operator.LTE, value)

    def search(self, term: str) -> Query:
        return self._add(Operator.SEARCH, term)

    def includes(self, value: Any) -> Query:
        return self._add(Operator.INCLUDES, value)

    def includes_any(self, *values: Any) -> Query:
        return self._add(Operator.INCLUDES_ANY, _flatten(values))

    def _add(self, operator: Operator, value: Any) -> Query:
        if not is_finite_value(value):
            raise InvalidArgumentError(
                f"Filter on '{self.key}' must not contain NaN or infinity, got {value!r}",
                details={"key": self.key, "operator": operator.value},
            )
        return self.query.add_filter(FieldFilter(key=self.key, operator=operator, value=value))


__all__ = ["Query", "FieldBuilder"]
