"""
Parameter store backing a Query.

Holds one entry per parameter key, in the order keys were first written.
An entry is one of:
- ScalarEntry: a single value, replaced on every write
- CommaListEntry: values rendered as one comma-joined string
- RowFilterEntry: the ordered row filters rendered as a JSON array

Row filters stay observable until a fold replaces them with one group.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from factual_query.errors import InvalidArgumentError, ParameterConflictError
from factual_query.query.models.filters import FieldFilter, FilterGroup
from factual_query.query.params import Combinator, ParamKey, is_finite_value, normalize_param

logger = logging.getLogger(__name__)

ScalarValue = Union[str, bool, int, float, Dict[str, Any], List[Any]]
SCALAR_TYPES = (str, bool, int, float, dict, list)


@dataclass
class ScalarEntry:
    value: ScalarValue
    kind: ClassVar[str] = "scalar"


@dataclass
class CommaListEntry:
    values: List[Any] = field(default_factory=list)
    kind: ClassVar[str] = "comma_list"


@dataclass
class RowFilterEntry:
    filters: List[Union[FieldFilter, FilterGroup]] = field(default_factory=list)
    kind: ClassVar[str] = "row_filters"


Entry = Union[ScalarEntry, CommaListEntry, RowFilterEntry]


class ParameterStore:
    """
    Ordered, key-unique accumulator of query parameters.

    Examples:
        store = ParameterStore()
        store.set("limit", 10)
        store.append_to_comma_list("sort", "name:asc")
        store.add_row_filter(FieldFilter(key="region", operator="$eq", value="CA"))
    """

    def __init__(self, row_filter_key: str = ParamKey.FILTERS):
        self.row_filter_key = row_filter_key
        self._entries: Dict[str, Entry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def items(self) -> Iterator[Tuple[str, Entry]]:
        return iter(list(self._entries.items()))

    def get(self, key: str) -> Optional[Entry]:
        return self._entries.get(key)

    @property
    def row_filters(self) -> Tuple[Union[FieldFilter, FilterGroup], ...]:
        entry = self._entries.get(self.row_filter_key)
        if entry is None or entry.kind != "row_filters":
            return ()
        return tuple(entry.filters)

    def set(self, key: str, value: ScalarValue) -> None:
        """Write a scalar parameter. The last write for a key wins."""
        value = normalize_param(value)
        if not isinstance(value, SCALAR_TYPES):
            raise InvalidArgumentError(
                f"Unsupported value for '{key}': {value!r}",
                details={"key": key, "type": type(value).__name__},
            )
        if not is_finite_value(value):
            raise InvalidArgumentError(
                f"Value for '{key}' must not contain NaN or infinity, got {value!r}",
                details={"key": key},
            )
        existing = self._entries.get(key)
        if existing is not None and existing.kind != "scalar":
            logger.debug(f"Replacing {existing.kind} entry '{key}' with a scalar")
        self._entries[key] = ScalarEntry(value)

    def append_to_comma_list(self, key: str, value: Any) -> None:
        """Append a value to the comma-joined parameter ``key``."""
        value = normalize_param(value)
        if not is_finite_value(value):
            raise InvalidArgumentError(
                f"Value for '{key}' must not contain NaN or infinity, got {value!r}",
                details={"key": key},
            )
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries[key] = CommaListEntry()
        elif entry.kind != "comma_list":
            raise ParameterConflictError(
                f"Parameter '{key}' already holds a {entry.kind} entry",
                details={"key": key, "kind": entry.kind},
            )
        entry.values.append(value)

    def add_row_filter(self, row_filter: Union[FieldFilter, FilterGroup]) -> None:
        """Append a filter to the row filter sequence."""
        if not isinstance(row_filter, (FieldFilter, FilterGroup)):
            raise InvalidArgumentError(
                f"Expected a row filter, got {type(row_filter).__name__}",
                details={"type": type(row_filter).__name__},
            )
        self._row_filter_entry().filters.append(row_filter)

    def fold_row_filters_into_group(
        self,
        combinator: Combinator,
        sources: Iterable["ParameterStore"] = (),
    ) -> Optional[FilterGroup]:
        """
        Replace the row filters with a single group.

        Operands are this store's row filters followed by each source's row
        filters, in the order given. Sources keep their own row filters. A
        source that is this store contributes nothing more, since its filters
        already lead the operand list. A previous group is nested as one
        operand, never flattened.

        Args:
            combinator: Combinator.AND or Combinator.OR
            sources: Stores whose row filters join the group

        Returns:
            The installed group, or None when there was nothing to fold
        """
        combinator = Combinator(normalize_param(combinator))
        operands = list(self.row_filters)
        for source in sources:
            if source is self:
                continue
            operands.extend(source.row_filters)

        if not operands:
            logger.debug(f"Nothing to fold into {combinator.value} group")
            return None

        group = FilterGroup(combinator=combinator, operands=tuple(operands))
        self._row_filter_entry().filters[:] = [group]

        logger.debug(
            f"Folded {len(operands)} row filters into {combinator.value} group",
            extra={"combinator": combinator.value, "operands": len(operands)},
        )
        return group

    def _row_filter_entry(self) -> RowFilterEntry:
        entry = self._entries.get(self.row_filter_key)
        if entry is None:
            entry = self._entries[self.row_filter_key] = RowFilterEntry()
        elif entry.kind != "row_filters":
            raise ParameterConflictError(
                f"Parameter '{self.row_filter_key}' already holds a {entry.kind} entry",
                details={"key": self.row_filter_key, "kind": entry.kind},
            )
        return entry


__all__ = [
    "ParameterStore",
    "ScalarEntry",
    "CommaListEntry",
    "RowFilterEntry",
    "ScalarValue",
]
