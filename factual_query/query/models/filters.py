"""
Row filter models.

A row filter is either a field predicate or a boolean group of other row
filters. Both are immutable pydantic models tagged by ``kind`` so that a
``RowFilter`` union can be validated and dispatched without isinstance checks.

Wire forms:
    FieldFilter(key="name", operator="$eq", value="x")  ->  {"name": {"$eq": "x"}}
    FieldFilter(key="name", value="x")                  ->  {"name": "x"}
    FilterGroup(combinator="$or", operands=(a, b))      ->  {"$or": [a, b]}
"""

import copy
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    field_validator,
)

from factual_query.errors import FilterParseError
from factual_query.query.params import Combinator, is_finite_value, normalize_param

Primitive = Union[StrictBool, StrictInt, StrictFloat, StrictStr, None]
FilterValue = Union[Primitive, List[Any], Dict[str, Any]]


class FieldFilter(BaseModel):
    """
    Predicate on a single field.

    Examples:
        # Equality
        FieldFilter(key="locality", operator="$eq", value="los angeles")

        # Membership
        FieldFilter(key="region", operator="$in", value=["CA", "NV"])

        # Shorthand, no operator
        FieldFilter(key="name", value="Starbucks")
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["field"] = "field"
    key: str = Field(..., description="Field name (or 'geo' for geo bounds)")
    operator: Optional[str] = Field(None, description="Operator such as '$eq'")
    value: FilterValue = Field(None, description="Operand")

    @field_validator("operator", mode="before")
    @classmethod
    def _operator_value(cls, v):
        return normalize_param(v)

    @field_validator("value")
    @classmethod
    def _finite_value(cls, v):
        if not is_finite_value(v):
            raise ValueError(f"Filter value must not contain NaN or infinity, got {v!r}")
        return copy.deepcopy(v)

    def to_wire(self) -> Dict[str, Any]:
        # Copied so callers cannot reach into a frozen filter
        value = copy.deepcopy(self.value)
        if self.operator is None:
            return {self.key: value}
        return {self.key: {self.operator: value}}


class FilterGroup(BaseModel):
    """
    AND/OR combination of row filters. Operand order is kept as given.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["group"] = "group"
    combinator: Combinator
    operands: Tuple["RowFilter", ...] = Field(..., min_length=1)

    def to_wire(self) -> Dict[str, Any]:
        return {self.combinator.value: [operand.to_wire() for operand in self.operands]}


RowFilter = Annotated[Union[FieldFilter, FilterGroup], Field(discriminator="kind")]

FilterGroup.model_rebuild()

_COMBINATORS = {c.value: c for c in Combinator}


def parse_row_filter(data: Any) -> Union[FieldFilter, FilterGroup]:
    """
    Parse one wire-format row filter element back into a model.

    Args:
        data: Decoded JSON element, e.g. {"name": {"$eq": "x"}}

    Returns:
        FieldFilter or FilterGroup

    Raises:
        FilterParseError: If the element is not a single-key object, or a
            group is not a non-empty list
    """
    if not isinstance(data, dict) or len(data) != 1:
        raise FilterParseError(
            f"Row filter must be an object with exactly one key, got {data!r}",
            details={"filter": data},
        )

    ((key, value),) = data.items()

    if not is_finite_value(value):
        raise FilterParseError(
            f"Row filter must not contain NaN or infinity, got {data!r}",
            details={"filter": data},
        )

    if key in _COMBINATORS:
        if not isinstance(value, list) or not value:
            raise FilterParseError(
                f"Operands of '{key}' must be a non-empty list, got {value!r}",
                details={"filter": data},
            )
        return FilterGroup(
            combinator=_COMBINATORS[key],
            operands=tuple(parse_row_filter(item) for item in value),
        )

    if isinstance(value, dict) and len(value) == 1:
        ((operator, operand),) = value.items()
        if operator.startswith("$"):
            return FieldFilter(key=key, operator=operator, value=operand)

    return FieldFilter(key=key, value=value)


__all__ = ["FieldFilter", "FilterGroup", "RowFilter", "parse_row_filter"]
