"""Tests for row filter models and wire parsing."""

import pytest
from pydantic import ValidationError

from factual_query.errors import FilterParseError, InvalidArgumentError
from factual_query.query.models.filters import FieldFilter, FilterGroup, parse_row_filter
from factual_query.query.params import Combinator, Operator


class TestFieldFilter:
    def test_operator_form(self, locality_filter):
        assert locality_filter.to_wire() == {"locality": {"$eq": "los angeles"}}

    def test_shorthand_without_operator(self):
        assert FieldFilter(key="name", value="Starbucks").to_wire() == {"name": "Starbucks"}

    def test_operator_enum_reduced_to_value(self):
        row_filter = FieldFilter(key="rating", operator=Operator.GTE, value=4)

        assert row_filter.operator == "$gte"
        assert row_filter.to_wire() == {"rating": {"$gte": 4}}

    def test_list_value(self, region_filter):
        assert region_filter.to_wire() == {"region": {"$in": ["CA", "NV"]}}

    def test_is_immutable(self, locality_filter):
        with pytest.raises(ValidationError):
            locality_filter.value = "san diego"

    def test_kind_tag(self, locality_filter):
        assert locality_filter.kind == "field"

    def test_wire_form_is_a_copy(self, region_filter):
        region_filter.to_wire()["region"]["$in"].append("AZ")

        assert region_filter.value == ["CA", "NV"]
        assert region_filter.to_wire() == {"region": {"$in": ["CA", "NV"]}}

    def test_input_value_is_copied(self):
        bounds = {"$center": [34.06, -118.42], "$meters": 5000}
        row_filter = FieldFilter(key="geo", operator="$circle", value=bounds)

        bounds["$center"].append(0)

        assert row_filter.value == {"$center": [34.06, -118.42], "$meters": 5000}

    @pytest.mark.parametrize(
        "value",
        [float("nan"), float("inf"), [1, float("-inf")], {"$center": [float("nan"), 0]}],
    )
    def test_rejects_non_finite_values(self, value):
        with pytest.raises(ValidationError):
            FieldFilter(key="rating", operator="$gt", value=value)


class TestFilterGroup:
    def test_wire_form_keeps_operand_order(self, locality_filter, region_filter):
        group = FilterGroup(combinator=Combinator.OR, operands=(region_filter, locality_filter))

        assert group.to_wire() == {
            "$or": [
                {"region": {"$in": ["CA", "NV"]}},
                {"locality": {"$eq": "los angeles"}},
            ]
        }

    def test_nested_groups(self, locality_filter, region_filter):
        inner = FilterGroup(combinator="$and", operands=[locality_filter, region_filter])
        outer = FilterGroup(combinator="$or", operands=[inner, FieldFilter(key="tel", operator="$blank", value=True)])

        assert outer.kind == "group"
        assert outer.to_wire() == {
            "$or": [
                {"$and": [{"locality": {"$eq": "los angeles"}}, {"region": {"$in": ["CA", "NV"]}}]},
                {"tel": {"$blank": True}},
            ]
        }

    def test_requires_an_operand(self):
        with pytest.raises(ValidationError):
            FilterGroup(combinator=Combinator.AND, operands=())

    def test_rejects_unknown_combinator(self, locality_filter):
        with pytest.raises(ValidationError):
            FilterGroup(combinator="$xor", operands=(locality_filter,))


class TestParseRowFilter:
    def test_field_with_operator(self):
        assert parse_row_filter({"name": {"$bw": "Star"}}) == FieldFilter(key="name", operator="$bw", value="Star")

    def test_shorthand(self):
        assert parse_row_filter({"name": "Starbucks"}) == FieldFilter(key="name", value="Starbucks")

    def test_object_value_without_operator_is_shorthand(self):
        parsed = parse_row_filter({"hours": {"monday": "9-5"}})

        assert parsed.operator is None
        assert parsed.value == {"monday": "9-5"}

    def test_group_round_trip(self, locality_filter, region_filter):
        group = FilterGroup(
            combinator=Combinator.AND,
            operands=(
                locality_filter,
                FilterGroup(combinator=Combinator.OR, operands=(region_filter,)),
            ),
        )

        assert parse_row_filter(group.to_wire()) == group

    @pytest.mark.parametrize(
        "data",
        [
            "name",
            [],
            {},
            {"a": 1, "b": 2},
            {"$and": []},
            {"$or": {"name": "x"}},
            {"rating": {"$gt": float("nan")}},
            {"$or": [{"a": {"$lt": float("inf")}}]},
        ],
    )
    def test_malformed(self, data):
        with pytest.raises(FilterParseError):
            parse_row_filter(data)

    def test_parse_error_is_an_invalid_argument(self):
        with pytest.raises(InvalidArgumentError):
            parse_row_filter({"$and": "nope"})
