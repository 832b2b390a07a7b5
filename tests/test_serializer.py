"""Tests for query string rendering and decoding."""

import json
from urllib.parse import parse_qsl, unquote_plus

import pytest

from factual_query.errors import FilterParseError
from factual_query.query.models.filters import FieldFilter, FilterGroup
from factual_query.query.params import Combinator
from factual_query.query.serializer import (
    decode_query_string,
    render_comma_list,
    render_scalar,
    to_json,
    to_query_string,
)
from factual_query.query.store import ParameterStore


@pytest.mark.parametrize(
    "value, expected",
    [
        (True, "true"),
        (False, "false"),
        (10, "10"),
        (0.5, "0.50"),
        (2.0, "2.00"),
        ("pizza", "pizza"),
        ({"placerank": 1}, '{"placerank":1}'),
        ([1, "a"], '[1,"a"]'),
    ],
)
def test_render_scalar(value, expected):
    assert render_scalar(value) == expected


@pytest.mark.parametrize("value", [float("nan"), [float("inf")], {"rating": float("-inf")}])
def test_to_json_rejects_non_finite_numbers(value):
    with pytest.raises(ValueError):
        to_json(value)


def test_render_comma_list():
    assert render_comma_list(["name:asc", "rating:desc"]) == "name:asc,rating:desc"


def test_empty_store():
    assert to_query_string(ParameterStore()) == ""


def test_renders_in_store_order():
    store = ParameterStore()
    store.set("q", "coffee shop")
    store.append_to_comma_list("select", "name")
    store.append_to_comma_list("select", "tel")
    store.set("include_count", True)

    assert to_query_string(store) == "q=coffee+shop&select=name%2Ctel&include_count=true"


def test_single_row_filter_is_still_an_array():
    store = ParameterStore()
    store.add_row_filter(FieldFilter(key="name", operator="$eq", value="x"))

    query_string = to_query_string(store)

    assert query_string == "filters=%5B%7B%22name%22%3A%7B%22%24eq%22%3A%22x%22%7D%7D%5D"
    assert unquote_plus(query_string.split("=", 1)[1]) == '[{"name":{"$eq":"x"}}]'


def test_row_filter_round_trip():
    nested = FilterGroup(
        combinator=Combinator.OR,
        operands=(
            FilterGroup(
                combinator=Combinator.AND,
                operands=(
                    FieldFilter(key="locality", operator="$eq", value="los angeles"),
                    FieldFilter(key="rating", operator="$gte", value=4.5),
                ),
            ),
            FieldFilter(key="name", operator="$bw", value="Café & Bar"),
        ),
    )
    store = ParameterStore()
    store.add_row_filter(nested)
    store.add_row_filter(FieldFilter(key="tel", operator="$blank", value=False))

    pairs = parse_qsl(to_query_string(store))

    assert [key for key, _ in pairs] == ["filters"]
    assert json.loads(pairs[0][1]) == [nested.to_wire(), {"tel": {"$blank": False}}]


def test_unicode_is_percent_encoded_utf8():
    store = ParameterStore()
    store.set("q", "café")

    assert to_query_string(store) == "q=caf%C3%A9"


class TestDecode:
    def test_decodes_values_as_text(self):
        assert decode_query_string("?limit=10&q=%22pizza%22") == {"limit": "10", "q": '"pizza"'}

    def test_parses_filters(self):
        store = ParameterStore()
        store.add_row_filter(FieldFilter(key="region", operator="$in", value=["CA", "NV"]))

        decoded = decode_query_string(to_query_string(store))

        assert decoded == {"filters": [{"region": {"$in": ["CA", "NV"]}}]}

    def test_keeps_blank_values(self):
        assert decode_query_string("q=") == {"q": ""}

    @pytest.mark.parametrize("query_string", ["filters=nope", "filters=%7B%7D"])
    def test_bad_filters(self, query_string):
        with pytest.raises(FilterParseError):
            decode_query_string(query_string)
