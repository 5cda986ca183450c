"""
Tests for the Range Expression Tree Encoder

The wire tree must mirror the input tree exactly: same combinators,
same nesting, same operand order. Shapes that are none of id,
combinator, filter or existence check are rejected.
"""

import json

import pytest

from kasane.ir import (
    Combination,
    DimensionRange,
    EncodingError,
    Filter,
    FilterValue,
    HasValue,
    IntOp,
    SetOperator,
    SpaceTimeId,
    encode_range,
    range_from_dict,
    to_json,
)

A = {"z": 1, "x": [1]}
B = {"z": 1, "x": [2]}
C = {"z": 1, "x": [3]}


@pytest.fixture
def leaf(wire_space_time_id):
    def _leaf(x):
        return {"SpaceTimeIdSet": [wire_space_time_id(z=1, x={"Single": x})]}

    return _leaf


class TestLeaves:
    def test_space_time_id(self, wire_space_time_id):
        assert encode_range({"z": 3, "i": 0}) == {
            "SpaceTimeIdSet": [wire_space_time_id(z=3)]
        }

    def test_typed_space_time_id(self, wire_space_time_id):
        stid = SpaceTimeId(z=5, i=60, t=DimensionRange.single(2))
        assert encode_range(stid) == {
            "SpaceTimeIdSet": [wire_space_time_id(z=5, i=60, t={"Single": 2})]
        }

    def test_filter(self):
        expr = {"Filter": {"space": "s", "key": "k", "filter": {"int": {"greaterThan": 20}}}}
        assert encode_range(expr) == {
            "Function": {
                "FilterValue": {
                    "spacename": "s",
                    "keyname": "k",
                    "filter": {"FilterINT": {"GreaterThan": 20}},
                }
            }
        }

    def test_filter_without_predicate_is_existence_probe(self):
        wire = encode_range({"Filter": {"space": "s", "key": "k"}})
        assert wire == {"Function": {"FilterValue": {"spacename": "s", "keyname": "k"}}}
        assert "filter" not in wire["Function"]["FilterValue"]

    def test_has_value(self):
        assert encode_range({"HasValue": {"space": "s", "key": "k"}}) == {
            "Function": {"HasValue": {"spacename": "s", "keyname": "k"}}
        }

    def test_typed_leaves(self):
        flt = Filter.integer(IntOp.LESS_THAN, 3)
        assert encode_range(FilterValue("s", "k", flt)) == encode_range(
            {"Filter": {"space": "s", "key": "k", "filter": {"int": {"lessThan": 3}}}}
        )
        assert encode_range(HasValue("s", "k")) == encode_range(
            {"HasValue": {"space": "s", "key": "k"}}
        )


class TestCombinators:
    def test_nesting_mirrors_input(self, leaf):
        """{AND: [{OR: [A, B]}, {NOT: [C]}]} keeps its depth-3 structure."""
        wire = encode_range({"AND": [{"OR": [A, B]}, {"NOT": [C]}]})

        assert wire == {
            "Prefix": {
                "AND": [
                    {"Prefix": {"OR": [leaf(1), leaf(2)]}},
                    {"Prefix": {"NOT": [leaf(3)]}},
                ]
            }
        }

    def test_operand_order_preserved(self, leaf):
        wire = encode_range({"XOR": [C, A, B]})
        assert wire == {"Prefix": {"XOR": [leaf(3), leaf(1), leaf(2)]}}

    @pytest.mark.parametrize("op", ["AND", "OR", "XOR", "NOT"])
    def test_each_combinator(self, op, leaf):
        assert encode_range({op: [A]}) == {"Prefix": {op: [leaf(1)]}}

    def test_mixed_leaves(self):
        wire = encode_range(
            {
                "AND": [
                    A,
                    {"Filter": {"space": "s", "key": "k", "filter": {"text": {"contains": "x"}}}},
                    {"NOT": [{"HasValue": {"space": "s", "key": "other"}}]},
                ]
            }
        )
        operands = wire["Prefix"]["AND"]
        assert list(operands[0]) == ["SpaceTimeIdSet"]
        assert operands[1]["Function"]["FilterValue"]["filter"] == {
            "FilterTEXT": {"Contains": "x"}
        }
        assert operands[2] == {
            "Prefix": {"NOT": [{"Function": {"HasValue": {"spacename": "s", "keyname": "other"}}}]}
        }

    def test_typed_and_dict_forms_agree(self):
        typed = Combination(
            op=SetOperator.OR,
            operands=(SpaceTimeId(z=1, x=DimensionRange.single(1)), HasValue("s", "k")),
        )
        assert encode_range(typed) == encode_range(
            {"OR": [A, {"HasValue": {"space": "s", "key": "k"}}]}
        )


class TestUnrecognizedShapes:
    @pytest.mark.parametrize(
        "expr",
        [
            {},
            {"FOO": []},
            {"AND": [A], "OR": [B]},
            {"AND": A},
            {"z": "3"},
            {"Filter": {"space": "s"}},
            {"HasValue": {"key": "k"}},
            {"HasValue": {"space": "s", "key": "k"}, "AND": []},
            [A],
            "AND",
        ],
    )
    def test_rejected(self, expr):
        with pytest.raises(EncodingError):
            encode_range(expr)

    def test_message(self):
        with pytest.raises(EncodingError) as exc_info:
            encode_range({"FOO": []})
        assert "unrecognized range expression shape" in str(exc_info.value)

    def test_bad_child_rejected(self):
        with pytest.raises(EncodingError):
            encode_range({"AND": [A, {"bogus": 1}]})

    def test_bad_nested_filter_rejected(self):
        with pytest.raises(EncodingError):
            encode_range({"Filter": {"space": "s", "key": "k", "filter": {"int": {}}}})


class TestParsing:
    def test_range_from_dict(self):
        node = range_from_dict({"NOT": [{"HasValue": {"space": "s", "key": "k"}}]})
        assert node == Combination(op=SetOperator.NOT, operands=(HasValue("s", "k"),))

    def test_to_json(self):
        data = json.loads(to_json({"OR": [A, B]}))
        assert list(data["Prefix"]) == ["OR"]
        assert len(data["Prefix"]["OR"]) == 2
