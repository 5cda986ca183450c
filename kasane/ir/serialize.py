"""
Kasane Wire Serialization

Translates the typed model into the engine's tagged-union wire form and
decodes engine identifiers back.

The translation must be:
- Lossless: every dimension range and identifier survives a round trip
- Strict: a shape that matches no known variant is rejected, never guessed
- Order-preserving: combinator operands keep the order they were given in

Range expressions are encode-only. The engine never echoes a query tree
back; only leaf identifiers come back and are decoded.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Mapping, Optional, Union

from .model import (
    ANY_MARKER,
    OPERATORS_BY_TYPE,
    BooleanOp,
    Combination,
    DimensionKind,
    DimensionRange,
    Filter,
    FilterValue,
    HasValue,
    IntOp,
    RangeExpr,
    SetOperator,
    SpaceTimeId,
    TextOp,
    ValueEntry,
    ValueType,
)
from .validation import (
    DecodingError,
    EncodingError,
    check_pair,
    describe,
    is_number,
    require_single_key,
)

DIMENSIONS = ("f", "x", "y", "t")

_BOOLEAN_TAGS = {
    BooleanOp.IS_TRUE: "IsTrue",
    BooleanOp.IS_FALSE: "IsFalse",
    BooleanOp.EQUALS: "Equals",
    BooleanOp.NOT_EQUALS: "NotEquals",
}

_INT_TAGS = {
    IntOp.EQUAL: "Equal",
    IntOp.NOT_EQUAL: "NotEqual",
    IntOp.GREATER_THAN: "GreaterThan",
    IntOp.GREATER_EQUAL: "GreaterEqual",
    IntOp.LESS_THAN: "LessThan",
    IntOp.LESS_EQUAL: "LessEqual",
    IntOp.BETWEEN: "Between",
    IntOp.IN: "In",
    IntOp.NOT_IN: "NotIn",
}

_TEXT_TAGS = {
    TextOp.EQUAL: "Equal",
    TextOp.NOT_EQUAL: "NotEqual",
    TextOp.CONTAINS: "Contains",
    TextOp.NOT_CONTAINS: "NotContains",
    TextOp.STARTS_WITH: "StartsWith",
    TextOp.ENDS_WITH: "EndsWith",
    TextOp.CASE_INSENSITIVE_EQUAL: "CaseInsensitiveEqual",
}

_FILTER_WIRE_KEYS = {
    ValueType.BOOLEAN: "FilterBOOLEAN",
    ValueType.INT: "FilterINT",
    ValueType.TEXT: "FilterTEXT",
}

_VALUE_TAGS = {"INT": int, "TEXT": str, "BOOLEAN": bool}


# ---------- Dimension ranges ----------


def dimension_range_from_array(value: Any) -> DimensionRange:
    """
    Parse the compact array notation.

    ["-"] -> Any, [v] -> Single, ["-", hi] -> before, [lo, "-"] -> after,
    [lo, hi] -> LimitRange.

    Raises:
        EncodingError: For any other length or member, including ["-", "-"].
    """
    if isinstance(value, (list, tuple)):
        if len(value) == 1:
            (only,) = value
            if only == ANY_MARKER:
                return DimensionRange.any()
            if is_number(only):
                return DimensionRange.single(only)
        elif len(value) == 2:
            first, second = value
            if first == ANY_MARKER and is_number(second):
                return DimensionRange.before(second)
            if is_number(first) and second == ANY_MARKER:
                return DimensionRange.after(first)
            if is_number(first) and is_number(second):
                return DimensionRange.between(first, second)
    raise EncodingError(f"invalid dimension range: {describe(value)}", value)


def _dimension_from_input(value: Any) -> DimensionRange:
    if isinstance(value, DimensionRange):
        return value
    if is_number(value):
        return DimensionRange.single(value)
    return dimension_range_from_array(value)


def encode_dimension_range(value: Union[DimensionRange, List[Any]]) -> Any:
    """
    Encode one axis constraint to its wire tag.

    Args:
        value: A DimensionRange or its compact array notation

    Returns:
        "Any", or a one-key dict such as {"LimitRange": [lo, hi]}
    """
    dr = _dimension_from_input(value)
    if dr.kind == DimensionKind.ANY:
        return DimensionKind.ANY.value
    if dr.kind == DimensionKind.SINGLE:
        return {DimensionKind.SINGLE.value: dr.start}
    if dr.kind == DimensionKind.LIMIT_RANGE:
        return {DimensionKind.LIMIT_RANGE.value: [dr.start, dr.end]}
    if dr.kind == DimensionKind.BEFORE_UNLIMIT:
        return {DimensionKind.BEFORE_UNLIMIT.value: dr.end}
    if dr.kind == DimensionKind.AFTER_UNLIMIT:
        return {DimensionKind.AFTER_UNLIMIT.value: dr.start}
    raise EncodingError(f"invalid dimension range: {dr!r}", dr)


def decode_dimension_range(wire: Any) -> DimensionRange:
    """
    Decode one wire dimension tag.

    Raises:
        DecodingError: If wire is not one of the five known shapes.
    """
    if wire == DimensionKind.ANY.value:
        return DimensionRange.any()
    if isinstance(wire, dict) and len(wire) == 1:
        tag, value = next(iter(wire.items()))
        if tag == DimensionKind.SINGLE.value and is_number(value):
            return DimensionRange.single(value)
        if (
            tag == DimensionKind.LIMIT_RANGE.value
            and isinstance(value, list)
            and len(value) == 2
            and all(is_number(v) for v in value)
        ):
            return DimensionRange.between(value[0], value[1])
        if tag == DimensionKind.BEFORE_UNLIMIT.value and is_number(value):
            return DimensionRange.before(value)
        if tag == DimensionKind.AFTER_UNLIMIT.value and is_number(value):
            return DimensionRange.after(value)
    raise DecodingError(f"unrecognized dimension range: {describe(wire)}", wire)


# ---------- Space-time identifiers ----------


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def space_time_id_from_dict(data: Mapping[str, Any]) -> SpaceTimeId:
    """
    Build a SpaceTimeId from the compact client notation.

    z is required. i defaults to 0 and each of f, x, y, t defaults to Any
    when its key is omitted. No cross-field checks (lo <= hi) are done
    here; the engine owns those.

    Raises:
        EncodingError: If z is missing or any field is malformed.
    """
    if not isinstance(data, Mapping):
        raise EncodingError(f"space-time id must be an object: {describe(data)}", data)
    if data.get("z") is None:
        raise EncodingError(f"space-time id requires 'z': {describe(data)}", data)
    z = data["z"]
    i = data.get("i")
    if i is None:
        i = 0
    if not _is_integer(z) or not _is_integer(i):
        raise EncodingError(
            f"space-time id 'z' and 'i' must be integers: {describe(data)}", data
        )
    dims = {
        name: (
            _dimension_from_input(data[name])
            if data.get(name) is not None
            else DimensionRange.any()
        )
        for name in DIMENSIONS
    }
    return SpaceTimeId(z=z, i=i, **dims)


def space_time_id_to_dict(stid: SpaceTimeId) -> Dict[str, Any]:
    """Return the compact client notation of an identifier."""
    return stid.to_dict()


def encode_space_time_id(stid: Union[SpaceTimeId, Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Encode an identifier to the engine's wire form.

    Args:
        stid: A SpaceTimeId or its compact dict notation

    Returns:
        {"z", "f", "x", "y", "i", "t"} with every dimension tagged
    """
    if not isinstance(stid, SpaceTimeId):
        stid = space_time_id_from_dict(stid)
    if not _is_integer(stid.z) or not _is_integer(stid.i):
        raise EncodingError(f"space-time id 'z' and 'i' must be integers: {stid!r}", stid)
    return {
        "z": stid.z,
        "f": encode_dimension_range(stid.f),
        "x": encode_dimension_range(stid.x),
        "y": encode_dimension_range(stid.y),
        "i": stid.i,
        "t": encode_dimension_range(stid.t),
    }


def decode_space_time_id(wire: Any) -> SpaceTimeId:
    """
    Decode an engine identifier.

    Every field must be present; defaults are never filled in on the way
    back, so the result is always fully explicit.

    Raises:
        DecodingError: If a field is missing or carries an unknown tag.
    """
    if not isinstance(wire, dict):
        raise DecodingError(f"space-time id must be an object: {describe(wire)}", wire)
    for name in ("z", "i") + DIMENSIONS:
        if name not in wire:
            raise DecodingError(f"space-time id missing '{name}': {describe(wire)}", wire)
    if not _is_integer(wire["z"]) or not _is_integer(wire["i"]):
        raise DecodingError(
            f"space-time id 'z' and 'i' must be integers: {describe(wire)}", wire
        )
    return SpaceTimeId(
        z=wire["z"],
        i=wire["i"],
        f=decode_dimension_range(wire["f"]),
        x=decode_dimension_range(wire["x"]),
        y=decode_dimension_range(wire["y"]),
        t=decode_dimension_range(wire["t"]),
    )


# ---------- Filters ----------


def _parse_predicate(kind: ValueType, payload: Any) -> Filter:
    key = require_single_key(payload, f"{kind.value} filter")
    try:
        op = OPERATORS_BY_TYPE[kind](key)
    except ValueError:
        raise EncodingError(
            f"unrecognized {kind.value} filter: {describe(payload)}", payload
        ) from None
    value = payload[key]
    if op in (BooleanOp.IS_TRUE, BooleanOp.IS_FALSE):
        if value is not True:
            raise EncodingError(
                f"invalid boolean filter: {describe(payload)}", payload
            )
        return Filter(kind=kind, op=op)
    if isinstance(value, list):
        value = tuple(value)
    return Filter(kind=kind, op=op, value=value)


def filter_from_dict(data: Any) -> Filter:
    """
    Parse {"boolean" | "int" | "text": {<predicate>: <operand>}}.

    Raises:
        EncodingError: If the value kind or predicate is not recognized.
    """
    if isinstance(data, Filter):
        return data
    key = require_single_key(data, "filter")
    try:
        kind = ValueType(key)
    except ValueError:
        raise EncodingError(f"unrecognized filter: {describe(data)}", data) from None
    return _parse_predicate(kind, data[key])


def _encode_predicate(flt: Filter) -> Any:
    bad = EncodingError(f"invalid {flt.kind.value} filter: {describe(flt.to_dict())}", flt)
    if flt.kind == ValueType.BOOLEAN:
        tag = _BOOLEAN_TAGS.get(flt.op)
        if tag is None:
            raise bad
        if flt.op in (BooleanOp.IS_TRUE, BooleanOp.IS_FALSE):
            # these take no operand
            if flt.value is not None:
                raise bad
            return tag
        if not isinstance(flt.value, bool):
            raise bad
        return {tag: flt.value}

    if flt.kind == ValueType.INT:
        tag = _INT_TAGS.get(flt.op)
        if tag is None:
            raise bad
        if flt.op == IntOp.BETWEEN:
            check_pair(flt.value, "between", flt)
            if not all(is_number(v) for v in flt.value):
                raise bad
            return {tag: list(flt.value)}
        if flt.op in (IntOp.IN, IntOp.NOT_IN):
            if not isinstance(flt.value, (list, tuple)) or not all(
                is_number(v) for v in flt.value
            ):
                raise bad
            return {tag: list(flt.value)}
        if not is_number(flt.value):
            raise bad
        return {tag: flt.value}

    if flt.kind == ValueType.TEXT:
        tag = _TEXT_TAGS.get(flt.op)
        if tag is None or not isinstance(flt.value, str):
            raise bad
        return {tag: flt.value}

    raise bad


def encode_boolean_filter(payload: Any) -> Any:
    """{"isTrue": True} -> "IsTrue", {"equals": v} -> {"Equals": v}, ..."""
    return _encode_predicate(_parse_predicate(ValueType.BOOLEAN, payload))


def encode_int_filter(payload: Any) -> Any:
    """{"between": [a, b]} -> {"Between": [a, b]}, {"in": [...]} -> {"In": [...]}, ..."""
    return _encode_predicate(_parse_predicate(ValueType.INT, payload))


def encode_text_filter(payload: Any) -> Any:
    """{"contains": s} -> {"Contains": s}, ..."""
    return _encode_predicate(_parse_predicate(ValueType.TEXT, payload))


def encode_filter(flt: Union[Filter, Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Encode a filter to {"FilterBOOLEAN" | "FilterINT" | "FilterTEXT": <tag>}.

    Raises:
        EncodingError: If the filter matches none of its kind's predicates.
    """
    flt = filter_from_dict(flt)
    return {_FILTER_WIRE_KEYS[flt.kind]: _encode_predicate(flt)}


# ---------- Range expressions ----------


def _leaf_names(data: Any, tag: str) -> Dict[str, Any]:
    leaf = data[tag]
    if (
        not isinstance(leaf, Mapping)
        or not isinstance(leaf.get("space"), str)
        or not isinstance(leaf.get("key"), str)
    ):
        raise EncodingError(
            f"{tag} requires 'space' and 'key': {describe(data)}", data
        )
    return dict(leaf)


def range_from_dict(data: Any) -> RangeExpr:
    """
    Parse the client JSON form of a range expression into typed nodes.

    Dispatch is on shape: a numeric "z" is an identifier; exactly one of
    AND/OR/XOR/NOT is a combinator; "Filter" and "HasValue" are leaves.

    Raises:
        EncodingError: If data matches none of those shapes.
    """
    if isinstance(data, (SpaceTimeId, Combination, FilterValue, HasValue)):
        return data
    if not isinstance(data, Mapping):
        raise EncodingError(
            f"unrecognized range expression shape: {describe(data)}", data
        )

    if is_number(data.get("z")):
        return space_time_id_from_dict(data)

    if len(data) == 1:
        tag = next(iter(data))
        if tag in SetOperator.__members__:
            operands = data[tag]
            if not isinstance(operands, (list, tuple)):
                raise EncodingError(
                    f"{tag} expects a list of range expressions: {describe(data)}",
                    data,
                )
            return Combination(
                op=SetOperator(tag),
                operands=tuple(range_from_dict(child) for child in operands),
            )
        if tag == "Filter":
            leaf = _leaf_names(data, tag)
            flt = leaf.get("filter")
            return FilterValue(
                space=leaf["space"],
                key=leaf["key"],
                filter=filter_from_dict(flt) if flt is not None else None,
            )
        if tag == "HasValue":
            leaf = _leaf_names(data, tag)
            return HasValue(space=leaf["space"], key=leaf["key"])

    raise EncodingError(f"unrecognized range expression shape: {describe(data)}", data)


def encode_range(expr: Union[RangeExpr, Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Encode a range expression tree into the engine's nested wire shape.

    Args:
        expr: A typed node or the client JSON form

    Returns:
        One of {"SpaceTimeIdSet": [...]}, {"Prefix": {<OP>: [...]}},
        {"Function": {"FilterValue" | "HasValue": {...}}}
    """
    node = range_from_dict(expr)

    if isinstance(node, SpaceTimeId):
        return {"SpaceTimeIdSet": [encode_space_time_id(node)]}

    if isinstance(node, Combination):
        return {"Prefix": {node.op.value: [encode_range(child) for child in node.operands]}}

    if isinstance(node, FilterValue):
        value: Dict[str, Any] = {"spacename": node.space, "keyname": node.key}
        if node.filter is not None:
            value["filter"] = encode_filter(node.filter)
        return {"Function": {"FilterValue": value}}

    if isinstance(node, HasValue):
        return {"Function": {"HasValue": {"spacename": node.space, "keyname": node.key}}}

    raise EncodingError(f"unrecognized range expression shape: {node!r}", node)


def to_json(expr: Union[RangeExpr, Mapping[str, Any]], indent: Optional[int] = None) -> str:
    """Serialize the wire form of a range expression to JSON."""
    return json.dumps(encode_range(expr), indent=indent)


# ---------- Stored values ----------


def encode_value_entry(value: ValueEntry) -> Dict[str, Any]:
    """
    Wrap a stored value: int -> {"INT": n}, str -> {"TEXT": s},
    bool -> {"BOOLEAN": b}.
    """
    if isinstance(value, bool):
        return {"BOOLEAN": value}
    if isinstance(value, int):
        return {"INT": value}
    if isinstance(value, str):
        return {"TEXT": value}
    raise EncodingError(f"unsupported value type: {type(value).__name__}", value)


def decode_value_entry(wire: Any) -> ValueEntry:
    """
    Unwrap {"INT": n} | {"TEXT": s} | {"BOOLEAN": b} into a plain scalar.

    Raises:
        DecodingError: If the wrapper is not exactly one known kind.
    """
    if isinstance(wire, dict) and len(wire) == 1:
        tag, value = next(iter(wire.items()))
        expected = _VALUE_TAGS.get(tag)
        if expected is bool and isinstance(value, bool):
            return value
        if expected is int and _is_integer(value):
            return value
        if expected is str and isinstance(value, str):
            return value
    raise DecodingError(f"unrecognized value entry: {describe(wire)}", wire)
