"""
Kasane Range Builders

Pure constructors for dimension ranges, range expressions, filters and
output options, plus a fluent builder for space-time identifiers.

None of these hold state; they only assemble model values.

Usage:
    region = (
        space_time_id()
        .zoom(10)
        .x(between(100, 200))
        .y(200)
        .interval(1)
        .build()
    )
    expr = and_(region, not_(has_value("sensors", "temperature")))
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Union

from kasane.ir.model import (
    BooleanOp,
    Combination,
    DimensionRange,
    Filter,
    FilterValue,
    HasValue,
    IntOp,
    Number,
    RangeExpr,
    SetOperator,
    SpaceTimeId,
    TextOp,
)
from kasane.ir.serialize import range_from_dict, space_time_id_from_dict
from kasane.ir.validation import EncodingError

DimensionInput = Union[DimensionRange, Number, Sequence[Any]]


class IncompleteIdError(EncodingError):
    """Raised when trying to build an identifier without a zoom level."""

    def __init__(self, missing_fields: List[str]):
        self.missing_fields = missing_fields
        super().__init__(f"Space-time id is incomplete. Missing: {', '.join(missing_fields)}")


# ========== Dimension ranges ==========


def single(value: Number) -> DimensionRange:
    return DimensionRange.single(value)


def between(start: Number, end: Number) -> DimensionRange:
    return DimensionRange.between(start, end)


def before(end: Number) -> DimensionRange:
    return DimensionRange.before(end)


def after(start: Number) -> DimensionRange:
    return DimensionRange.after(start)


def any_range() -> DimensionRange:
    return DimensionRange.any()


# ========== Range expressions ==========


def _combine(op: SetOperator, exprs: Sequence[Any]) -> Combination:
    return Combination(op=op, operands=tuple(range_from_dict(e) for e in exprs))


def and_(*exprs: Any) -> Combination:
    """Intersection of all operands."""
    return _combine(SetOperator.AND, exprs)


def or_(*exprs: Any) -> Combination:
    """Union of all operands."""
    return _combine(SetOperator.OR, exprs)


def xor(*exprs: Any) -> Combination:
    return _combine(SetOperator.XOR, exprs)


def not_(*exprs: Any) -> Combination:
    """Complement; the engine decides the universe it complements against."""
    return _combine(SetOperator.NOT, exprs)


def value_filter(space: str, key: str, flt: Optional[Filter] = None) -> FilterValue:
    """Regions whose value under space/key satisfies flt (any value if None)."""
    return FilterValue(space=space, key=key, filter=flt)


def has_value(space: str, key: str) -> HasValue:
    return HasValue(space=space, key=key)


def id_from(data: Any) -> RangeExpr:
    """Accept a SpaceTimeId or its compact dict notation."""
    if isinstance(data, SpaceTimeId):
        return data
    return space_time_id_from_dict(data)


# ========== Filters ==========


class BooleanFilter:
    @staticmethod
    def is_true() -> Filter:
        return Filter.boolean(BooleanOp.IS_TRUE)

    @staticmethod
    def is_false() -> Filter:
        return Filter.boolean(BooleanOp.IS_FALSE)

    @staticmethod
    def equals(value: bool) -> Filter:
        return Filter.boolean(BooleanOp.EQUALS, value)

    @staticmethod
    def not_equals(value: bool) -> Filter:
        return Filter.boolean(BooleanOp.NOT_EQUALS, value)


class IntFilter:
    @staticmethod
    def equal(value: int) -> Filter:
        return Filter.integer(IntOp.EQUAL, value)

    @staticmethod
    def not_equal(value: int) -> Filter:
        return Filter.integer(IntOp.NOT_EQUAL, value)

    @staticmethod
    def greater_than(value: int) -> Filter:
        return Filter.integer(IntOp.GREATER_THAN, value)

    @staticmethod
    def greater_equal(value: int) -> Filter:
        return Filter.integer(IntOp.GREATER_EQUAL, value)

    @staticmethod
    def less_than(value: int) -> Filter:
        return Filter.integer(IntOp.LESS_THAN, value)

    @staticmethod
    def less_equal(value: int) -> Filter:
        return Filter.integer(IntOp.LESS_EQUAL, value)

    @staticmethod
    def between(start: int, end: int) -> Filter:
        """Inclusive on both ends."""
        return Filter.integer(IntOp.BETWEEN, (start, end))

    @staticmethod
    def in_(values: Sequence[int]) -> Filter:
        return Filter.integer(IntOp.IN, tuple(values))

    @staticmethod
    def not_in(values: Sequence[int]) -> Filter:
        return Filter.integer(IntOp.NOT_IN, tuple(values))


class TextFilter:
    @staticmethod
    def equal(value: str) -> Filter:
        return Filter.text(TextOp.EQUAL, value)

    @staticmethod
    def not_equal(value: str) -> Filter:
        return Filter.text(TextOp.NOT_EQUAL, value)

    @staticmethod
    def contains(value: str) -> Filter:
        return Filter.text(TextOp.CONTAINS, value)

    @staticmethod
    def not_contains(value: str) -> Filter:
        return Filter.text(TextOp.NOT_CONTAINS, value)

    @staticmethod
    def starts_with(value: str) -> Filter:
        return Filter.text(TextOp.STARTS_WITH, value)

    @staticmethod
    def ends_with(value: str) -> Filter:
        return Filter.text(TextOp.ENDS_WITH, value)

    @staticmethod
    def case_insensitive_equal(value: str) -> Filter:
        return Filter.text(TextOp.CASE_INSENSITIVE_EQUAL, value)


# ========== Fluent identifier builder ==========


@dataclass
class _BuilderState:
    """Internal state for the builder."""

    z: Optional[int] = None
    i: int = 0
    f: Optional[DimensionInput] = None
    x: Optional[DimensionInput] = None
    y: Optional[DimensionInput] = None
    t: Optional[DimensionInput] = None


class SpaceTimeIdBuilder:
    """
    Fluent builder for space-time identifiers.

    Usage:
        stid = space_time_id().zoom(10).x(100).y([100, 200]).interval(60).t(5).build()

    zoom is required; interval defaults to 0 (a spatial id) and every
    axis left unset is Any.
    """

    def __init__(self) -> None:
        self._state = _BuilderState()

    def zoom(self, z: int) -> "SpaceTimeIdBuilder":
        self._state.z = z
        return self

    def interval(self, i: int) -> "SpaceTimeIdBuilder":
        """Interval length in seconds; 0 makes this a spatial id."""
        self._state.i = i
        return self

    def f(self, value: DimensionInput) -> "SpaceTimeIdBuilder":
        """Altitude axis."""
        self._state.f = value
        return self

    def x(self, value: DimensionInput) -> "SpaceTimeIdBuilder":
        self._state.x = value
        return self

    def y(self, value: DimensionInput) -> "SpaceTimeIdBuilder":
        self._state.y = value
        return self

    def t(self, value: DimensionInput) -> "SpaceTimeIdBuilder":
        """Time index within the interval."""
        self._state.t = value
        return self

    def build(self) -> SpaceTimeId:
        """
        Build the identifier.

        Raises:
            IncompleteIdError: If no zoom level was set
            EncodingError: If an axis is not a valid dimension range
        """
        if self._state.z is None:
            raise IncompleteIdError(["z (use .zoom())"])
        return space_time_id_from_dict(
            {
                "z": self._state.z,
                "i": self._state.i,
                "f": self._state.f,
                "x": self._state.x,
                "y": self._state.y,
                "t": self._state.t,
            }
        )

    def copy(self) -> "SpaceTimeIdBuilder":
        new_builder = SpaceTimeIdBuilder()
        new_builder._state = _BuilderState(**vars(self._state))
        return new_builder


# Convenience function for starting an identifier
def space_time_id() -> SpaceTimeIdBuilder:
    """Start building a new space-time identifier."""
    return SpaceTimeIdBuilder()
