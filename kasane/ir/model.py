"""
Kasane Range Model

Typed values for everything that crosses the engine boundary:
dimension ranges, space-time identifiers, value filters, range
expressions, output options and result records.

Required Properties of the model:
- Closed: every variant is an enum member, never a free-form string
- Explicit: a decoded identifier carries all six fields
- Immutable: values are frozen and safe to share
- Backend-agnostic: no wire tags leak into the model itself
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union

from .validation import EncodingError, is_number

ANY_MARKER = "-"

Number = Union[int, float]
Point = Tuple[float, float, float]
ValueEntry = Union[int, str, bool]


# ---------- Enums (closed-world) ----------


class DimensionKind(str, Enum):
    """
    The five shapes a single axis constraint can take.

    Values are the engine's wire tags.
    """

    SINGLE = "Single"
    LIMIT_RANGE = "LimitRange"
    BEFORE_UNLIMIT = "BeforeUnLimitRange"
    AFTER_UNLIMIT = "AfterUnLimitRange"
    ANY = "Any"


class ValueType(str, Enum):
    """Kind of value a filter predicate applies to."""

    BOOLEAN = "boolean"
    INT = "int"
    TEXT = "text"


class KeyType(str, Enum):
    """Data type declared for a key when it is created."""

    INT = "INT"
    BOOLEAN = "BOOLEAN"
    TEXT = "TEXT"


class BooleanOp(str, Enum):
    IS_TRUE = "isTrue"
    IS_FALSE = "isFalse"
    EQUALS = "equals"
    NOT_EQUALS = "notEquals"


class IntOp(str, Enum):
    EQUAL = "equal"
    NOT_EQUAL = "notEqual"
    GREATER_THAN = "greaterThan"
    GREATER_EQUAL = "greaterEqual"
    LESS_THAN = "lessThan"
    LESS_EQUAL = "lessEqual"
    BETWEEN = "between"
    IN = "in"
    NOT_IN = "notIn"


class TextOp(str, Enum):
    EQUAL = "equal"
    NOT_EQUAL = "notEqual"
    CONTAINS = "contains"
    NOT_CONTAINS = "notContains"
    STARTS_WITH = "startsWith"
    ENDS_WITH = "endsWith"
    CASE_INSENSITIVE_EQUAL = "caseInsensitiveEqual"


FilterOp = Union[BooleanOp, IntOp, TextOp]

OPERATORS_BY_TYPE = {
    ValueType.BOOLEAN: BooleanOp,
    ValueType.INT: IntOp,
    ValueType.TEXT: TextOp,
}


class SetOperator(str, Enum):
    """
    Set combinators over range expressions.

    The engine alone decides what NOT complements against and whether
    operand order matters; operands are always passed through in order.
    """

    AND = "AND"
    OR = "OR"
    XOR = "XOR"
    NOT = "NOT"


# ---------- Dimension ranges ----------


@dataclass(frozen=True)
class DimensionRange:
    """
    A constraint on one scalar axis (f, x, y or t).

    SINGLE uses start; LIMIT_RANGE uses start and end (inclusive);
    BEFORE_UNLIMIT uses end; AFTER_UNLIMIT uses start; ANY uses neither.
    """

    kind: DimensionKind
    start: Optional[Number] = None
    end: Optional[Number] = None

    def __post_init__(self) -> None:
        """
        Raises:
            EncodingError: If the bounds do not match the kind.
        """
        if self.kind in (DimensionKind.SINGLE, DimensionKind.AFTER_UNLIMIT):
            valid = is_number(self.start) and self.end is None
        elif self.kind == DimensionKind.BEFORE_UNLIMIT:
            valid = is_number(self.end) and self.start is None
        elif self.kind == DimensionKind.LIMIT_RANGE:
            valid = is_number(self.start) and is_number(self.end)
        elif self.kind == DimensionKind.ANY:
            valid = self.start is None and self.end is None
        else:
            valid = False
        if not valid:
            raise EncodingError(f"invalid dimension range: {self!r}", self)

    @staticmethod
    def single(value: Number) -> "DimensionRange":
        """Exactly one index on this axis."""
        return DimensionRange(kind=DimensionKind.SINGLE, start=value)

    @staticmethod
    def between(start: Number, end: Number) -> "DimensionRange":
        """Every index from start to end, both inclusive."""
        return DimensionRange(kind=DimensionKind.LIMIT_RANGE, start=start, end=end)

    @staticmethod
    def before(end: Number) -> "DimensionRange":
        """Every index up to and including end."""
        return DimensionRange(kind=DimensionKind.BEFORE_UNLIMIT, end=end)

    @staticmethod
    def after(start: Number) -> "DimensionRange":
        """Every index from start onwards."""
        return DimensionRange(kind=DimensionKind.AFTER_UNLIMIT, start=start)

    @staticmethod
    def any() -> "DimensionRange":
        """No constraint on this axis."""
        return DimensionRange(kind=DimensionKind.ANY)

    @property
    def is_any(self) -> bool:
        return self.kind == DimensionKind.ANY

    def to_array(self) -> List[Any]:
        """Return the compact array notation, e.g. [5], [1, 9], ["-", 9]."""
        if self.kind == DimensionKind.SINGLE:
            return [self.start]
        if self.kind == DimensionKind.LIMIT_RANGE:
            return [self.start, self.end]
        if self.kind == DimensionKind.BEFORE_UNLIMIT:
            return [ANY_MARKER, self.end]
        if self.kind == DimensionKind.AFTER_UNLIMIT:
            return [self.start, ANY_MARKER]
        return [ANY_MARKER]


# ---------- Identifiers ----------


@dataclass(frozen=True)
class SpaceTimeId:
    """
    A 4D region at one zoom level.

    z is the resolution level and i the interval length in seconds.
    i == 0 marks a spatial id, valid at all times; any other value marks
    a space-time id, valid only within interval t.
    """

    z: int
    i: int = 0
    f: DimensionRange = field(default_factory=DimensionRange.any)
    x: DimensionRange = field(default_factory=DimensionRange.any)
    y: DimensionRange = field(default_factory=DimensionRange.any)
    t: DimensionRange = field(default_factory=DimensionRange.any)

    @property
    def is_spatial(self) -> bool:
        return self.i == 0

    def to_dict(self) -> Dict[str, Any]:
        """Return the compact client notation with every field explicit."""
        return {
            "z": self.z,
            "f": self.f.to_array(),
            "x": self.x.to_array(),
            "y": self.y.to_array(),
            "i": self.i,
            "t": self.t.to_array(),
        }


# ---------- Filters ----------


@dataclass(frozen=True)
class Filter:
    """
    A single value predicate.

    Exactly one operator is carried. Operators that take no operand
    (isTrue, isFalse) leave value as None; between holds a 2-tuple;
    in and notIn hold a tuple of members.
    """

    kind: ValueType
    op: FilterOp
    value: Any = None

    @staticmethod
    def boolean(op: Union[BooleanOp, str], value: Optional[bool] = None) -> "Filter":
        return Filter(kind=ValueType.BOOLEAN, op=BooleanOp(op), value=value)

    @staticmethod
    def integer(op: Union[IntOp, str], value: Any) -> "Filter":
        if isinstance(value, list):
            value = tuple(value)
        return Filter(kind=ValueType.INT, op=IntOp(op), value=value)

    @staticmethod
    def text(op: Union[TextOp, str], value: str) -> "Filter":
        return Filter(kind=ValueType.TEXT, op=TextOp(op), value=value)

    def to_dict(self) -> Dict[str, Any]:
        """Return the client JSON form, e.g. {"int": {"between": [1, 5]}}."""
        if self.op in (BooleanOp.IS_TRUE, BooleanOp.IS_FALSE):
            payload: Any = True
        elif isinstance(self.value, tuple):
            payload = list(self.value)
        else:
            payload = self.value
        return {self.kind.value: {self.op.value: payload}}


# ---------- Range expressions ----------


@dataclass(frozen=True)
class Combination:
    """A set operation over an ordered list of range expressions."""

    op: SetOperator
    operands: Tuple["RangeExpr", ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class FilterValue:
    """
    Regions of space/key whose stored value satisfies filter.

    With filter omitted the engine treats this as an existence probe,
    equivalent to HasValue.
    """

    space: str
    key: str
    filter: Optional[Filter] = None


@dataclass(frozen=True)
class HasValue:
    """Regions of space/key that hold any value at all."""

    space: str
    key: str


RangeExpr = Union[SpaceTimeId, Combination, FilterValue, HasValue]


# ---------- Output ----------


@dataclass(frozen=True)
class OutputOptions:
    """Which optional annotations the engine attaches to result records."""

    vertex: bool = False
    center: bool = False
    id_string: bool = False
    id_pure: bool = False

    @staticmethod
    def all() -> "OutputOptions":
        return OutputOptions(vertex=True, center=True, id_string=True, id_pure=True)

    @staticmethod
    def spatial() -> "OutputOptions":
        """Geometry only: vertices and centre."""
        return OutputOptions(vertex=True, center=True)

    @staticmethod
    def ids() -> "OutputOptions":
        """Identifier strings only."""
        return OutputOptions(id_string=True, id_pure=True)

    @staticmethod
    def minimal() -> "OutputOptions":
        return OutputOptions()


def _record_dict(
    space_time_id: SpaceTimeId,
    vertex: Optional[Tuple[Point, ...]],
    center: Optional[Point],
    id_string: Optional[str],
) -> Dict[str, Any]:
    data: Dict[str, Any] = {"spacetimeid": space_time_id.to_dict()}
    if id_string is not None:
        data["id_string"] = id_string
    if vertex is not None:
        data["vertex"] = [list(p) for p in vertex]
    if center is not None:
        data["center"] = list(center)
    return data


@dataclass(frozen=True)
class SelectRecord:
    """One region matched by a select."""

    space_time_id: SpaceTimeId
    vertex: Optional[Tuple[Point, ...]] = None
    center: Optional[Point] = None
    id_string: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict; absent annotations are left out rather than None."""
        return _record_dict(self.space_time_id, self.vertex, self.center, self.id_string)


@dataclass(frozen=True)
class GetValueRecord:
    """One region matched by get_value, with the value stored there."""

    space_time_id: SpaceTimeId
    value: ValueEntry
    vertex: Optional[Tuple[Point, ...]] = None
    center: Optional[Point] = None
    id_string: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = _record_dict(self.space_time_id, self.vertex, self.center, self.id_string)
        data["value"] = self.value
        return data
