"""Kasane typed model and wire codecs."""

from .model import (
    ANY_MARKER,
    BooleanOp,
    Combination,
    DimensionKind,
    DimensionRange,
    Filter,
    FilterValue,
    GetValueRecord,
    HasValue,
    IntOp,
    KeyType,
    OutputOptions,
    RangeExpr,
    SelectRecord,
    SetOperator,
    SpaceTimeId,
    TextOp,
    ValueType,
)
from .validation import (
    CommandError,
    DecodingError,
    EncodingError,
    KasaneError,
    ResponseShapeError,
    VersionCompatibilityWarning,
)
from .serialize import (
    decode_dimension_range,
    decode_space_time_id,
    decode_value_entry,
    dimension_range_from_array,
    encode_boolean_filter,
    encode_dimension_range,
    encode_filter,
    encode_int_filter,
    encode_range,
    encode_space_time_id,
    encode_text_filter,
    encode_value_entry,
    filter_from_dict,
    range_from_dict,
    space_time_id_from_dict,
    space_time_id_to_dict,
    to_json,
)

__all__ = [
    "ANY_MARKER",
    "BooleanOp",
    "Combination",
    "CommandError",
    "DecodingError",
    "DimensionKind",
    "DimensionRange",
    "EncodingError",
    "Filter",
    "FilterValue",
    "GetValueRecord",
    "HasValue",
    "IntOp",
    "KasaneError",
    "KeyType",
    "OutputOptions",
    "RangeExpr",
    "ResponseShapeError",
    "SelectRecord",
    "SetOperator",
    "SpaceTimeId",
    "TextOp",
    "ValueType",
    "VersionCompatibilityWarning",
    # Serialization
    "decode_dimension_range",
    "decode_space_time_id",
    "decode_value_entry",
    "dimension_range_from_array",
    "encode_boolean_filter",
    "encode_dimension_range",
    "encode_filter",
    "encode_int_filter",
    "encode_range",
    "encode_space_time_id",
    "encode_text_filter",
    "encode_value_entry",
    "filter_from_dict",
    "range_from_dict",
    "space_time_id_from_dict",
    "space_time_id_to_dict",
    "to_json",
]
