"""Kasane command dispatch and output decoding."""

from kasane.config import SUPPORTED_ENGINE_VERSION_RANGE

from .gateway import (
    CommandGateway,
    Engine,
    compare_versions,
    is_version_in_range,
    parse_version,
)
from .results import (
    decode_get_value_records,
    decode_select_records,
    decode_space_time_id_set,
    expect_names,
    expect_output,
    expect_success,
)

__all__ = [
    "SUPPORTED_ENGINE_VERSION_RANGE",
    "CommandGateway",
    "Engine",
    "compare_versions",
    "decode_get_value_records",
    "decode_select_records",
    "decode_space_time_id_set",
    "expect_names",
    "expect_output",
    "expect_success",
    "is_version_in_range",
    "parse_version",
]
