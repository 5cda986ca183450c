"""
Kasane client: typed range queries for a 4D space-time engine.

An encoding and dispatch layer that turns space-time range expressions
(dimension ranges, set combinators, value filters, existence checks) into
the engine's tagged wire format, sends one command per call, and decodes
the replies back into typed records.
"""

__version__ = "0.1.0"

from .client import KeyHandle, Kasane, SpaceHandle
from .ir import (
    CommandError,
    DecodingError,
    DimensionRange,
    EncodingError,
    Filter,
    GetValueRecord,
    KasaneError,
    OutputOptions,
    ResponseShapeError,
    SelectRecord,
    SpaceTimeId,
    VersionCompatibilityWarning,
)

__all__ = [
    "CommandError",
    "DecodingError",
    "DimensionRange",
    "EncodingError",
    "Filter",
    "GetValueRecord",
    "KasaneError",
    "Kasane",
    "KeyHandle",
    "OutputOptions",
    "ResponseShapeError",
    "SelectRecord",
    "SpaceHandle",
    "SpaceTimeId",
    "VersionCompatibilityWarning",
]
