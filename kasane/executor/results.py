"""
Kasane Output Decoding

Narrows an engine Output to the variant an operation expects and maps
result records back to typed objects.

An Output is one of:
    {"SpaceNames": [...]}, {"KeyNames": [...]}, {"GetValue": [...]},
    {"SelectValue": [...]}, {"SpaceTimeIdSet": {"ids": [...]}},
    {"Version": "..."}, or the bare literal "Success".

Anything else, or a record that fails its wire DTO, is a
ResponseShapeError.
"""

from __future__ import annotations

from typing import Any, List, Optional, Tuple

from pydantic import ValidationError

from kasane.ir.model import GetValueRecord, Point, SelectRecord, SpaceTimeId
from kasane.ir.serialize import decode_space_time_id, decode_value_entry
from kasane.ir.validation import ResponseShapeError, describe
from kasane.ir.wire import WireGetValueRecord, WireSelectRecord, WireSpaceTimeIdSet

SUCCESS = "Success"


def expect_output(output: Any, tag: str) -> Any:
    """
    Return the payload of the expected Output variant.

    Raises:
        ResponseShapeError: If output is a different variant.
    """
    if isinstance(output, dict) and len(output) == 1 and tag in output:
        return output[tag]
    raise ResponseShapeError(
        f"Unexpected response format for {tag}: {describe(output)}", output
    )


def expect_success(output: Any) -> None:
    """Accept the bare "Success" literal returned by commands with no payload."""
    if output != SUCCESS:
        raise ResponseShapeError(
            f"Unexpected response format, expected Success: {describe(output)}", output
        )


def expect_names(output: Any, tag: str) -> List[str]:
    """Narrow SpaceNames / KeyNames to a list of strings."""
    names = expect_output(output, tag)
    if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
        raise ResponseShapeError(f"{tag} must be a list of strings: {describe(names)}", names)
    return names


def _geometry(
    record: WireSelectRecord,
) -> Tuple[Optional[Tuple[Point, ...]], Optional[Point]]:
    vertex = tuple(record.vertex) if record.vertex is not None else None
    return vertex, record.center


def _validate(model, payload: Any, what: str):
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise ResponseShapeError(f"malformed {what} record: {e}", payload) from e


def _records(payload: Any, what: str) -> List[Any]:
    if not isinstance(payload, list):
        raise ResponseShapeError(f"{what} payload must be a list: {describe(payload)}", payload)
    return payload


def decode_select_records(payload: Any) -> List[SelectRecord]:
    """
    Decode a SelectValue payload.

    vertex, when present, must be exactly 8 points of 3 coordinates;
    center exactly 3 coordinates.
    """
    records = []
    for item in _records(payload, "SelectValue"):
        wire = _validate(WireSelectRecord, item, "SelectValue")
        vertex, center = _geometry(wire)
        records.append(
            SelectRecord(
                space_time_id=decode_space_time_id(wire.spacetimeid),
                vertex=vertex,
                center=center,
                id_string=wire.id_string,
            )
        )
    return records


def decode_get_value_records(payload: Any) -> List[GetValueRecord]:
    """Decode a GetValue payload; the value is unwrapped to a plain scalar."""
    records = []
    for item in _records(payload, "GetValue"):
        wire = _validate(WireGetValueRecord, item, "GetValue")
        vertex, center = _geometry(wire)
        records.append(
            GetValueRecord(
                space_time_id=decode_space_time_id(wire.spacetimeid),
                value=decode_value_entry(wire.value),
                vertex=vertex,
                center=center,
                id_string=wire.id_string,
            )
        )
    return records


def decode_space_time_id_set(payload: Any) -> List[SpaceTimeId]:
    wire = _validate(WireSpaceTimeIdSet, payload, "SpaceTimeIdSet")
    return [decode_space_time_id(item) for item in wire.ids]
