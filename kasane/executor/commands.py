"""
Engine command variants.

Each builder returns the JSON-ready command the gateway places inside
the {"command": [...]} envelope. Ranges and values are encoded here so
the gateway never sees typed objects.
"""

from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Union

from kasane.ir.model import KeyType, OutputOptions, RangeExpr, ValueEntry
from kasane.ir.serialize import encode_range, encode_value_entry
from kasane.ir.validation import EncodingError

Range = Union[RangeExpr, Mapping[str, Any]]


def _options(options: Optional[OutputOptions]) -> Dict[str, bool]:
    options = options or OutputOptions()
    return {
        "vertex": options.vertex,
        "center": options.center,
        "id_string": options.id_string,
        "id_pure": options.id_pure,
    }


def _key_type(value: Union[KeyType, str]) -> str:
    try:
        return KeyType(value).value
    except ValueError:
        raise EncodingError(f"unsupported key type: {value!r}", value) from None


# ---------- Spaces ----------


def add_space(space: str) -> Dict[str, Any]:
    return {"AddSpace": {"spacename": space}}


def delete_space(space: str) -> Dict[str, Any]:
    return {"DeleteSpace": {"spacename": space}}


def spaces() -> Dict[str, Any]:
    return {"Spaces": {}}


# ---------- Keys ----------


def add_key(space: str, key: str, key_type: Union[KeyType, str]) -> Dict[str, Any]:
    return {"AddKey": {"spacename": space, "keyname": key, "type": _key_type(key_type)}}


def delete_key(space: str, key: str) -> Dict[str, Any]:
    # the engine names this field "name", not "keyname"
    return {"DeleteKey": {"spacename": space, "name": key}}


def keys(space: str) -> Dict[str, Any]:
    return {"Keys": {"spacename": space}}


# ---------- Values ----------


def put_value(space: str, key: str, range: Range, value: ValueEntry) -> Dict[str, Any]:
    """Store value without overwriting; the engine errors on overlap."""
    return {
        "PutValue": {
            "spacename": space,
            "keyname": key,
            "range": encode_range(range),
            "value": encode_value_entry(value),
        }
    }


def set_value(space: str, key: str, range: Range, value: ValueEntry) -> Dict[str, Any]:
    """Store value, overwriting whatever is there."""
    return {
        "SetValue": {
            "spacename": space,
            "keyname": key,
            "range": encode_range(range),
            "value": encode_value_entry(value),
        }
    }


def get_value(
    space: str, key: str, range: Range, options: Optional[OutputOptions] = None
) -> Dict[str, Any]:
    return {
        "GetValue": {
            "spacename": space,
            "keyname": key,
            "range": encode_range(range),
            **_options(options),
        }
    }


def delete_value(space: str, key: str, range: Range) -> Dict[str, Any]:
    return {"DeleteValue": {"spacename": space, "keyname": key, "range": encode_range(range)}}


# ---------- Queries ----------


def select(range: Range, options: Optional[OutputOptions] = None) -> Dict[str, Any]:
    return {"Select": {"range": encode_range(range), **_options(options)}}


def version() -> str:
    return "Version"
