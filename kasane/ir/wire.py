"""
Wire DTOs for engine result records.

Engine output is untyped JSON. These models pin down the structure of
each record before anything is decoded, so a malformed response is
caught at the boundary instead of leaking into caller code.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictStr

# Coordinates are taken as sent: no coercion from strings or booleans
WirePoint = Tuple[StrictFloat, StrictFloat, StrictFloat]

# A cuboid: exactly eight corner points
WireVertices = Annotated[List[WirePoint], Field(min_length=8, max_length=8)]


class WireSelectRecord(BaseModel):
    """One element of a SelectValue payload."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    spacetimeid: Dict[str, Any]
    id_string: Optional[StrictStr] = None
    vertex: Optional[WireVertices] = None
    center: Optional[WirePoint] = None


class WireGetValueRecord(WireSelectRecord):
    """One element of a GetValue payload; adds the kind-tagged value."""

    value: Dict[str, Any]


class WireSpaceTimeIdSet(BaseModel):
    """Payload of the SpaceTimeIdSet output variant."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    ids: List[Dict[str, Any]]
