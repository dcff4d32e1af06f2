"""
Pydantic models for outbound WebSocket frames.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, Literal

from pydantic import BaseModel, ConfigDict, Field

from .presence import Position


class PositionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    lat: float
    lng: float
    # epoch milliseconds
    updated_at: int = Field(serialization_alias="updatedAt")


class PositionsEvent(BaseModel):
    """Full snapshot of every live session."""
    type: Literal["positions"] = "positions"
    positions: list[PositionOut]


class ConnectedEvent(BaseModel):
    type: Literal["connected"] = "connected"
    connection_id: str


def positions_payload(snapshot: Iterable[Position]) -> Dict[str, Any]:
    event = PositionsEvent(positions=[PositionOut.model_validate(p) for p in snapshot])
    return event.model_dump(by_alias=True)
