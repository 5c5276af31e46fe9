"""Pydantic data schemas used across the relay.

Wire names are camelCase (``roomId``, ``playerName`` ...) to match the
browser client; Python code uses the snake_case attribute names and
serialises with ``by_alias=True``.
"""
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

# -----------------------------
# Runtime
# -----------------------------


class Direction(BaseModel):
    """Facing / velocity vector reported by the client."""

    x: float = 0
    y: float = 0


class Player(BaseModel):
    """Presence record of one connection inside one room."""

    id: str
    x: float
    y: float
    direction: Direction = Field(default_factory=Direction)
    name: str


class ChatMessage(BaseModel):
    """A single chat line. Never mutated once appended to a room."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    sender: str
    message: str
    timestamp: int  # epoch millis
    room_id: str = Field(alias="roomId")


class RoomJoined(BaseModel):
    """Confirmation unicast to a connection after it joined a room."""

    model_config = ConfigDict(populate_by_name=True)

    room_id: str = Field(alias="roomId")
    player_id: str = Field(alias="playerId")
    players: Dict[str, Player]


# -----------------------------
# Inbound event payloads
# -----------------------------


class JoinRoomPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    room_id: str = Field(alias="roomId")
    player_name: Optional[str] = Field(default=None, alias="playerName")


class LeaveRoomPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Informational only; a connection always leaves the room it is in.
    room_id: Optional[str] = Field(default=None, alias="roomId")


class MovePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    room_id: str = Field(alias="roomId")
    x: float
    y: float
    direction: Direction


class SendMessagePayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    room_id: str = Field(alias="roomId")
    message: str


# -----------------------------
# REST responses
# -----------------------------


class RoomSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    player_count: int = Field(alias="playerCount")


__all__ = [
    # runtime
    "Direction",
    "Player",
    "ChatMessage",
    "RoomJoined",
    # inbound
    "JoinRoomPayload",
    "LeaveRoomPayload",
    "MovePayload",
    "SendMessagePayload",
    # rest
    "RoomSummary",
]
