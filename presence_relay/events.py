"""Closed sets of event names exchanged over the relay socket."""
from __future__ import annotations

from enum import Enum
from typing import Optional


class InboundEvent(str, Enum):
    """Events a client may send."""

    JOIN_ROOM = "joinRoom"
    LEAVE_ROOM = "leaveRoom"
    MOVE = "move"
    SEND_MESSAGE = "sendMessage"

    @classmethod
    def parse(cls, name: object) -> Optional["InboundEvent"]:
        """Return the matching member or ``None`` for unknown names."""
        if not isinstance(name, str):
            return None
        try:
            return cls(name)
        except ValueError:
            return None


class OutboundEvent(str, Enum):
    """Events the server emits."""

    CHAT_HISTORY = "chatHistory"
    ROOM_JOINED = "roomJoined"
    UPDATE_PLAYERS = "updatePlayers"
    NEW_MESSAGE = "newMessage"


__all__ = ["InboundEvent", "OutboundEvent"]
