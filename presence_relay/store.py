"""Room Store: room id -> ``Room``.

A room exists in the store if and only if it has at least one member. Rooms
are created lazily by ``ensure_room`` and destroyed synchronously by
``remove_member`` the moment their last member leaves.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from .room import Room
from .schemas import ChatMessage, Player, RoomSummary

logger = logging.getLogger(__name__)


class RoomStore:
    def __init__(self) -> None:
        self._rooms: Dict[str, Room] = {}

    def ensure_room(self, room_id: str) -> Room:
        """Return the room *room_id*, creating an empty one if needed."""
        room = self._rooms.get(room_id)
        if room is None:
            room = Room(room_id)
            self._rooms[room_id] = room
            logger.info("Room %s created", room_id)
        return room

    def get(self, room_id: str) -> Optional[Room]:
        return self._rooms.get(room_id)

    def add_member(self, room_id: str, connection_id: str, player: Player) -> None:
        self.ensure_room(room_id).add_member(connection_id, player)

    def remove_member(self, room_id: str, connection_id: str) -> Optional[Player]:
        """Remove *connection_id* from *room_id*; drop the room once it is empty.

        Returns the removed ``Player`` or ``None`` if it was not a member.
        """
        room = self._rooms.get(room_id)
        if room is None:
            return None
        player = room.remove_member(connection_id)
        if room.is_empty():
            del self._rooms[room_id]
            logger.info("Room %s is empty, discarded %d chat messages", room_id, len(room.chat_history))
        return player

    def append_chat(self, room_id: str, message: ChatMessage) -> None:
        room = self._rooms.get(room_id)
        if room is None:
            logger.debug("Dropping chat message for vanished room %s", room_id)
            return
        room.append_chat(message)

    def is_member(self, room_id: str, connection_id: str) -> bool:
        room = self._rooms.get(room_id)
        return room is not None and room.has_member(connection_id)

    def snapshot(self, room_id: str) -> Dict[str, Player]:
        """Return a copy of the member mapping (empty if the room is gone)."""
        room = self._rooms.get(room_id)
        if room is None:
            return {}
        return dict(room.members)

    def chat_history(self, room_id: str) -> List[ChatMessage]:
        room = self._rooms.get(room_id)
        if room is None:
            return []
        return list(room.chat_history)

    def rooms_with_member(self, connection_id: str) -> List[str]:
        """Every room id listing *connection_id* as a member."""
        return [rid for rid, room in self._rooms.items() if room.has_member(connection_id)]

    def summaries(self) -> List[RoomSummary]:
        return [RoomSummary(id=rid, player_count=len(room)) for rid, room in self._rooms.items()]

    def __contains__(self, room_id: object) -> bool:
        return room_id in self._rooms

    def __len__(self) -> int:
        return len(self._rooms)


__all__ = ["RoomStore"]
