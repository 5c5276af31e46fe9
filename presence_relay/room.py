from __future__ import annotations

from typing import Dict, List, Optional

from .schemas import ChatMessage, Player

# NOTE: ``Room`` only holds data. Creation and destruction are owned by
# ``RoomStore`` so that an empty room can never be observed.


class Room:
    """Runtime state of one room: its members and its chat history."""

    def __init__(self, room_id: str):
        self.room_id = room_id
        # connection id -> Player
        self.members: Dict[str, Player] = {}
        self.chat_history: List[ChatMessage] = []

    # -------------------- Member management -------------------- #

    def add_member(self, connection_id: str, player: Player) -> None:
        self.members[connection_id] = player

    def remove_member(self, connection_id: str) -> Optional[Player]:
        return self.members.pop(connection_id, None)

    def has_member(self, connection_id: str) -> bool:
        return connection_id in self.members

    def is_empty(self) -> bool:
        return not self.members

    # -------------------- Chat -------------------- #

    def append_chat(self, message: ChatMessage) -> None:
        self.chat_history.append(message)

    def __len__(self) -> int:
        return len(self.members)


__all__ = ["Room"]
