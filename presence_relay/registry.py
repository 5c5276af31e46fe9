from __future__ import annotations

from typing import Dict, Optional


class ConnectionRegistry:
    """Connection id -> the single room that connection is currently in.

    Pure bookkeeping. The dispatcher removes the connection from its previous
    room's member mapping in the same step that it overwrites the entry here.
    """

    def __init__(self) -> None:
        self._memberships: Dict[str, str] = {}

    def record_membership(self, connection_id: str, room_id: str) -> None:
        self._memberships[connection_id] = room_id

    def current_room(self, connection_id: str) -> Optional[str]:
        return self._memberships.get(connection_id)

    def clear_membership(self, connection_id: str) -> None:
        self._memberships.pop(connection_id, None)

    def __contains__(self, connection_id: object) -> bool:
        return connection_id in self._memberships

    def __len__(self) -> int:
        return len(self._memberships)


__all__ = ["ConnectionRegistry"]
