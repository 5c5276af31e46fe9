"""Event Dispatcher: the per-connection state machine of the relay.

Every handler runs to completion under a single lock, mutating the
``RoomStore`` and ``ConnectionRegistry`` and *enqueueing* outbound events on
the affected connections. No handler awaits anything; delivery is done by
each connection's own writer. Handlers must be called from the event loop
thread: websocket connections enqueue on an ``asyncio.Queue``, which is not
thread-safe. The lock only serialises handlers against each other.

Malformed payloads and events whose preconditions do not hold are ignored
without telling the sender.
"""
from __future__ import annotations

import logging
import threading
import time
from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, List, Optional, Protocol

from pydantic import ValidationError

from .constants import DEFAULT_NAME_ID_LENGTH, DEFAULT_NAME_PREFIX, SPAWN_X, SPAWN_Y, SYSTEM_SENDER
from .events import InboundEvent, OutboundEvent
from .schemas import (
    ChatMessage,
    Direction,
    JoinRoomPayload,
    LeaveRoomPayload,
    MovePayload,
    Player,
    RoomJoined,
    SendMessagePayload,
)

if TYPE_CHECKING:
    from .state import RelayState

logger = logging.getLogger(__name__)


class Connection(Protocol):
    """What the dispatcher needs from a transport connection."""

    id: str

    def send(self, event: str, data: Any) -> None:
        """Queue *event* for delivery. Must not block."""


def default_player_name(connection_id: str) -> str:
    """Display name for a player that joined without one."""
    return f"{DEFAULT_NAME_PREFIX}{connection_id[:DEFAULT_NAME_ID_LENGTH]}"


def now_millis() -> int:
    return int(time.time() * 1000)


def _players_payload(players: Dict[str, Player]) -> Dict[str, dict]:
    return {cid: p.model_dump() for cid, p in players.items()}


class EventDispatcher:
    def __init__(self, state: "RelayState", clock: Callable[[], int] = now_millis):
        self.state = state
        self.clock = clock
        self._connections: Dict[str, Connection] = {}
        self._lock = threading.RLock()
        self._handlers: Dict[InboundEvent, Callable[[str, Any], None]] = {
            InboundEvent.JOIN_ROOM: self._on_join_room,
            InboundEvent.LEAVE_ROOM: self._on_leave_room,
            InboundEvent.MOVE: self._on_move,
            InboundEvent.SEND_MESSAGE: self._on_send_message,
        }

    # ---------------------------------------------------------------------
    # Connection lifecycle
    # ---------------------------------------------------------------------

    def connect(self, connection: Connection) -> None:
        with self._lock:
            self._connections[connection.id] = connection
        logger.info("Connection %s opened", connection.id)

    def disconnect(self, connection_id: str) -> None:
        """Purge every trace of *connection_id*. Never fails, never retried."""
        with self._lock:
            # The registry should point at the only room, but scan them all so
            # a stale membership can never survive the connection.
            for room_id in self.state.rooms.rooms_with_member(connection_id):
                self._leave(connection_id, room_id)
            self.state.registry.clear_membership(connection_id)
            self._connections.pop(connection_id, None)
        logger.info("Connection %s closed", connection_id)

    def is_connected(self, connection_id: str) -> bool:
        return connection_id in self._connections

    # ---------------------------------------------------------------------
    # Inbound events
    # ---------------------------------------------------------------------

    def handle(self, connection_id: str, event: object, data: Any = None) -> None:
        """Route a raw ``{type, data}`` frame to its handler."""
        kind = InboundEvent.parse(event)
        if kind is None:
            logger.debug("Ignoring unknown event %r from %s", event, connection_id)
            return
        try:
            self._handlers[kind](connection_id, data)
        except ValidationError as exc:
            logger.debug("Ignoring malformed %s from %s: %s", kind.value, connection_id, exc.errors())

    def _on_join_room(self, connection_id: str, data: Any) -> None:
        if isinstance(data, str):
            data = {"roomId": data}
        elif isinstance(data, list) and 1 <= len(data) <= 2:
            # Positional form: [roomId, playerName?]
            data = dict(zip(("roomId", "playerName"), data))
        payload = JoinRoomPayload.model_validate(data)
        self.join_room(connection_id, payload.room_id, payload.player_name)

    def _on_leave_room(self, connection_id: str, data: Any) -> None:
        payload = LeaveRoomPayload.model_validate(data or {})
        current = self.state.registry.current_room(connection_id)
        if payload.room_id is not None and payload.room_id != current:
            logger.debug("%s asked to leave %s but is in %s", connection_id, payload.room_id, current)
        self.leave_room(connection_id)

    def _on_move(self, connection_id: str, data: Any) -> None:
        payload = MovePayload.model_validate(data)
        self.move(connection_id, payload.room_id, payload.x, payload.y, payload.direction)

    def _on_send_message(self, connection_id: str, data: Any) -> None:
        payload = SendMessagePayload.model_validate(data)
        self.send_message(connection_id, payload.room_id, payload.message)

    # ---------------------------------------------------------------------
    # Operations
    # ---------------------------------------------------------------------

    def join_room(self, connection_id: str, room_id: str, player_name: Optional[str] = None) -> None:
        with self._lock:
            if connection_id not in self._connections:
                logger.debug("Ignoring join from unknown connection %s", connection_id)
                return
            for old_room in self._rooms_of(connection_id):
                self._leave(connection_id, old_room)

            rooms = self.state.rooms
            rooms.ensure_room(room_id)
            name = player_name or default_player_name(connection_id)
            player = Player(id=connection_id, x=SPAWN_X, y=SPAWN_Y, direction=Direction(), name=name)
            history = [m.model_dump(by_alias=True) for m in rooms.chat_history(room_id)]
            rooms.add_member(room_id, connection_id, player)
            self.state.registry.record_membership(connection_id, room_id)
            logger.info("%s (%s) joined room %s", name, connection_id, room_id)

            players = _players_payload(rooms.snapshot(room_id))
            self._send(connection_id, OutboundEvent.CHAT_HISTORY, history)
            self._emit_room(room_id, OutboundEvent.UPDATE_PLAYERS, players)
            joined = RoomJoined(room_id=room_id, player_id=connection_id, players=rooms.snapshot(room_id))
            self._send(connection_id, OutboundEvent.ROOM_JOINED, joined.model_dump(by_alias=True))

            announcement = self._system_message(room_id, f"{name} joined the room")
            rooms.append_chat(room_id, announcement)
            self._emit_room(room_id, OutboundEvent.NEW_MESSAGE, announcement.model_dump(by_alias=True))

    def leave_room(self, connection_id: str) -> None:
        with self._lock:
            rooms = self._rooms_of(connection_id)
            if not rooms:
                logger.debug("Ignoring leave from %s: not in a room", connection_id)
                return
            for room_id in rooms:
                self._leave(connection_id, room_id)
            self.state.registry.clear_membership(connection_id)

    def move(self, connection_id: str, room_id: str, x: float, y: float, direction: Direction) -> None:
        with self._lock:
            if not self.state.rooms.is_member(room_id, connection_id):
                logger.debug("Ignoring move from %s: not in room %s", connection_id, room_id)
                return
            room = self.state.rooms.get(room_id)
            player = room.members[connection_id]
            player.x = x
            player.y = y
            player.direction = direction
            self._emit_room(room_id, OutboundEvent.UPDATE_PLAYERS, _players_payload(room.members))

    def send_message(self, connection_id: str, room_id: str, message: str) -> None:
        with self._lock:
            if not self.state.rooms.is_member(room_id, connection_id):
                logger.debug("Ignoring message from %s: not in room %s", connection_id, room_id)
                return
            room = self.state.rooms.get(room_id)
            chat = ChatMessage(
                sender=room.members[connection_id].name,
                message=message,
                timestamp=self.clock(),
                room_id=room_id,
            )
            self.state.rooms.append_chat(room_id, chat)
            self._emit_room(room_id, OutboundEvent.NEW_MESSAGE, chat.model_dump(by_alias=True))

    # ---------------------------------------------------------------------
    # Helpers (caller holds the lock)
    # ---------------------------------------------------------------------

    def _rooms_of(self, connection_id: str) -> List[str]:
        found = self.state.rooms.rooms_with_member(connection_id)
        current = self.state.registry.current_room(connection_id)
        if current is not None and current not in found and current in self.state.rooms:
            found.append(current)
        return found

    def _leave(self, connection_id: str, room_id: str) -> None:
        """Announce, remove the member, and notify whoever is left."""
        rooms = self.state.rooms
        room = rooms.get(room_id)
        if room is None or not room.has_member(connection_id):
            return
        name = room.members[connection_id].name
        farewell = self._system_message(room_id, f"{name} left the room")
        rooms.append_chat(room_id, farewell)
        rooms.remove_member(room_id, connection_id)
        logger.info("%s (%s) left room %s", name, connection_id, room_id)

        if room_id not in rooms:
            return
        self._emit_room(room_id, OutboundEvent.NEW_MESSAGE, farewell.model_dump(by_alias=True))
        self._emit_room(room_id, OutboundEvent.UPDATE_PLAYERS, _players_payload(rooms.snapshot(room_id)))

    def _system_message(self, room_id: str, text: str) -> ChatMessage:
        return ChatMessage(sender=SYSTEM_SENDER, message=text, timestamp=self.clock(), room_id=room_id)

    def _emit_room(self, room_id: str, event: OutboundEvent, data: Any) -> None:
        self._broadcast(self.state.rooms.snapshot(room_id).keys(), event, data)

    def _broadcast(self, connection_ids: Iterable[str], event: OutboundEvent, data: Any) -> None:
        for cid in list(connection_ids):
            self._send(cid, event, data)

    def _send(self, connection_id: str, event: OutboundEvent, data: Any) -> None:
        connection = self._connections.get(connection_id)
        if connection is None:
            return
        try:
            connection.send(event.value, data)
        except Exception:
            # One broken connection must not stop the fanout to the others.
            logger.exception("Failed to queue %s for %s", event.value, connection_id)


__all__ = [
    "Connection",
    "EventDispatcher",
    "default_player_name",
    "now_millis",
]
