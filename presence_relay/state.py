"""Centralised in-memory runtime state.

``RelayState`` owns the two process-wide tables. Only the
``EventDispatcher`` mutates them; HTTP routes read them.
"""
from __future__ import annotations

from .dispatcher import EventDispatcher
from .registry import ConnectionRegistry
from .store import RoomStore


class RelayState:
    def __init__(self) -> None:
        self.rooms = RoomStore()
        self.registry = ConnectionRegistry()


relay_state = RelayState()
dispatcher = EventDispatcher(relay_state)


def get_dispatcher() -> EventDispatcher:
    """FastAPI dependency returning the process-wide dispatcher."""
    return dispatcher


__all__ = ["RelayState", "relay_state", "dispatcher", "get_dispatcher"]
