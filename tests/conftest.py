from __future__ import annotations

from typing import Any, Callable, List, Tuple

import pytest

from presence_relay.dispatcher import EventDispatcher
from presence_relay.state import RelayState


class FakeConnection:
    """Records every event the dispatcher queues for it."""

    def __init__(self, connection_id: str):
        self.id = connection_id
        self.sent: List[Tuple[str, Any]] = []

    def send(self, event: str, data: Any) -> None:
        self.sent.append((event, data))

    def events(self) -> List[str]:
        return [event for event, _ in self.sent]

    def payloads(self, event: str) -> List[Any]:
        return [data for name, data in self.sent if name == event]

    def clear(self) -> None:
        self.sent.clear()


class TickingClock:
    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        self.now += 1
        return self.now


@pytest.fixture
def state() -> RelayState:
    return RelayState()


@pytest.fixture
def dispatcher(state: RelayState) -> EventDispatcher:
    return EventDispatcher(state, clock=TickingClock())


@pytest.fixture
def connect(dispatcher: EventDispatcher) -> Callable[[str], FakeConnection]:
    def _connect(connection_id: str) -> FakeConnection:
        conn = FakeConnection(connection_id)
        dispatcher.connect(conn)
        return conn

    return _connect
