from __future__ import annotations

import asyncio
import json
import logging
import uuid
from typing import Any, Dict

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from ..dispatcher import EventDispatcher
from ..state import get_dispatcher

logger = logging.getLogger(__name__)

router = APIRouter(prefix="", tags=["ws"])


class WebSocketConnection:
    """A relay connection backed by a FastAPI websocket.

    ``send`` only enqueues; ``pump`` drains the queue onto the socket so the
    dispatcher never waits on the network.
    """

    def __init__(self, ws: WebSocket):
        self.id = uuid.uuid4().hex
        self.ws = ws
        # asyncio queues are not thread-safe; only call send from the loop thread.
        self._outbox: "asyncio.Queue[Dict[str, Any]]" = asyncio.Queue()

    def send(self, event: str, data: Any) -> None:
        self._outbox.put_nowait({"type": event, "data": data})

    async def pump(self) -> None:
        try:
            while True:
                payload = await self._outbox.get()
                await self.ws.send_json(payload)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            # The receive loop notices the dead socket and runs the cleanup.
            logger.warning("Stopped sending to %s: %s", self.id, exc)


@router.websocket("/ws")
async def relay_endpoint(ws: WebSocket, dispatcher: EventDispatcher = Depends(get_dispatcher)):
    await ws.accept()
    conn = WebSocketConnection(ws)
    dispatcher.connect(conn)
    writer = asyncio.create_task(conn.pump())
    try:
        while True:
            message = await ws.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            raw = message.get("text")
            if raw is None:
                logger.debug("Ignoring binary frame from %s", conn.id)
                continue
            try:
                frame = json.loads(raw)
            except json.JSONDecodeError:
                logger.debug("Ignoring non-JSON frame from %s", conn.id)
                continue
            if not isinstance(frame, dict):
                logger.debug("Ignoring non-object frame from %s", conn.id)
                continue
            try:
                dispatcher.handle(conn.id, frame.get("type"), frame.get("data"))
            except Exception:
                logger.exception("Error handling %r from %s", frame.get("type"), conn.id)
    except WebSocketDisconnect:
        pass
    except Exception:
        logger.exception("WebSocket error on %s", conn.id)
    finally:
        dispatcher.disconnect(conn.id)
        writer.cancel()
