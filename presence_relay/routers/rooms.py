from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from ..constants import STATUS_TEXT
from ..dispatcher import EventDispatcher
from ..schemas import RoomSummary
from ..state import get_dispatcher

router = APIRouter(prefix="", tags=["rooms"])


@router.get("/", response_class=PlainTextResponse)
async def status() -> str:
    return STATUS_TEXT


# ---------------------------------------------------------------------------
# Room listing (diagnostic, read-only)
# ---------------------------------------------------------------------------


@router.get("/rooms", response_model=List[RoomSummary])
async def list_rooms(dispatcher: EventDispatcher = Depends(get_dispatcher)):
    return dispatcher.state.rooms.summaries()
