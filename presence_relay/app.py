from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import ALLOWED_ORIGINS
from .routers import rooms as rooms_router
from .routers import websockets as ws_router

logger = logging.getLogger(__name__)

# -----------------------------
# FastAPI app instance
# -----------------------------

app = FastAPI(title="Presence Relay")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials="*" not in ALLOWED_ORIGINS,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

# Register routers
app.include_router(rooms_router.router)
app.include_router(ws_router.router)

logger.debug("Relay application initialised, CORS origins: %s", ALLOWED_ORIGINS)

__all__ = ["app"]
