"""Environment driven settings for the relay server."""
from __future__ import annotations

import logging
import os
from typing import List, Optional

HOST: str = os.getenv("HOST", "0.0.0.0")
PORT: int = int(os.getenv("PORT", 4000))

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE: Optional[str] = os.getenv("LOG_FILE") or None

_DEFAULT_ORIGINS = "http://localhost:3000,https://pix-frontend-eight.vercel.app"


def parse_origins(raw: str) -> List[str]:
    """Split a comma separated origin list, dropping blanks."""
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


ALLOWED_ORIGINS: List[str] = parse_origins(os.getenv("ALLOWED_ORIGINS", _DEFAULT_ORIGINS))


def setup_logging(log_level: str = LOG_LEVEL, log_file: Optional[str] = LOG_FILE) -> None:
    """Configure logging to the console and, optionally, a file."""
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=handlers,
    )


__all__ = [
    "HOST",
    "PORT",
    "LOG_LEVEL",
    "LOG_FILE",
    "ALLOWED_ORIGINS",
    "parse_origins",
    "setup_logging",
]
