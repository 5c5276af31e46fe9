"""Server entry point."""
from __future__ import annotations

import argparse
import logging

import uvicorn

from . import config

logger = logging.getLogger(__name__)


def main() -> None:
    parser = argparse.ArgumentParser(description="Presence Relay server")
    parser.add_argument("--host", default=config.HOST, help="Host to bind to")
    parser.add_argument("--port", type=int, default=config.PORT, help="Port to bind to (env PORT, default 4000)")
    parser.add_argument("--log-level", default=config.LOG_LEVEL, help="Logging level")
    parser.add_argument("--log-file", default=config.LOG_FILE, help="Optional log file path")
    args = parser.parse_args()

    config.setup_logging(args.log_level, args.log_file)
    logger.info("Server running on http://%s:%d", args.host, args.port)
    uvicorn.run("presence_relay.app:app", host=args.host, port=args.port, log_config=None)


if __name__ == "__main__":
    main()
