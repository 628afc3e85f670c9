"""geoquiz JSON-lines server entry point.

Usage: python -m geoquiz.server

Reads JSON requests from stdin (one per line), writes JSON responses and
notifications to stdout. All logging goes to stderr to keep the protocol clean.
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys

from geoquiz.config.settings import Settings
from geoquiz.errors import GameError
from geoquiz.logging_config import configure_logging

from .handler import GameHandler
from .protocol import Notification, Request, Response

logger = logging.getLogger("geoquiz.server")


async def handle_line(handler: GameHandler, line_str: str) -> str:
    """Answer one request line. Every failure becomes an error response."""
    try:
        request = Request.from_json_line(line_str)
    except (json.JSONDecodeError, ValueError) as e:
        return Response(id=0, error=f"Invalid request: {e}").to_json_line()

    try:
        result = await handler.dispatch({"method": request.method, "params": request.params})
        resp = Response(id=request.id, result=result)
    except (GameError, ValueError, KeyError) as e:
        logger.warning("%s failed: %s", request.method, e)
        resp = Response(id=request.id, error=str(e), error_type=type(e).__name__)
    except Exception as e:
        logger.exception("%s crashed", request.method)
        resp = Response(id=request.id, error=str(e), error_type=type(e).__name__)

    return resp.to_json_line()


async def serve(settings: Settings | None = None) -> None:
    loop = asyncio.get_running_loop()
    settings = settings or Settings.load()

    def write_line(text: str) -> None:
        sys.stdout.write(text)
        sys.stdout.flush()

    def write_notification(notification: Notification) -> None:
        write_line(notification.to_json_line())

    handler = GameHandler(settings=settings, write_notification=write_notification)
    logger.info("geoquiz-server: ready")

    reader = asyncio.StreamReader()
    protocol = asyncio.StreamReaderProtocol(reader)
    await loop.connect_read_pipe(lambda: protocol, sys.stdin)

    while True:
        line = await reader.readline()
        if not line:
            break  # stdin closed

        line_str = line.decode("utf-8", errors="replace").strip()
        if not line_str:
            continue

        write_line(await handle_line(handler, line_str))


def main() -> None:
    settings = Settings.load()
    configure_logging(settings.get_log_level())
    asyncio.run(serve(settings))


if __name__ == "__main__":
    main()
