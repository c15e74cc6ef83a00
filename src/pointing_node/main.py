#!/usr/bin/env python3
"""
Scrum Pointing Node Server

Real-time estimation rooms over WebSockets.
"""

import asyncio
import logging
import os
import sys

from .room_state import DISCONNECT_GRACE_PERIOD, TYPING_TIMEOUT
from .service import PointingService
from .websocket_server import WebSocketServer

logger = logging.getLogger(__name__)


async def run_server(
    host: str,
    port: int,
    grace_period: float = DISCONNECT_GRACE_PERIOD,
    typing_timeout: float = TYPING_TIMEOUT,
):
    """
    Run the pointing server until cancelled.

    Args:
        host: WebSocket host address to bind to
        port: WebSocket port to listen on
        grace_period: Seconds a disconnected participant is kept
        typing_timeout: Seconds a typing indicator lives
    """
    service = PointingService(grace_period=grace_period, typing_timeout=typing_timeout)
    ws_server = WebSocketServer(service, host, port)

    await ws_server.start()
    logger.info(f"Scrum Pointing server running on port {port}")

    try:
        await asyncio.Event().wait()
    except asyncio.CancelledError:
        logger.info("Server shutdown requested")
    finally:
        await ws_server.stop()
        logger.info("Pointing server stopped")


def _env_seconds(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value in (None, ""):
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={value!r}, using {default}")
        return default


def main():
    """Main entry point for the pointing server."""
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info("Starting Scrum Pointing server...")

    host = os.environ.get("POINTING_HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "10000"))
    grace_period = _env_seconds("DISCONNECT_GRACE_PERIOD", DISCONNECT_GRACE_PERIOD)
    typing_timeout = _env_seconds("TYPING_TIMEOUT", TYPING_TIMEOUT)

    try:
        asyncio.run(run_server(host, port, grace_period, typing_timeout))
    except KeyboardInterrupt:
        logger.info("Shutting down pointing server...")
        sys.exit(0)


if __name__ == "__main__":
    main()
