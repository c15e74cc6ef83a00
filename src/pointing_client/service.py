"""
Client Service for the Scrum Pointing Tool

This module provides the base client service that owns the WebSocket
connection to a pointing server and sends request frames over it.

Architecture:
    - Uses WebSocket for real-time bidirectional communication
    - Supports dependency injection for the network layer (for testability)
    - Async/await pattern for non-blocking I/O operations
"""

import logging
from typing import Any, Callable, Optional

import websockets

from .schemas import BaseRequest

logger = logging.getLogger(__name__)


class ClientService:
    """
    Owns the connection to a pointing server.

    Attributes:
        server_url: WebSocket URL of the server (e.g., ws://localhost:10000)
        websocket: Active WebSocket connection (None if not connected)
    """

    def __init__(
        self,
        server_url: str,
        websocket_factory: Optional[Callable] = None,
    ):
        """
        Initialize the client service.

        Args:
            server_url: WebSocket URL of the server
            websocket_factory: Optional factory for creating WebSocket
                             connections (for dependency injection/testing)
        """
        self.server_url = server_url
        self.websocket: Optional[Any] = None
        self._websocket_factory = websocket_factory or websockets.connect
        self._connected = False

        logger.info(f"ClientService initialized for server: {server_url}")

    async def connect(self) -> None:
        """
        Establish WebSocket connection to the server.

        Raises:
            ConnectionError: If connection fails
        """
        try:
            logger.info(f"Connecting to {self.server_url}...")
            self.websocket = await self._websocket_factory(self.server_url)
            self._connected = True
            logger.info("Successfully connected to pointing server")
        except Exception as e:
            logger.error(f"Failed to connect to server: {e}")
            raise ConnectionError(f"Could not connect to {self.server_url}: {e}")

    async def disconnect(self) -> None:
        """Close the WebSocket connection."""
        if self.websocket:
            if hasattr(self.websocket, "close"):
                await self.websocket.close()
            self.websocket = None
            self._connected = False
            logger.info("Disconnected from pointing server")

    @property
    def is_connected(self) -> bool:
        """Check if currently connected to a server."""
        return self._connected and self.websocket is not None

    async def send(self, request: BaseRequest) -> None:
        """
        Send a request frame.

        Raises:
            ConnectionError: If not connected to a server
        """
        if not self.is_connected:
            raise ConnectionError("Not connected to a pointing server")
        await self.websocket.send(request.to_json())
        logger.debug(f"Sent {request.to_dict()['type']}")
