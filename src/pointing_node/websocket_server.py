"""
WebSocket Server for the Pointing Node

Accepts client connections, decodes inbound event frames, validates their
payloads and hands them to the PointingService. A closed connection is
reported to the service as a disconnect.
"""

import json
import logging
from typing import Any, Optional, Set

import websockets

from .schemas import requests
from .schemas.events import create_error_event
from .schemas.requests import PayloadError
from .service import PointingService

logger = logging.getLogger(__name__)


class WebSocketServer:
    """
    WebSocket transport for the pointing service.

    Every frame is a JSON object {"type": <event>, "data": <payload>}.
    """

    def __init__(
        self,
        service: PointingService,
        host: str,
        port: int,
    ):
        """
        Initialize the WebSocket server.

        Args:
            service: The pointing service handling room events
            host: Host address to bind to
            port: Port to listen on
        """
        self.service = service
        self.host = host
        self.port = port
        self.clients: Set[Any] = set()
        self.server = None

    async def start(self):
        """Start the WebSocket server."""
        self.server = await websockets.serve(self.handle_client, self.host, self.port)
        logger.info(f"WebSocket server started on ws://{self.host}:{self.port}")

    async def stop(self):
        """Stop the WebSocket server and cancel pending timers."""
        cancelled = self.service.shutdown()
        if cancelled:
            logger.info(f"Cancelled {cancelled} pending timer(s)")
        if self.server:
            self.server.close()
            await self.server.wait_closed()
            logger.info("WebSocket server stopped")

    async def handle_client(self, websocket: Any):
        """
        Handle a client connection.

        Args:
            websocket: The WebSocket connection
        """
        self.clients.add(websocket)
        client_id = id(websocket)
        logger.info(f"Client {client_id} connected")

        try:
            async for message in websocket:
                await self.process_message(websocket, message)
        except websockets.exceptions.ConnectionClosed:
            logger.info(f"Client {client_id} disconnected")
        except Exception as e:
            logger.error(f"Error handling client {client_id}: {e}")
        finally:
            self.clients.discard(websocket)
            await self.handle_disconnect(websocket)

    async def handle_disconnect(self, websocket: Any):
        """Report a closed connection to the service."""
        try:
            await self.service.disconnect(websocket)
        except Exception:
            logger.exception(f"Error handling disconnect of {id(websocket)}")

    async def process_message(self, websocket: Any, message: str):
        """
        Process an incoming frame from a client.

        Args:
            websocket: The WebSocket connection
            message: The message string (JSON)
        """
        try:
            frame = json.loads(message)
        except (json.JSONDecodeError, TypeError) as e:
            logger.warning(f"Invalid JSON received: {e}")
            await self.send_error(websocket, "Invalid JSON format", "INVALID_JSON")
            return

        if not isinstance(frame, dict) or not isinstance(frame.get("type"), str):
            logger.warning("Frame without an event type received")
            await self.send_error(websocket, "Missing event type", "INVALID_FRAME")
            return

        event = frame["type"]
        data = frame.get("data")

        try:
            await self.dispatch(websocket, event, data)
        except PayloadError as e:
            logger.warning(f"Dropping malformed {event} payload: {e}")
        except Exception:
            logger.exception(f"Error processing {event}")
            await self.send_error(websocket, "Internal server error", "INTERNAL_ERROR")

    async def dispatch(self, websocket: Any, event: str, data: Any):
        """
        Route one validated frame to the matching service operation.

        Raises:
            PayloadError: If the payload is malformed
        """
        service = self.service

        if event == requests.JOIN:
            await service.join(websocket, requests.JoinRequest.from_data(data))
        elif event == requests.VOTE:
            await service.vote(websocket, requests.VoteRequest.from_data(data))
        elif event == requests.START_SESSION:
            await service.start_session(
                websocket, requests.StartSessionRequest.from_data(data)
            )
        elif event == requests.REVEAL_VOTES:
            await service.reveal_votes(websocket)
        elif event == requests.END_SESSION:
            await service.end_session(websocket)
        elif event == requests.END_POINTING_SESSION:
            await service.end_pointing_session(websocket)
        elif event == requests.FORCE_REMOVE_USER:
            await service.force_remove_user(
                websocket, requests.ForceRemoveRequest.from_data(data)
            )
        elif event == requests.UPDATE_MOOD:
            await service.update_mood(
                websocket, requests.UpdateMoodRequest.from_data(data)
            )
        elif event == requests.USER_TYPING:
            await service.user_typing(websocket)
        elif event == requests.TEAM_CHAT:
            await service.team_chat(websocket, requests.TeamChatRequest.from_data(data))
        elif event == requests.EMOJI_REACTION:
            await service.emoji_reaction(
                websocket, requests.EmojiReactionRequest.from_data(data)
            )
        elif event == requests.LOGOUT:
            await service.logout(websocket)
        elif event == requests.HAIFETTI:
            await service.confetti(websocket)
        else:
            logger.warning(f"Unknown event type: {event}")
            await self.send_error(
                websocket, f"Unknown event type: {event}", "UNKNOWN_EVENT"
            )

    async def send_error(
        self, websocket: Any, message: str, error_code: Optional[str] = None
    ):
        """
        Send an error frame to one client.

        Args:
            websocket: The WebSocket connection
            message: Error message
            error_code: Optional machine readable code
        """
        try:
            await websocket.send(json.dumps(create_error_event(message, error_code)))
        except websockets.exceptions.ConnectionClosed:
            pass
