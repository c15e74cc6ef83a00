"""
Broadcast Utilities

Fans out event frames to the connections subscribed to a room, or to the
subset whose nickname holds a given role. Delivery is fire-and-forget:
frames for closed connections are dropped, nothing is queued or retried.
"""

import json
import logging
from typing import Any, Iterable, Optional

import websockets

from ..presence import PresenceTracker
from ..room_state import Role, RoomStateManager
from ..schemas.events import create_envelope

logger = logging.getLogger(__name__)


class BroadcastDispatcher:
    """
    Sends event frames to room audiences.

    Attributes:
        presence: Tracker used to resolve a room's live connections
        room_manager: Registry used to resolve roles
    """

    def __init__(self, presence: PresenceTracker, room_manager: RoomStateManager):
        self.presence = presence
        self.room_manager = room_manager

    async def send(self, connection: Any, event: str, *payload: Any) -> bool:
        """
        Send one frame to one connection.

        Args:
            connection: Target connection
            event: Event name
            payload: Optional single payload value

        Returns:
            True if the frame was handed to the transport
        """
        message = json.dumps(create_envelope(event, *payload))
        return await self._deliver(connection, message)

    async def to_room(
        self,
        room_id: str,
        event: str,
        *payload: Any,
        exclude: Optional[Any] = None,
    ) -> int:
        """
        Broadcast a frame to every connection subscribed to a room.

        Args:
            room_id: The room ID
            event: Event name
            payload: Optional single payload value
            exclude: Optional connection to skip

        Returns:
            Number of connections the frame was delivered to
        """
        targets = [
            connection
            for connection in self.presence.connections(room_id)
            if connection is not exclude
        ]
        return await self._fan_out(targets, event, payload)

    async def to_connections(
        self, targets: Iterable[Any], event: str, *payload: Any
    ) -> int:
        """
        Send a frame to an already resolved list of connections.

        Returns:
            Number of connections the frame was delivered to
        """
        return await self._fan_out(list(targets), event, payload)

    async def to_role_in_room(
        self, room_id: str, role: Role, event: str, *payload: Any
    ) -> int:
        """
        Send a frame to the connected participants holding a role.

        Returns:
            Number of connections the frame was delivered to
        """
        room = self.room_manager.get_room(room_id)
        if room is None:
            return 0
        targets = []
        for nickname in room.nicknames_with_role(role):
            targets.extend(self.presence.connections_for(room_id, nickname))
        return await self._fan_out(targets, event, payload)

    async def _fan_out(self, targets: Iterable[Any], event: str, payload) -> int:
        message = json.dumps(create_envelope(event, *payload))
        delivered = 0
        for connection in targets:
            if await self._deliver(connection, message):
                delivered += 1
        logger.debug(f"Delivered {event} to {delivered} connection(s)")
        return delivered

    async def _deliver(self, connection: Any, message: str) -> bool:
        try:
            await connection.send(message)
            return True
        except websockets.exceptions.ConnectionClosed:
            return False
