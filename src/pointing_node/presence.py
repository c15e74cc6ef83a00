"""
Presence Tracking

Tracks which live connections are subscribed to which room and under which
nickname. A nickname is connected to a room iff at least one open connection
is currently bound to that (room, nickname) pair.

Two indexes are kept in step:
- room_id -> {connection: nickname}, insertion ordered
- connection -> Binding
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Binding:
    """The room and nickname a connection last joined as."""

    room_id: str
    nickname: str


class PresenceTracker:
    """Reverse index of live connections per room."""

    def __init__(self):
        self._room_connections: Dict[str, Dict[Any, str]] = {}
        self._bindings: Dict[Any, Binding] = {}

    def bind(self, connection: Any, room_id: str, nickname: str) -> Optional[Binding]:
        """
        Subscribe a connection to a room under a nickname.

        Any previous binding of the connection is replaced.

        Returns:
            The previous binding if it differs from the new one
        """
        previous = self.unbind(connection)
        binding = Binding(room_id=room_id, nickname=nickname)
        self._room_connections.setdefault(room_id, {})[connection] = nickname
        self._bindings[connection] = binding
        if previous == binding:
            return None
        return previous

    def unbind(self, connection: Any) -> Optional[Binding]:
        """
        Remove a connection from presence tracking.

        Returns:
            The binding the connection had, if any
        """
        binding = self._bindings.pop(connection, None)
        if binding is None:
            return None
        members = self._room_connections.get(binding.room_id)
        if members is not None:
            members.pop(connection, None)
            if not members:
                del self._room_connections[binding.room_id]
        return binding

    def drop_room(self, room_id: str) -> List[Any]:
        """
        Unsubscribe every connection from a room.

        Returns:
            The connections that were subscribed
        """
        members = self._room_connections.pop(room_id, {})
        for connection in members:
            self._bindings.pop(connection, None)
        return list(members)

    def binding_for(self, connection: Any) -> Optional[Binding]:
        """Get the current binding of a connection."""
        return self._bindings.get(connection)

    def connections(self, room_id: str) -> List[Any]:
        """Get all connections subscribed to a room."""
        return list(self._room_connections.get(room_id, {}))

    def connections_for(self, room_id: str, nickname: str) -> List[Any]:
        """Get the connections bound to a nickname in a room."""
        return [
            connection
            for connection, name in self._room_connections.get(room_id, {}).items()
            if name == nickname
        ]

    def connected_nicknames(self, room_id: str) -> List[str]:
        """
        Get the nicknames currently connected to a room.

        Returns:
            Unique nicknames in subscription order
        """
        seen: Dict[str, None] = {}
        for nickname in self._room_connections.get(room_id, {}).values():
            seen.setdefault(nickname, None)
        return list(seen)

    def is_connected(self, room_id: str, nickname: str) -> bool:
        """Check whether any live connection is bound to (room, nickname)."""
        return nickname in self._room_connections.get(room_id, {}).values()

    def __len__(self) -> int:
        return len(self._bindings)
