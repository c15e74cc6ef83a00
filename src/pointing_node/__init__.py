"""
Pointing Node Package

This package provides the server side of the Scrum pointing tool: room
state management, presence tracking, vote tallying, broadcast fan-out and
the WebSocket transport.
"""

from .room_state import (
    RoomStateManager,
    Room,
    Role,
    DeviceClass,
    DISCONNECT_GRACE_PERIOD,
    TYPING_TIMEOUT,
    REMOVAL_TIMER,
    TYPING_TIMER,
)
from .timers import DelayedTask, TimerRegistry
from .presence import PresenceTracker, Binding
from .tally import VoteTally, VoteEntry, tally_votes, coerce_point
from .utils.broadcast import BroadcastDispatcher
from .service import PointingService
from .websocket_server import WebSocketServer

__all__ = [
    "RoomStateManager",
    "Room",
    "Role",
    "DeviceClass",
    "DISCONNECT_GRACE_PERIOD",
    "TYPING_TIMEOUT",
    "REMOVAL_TIMER",
    "TYPING_TIMER",
    "DelayedTask",
    "TimerRegistry",
    "PresenceTracker",
    "Binding",
    "VoteTally",
    "VoteEntry",
    "tally_votes",
    "coerce_point",
    "BroadcastDispatcher",
    "PointingService",
    "WebSocketServer",
]
