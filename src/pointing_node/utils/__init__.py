"""
Utilities for the Pointing Server

Broadcast fan-out and device classification helpers.
"""

from .broadcast import BroadcastDispatcher
from .device import classify_device, classify_user_agent, handshake_headers

__all__ = [
    "BroadcastDispatcher",
    "classify_device",
    "classify_user_agent",
    "handshake_headers",
]
