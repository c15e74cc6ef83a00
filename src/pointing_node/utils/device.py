"""
Device Classification

Derives a participant's device class from the websocket handshake.
"""

import re
from typing import Any, Mapping, Optional

from ..room_state import DeviceClass

_MOBILE_MARKERS = re.compile(r"Mobi|Android|iPhone|iPad|iPod|Windows Phone", re.IGNORECASE)


def handshake_headers(connection: Any) -> Mapping[str, str]:
    """
    Get the HTTP headers a websocket connection was opened with.

    Works with both the asyncio implementation (connection.request.headers)
    and the legacy one (connection.request_headers).
    """
    request = getattr(connection, "request", None)
    headers = getattr(request, "headers", None)
    if headers is None:
        headers = getattr(connection, "request_headers", None)
    return headers or {}


def classify_user_agent(user_agent: Optional[str]) -> DeviceClass:
    """Classify a User-Agent string as mobile or desktop."""
    if user_agent and _MOBILE_MARKERS.search(user_agent):
        return DeviceClass.MOBILE
    return DeviceClass.DESKTOP


def classify_device(
    connection: Any, requested: Optional[DeviceClass] = None
) -> DeviceClass:
    """
    Determine the device class for a joining connection.

    Args:
        connection: The websocket connection
        requested: Device class sent explicitly by the client, if any

    Returns:
        DeviceClass for the participant
    """
    if requested is not None:
        return requested
    return classify_user_agent(handshake_headers(connection).get("User-Agent"))
