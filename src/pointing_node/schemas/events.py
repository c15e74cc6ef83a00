"""
Event Schema Definitions

Contains functions for creating the outbound event frames broadcast to
clients. Every frame has the shape {"type": <event>, "data": <payload>};
events without a payload carry only "type".
"""

from typing import Any, Dict, Iterable, List, Optional

# Outbound event names
PARTICIPANTS_UPDATE = "participantsUpdate"
UPDATE_VOTES = "updateVotes"
USER_JOINED = "userJoined"
USER_LEFT = "userLeft"
START_SESSION = "startSession"
REVEAL_VOTES = "revealVotes"
SESSION_ENDED = "sessionEnded"
SESSION_TERMINATED = "sessionTerminated"
TEAM_CHAT = "teamChat"
EMOJI_REACTION = "emojiReaction"
TYPING_UPDATE = "typingUpdate"
HAIFETTI = "haifetti"

_NO_PAYLOAD = object()


def create_envelope(event: str, data: Any = _NO_PAYLOAD) -> Dict[str, Any]:
    """
    Wrap a payload in the standard frame.

    Args:
        event: Event name
        data: Payload; omitted from the frame when not given

    Returns:
        dict: Event frame
    """
    if data is _NO_PAYLOAD:
        return {"type": event}
    return {"type": event, "data": data}


def create_participants_update(room, connected: Iterable[str]) -> Dict[str, Any]:
    """
    Create a participantsUpdate payload.

    Args:
        room: The Room to describe
        connected: Nicknames currently connected to the room

    Returns:
        dict: Event data
    """
    return {
        "names": list(room.participants),
        "roles": {name: role.value for name, role in room.roles.items()},
        "avatars": dict(room.avatars),
        "moods": dict(room.moods),
        "connected": list(connected),
        "devices": {name: device.value for name, device in room.devices.items()},
    }


def create_votes_update(room) -> Dict[str, Any]:
    """Create an updateVotes payload (nickname -> vote)."""
    return dict(room.votes)


def create_typing_update(room) -> List[str]:
    """Create a typingUpdate payload."""
    return list(room.typing)


def create_reveal_event(story: str) -> Dict[str, Any]:
    """Create the public revealVotes payload."""
    return {"story": story}


def create_team_chat_event(sender: Any, text: str) -> Dict[str, Any]:
    """Create a relayed teamChat payload."""
    return {"sender": sender, "text": text}


def create_vote_summary_event(summary: Dict[str, Any]) -> Dict[str, Any]:
    """
    Create the private teamChat payload carrying a reveal summary.

    Args:
        summary: Output of VoteTally.to_summary()

    Returns:
        dict: Event data
    """
    return {"type": "voteSummary", "summary": summary}


def create_emoji_reaction_event(sender: Any, emoji: Any) -> Dict[str, Any]:
    """Create a relayed emojiReaction payload."""
    return {"sender": sender, "emoji": emoji}


def create_error_event(
    message: str, error_code: Optional[str] = None
) -> Dict[str, Any]:
    """
    Create an error frame sent only to the offending connection.

    Args:
        message: Error message text
        error_code: Optional machine readable code

    Returns:
        dict: Error frame
    """
    data: Dict[str, Any] = {"success": False, "message": message}
    if error_code:
        data["error_code"] = error_code
    return create_envelope("error", data)
