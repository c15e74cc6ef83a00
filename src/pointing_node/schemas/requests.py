"""
Request Schema Definitions

One dataclass per inbound event. Each `from_data()` validates field
presence and types and raises PayloadError for anything malformed, so the
service layer only ever sees well-formed requests.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..room_state import DeviceClass, Role, VoteValue

# Inbound event names
JOIN = "join"
VOTE = "vote"
START_SESSION = "startSession"
REVEAL_VOTES = "revealVotes"
END_SESSION = "endSession"
END_POINTING_SESSION = "endPointingSession"
FORCE_REMOVE_USER = "forceRemoveUser"
UPDATE_MOOD = "updateMood"
USER_TYPING = "userTyping"
TEAM_CHAT = "teamChat"
EMOJI_REACTION = "emojiReaction"
LOGOUT = "logout"
HAIFETTI = "haifetti"


class PayloadError(ValueError):
    """Raised when an inbound payload is missing fields or has wrong types."""


def _require_mapping(data: Any, event: str) -> Dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise PayloadError(f"{event} payload must be an object")
    return data


def _require_name(data: Dict[str, Any], key: str, event: str) -> str:
    value = data.get(key)
    if not isinstance(value, str) or not value.strip():
        raise PayloadError(f"{event}.{key} must be a non-empty string")
    return value


def _optional_name(data: Dict[str, Any], key: str, event: str) -> Optional[str]:
    if data.get(key) is None:
        return None
    return _require_name(data, key, event)


@dataclass
class JoinRequest:
    """
    Request to join (or rejoin) a room.

    Attributes:
        nickname: Self-chosen display name
        room: Room identifier; created on first join
        role: Developer or Scrum Master
        avatar: Opaque avatar token
        emoji: Opaque mood emoji token
        device: Explicit device class, or None to derive from headers
    """

    nickname: str
    room: str
    role: Role
    avatar: Any = None
    emoji: Any = None
    device: Optional[DeviceClass] = None

    @classmethod
    def from_data(cls, data: Any) -> "JoinRequest":
        data = _require_mapping(data, JOIN)
        try:
            role = Role.parse(data.get("role"))
        except ValueError as e:
            raise PayloadError(str(e)) from e

        device = None
        raw_device = data.get("device")
        if isinstance(raw_device, str):
            try:
                device = DeviceClass(raw_device.strip().lower())
            except ValueError:
                device = None

        return cls(
            nickname=_require_name(data, "nickname", JOIN),
            room=_require_name(data, "room", JOIN),
            role=role,
            avatar=data.get("avatar"),
            emoji=data.get("emoji"),
            device=device,
        )


@dataclass
class VoteRequest:
    """Vote cast by a participant; nickname falls back to the connection's."""

    nickname: Optional[str]
    point: VoteValue

    @classmethod
    def from_data(cls, data: Any) -> "VoteRequest":
        data = _require_mapping(data, VOTE)
        point = data.get("point")
        if isinstance(point, bool) or not isinstance(point, (str, int, float, type(None))):
            raise PayloadError("vote.point must be a string, a number or null")
        return cls(nickname=_optional_name(data, "nickname", VOTE), point=point)


@dataclass
class StartSessionRequest:
    """Start estimating a story; room falls back to the connection's."""

    title: str
    room: Optional[str] = None

    @classmethod
    def from_data(cls, data: Any) -> "StartSessionRequest":
        data = _require_mapping(data, START_SESSION)
        title = data.get("title", "")
        if title is None:
            title = ""
        if not isinstance(title, str):
            raise PayloadError("startSession.title must be a string")
        return cls(title=title, room=_optional_name(data, "room", START_SESSION))


@dataclass
class ForceRemoveRequest:
    """Scrum Master request to purge an offline participant."""

    target: str

    @classmethod
    def from_data(cls, data: Any) -> "ForceRemoveRequest":
        if isinstance(data, str) and data.strip():
            return cls(target=data)
        data = _require_mapping(data, FORCE_REMOVE_USER)
        for key in ("nickname", "targetNickname"):
            if isinstance(data.get(key), str) and data[key].strip():
                return cls(target=data[key])
        raise PayloadError("forceRemoveUser needs a target nickname")


@dataclass
class UpdateMoodRequest:
    """Change a participant's mood emoji."""

    nickname: Optional[str]
    emoji: Any

    @classmethod
    def from_data(cls, data: Any) -> "UpdateMoodRequest":
        data = _require_mapping(data, UPDATE_MOOD)
        return cls(
            nickname=_optional_name(data, "nickname", UPDATE_MOOD),
            emoji=data.get("emoji"),
        )


@dataclass
class TeamChatRequest:
    """Chat line relayed to the room."""

    sender: Any
    text: str

    @classmethod
    def from_data(cls, data: Any) -> "TeamChatRequest":
        data = _require_mapping(data, TEAM_CHAT)
        text = data.get("text") or ""
        if not isinstance(text, str):
            raise PayloadError("teamChat.text must be a string")
        return cls(sender=data.get("sender"), text=text)


@dataclass
class EmojiReactionRequest:
    """Emoji reaction relayed to the room."""

    sender: Any
    emoji: Any

    @classmethod
    def from_data(cls, data: Any) -> "EmojiReactionRequest":
        data = _require_mapping(data, EMOJI_REACTION)
        return cls(sender=data.get("sender"), emoji=data.get("emoji"))
