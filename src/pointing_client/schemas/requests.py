"""
Request Schema Definitions

One dataclass per event a client can send to the pointing server.
"""

from dataclasses import dataclass
from typing import Any, Optional, Union

from .base import BaseRequest

DEVELOPER = "Developer"
SCRUM_MASTER = "Scrum Master"


@dataclass
class JoinRequest(BaseRequest):
    """
    Request to join (or rejoin) a room.

    Attributes:
        nickname: Display name, unique within the room
        room: Room identifier
        role: "Developer" or "Scrum Master"
        avatar: Avatar token shown next to the name
        emoji: Mood emoji
        device: "mobile", "desktop", or None to let the server decide
    """

    nickname: str
    room: str
    role: str = DEVELOPER
    avatar: Optional[str] = None
    emoji: Optional[str] = None
    device: Optional[str] = None

    @property
    def _message_type(self) -> str:
        return "join"


@dataclass
class VoteRequest(BaseRequest):
    """Cast (or clear, with None) a vote."""

    nickname: str
    point: Optional[Union[str, int, float]]

    @property
    def _message_type(self) -> str:
        return "vote"


@dataclass
class StartSessionRequest(BaseRequest):
    """Start estimating a story."""

    title: str
    room: str

    @property
    def _message_type(self) -> str:
        return "startSession"


@dataclass
class RevealVotesRequest(BaseRequest):
    @property
    def _message_type(self) -> str:
        return "revealVotes"


@dataclass
class EndSessionRequest(BaseRequest):
    @property
    def _message_type(self) -> str:
        return "endSession"


@dataclass
class EndPointingSessionRequest(BaseRequest):
    @property
    def _message_type(self) -> str:
        return "endPointingSession"


@dataclass
class ForceRemoveUserRequest(BaseRequest):
    """Scrum Master request to remove an offline participant."""

    nickname: str

    @property
    def _message_type(self) -> str:
        return "forceRemoveUser"


@dataclass
class UpdateMoodRequest(BaseRequest):
    nickname: str
    emoji: Any

    @property
    def _message_type(self) -> str:
        return "updateMood"


@dataclass
class UserTypingRequest(BaseRequest):
    @property
    def _message_type(self) -> str:
        return "userTyping"


@dataclass
class TeamChatRequest(BaseRequest):
    sender: str
    text: str

    @property
    def _message_type(self) -> str:
        return "teamChat"


@dataclass
class EmojiReactionRequest(BaseRequest):
    sender: str
    emoji: str

    @property
    def _message_type(self) -> str:
        return "emojiReaction"


@dataclass
class LogoutRequest(BaseRequest):
    @property
    def _message_type(self) -> str:
        return "logout"


@dataclass
class HaifettiRequest(BaseRequest):
    """Confetti for everyone in the room."""

    @property
    def _message_type(self) -> str:
        return "haifetti"
