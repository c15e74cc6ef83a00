"""
Client Package

This package provides the client side of the Scrum pointing tool: the
ClientService connection wrapper, the RoomClient with one method per room
operation, protocol schemas and the terminal user interface.
"""

from .service import ClientService
from .room_client import RoomClient
from .schemas import (
    BaseRequest,
    BaseUpdate,
    DEVELOPER,
    SCRUM_MASTER,
    JoinRequest,
    VoteRequest,
    StartSessionRequest,
    RevealVotesRequest,
    EndSessionRequest,
    EndPointingSessionRequest,
    ForceRemoveUserRequest,
    UpdateMoodRequest,
    UserTypingRequest,
    TeamChatRequest,
    EmojiReactionRequest,
    LogoutRequest,
    HaifettiRequest,
    ParticipantsUpdate,
    VoteSummary,
)

__all__ = [
    "ClientService",
    "RoomClient",
    "BaseRequest",
    "BaseUpdate",
    "DEVELOPER",
    "SCRUM_MASTER",
    "JoinRequest",
    "VoteRequest",
    "StartSessionRequest",
    "RevealVotesRequest",
    "EndSessionRequest",
    "EndPointingSessionRequest",
    "ForceRemoveUserRequest",
    "UpdateMoodRequest",
    "UserTypingRequest",
    "TeamChatRequest",
    "EmojiReactionRequest",
    "LogoutRequest",
    "HaifettiRequest",
    "ParticipantsUpdate",
    "VoteSummary",
]
