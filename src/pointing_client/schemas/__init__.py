"""
Schemas Package

Protocol message schemas for client-server communication: requests the
client sends and the updates the server pushes.
"""

from .base import BaseRequest, BaseUpdate
from .requests import (
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
)
from .updates import ParticipantsUpdate, VoteSummary

__all__ = [
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
