"""
Schemas for the Pointing Server

This module contains the inbound request structures and the outbound
event builders used on the websocket wire.
"""

from .events import (
    create_envelope,
    create_participants_update,
    create_votes_update,
    create_typing_update,
    create_reveal_event,
    create_team_chat_event,
    create_vote_summary_event,
    create_emoji_reaction_event,
    create_error_event,
)
from .requests import (
    PayloadError,
    JoinRequest,
    VoteRequest,
    StartSessionRequest,
    ForceRemoveRequest,
    UpdateMoodRequest,
    TeamChatRequest,
    EmojiReactionRequest,
)

__all__ = [
    "create_envelope",
    "create_participants_update",
    "create_votes_update",
    "create_typing_update",
    "create_reveal_event",
    "create_team_chat_event",
    "create_vote_summary_event",
    "create_emoji_reaction_event",
    "create_error_event",
    "PayloadError",
    "JoinRequest",
    "VoteRequest",
    "StartSessionRequest",
    "ForceRemoveRequest",
    "UpdateMoodRequest",
    "TeamChatRequest",
    "EmojiReactionRequest",
]
