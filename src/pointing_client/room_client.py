"""
Room Client for the Scrum Pointing Tool

This module provides a RoomClient class that extends the base ClientService
with one method per room operation, a receive loop, and a local mirror of
the room state the server last published.

Usage:
    client = RoomClient("ws://localhost:10000")
    await client.connect()
    await client.join("sprint-42", "alice", role="Scrum Master")
    await client.receive_messages()
"""

import json
import logging
from typing import Any, Callable, Dict, List, Optional

import websockets

from .schemas import (
    DEVELOPER,
    SCRUM_MASTER,
    EmojiReactionRequest,
    EndPointingSessionRequest,
    EndSessionRequest,
    ForceRemoveUserRequest,
    HaifettiRequest,
    JoinRequest,
    LogoutRequest,
    ParticipantsUpdate,
    RevealVotesRequest,
    StartSessionRequest,
    TeamChatRequest,
    UpdateMoodRequest,
    UserTypingRequest,
    VoteRequest,
    VoteSummary,
)
from .service import ClientService

logger = logging.getLogger(__name__)

Callback = Callable[[Any], None]


class RoomClient(ClientService):
    """
    Client for a single estimation room.

    Attributes:
        nickname: Nickname used for the current room
        room: Current room identifier
        role: Role joined with
        participants: Last participantsUpdate received
        votes: Last updateVotes received
        typing: Nicknames currently typing
        story: Active story ("" when none)
        summaries: Vote summaries received (Scrum Masters only)
    """

    def __init__(
        self,
        server_url: str,
        websocket_factory: Optional[Callable] = None,
    ):
        super().__init__(server_url, websocket_factory)

        self.nickname: Optional[str] = None
        self.room: Optional[str] = None
        self.role: str = DEVELOPER
        self.participants = ParticipantsUpdate()
        self.votes: Dict[str, Any] = {}
        self.typing: List[str] = []
        self.story = ""
        self.summaries: List[VoteSummary] = []

        self._callbacks: Dict[str, Callback] = {}

        logger.info("RoomClient initialized for server: %s", server_url)

    def on(self, event: str, callback: Callback) -> None:
        """
        Register a callback for a server event.

        The callback receives the decoded payload (ParticipantsUpdate and
        VoteSummary for those events, raw data otherwise).

        Args:
            event: Server event name, or "voteSummary" for the private summary
            callback: Function receiving the payload
        """
        self._callbacks[event] = callback

    @property
    def is_scrum_master(self) -> bool:
        return self.role == SCRUM_MASTER

    # Requests

    async def join(
        self,
        room: str,
        nickname: str,
        role: str = DEVELOPER,
        avatar: Optional[str] = None,
        emoji: Optional[str] = None,
        device: Optional[str] = None,
    ) -> None:
        """Join a room, creating it if it does not exist yet."""
        await self.send(JoinRequest(nickname, room, role, avatar, emoji, device))
        self.nickname = nickname
        self.room = room
        self.role = role
        logger.info("Joined room %s as %s (%s)", room, nickname, role)

    async def vote(self, point: Optional[Any]) -> None:
        await self.send(VoteRequest(self._require_nickname(), point))

    async def start_session(self, title: str) -> None:
        if not self.room:
            raise RuntimeError("Not in a room")
        await self.send(StartSessionRequest(title, self.room))

    async def reveal_votes(self) -> None:
        await self.send(RevealVotesRequest())

    async def end_session(self) -> None:
        await self.send(EndSessionRequest())

    async def end_pointing_session(self) -> None:
        await self.send(EndPointingSessionRequest())

    async def force_remove_user(self, nickname: str) -> None:
        await self.send(ForceRemoveUserRequest(nickname))

    async def update_mood(self, emoji: Any) -> None:
        await self.send(UpdateMoodRequest(self._require_nickname(), emoji))

    async def typing_started(self) -> None:
        await self.send(UserTypingRequest())

    async def chat(self, text: str) -> None:
        await self.send(TeamChatRequest(self._require_nickname(), text))

    async def react(self, emoji: str) -> None:
        await self.send(EmojiReactionRequest(self._require_nickname(), emoji))

    async def haifetti(self) -> None:
        await self.send(HaifettiRequest())

    async def logout(self) -> None:
        """Leave the room for good."""
        await self.send(LogoutRequest())
        self._reset_room_state()

    def _require_nickname(self) -> str:
        if not self.nickname:
            raise RuntimeError("Join a room first")
        return self.nickname

    def _reset_room_state(self) -> None:
        self.room = None
        self.participants = ParticipantsUpdate()
        self.votes = {}
        self.typing = []
        self.story = ""

    # Receiving

    async def receive_messages(self) -> None:
        """
        Continuously receive and process frames from the server.

        Raises:
            ConnectionError: If not connected
        """
        if not self.is_connected:
            raise ConnectionError("Not connected to a pointing server")

        logger.info("Starting message receive loop")

        try:
            async for message in self.websocket:
                self.process_message(message)
        except websockets.exceptions.ConnectionClosed:
            logger.warning("Connection closed by server")
            self._connected = False

    def process_message(self, message: str) -> None:
        """
        Apply one server frame to the local mirror and fire its callback.

        Args:
            message: Raw JSON frame
        """
        try:
            frame = json.loads(message)
        except json.JSONDecodeError as e:
            logger.error("Failed to parse message JSON: %s", e)
            return

        event = frame.get("type")
        data = frame.get("data")

        if event == "participantsUpdate":
            self.participants = ParticipantsUpdate.from_dict(data or {})
            data = self.participants
        elif event == "updateVotes":
            self.votes = dict(data or {})
        elif event == "startSession":
            self.story = data or ""
            self.votes = {name: None for name in self.participants.names}
        elif event == "revealVotes":
            self.story = (data or {}).get("story", self.story)
        elif event == "sessionEnded":
            self.story = ""
            self.votes = {name: None for name in self.participants.names}
        elif event == "sessionTerminated":
            self._reset_room_state()
        elif event == "typingUpdate":
            self.typing = list(data or [])
        elif event == "teamChat" and isinstance(data, dict) and data.get("type") == "voteSummary":
            summary = VoteSummary.from_dict(data)
            self.summaries.append(summary)
            event, data = "voteSummary", summary
        elif event == "error":
            logger.error("Server error: %s", (data or {}).get("message"))

        callback = self._callbacks.get(event)
        if callback:
            callback(data)
        else:
            logger.debug("Unhandled event type: %s", event)
