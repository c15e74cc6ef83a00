"""
Pointing Service

Implements every room operation triggered by client events. Each method
takes the acting connection, mutates room state through the
RoomStateManager, and hands the resulting notifications to the
BroadcastDispatcher.

Architecture:
    - RoomStateManager: room registry and synchronous state transitions
    - PresenceTracker: which connections are live in which room
    - BroadcastDispatcher: fire-and-forget fan-out to room audiences
    - TimerRegistry (per room): grace-period removals, typing expiry

Guard failures (unknown room, nickname not a participant, role mismatch)
are silent no-ops.
"""

import logging
from typing import Any, Optional, Tuple

from .presence import Binding, PresenceTracker
from .room_state import (
    DISCONNECT_GRACE_PERIOD,
    REMOVAL_TIMER,
    TYPING_TIMEOUT,
    TYPING_TIMER,
    Role,
    Room,
    RoomStateManager,
)
from .schemas import events
from .schemas.requests import (
    EmojiReactionRequest,
    ForceRemoveRequest,
    JoinRequest,
    StartSessionRequest,
    TeamChatRequest,
    UpdateMoodRequest,
    VoteRequest,
)
from .tally import VoteTally, tally_votes
from .utils.broadcast import BroadcastDispatcher
from .utils.device import classify_device

logger = logging.getLogger(__name__)


class PointingService:
    """
    Room session state machine.

    Attributes:
        room_manager: Registry of rooms
        presence: Live connection index
        dispatcher: Outbound broadcaster
        grace_period: Seconds a disconnected participant is kept; <= 0 keeps
            them until logout or forced removal
        typing_timeout: Seconds a typing indicator lives
    """

    def __init__(
        self,
        room_manager: Optional[RoomStateManager] = None,
        presence: Optional[PresenceTracker] = None,
        dispatcher: Optional[BroadcastDispatcher] = None,
        grace_period: float = DISCONNECT_GRACE_PERIOD,
        typing_timeout: float = TYPING_TIMEOUT,
    ):
        self.room_manager = room_manager or RoomStateManager()
        self.presence = presence or PresenceTracker()
        self.dispatcher = dispatcher or BroadcastDispatcher(
            self.presence, self.room_manager
        )
        self.grace_period = grace_period
        self.typing_timeout = typing_timeout

        logger.info(
            f"PointingService initialized "
            f"(grace period {grace_period}s, typing timeout {typing_timeout}s)"
        )

    def _context(self, connection: Any) -> Tuple[Optional[Binding], Optional[Room]]:
        """Resolve the binding and room a connection is acting in."""
        binding = self.presence.binding_for(connection)
        if binding is None:
            return None, None
        return binding, self.room_manager.get_room(binding.room_id)

    async def _broadcast_participants(self, room: Room):
        connected = self.presence.connected_nicknames(room.room_id)
        await self.dispatcher.to_room(
            room.room_id,
            events.PARTICIPANTS_UPDATE,
            events.create_participants_update(room, connected),
        )

    async def _broadcast_typing(self, room: Room):
        await self.dispatcher.to_room(
            room.room_id, events.TYPING_UPDATE, events.create_typing_update(room)
        )

    async def _remove(self, room: Room, nickname: str):
        """Remove a participant, notify the room, and drop the room if empty."""
        self.room_manager.remove_participant(room, nickname)
        await self._broadcast_participants(room)
        await self.dispatcher.to_room(room.room_id, events.USER_LEFT, nickname)
        if self.room_manager.delete_if_empty(room):
            self.presence.drop_room(room.room_id)

    # Membership

    async def join(self, connection: Any, request: JoinRequest) -> Room:
        """
        Handle a join or reconnection.

        Args:
            connection: The joining connection
            request: Validated join payload

        Returns:
            The room joined
        """
        previous = self.presence.binding_for(connection)
        if previous is not None and previous != Binding(request.room, request.nickname):
            self.presence.unbind(connection)
            await self._handle_departure(previous)

        device = classify_device(connection, request.device)
        room = self.room_manager.join(
            request.room,
            request.nickname,
            request.role,
            avatar=request.avatar,
            mood=request.emoji,
            device=device,
        )
        self.presence.bind(connection, room.room_id, request.nickname)

        await self._broadcast_participants(room)
        await self.dispatcher.to_room(
            room.room_id, events.USER_JOINED, request.nickname, exclude=connection
        )
        return room

    async def disconnect(self, connection: Any):
        """Handle a transport-level disconnect."""
        binding = self.presence.unbind(connection)
        if binding is None:
            return
        await self._handle_departure(binding)

    async def _handle_departure(self, binding: Binding):
        """
        Publish the new connected set and start the grace period.

        The participant stays listed; the removal timer only fires if no
        connection for the nickname is back by then.
        """
        room = self.room_manager.get_room(binding.room_id)
        if room is None:
            return

        await self._broadcast_participants(room)

        nickname = binding.nickname
        if not room.is_participant(nickname):
            return
        if self.presence.is_connected(room.room_id, nickname):
            return
        if self.grace_period <= 0:
            logger.info(
                f"{nickname} disconnected from '{room.room_id}', "
                f"kept until logout"
            )
            return

        room.timers.arm(
            nickname,
            REMOVAL_TIMER,
            self.grace_period,
            lambda: self._expire_participant(room, nickname),
        )
        logger.info(
            f"{nickname} disconnected from '{room.room_id}', "
            f"removal in {self.grace_period}s"
        )

    async def _expire_participant(self, room: Room, nickname: str):
        if not self.room_manager.is_current(room):
            return
        if not room.is_participant(nickname):
            return
        if self.presence.is_connected(room.room_id, nickname):
            return
        logger.info(f"Grace period expired for {nickname} in '{room.room_id}'")
        await self._remove(room, nickname)

    async def logout(self, connection: Any):
        """Handle an explicit logout."""
        binding, room = self._context(connection)
        if binding is None:
            return
        self.presence.unbind(connection)
        if room is None or not room.is_participant(binding.nickname):
            return
        logger.info(f"{binding.nickname} logged out of '{room.room_id}'")
        await self._remove(room, binding.nickname)

    async def force_remove_user(self, connection: Any, request: ForceRemoveRequest):
        """Let a Scrum Master purge a participant with no live connection."""
        binding, room = self._context(connection)
        if room is None:
            return
        if room.role_of(binding.nickname) != Role.SCRUM_MASTER:
            logger.info(
                f"{binding.nickname} is not a Scrum Master, "
                f"ignoring removal of {request.target}"
            )
            return
        if not room.is_participant(request.target):
            return
        if self.presence.is_connected(room.room_id, request.target):
            logger.info(f"Attempted to remove online user: {request.target}")
            return

        logger.info(f"{request.target} removed by Scrum Master {binding.nickname}")
        await self._remove(room, request.target)

    # Voting

    async def vote(self, connection: Any, request: VoteRequest):
        """Record a vote and publish the full votes map."""
        binding, room = self._context(connection)
        if room is None:
            return
        nickname = request.nickname or binding.nickname
        if not self.room_manager.cast_vote(room, nickname, request.point):
            return
        await self.dispatcher.to_room(
            room.room_id, events.UPDATE_VOTES, events.create_votes_update(room)
        )

    async def start_session(self, connection: Any, request: StartSessionRequest):
        """Reset votes and announce a new story."""
        room_id = request.room
        if room_id is None:
            binding = self.presence.binding_for(connection)
            room_id = binding.room_id if binding else None
        room = self.room_manager.get_room(room_id)
        if room is None:
            return
        self.room_manager.start_session(room, request.title)
        await self.dispatcher.to_room(room.room_id, events.START_SESSION, request.title)

    async def reveal_votes(self, connection: Any) -> Optional[VoteTally]:
        """
        Reveal votes to the room and send Scrum Masters the summary.

        Returns:
            The computed tally, or None if the connection is in no room
        """
        _, room = self._context(connection)
        if room is None:
            return None

        tally = tally_votes(room, self.presence.connected_nicknames(room.room_id))
        logger.info(
            f"Revealed votes in '{room.room_id}': "
            f"{len(tally.votes)} voter(s), consensus {tally.consensus}"
        )
        await self.dispatcher.to_room(
            room.room_id,
            events.REVEAL_VOTES,
            events.create_reveal_event(room.current_story),
        )
        await self.dispatcher.to_role_in_room(
            room.room_id,
            Role.SCRUM_MASTER,
            events.TEAM_CHAT,
            events.create_vote_summary_event(tally.to_summary()),
        )
        return tally

    async def end_session(self, connection: Any):
        """Clear votes and the active story."""
        _, room = self._context(connection)
        if room is None:
            return
        self.room_manager.end_session(room)
        await self.dispatcher.to_room(room.room_id, events.SESSION_ENDED)

    async def end_pointing_session(self, connection: Any):
        """
        Terminate the room entirely.

        The room and its bindings are gone before the first send, so a join
        arriving during the fan-out starts a fresh room.
        """
        _, room = self._context(connection)
        if room is None:
            return
        audience = self.presence.drop_room(room.room_id)
        self.room_manager.delete_room(room.room_id)
        logger.info(f"Pointing session '{room.room_id}' terminated")
        await self.dispatcher.to_connections(audience, events.SESSION_TERMINATED)

    # Presence extras

    async def update_mood(self, connection: Any, request: UpdateMoodRequest):
        """Change a participant's mood emoji."""
        binding, room = self._context(connection)
        if room is None:
            return
        nickname = request.nickname or binding.nickname
        if not self.room_manager.update_mood(room, nickname, request.emoji):
            return
        await self._broadcast_participants(room)

    async def user_typing(self, connection: Any):
        """Mark the sender as typing and (re)arm its expiry."""
        binding, room = self._context(connection)
        if room is None or not room.is_participant(binding.nickname):
            return
        nickname = binding.nickname
        self.room_manager.mark_typing(room, nickname)
        await self._broadcast_typing(room)
        room.timers.arm(
            nickname,
            TYPING_TIMER,
            self.typing_timeout,
            lambda: self._expire_typing(room, nickname),
        )

    async def _expire_typing(self, room: Room, nickname: str):
        if not self.room_manager.is_current(room):
            return
        if self.room_manager.clear_typing(room, nickname):
            await self._broadcast_typing(room)

    # Relays

    async def team_chat(self, connection: Any, request: TeamChatRequest):
        """Relay a chat line to the sender's room."""
        binding = self.presence.binding_for(connection)
        if binding is None or not request.text:
            return
        await self.dispatcher.to_room(
            binding.room_id,
            events.TEAM_CHAT,
            events.create_team_chat_event(request.sender, request.text),
        )

    async def emoji_reaction(self, connection: Any, request: EmojiReactionRequest):
        """Relay an emoji reaction to the sender's room."""
        binding = self.presence.binding_for(connection)
        if binding is None:
            return
        await self.dispatcher.to_room(
            binding.room_id,
            events.EMOJI_REACTION,
            events.create_emoji_reaction_event(request.sender, request.emoji),
        )

    async def confetti(self, connection: Any):
        """Relay a confetti trigger to the sender's room."""
        _, room = self._context(connection)
        if room is None:
            return
        await self.dispatcher.to_room(room.room_id, events.HAIFETTI)

    def shutdown(self) -> int:
        """
        Cancel every pending timer in every room.

        Returns:
            Number of timers cancelled
        """
        return sum(room.timers.cancel_all() for room in self.room_manager.rooms())
