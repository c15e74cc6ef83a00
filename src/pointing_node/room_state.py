"""
Room State Management for the Pointing Server

This module manages the in-memory state of every estimation room hosted by
this process. Rooms are created lazily on first join and deleted as soon as
their participant list becomes empty.

All mutations here are synchronous and free of I/O; the service layer calls
them between awaits, so one event is always applied to completion before the
next one touches the same room.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .timers import TimerRegistry

logger = logging.getLogger(__name__)

# Configuration constants for membership management
DISCONNECT_GRACE_PERIOD = 20 * 60  # seconds a disconnected participant is kept
TYPING_TIMEOUT = 3  # seconds a typing indicator lives without refresh

# Timer purposes stored in Room.timers
REMOVAL_TIMER = "removal"
TYPING_TIMER = "typing"

VoteValue = Optional[Union[str, int, float]]


class Role(Enum):
    """Participant roles inside a room."""

    DEVELOPER = "Developer"
    SCRUM_MASTER = "Scrum Master"

    @classmethod
    def parse(cls, value: Any) -> "Role":
        """
        Parse a role from its wire representation.

        Raises:
            ValueError: If the value is not a known role
        """
        if isinstance(value, Role):
            return value
        if isinstance(value, str):
            normalized = value.strip().replace(" ", "").replace("_", "").lower()
            for role in cls:
                if role.value.replace(" ", "").lower() == normalized:
                    return role
        raise ValueError(f"Unknown role: {value!r}")


class DeviceClass(Enum):
    """Device classification captured once at join time."""

    MOBILE = "mobile"
    DESKTOP = "desktop"


@dataclass
class Room:
    """
    Represents an estimation room.

    Attributes:
        room_id: Identifier chosen by the first joiner
        participants: Nicknames in join order (authoritative membership)
        roles: nickname -> Role
        avatars: nickname -> opaque avatar token
        moods: nickname -> opaque emoji token
        votes: nickname -> vote value (None = no vote cast)
        devices: nickname -> DeviceClass
        typing: Nicknames currently composing a chat message
        current_story: Active estimation subject ("" = none)
        created_at: ISO 8601 timestamp when the room was created
        timers: Pending removal and typing-expiry tasks for this room
    """

    room_id: str
    participants: List[str] = field(default_factory=list)
    roles: Dict[str, Role] = field(default_factory=dict)
    avatars: Dict[str, Any] = field(default_factory=dict)
    moods: Dict[str, Any] = field(default_factory=dict)
    votes: Dict[str, VoteValue] = field(default_factory=dict)
    devices: Dict[str, DeviceClass] = field(default_factory=dict)
    typing: List[str] = field(default_factory=list)
    current_story: str = ""
    created_at: str = ""
    timers: TimerRegistry = field(default_factory=TimerRegistry)

    def __post_init__(self):
        """Initialize the creation timestamp if not set."""
        if not self.created_at:
            self.created_at = datetime.now(timezone.utc).isoformat()

    @property
    def pending_removals(self) -> List[str]:
        """Nicknames currently inside the disconnect grace period."""
        return self.timers.armed_for(REMOVAL_TIMER)

    def is_participant(self, nickname: Optional[str]) -> bool:
        """Check whether a nickname is part of this room."""
        return nickname is not None and nickname in self.participants

    def role_of(self, nickname: str) -> Optional[Role]:
        """Get the role held by a nickname, if any."""
        return self.roles.get(nickname)

    def nicknames_with_role(self, role: Role) -> List[str]:
        """Get participants holding a role, in join order."""
        return [name for name in self.participants if self.roles.get(name) == role]

    def to_dict(self) -> Dict[str, Any]:
        """Convert room to dictionary for logging and inspection."""
        return {
            "room_id": self.room_id,
            "participants": list(self.participants),
            "participant_count": len(self.participants),
            "current_story": self.current_story,
            "pending_removals": self.pending_removals,
            "created_at": self.created_at,
        }


class RoomStateManager:
    """
    Registry of all rooms plus the membership and voting transitions.

    The manager is the lifecycle owner for Room objects: it creates them on
    first join and deletes them when their last participant is removed.
    """

    def __init__(self):
        """Initialize an empty room registry."""
        self._rooms: Dict[str, Room] = {}
        logger.info("RoomStateManager initialized")

    # Registry

    def get_or_create(self, room_id: str) -> Room:
        """
        Get a room, creating it with empty defaults if absent.

        Args:
            room_id: The room identifier

        Returns:
            The existing or newly created Room
        """
        room = self._rooms.get(room_id)
        if room is None:
            room = Room(room_id=room_id)
            self._rooms[room_id] = room
            logger.info(f"Created room '{room_id}'")
        return room

    def get_room(self, room_id: Optional[str]) -> Optional[Room]:
        """
        Get a room by its ID.

        Returns:
            The Room object if found, None otherwise
        """
        if room_id is None:
            return None
        return self._rooms.get(room_id)

    def exists(self, room_id: str) -> bool:
        """Check whether a room is registered."""
        return room_id in self._rooms

    def is_current(self, room: Room) -> bool:
        """Check that a room object is still the registered one for its id."""
        return self._rooms.get(room.room_id) is room

    def rooms(self) -> List[Room]:
        """Get every registered room."""
        return list(self._rooms.values())

    def list_rooms(self) -> List[Dict[str, Any]]:
        """Get a summary of every registered room."""
        return [room.to_dict() for room in self._rooms.values()]

    def delete_room(self, room_id: str) -> bool:
        """
        Delete a room and cancel all of its timers.

        Returns:
            True if room was deleted, False if room didn't exist
        """
        room = self._rooms.pop(room_id, None)
        if room is None:
            return False
        room.timers.cancel_all()
        logger.info(f"Deleted room '{room_id}'")
        return True

    def delete_if_empty(self, room: Room) -> bool:
        """Delete a room whose participant list has become empty."""
        if room.participants or not self.is_current(room):
            return False
        return self.delete_room(room.room_id)

    # Membership

    def join(
        self,
        room_id: str,
        nickname: str,
        role: Role,
        avatar: Any = None,
        mood: Any = None,
        device: DeviceClass = DeviceClass.DESKTOP,
    ) -> Room:
        """
        Add or refresh a participant.

        A new nickname is appended to the participant list. A known nickname
        (typically reconnecting inside the grace period) has its pending
        removal cancelled. In both cases role, avatar, mood and device are
        replaced with the supplied values and the vote is reset.

        Returns:
            The room the participant is now in
        """
        room = self.get_or_create(room_id)

        if nickname not in room.participants:
            room.participants.append(nickname)
            logger.info(f"{nickname} joined room '{room_id}'")
        else:
            if room.timers.cancel(nickname, REMOVAL_TIMER):
                logger.info(
                    f"{nickname} reconnected to room '{room_id}', "
                    f"pending removal cancelled"
                )
            else:
                logger.info(f"{nickname} re-joined room '{room_id}'")

        room.roles[nickname] = role
        room.avatars[nickname] = avatar
        room.moods[nickname] = mood
        room.votes[nickname] = None
        room.devices[nickname] = device
        return room

    def remove_participant(self, room: Room, nickname: str) -> bool:
        """
        Fully remove a participant from every per-nickname map.

        Any pending removal or typing timer for the nickname is cancelled
        first. The room itself is not deleted here; see delete_if_empty().

        Returns:
            True if the nickname was a participant
        """
        room.timers.cancel(nickname, REMOVAL_TIMER)
        room.timers.cancel(nickname, TYPING_TIMER)
        if nickname not in room.participants:
            return False

        room.participants.remove(nickname)
        for mapping in (room.roles, room.avatars, room.moods, room.votes, room.devices):
            mapping.pop(nickname, None)
        if nickname in room.typing:
            room.typing.remove(nickname)
        logger.info(f"Removed {nickname} from room '{room.room_id}'")
        return True

    # Voting

    def cast_vote(self, room: Room, nickname: str, value: VoteValue) -> bool:
        """
        Record a vote for a participant.

        Returns:
            True if the vote was stored, False if nickname is not a participant
        """
        if not room.is_participant(nickname):
            return False
        room.votes[nickname] = value
        return True

    def start_session(self, room: Room, story: str):
        """Reset all votes and set the active story."""
        room.votes = {name: None for name in room.participants}
        room.current_story = story
        logger.info(f"Started session '{story}' in room '{room.room_id}'")

    def end_session(self, room: Room):
        """Clear all votes and the active story."""
        room.votes = {name: None for name in room.participants}
        room.current_story = ""
        logger.info(f"Ended session in room '{room.room_id}'")

    def update_mood(self, room: Room, nickname: str, mood: Any) -> bool:
        """
        Update a participant's mood emoji.

        Returns:
            True if updated, False if nickname is not a participant
        """
        if not room.is_participant(nickname):
            return False
        room.moods[nickname] = mood
        return True

    # Typing indicators

    def mark_typing(self, room: Room, nickname: str) -> bool:
        """
        Add a nickname to the typing set.

        Returns:
            True if the nickname was newly added
        """
        if nickname in room.typing:
            return False
        room.typing.append(nickname)
        return True

    def clear_typing(self, room: Room, nickname: str) -> bool:
        """
        Remove a nickname from the typing set.

        Returns:
            True if the nickname was present
        """
        if nickname not in room.typing:
            return False
        room.typing.remove(nickname)
        return True
