"""
Vote Tally

Computes the consensus and per-voter summary shown when votes are revealed.

Only connected Developers with a non-empty vote count as voters. Votes that
are not numeric still appear in the voter list but are left out of the
frequency count.
"""

import re
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Union

from .room_state import Role, Room

Number = Union[int, float]

_DECIMAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_PREFIXED = {"0x": 16, "0o": 8, "0b": 2}

UNTITLED_STORY = "Untitled Story"


def coerce_point(value: Any) -> Optional[Number]:
    """
    Convert a raw vote to a number.

    Strings are trimmed and accepted as decimal literals or as 0x/0o/0b
    prefixed integers; a whitespace-only string counts as 0. Integral values
    come back as int so 5 and "5.0" land on the same consensus key.

    Returns:
        The numeric value, or None if the vote is not numeric
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        prefix = text[:2].lower()
        if prefix in _PREFIXED:
            try:
                return int(text[2:], _PREFIXED[prefix])
            except ValueError:
                return None
        if not _DECIMAL.fullmatch(text):
            return None
        number = float(text)
    else:
        return None

    if number != number or number in (float("inf"), float("-inf")):
        return None
    if number.is_integer():
        return int(number)
    return number


def has_vote(value: Any) -> bool:
    """Check that a vote is present and not the empty string."""
    return value is not None and value != ""


@dataclass
class VoteEntry:
    """One valid voter in a reveal summary."""

    name: str
    avatar: Any
    point: Any

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "avatar": self.avatar, "point": self.point}


@dataclass
class VoteTally:
    """
    Result of revealing a room's votes.

    Attributes:
        consensus: Numeric values tied for highest frequency, ascending
        votes: Valid voters in iteration order
        story: The story the votes were cast on
        timestamp: Local wall-clock time of the reveal (HH:MM:SS)
    """

    consensus: List[Number] = field(default_factory=list)
    votes: List[VoteEntry] = field(default_factory=list)
    story: str = ""
    timestamp: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "consensus": list(self.consensus),
            "voteList": [entry.to_dict() for entry in self.votes],
            "story": self.story,
            "timestamp": self.timestamp,
        }

    def to_summary(self) -> Dict[str, Any]:
        """Summary payload sent privately to Scrum Masters."""
        return {
            "story": self.story or UNTITLED_STORY,
            "consensus": list(self.consensus),
            "votes": [entry.to_dict() for entry in self.votes],
            "timestamp": self.timestamp,
            "expand": False,
        }


def compute_consensus(points: Iterable[Number]) -> List[Number]:
    """
    Get the values tied for the highest frequency.

    Returns:
        Values in ascending order, empty when there are no points
    """
    frequency = Counter(points)
    highest = max(frequency.values(), default=0)
    return sorted(value for value, count in frequency.items() if count == highest)


def tally_votes(
    room: Room,
    connected: Iterable[str],
    now: Optional[datetime] = None,
) -> VoteTally:
    """
    Tally the votes of a room.

    Args:
        room: The room being revealed
        connected: Nicknames currently connected to the room, in order
        now: Time of the reveal (defaults to local now)

    Returns:
        VoteTally with consensus, voter list, story and timestamp
    """
    voters = [
        name
        for name in connected
        if room.roles.get(name) == Role.DEVELOPER and has_vote(room.votes.get(name))
    ]

    points = []
    for name in voters:
        point = coerce_point(room.votes[name])
        if point is not None:
            points.append(point)

    moment = now or datetime.now()
    return VoteTally(
        consensus=compute_consensus(points),
        votes=[
            VoteEntry(name=name, avatar=room.avatars.get(name), point=room.votes[name])
            for name in voters
        ],
        story=room.current_story,
        timestamp=moment.strftime("%X"),
    )
