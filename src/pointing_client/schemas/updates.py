"""
Update Schema Definitions

Structures for the state snapshots and summaries the server pushes.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .base import BaseUpdate


@dataclass
class ParticipantsUpdate(BaseUpdate):
    """
    Snapshot of a room's membership.

    Attributes:
        names: Participants in join order
        roles: nickname -> role
        avatars: nickname -> avatar token
        moods: nickname -> mood emoji
        connected: Participants with a live connection
        devices: nickname -> "mobile" or "desktop"
    """

    names: List[str] = field(default_factory=list)
    roles: Dict[str, str] = field(default_factory=dict)
    avatars: Dict[str, Any] = field(default_factory=dict)
    moods: Dict[str, Any] = field(default_factory=dict)
    connected: List[str] = field(default_factory=list)
    devices: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "ParticipantsUpdate":
        return cls(
            names=list(data.get("names", [])),
            roles=dict(data.get("roles", {})),
            avatars=dict(data.get("avatars", {})),
            moods=dict(data.get("moods", {})),
            connected=list(data.get("connected", [])),
            devices=dict(data.get("devices", {})),
        )

    def is_online(self, nickname: str) -> bool:
        return nickname in self.connected


@dataclass
class VoteSummary(BaseUpdate):
    """
    Private reveal summary delivered to Scrum Masters.

    Attributes:
        story: Story the votes were cast on
        consensus: Most frequent numeric values, ascending
        votes: [{"name", "avatar", "point"}] for each valid voter
        timestamp: Server-local time of the reveal
    """

    story: str
    consensus: List[Any] = field(default_factory=list)
    votes: List[Dict[str, Any]] = field(default_factory=list)
    timestamp: str = ""
    expand: bool = False

    @classmethod
    def _from_data(cls, data: Dict[str, Any]) -> "VoteSummary":
        summary = data.get("summary", data)
        return cls(
            story=summary.get("story", ""),
            consensus=list(summary.get("consensus", [])),
            votes=list(summary.get("votes", [])),
            timestamp=summary.get("timestamp", ""),
            expand=bool(summary.get("expand", False)),
        )

    def describe(self) -> str:
        """One-line human readable description."""
        if self.consensus:
            consensus = ", ".join(str(value) for value in self.consensus)
        else:
            consensus = "none"
        return (
            f"{self.story} @ {self.timestamp}: consensus {consensus} "
            f"({len(self.votes)} vote(s))"
        )
