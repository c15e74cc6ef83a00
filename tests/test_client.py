"""
Tests for the Pointing Client

Covers request serialization, update parsing, the ClientService connection
wrapper and the RoomClient local mirror.
"""

import json

import pytest

from pointing_client import (
    SCRUM_MASTER,
    ClientService,
    ForceRemoveUserRequest,
    JoinRequest,
    LogoutRequest,
    ParticipantsUpdate,
    RevealVotesRequest,
    RoomClient,
    VoteRequest,
    VoteSummary,
)


class FakeWebSocket:
    def __init__(self, incoming=None):
        self.sent = []
        self.closed = False
        self._incoming = list(incoming or [])

    async def send(self, message):
        self.sent.append(json.loads(message))

    async def close(self):
        self.closed = True

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._incoming:
            raise StopAsyncIteration
        return self._incoming.pop(0)


def factory_for(websocket):
    async def factory(url):
        factory.url = url
        return websocket

    return factory


# Requests


def test_join_request_serialization():
    request = JoinRequest("alice", "sprint", SCRUM_MASTER, avatar="owl", emoji="🙂")

    assert request.to_dict() == {
        "type": "join",
        "data": {
            "nickname": "alice",
            "room": "sprint",
            "role": "Scrum Master",
            "avatar": "owl",
            "emoji": "🙂",
            "device": None,
        },
    }
    assert json.loads(request.to_json())["type"] == "join"


def test_requests_without_fields_omit_data():
    assert RevealVotesRequest().to_dict() == {"type": "revealVotes"}
    assert LogoutRequest().to_dict() == {"type": "logout"}


def test_force_remove_request():
    assert ForceRemoveUserRequest("bob").to_dict() == {
        "type": "forceRemoveUser",
        "data": {"nickname": "bob"},
    }


def test_vote_request_allows_clearing():
    assert VoteRequest("alice", None).to_dict()["data"] == {
        "nickname": "alice",
        "point": None,
    }


# Updates


def test_participants_update_from_frame():
    update = ParticipantsUpdate.from_dict(
        {
            "type": "participantsUpdate",
            "data": {
                "names": ["alice", "bob"],
                "roles": {"alice": "Scrum Master", "bob": "Developer"},
                "avatars": {},
                "moods": {},
                "connected": ["alice"],
                "devices": {"alice": "desktop", "bob": "mobile"},
            },
        }
    )

    assert update.names == ["alice", "bob"]
    assert update.is_online("alice")
    assert not update.is_online("bob")
    assert update.devices["bob"] == "mobile"


def test_vote_summary_from_team_chat_payload():
    summary = VoteSummary.from_dict(
        {
            "type": "voteSummary",
            "summary": {
                "story": "Login",
                "consensus": [3, 5],
                "votes": [{"name": "d1", "avatar": None, "point": "3"}],
                "timestamp": "10:00:00",
                "expand": False,
            },
        }
    )

    assert summary.story == "Login"
    assert summary.consensus == [3, 5]
    assert summary.describe() == "Login @ 10:00:00: consensus 3, 5 (1 vote(s))"


def test_vote_summary_without_consensus():
    summary = VoteSummary(story="Untitled Story", timestamp="09:00:00")
    assert "consensus none" in summary.describe()


# ClientService


@pytest.mark.asyncio
async def test_client_service_connect_send_disconnect():
    websocket = FakeWebSocket()
    factory = factory_for(websocket)
    service = ClientService("ws://localhost:10000", websocket_factory=factory)
    assert not service.is_connected

    await service.connect()
    assert service.is_connected
    assert factory.url == "ws://localhost:10000"

    await service.send(RevealVotesRequest())
    assert websocket.sent == [{"type": "revealVotes"}]

    await service.disconnect()
    assert websocket.closed
    assert not service.is_connected


@pytest.mark.asyncio
async def test_client_service_send_requires_connection():
    service = ClientService("ws://localhost:10000")
    with pytest.raises(ConnectionError):
        await service.send(LogoutRequest())


@pytest.mark.asyncio
async def test_client_service_connect_failure():
    async def failing(url):
        raise OSError("refused")

    service = ClientService("ws://localhost:1", websocket_factory=failing)
    with pytest.raises(ConnectionError):
        await service.connect()
    assert not service.is_connected


# RoomClient


@pytest.mark.asyncio
async def test_room_client_sends_requests_with_identity():
    websocket = FakeWebSocket()
    client = RoomClient("ws://test", websocket_factory=factory_for(websocket))
    await client.connect()

    await client.join("sprint", "alice", role=SCRUM_MASTER)
    await client.vote("5")
    await client.start_session("Story")
    await client.force_remove_user("bob")
    await client.chat("hello")

    assert client.is_scrum_master
    assert [frame["type"] for frame in websocket.sent] == [
        "join",
        "vote",
        "startSession",
        "forceRemoveUser",
        "teamChat",
    ]
    assert websocket.sent[1]["data"] == {"nickname": "alice", "point": "5"}
    assert websocket.sent[2]["data"] == {"title": "Story", "room": "sprint"}
    assert websocket.sent[4]["data"] == {"sender": "alice", "text": "hello"}


@pytest.mark.asyncio
async def test_room_client_requires_join_before_voting():
    client = RoomClient("ws://test", websocket_factory=factory_for(FakeWebSocket()))
    await client.connect()
    with pytest.raises(RuntimeError):
        await client.vote("3")


def test_room_client_mirrors_participants_and_votes():
    client = RoomClient("ws://test")
    updates = []
    client.on("participantsUpdate", updates.append)

    client.process_message(
        json.dumps(
            {
                "type": "participantsUpdate",
                "data": {"names": ["alice", "bob"], "connected": ["alice", "bob"]},
            }
        )
    )
    client.process_message(
        json.dumps({"type": "updateVotes", "data": {"alice": "3", "bob": None}})
    )

    assert client.participants.names == ["alice", "bob"]
    assert isinstance(updates[0], ParticipantsUpdate)
    assert client.votes == {"alice": "3", "bob": None}

    client.process_message(json.dumps({"type": "startSession", "data": "Story B"}))
    assert client.story == "Story B"
    assert client.votes == {"alice": None, "bob": None}

    client.process_message(json.dumps({"type": "sessionEnded"}))
    assert client.story == ""


def test_room_client_turns_summary_into_callback():
    client = RoomClient("ws://test")
    summaries = []
    chats = []
    client.on("voteSummary", summaries.append)
    client.on("teamChat", chats.append)

    client.process_message(
        json.dumps(
            {
                "type": "teamChat",
                "data": {
                    "type": "voteSummary",
                    "summary": {"story": "S", "consensus": [5], "votes": [], "timestamp": "t"},
                },
            }
        )
    )
    client.process_message(
        json.dumps({"type": "teamChat", "data": {"sender": "bob", "text": "hi"}})
    )

    assert len(summaries) == 1
    assert summaries[0].consensus == [5]
    assert client.summaries == summaries
    assert chats == [{"sender": "bob", "text": "hi"}]


def test_room_client_resets_on_termination():
    client = RoomClient("ws://test")
    client.room = "sprint"
    client.story = "S"
    client.typing = ["bob"]

    client.process_message(json.dumps({"type": "sessionTerminated"}))

    assert client.room is None
    assert client.story == ""
    assert client.typing == []


def test_room_client_ignores_invalid_json():
    client = RoomClient("ws://test")
    client.process_message("not json")
    assert client.votes == {}


@pytest.mark.asyncio
async def test_room_client_receive_loop():
    websocket = FakeWebSocket(
        incoming=[
            json.dumps({"type": "typingUpdate", "data": ["bob"]}),
            json.dumps({"type": "revealVotes", "data": {"story": "S"}}),
        ]
    )
    client = RoomClient("ws://test", websocket_factory=factory_for(websocket))
    await client.connect()

    await client.receive_messages()

    assert client.typing == ["bob"]
    assert client.story == "S"
