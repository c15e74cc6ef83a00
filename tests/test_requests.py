"""
Tests for inbound payload validation
"""

import pytest

from pointing_node.room_state import DeviceClass, Role
from pointing_node.schemas import (
    EmojiReactionRequest,
    ForceRemoveRequest,
    JoinRequest,
    PayloadError,
    StartSessionRequest,
    TeamChatRequest,
    UpdateMoodRequest,
    VoteRequest,
)


class TestJoinRequest:
    def test_full_payload(self):
        request = JoinRequest.from_data(
            {
                "nickname": "alice",
                "room": "sprint",
                "role": "Scrum Master",
                "avatar": "owl",
                "emoji": "🙂",
                "device": "Mobile",
            }
        )
        assert request.nickname == "alice"
        assert request.room == "sprint"
        assert request.role == Role.SCRUM_MASTER
        assert request.avatar == "owl"
        assert request.emoji == "🙂"
        assert request.device == DeviceClass.MOBILE

    def test_unknown_device_falls_back_to_headers(self):
        request = JoinRequest.from_data(
            {"nickname": "a", "room": "r", "role": "Developer", "device": "fridge"}
        )
        assert request.device is None

    @pytest.mark.parametrize(
        "data",
        [
            None,
            [],
            {"nickname": "a", "room": "r"},
            {"nickname": "a", "room": "r", "role": "Tester"},
            {"nickname": " ", "room": "r", "role": "Developer"},
            {"nickname": "a", "room": 7, "role": "Developer"},
        ],
    )
    def test_invalid_payloads(self, data):
        with pytest.raises(PayloadError):
            JoinRequest.from_data(data)


class TestVoteRequest:
    @pytest.mark.parametrize("point", ["5", "", "?", 3, 2.5, None])
    def test_accepted_points(self, point):
        assert VoteRequest.from_data({"nickname": "a", "point": point}).point == point

    @pytest.mark.parametrize("point", [True, [1], {"v": 1}])
    def test_rejected_points(self, point):
        with pytest.raises(PayloadError):
            VoteRequest.from_data({"nickname": "a", "point": point})

    def test_nickname_is_optional(self):
        assert VoteRequest.from_data({"point": "8"}).nickname is None


def test_start_session_title_is_verbatim():
    request = StartSessionRequest.from_data({"title": "  Spaced  "})
    assert request.title == "  Spaced  "
    assert request.room is None
    assert StartSessionRequest.from_data(None).title == ""
    with pytest.raises(PayloadError):
        StartSessionRequest.from_data({"title": 12})


@pytest.mark.parametrize(
    "data", ["bob", {"nickname": "bob"}, {"targetNickname": "bob"}]
)
def test_force_remove_target_forms(data):
    assert ForceRemoveRequest.from_data(data).target == "bob"


def test_force_remove_without_target():
    with pytest.raises(PayloadError):
        ForceRemoveRequest.from_data({})


def test_relay_payloads():
    assert TeamChatRequest.from_data({"sender": "a"}).text == ""
    assert EmojiReactionRequest.from_data({"sender": "a", "emoji": "👍"}).emoji == "👍"
    assert UpdateMoodRequest.from_data({"emoji": "😴"}).nickname is None
    with pytest.raises(PayloadError):
        TeamChatRequest.from_data({"sender": "a", "text": 5})
