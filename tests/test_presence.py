"""
Tests for PresenceTracker
"""

from pointing_node.presence import Binding, PresenceTracker


def test_bind_and_lookup():
    presence = PresenceTracker()
    ws = object()

    assert presence.bind(ws, "r1", "alice") is None

    assert presence.binding_for(ws) == Binding("r1", "alice")
    assert presence.connections("r1") == [ws]
    assert presence.is_connected("r1", "alice")
    assert not presence.is_connected("r2", "alice")


def test_rebind_returns_previous_binding():
    presence = PresenceTracker()
    ws = object()
    presence.bind(ws, "r1", "alice")

    previous = presence.bind(ws, "r2", "alice")

    assert previous == Binding("r1", "alice")
    assert presence.connections("r1") == []
    assert presence.connections("r2") == [ws]
    assert presence.bind(ws, "r2", "alice") is None


def test_nickname_connected_while_any_connection_remains():
    presence = PresenceTracker()
    tab_1, tab_2, other = object(), object(), object()
    presence.bind(tab_1, "r1", "alice")
    presence.bind(other, "r1", "bob")
    presence.bind(tab_2, "r1", "alice")

    assert presence.connected_nicknames("r1") == ["alice", "bob"]
    assert presence.connections_for("r1", "alice") == [tab_1, tab_2]

    presence.unbind(tab_1)
    assert presence.is_connected("r1", "alice")

    presence.unbind(tab_2)
    assert not presence.is_connected("r1", "alice")
    assert presence.connected_nicknames("r1") == ["bob"]


def test_unbind_unknown_connection():
    presence = PresenceTracker()
    assert presence.unbind(object()) is None
    assert len(presence) == 0


def test_drop_room_clears_bindings():
    presence = PresenceTracker()
    ws_a, ws_b, elsewhere = object(), object(), object()
    presence.bind(ws_a, "r1", "alice")
    presence.bind(ws_b, "r1", "bob")
    presence.bind(elsewhere, "r2", "carol")

    dropped = presence.drop_room("r1")

    assert dropped == [ws_a, ws_b]
    assert presence.binding_for(ws_a) is None
    assert presence.connected_nicknames("r1") == []
    assert presence.connected_nicknames("r2") == ["carol"]
    assert len(presence) == 1
