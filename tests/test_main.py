"""
Tests for server configuration from the environment
"""

from pointing_node.main import _env_seconds


def test_env_seconds_default_when_unset(monkeypatch):
    monkeypatch.delenv("DISCONNECT_GRACE_PERIOD", raising=False)
    assert _env_seconds("DISCONNECT_GRACE_PERIOD", 1200) == 1200


def test_env_seconds_parses_float(monkeypatch):
    monkeypatch.setenv("TYPING_TIMEOUT", "0.5")
    assert _env_seconds("TYPING_TIMEOUT", 3) == 0.5


def test_env_seconds_ignores_garbage(monkeypatch):
    monkeypatch.setenv("TYPING_TIMEOUT", "soon")
    assert _env_seconds("TYPING_TIMEOUT", 3) == 3


def test_env_seconds_allows_disabling(monkeypatch):
    monkeypatch.setenv("DISCONNECT_GRACE_PERIOD", "0")
    assert _env_seconds("DISCONNECT_GRACE_PERIOD", 1200) == 0
