"""Tests for the host factory."""

import pytest

from termpanel.adapters import create_host, detect_host_type
from termpanel.adapters.tmux import TmuxHost


class TestDetectHostType:
    def test_inside_tmux(self, monkeypatch):
        monkeypatch.setenv("TMUX", "/tmp/tmux-1000/default,123,0")
        assert detect_host_type() == "tmux"

    def test_outside_tmux(self, monkeypatch):
        monkeypatch.delenv("TMUX", raising=False)
        assert detect_host_type() is None


class TestCreateHost:
    def test_tmux(self):
        host = create_host("tmux", socket_path="/tmp/test.sock")
        assert isinstance(host, TmuxHost)
        assert host.client.socket_path == "/tmp/test.sock"

    def test_auto_inside_tmux(self, monkeypatch):
        monkeypatch.setenv("TMUX", "/tmp/tmux-1000/default,123,0")
        assert isinstance(create_host("auto"), TmuxHost)

    def test_auto_with_socket(self, monkeypatch):
        monkeypatch.delenv("TMUX", raising=False)
        assert isinstance(create_host("auto", socket_path="/tmp/test.sock"), TmuxHost)

    def test_auto_undetectable(self, monkeypatch):
        monkeypatch.delenv("TMUX", raising=False)
        with pytest.raises(ValueError, match="Cannot detect host"):
            create_host("auto")

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown host type"):
            create_host("kitty")
