from __future__ import annotations

import subprocess

import pytest

from fzf_harness import TmuxClient
from fzf_harness.tmux import escape_key_arg, tmux_base_args


@pytest.fixture
def recorded(monkeypatch):
    calls: list[list[str]] = []

    def fake_run(argv, **kwargs):
        calls.append(list(argv))
        return subprocess.CompletedProcess(argv, 0, stdout="", stderr="")

    monkeypatch.setattr("fzf_harness.tmux.subprocess.run", fake_run)
    return calls


def test_tmux_base_args_uses_dedicated_socket():
    assert tmux_base_args("fzf_harness") == ["tmux", "-L", "fzf_harness"]
    assert tmux_base_args("  ") == ["tmux"]


def test_escape_key_arg_protects_trailing_semicolon():
    assert escape_key_arg("echo a;") == "echo a\\;"
    assert escape_key_arg(";") == "\\;"
    assert escape_key_arg("a;b") == "a;b"
    assert escape_key_arg("Enter") == "Enter"


def test_send_keys_keeps_each_token_literal(recorded):
    client = TmuxClient("sock")
    assert client.send_keys("@3", ["echo a;", "echo b", "Enter"]) == 0
    assert recorded == [
        ["tmux", "-L", "sock", "send-keys", "-t", "@3", "echo a\\;", "echo b", "Enter"],
    ]


def test_capture_to_file_chains_save_buffer(recorded):
    TmuxClient("sock").capture_to_file("@3", "/tmp/capture.txt")
    assert recorded == [
        ["tmux", "-L", "sock", "capture-pane", "-t", "@3", ";", "save-buffer", "/tmp/capture.txt"],
    ]
