"""Integration tests for Session against a real tmux server.

Run with: pytest tests/test_session_integration.py -v

Prerequisites:
- tmux and bash on PATH
"""

from __future__ import annotations

import pytest

from fzf_harness import Key, WindowNotFound, shell_returned

from conftest import BASH_AVAILABLE, TMUX_AVAILABLE


pytestmark = [
    pytest.mark.skipif(not TMUX_AVAILABLE, reason="tmux not available"),
    pytest.mark.skipif(not BASH_AVAILABLE, reason="bash not available"),
]


def test_fresh_window_shows_only_the_prompt(tmux):
    assert tmux.until(shell_returned("FIN"), timeout=5) == ["FIN"]


def test_noop_command_then_close(tmux):
    tmux.until(shell_returned("FIN"), timeout=5)
    tmux.send_keys("true", Key.ENTER)
    tmux.until(lambda lines: lines[-2] == "FINtrue" and lines[-1] == "FIN", timeout=5)
    tmux.close(5)
    assert tmux.closed


def test_typed_text_and_chords_reach_command_line(tmux):
    tmux.until(shell_returned("FIN"), timeout=5)
    tmux.send_keys("echo foo bar", "C-a", "# ")
    tmux.until(lambda lines: lines[-1] == "FIN# echo foo bar", timeout=5)
    tmux.send_keys("C-e", " baz")
    tmux.until(lambda lines: lines[-1] == "FIN# echo foo bar baz", timeout=5)
    tmux.send_keys("C-u")
    tmux.until(lambda lines: lines[-1] == "FIN", timeout=5)


def test_capture_fits_screen_and_has_no_trailing_blank(tmux):
    tmux.until(shell_returned("FIN"), timeout=5)
    tmux.send_keys("seq 1 200", Key.ENTER)
    lines = tmux.until(lambda lines: lines[-2] == "200" and lines[-1] == "FIN", timeout=5)
    assert len(lines) <= tmux.lines
    assert lines[-1].strip() != ""


def test_program_output_through_temp_channel(tmux, output):
    tmux.until(shell_returned("FIN"), timeout=5)
    tmux.send_keys(f"echo hello {output.redirect()}", Key.ENTER)
    assert output.read_once() == "hello\n"
    assert not output.exists()


def test_kill_is_idempotent_and_capture_fails_afterwards(tmux):
    tmux.kill()
    assert tmux.closed
    tmux.kill()
    with pytest.raises(WindowNotFound):
        tmux.capture()


def test_trailing_semicolon_is_typed_literally(tmux):
    tmux.until(shell_returned("FIN"), timeout=5)
    tmux.send_keys("echo a;", "echo b", Key.ENTER)
    lines = tmux.until(lambda lines: lines[-1] == "FIN" and lines[-3:-1] == ["a", "b"], timeout=5)
    assert "FINecho a;echo b" in lines
