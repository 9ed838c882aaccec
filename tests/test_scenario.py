from __future__ import annotations

import pytest

from fzf_harness import TempChannel
from fzf_harness.scenario import (
    fzf_command,
    has_line,
    line_contains,
    line_equals,
    prompt_ready,
    selected_item,
    shell_returned,
)


def test_fzf_command_with_source_env_and_output(tmp_path):
    output = TempChannel(tmp_path / "output")
    command = fzf_command(
        "--multi",
        "-q",
        "foo bar",
        source="seq 1 10",
        env={"FZF_DEFAULT_OPTS": "--height 40%"},
        output=output,
    )
    assert command == (
        f"seq 1 10 | FZF_DEFAULT_OPTS='--height 40%' fzf --multi -q 'foo bar' > {tmp_path / 'output'}"
    )


def test_fzf_command_default_command_env():
    command = fzf_command(env={"FZF_DEFAULT_COMMAND": "echo hello"}, binary="/usr/local/bin/fzf")
    assert command == "FZF_DEFAULT_COMMAND='echo hello' /usr/local/bin/fzf"


def test_fzf_command_rejects_bad_env_names():
    with pytest.raises(ValueError):
        fzf_command(env={"BAD NAME": "x"})


def test_screen_predicates():
    screen = ["  2", "> 1", "  100/100", ">"]
    assert prompt_ready(screen)
    assert not prompt_ready([])
    assert line_equals(-2, "  100/100")(screen)
    assert line_contains(-2, "100/100")(screen)
    assert has_line("> 1")(screen)
    assert not has_line("> 2")(screen)
    assert shell_returned()(["FINseq 1 10", "FIN"])
    assert not shell_returned()(["FINseq 1 10"])
    assert not shell_returned()(screen)


def test_selected_item_ignores_pointer_glyph():
    assert selected_item("100")(["  99", "> 100", "  100/100", ">"])
    assert selected_item("100")(["  99", "▌ 100", "  100/100", ">"])
    assert not selected_item("100")(["  100", "> 99"])
    assert not selected_item("100")(["  100/100"])


def test_predicates_have_readable_names():
    assert line_equals(-1, ">").__name__ == "line_equals(-1, '>')"
    assert shell_returned("FIN").__name__ == "shell_returned('FIN')"
