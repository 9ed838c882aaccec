"""Building blocks for fzf interaction scenarios.

Scenarios type a command line into a :class:`~fzf_harness.session.Session`,
so the environment fzf sees is spelled out in that command rather than taken
from the test process.
"""

from __future__ import annotations

import re
import shlex
from typing import List, Mapping, Optional, Sequence

from .temp_channel import TempChannel

Screen = Sequence[str]


def _env_prefix(env: Optional[Mapping[str, str]]) -> List[str]:
    prefix: List[str] = []
    for name, value in (env or {}).items():
        if not re.fullmatch(r"[A-Za-z_][A-Za-z0-9_]*", name):
            raise ValueError(f"invalid environment variable name: {name!r}")
        prefix.append(f"{name}={shlex.quote(str(value))}")
    return prefix


def fzf_command(
    *options: str,
    source: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    output: Optional[TempChannel] = None,
    binary: str = "fzf",
) -> str:
    """Return a shell command line that runs fzf.

    ``source`` is a shell pipeline whose stdout feeds fzf and is inserted
    verbatim; ``options`` are quoted one by one.
    """
    parts: List[str] = []
    if source:
        parts += [source, "|"]
    parts += _env_prefix(env)
    parts.append(binary)
    parts += [shlex.quote(str(opt)) for opt in options]
    if output is not None:
        parts.append(output.redirect())
    return " ".join(parts)


def prompt_ready(lines: Screen) -> bool:
    return bool(lines) and lines[-1].startswith(">")


def shell_returned(prompt: str = "FIN"):
    def predicate(lines: Screen) -> bool:
        return bool(lines) and lines[-1].rstrip() == prompt

    predicate.__name__ = f"shell_returned({prompt!r})"
    return predicate


def line_equals(index: int, text: str):
    def predicate(lines: Screen) -> bool:
        return lines[index] == text

    predicate.__name__ = f"line_equals({index}, {text!r})"
    return predicate


def line_contains(index: int, text: str):
    def predicate(lines: Screen) -> bool:
        return text in lines[index]

    predicate.__name__ = f"line_contains({index}, {text!r})"
    return predicate


def has_line(text: str):
    def predicate(lines: Screen) -> bool:
        return text in lines

    predicate.__name__ = f"has_line({text!r})"
    return predicate


def selected_item(text: str):
    """Match the list row under the pointer, whatever glyph fzf draws for it."""

    def predicate(lines: Screen) -> bool:
        return any(line[:1].strip() and line[1:].strip() == text for line in lines)

    predicate.__name__ = f"selected_item({text!r})"
    return predicate
