from __future__ import annotations

from typing import Iterable, List


class Key:
    """tmux names for the special keys scenarios send."""

    ENTER = "Enter"
    TAB = "Tab"
    BTAB = "BTab"
    ESCAPE = "Escape"
    SPACE = "Space"
    BSPACE = "BSpace"
    DELETE = "DC"
    LEFT = "Left"
    RIGHT = "Right"
    UP = "Up"
    DOWN = "Down"
    HOME = "Home"
    END = "End"
    PGUP = "PgUp"
    PGDN = "PgDn"


_NAMED_ALIASES = {
    "enter": Key.ENTER,
    "return": Key.ENTER,
    "tab": Key.TAB,
    "escape": Key.ESCAPE,
    "esc": Key.ESCAPE,
    "space": Key.SPACE,
    "backspace": Key.BSPACE,
    "delete": Key.DELETE,
    "left": Key.LEFT,
    "right": Key.RIGHT,
    "up": Key.UP,
    "down": Key.DOWN,
    "home": Key.HOME,
    "end": Key.END,
    "pageup": Key.PGUP,
    "pagedown": Key.PGDN,
}

_MODIFIERS = {
    "ctrl": "C",
    "control": "C",
    "alt": "M",
    "meta": "M",
}


def ctrl(char: str) -> str:
    return f"C-{char}"


def meta(char: str) -> str:
    return f"M-{char}"


def normalize_key(token: str) -> str:
    """Translate ``ctrl+a`` / ``alt+f`` / ``shift+tab`` style chords to tmux names.

    Plain tokens (literal text, tmux key names, ``C-a`` chords) pass through
    unchanged so typed text is never reinterpreted as a key.
    """
    if not isinstance(token, str):
        raise TypeError(f"key token must be a string, got {type(token).__name__}")
    if token == "":
        raise ValueError("key token must not be empty")
    if "+" not in token:
        return token
    head, _, tail = token.rpartition("+")
    mods = [part.lower() for part in head.split("+")]
    if not tail:
        return token
    if mods == ["shift"] and tail.lower() == "tab":
        return Key.BTAB
    if not all(mod in _MODIFIERS for mod in mods):
        return token
    base = _NAMED_ALIASES.get(tail.lower(), tail)
    prefix = "".join(f"{_MODIFIERS[mod]}-" for mod in mods)
    return f"{prefix}{base}"


def normalize_keys(tokens: Iterable[str]) -> List[str]:
    return [normalize_key(token) for token in tokens]
