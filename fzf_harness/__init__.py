"""tmux-driven integration test harness for fzf.

This package drives fzf inside a dedicated tmux server, including:
- Session: window lifecycle, keystroke injection, screen capture and polling waits
- read_once / TempChannel: read-once-and-delete handoff for program output
- scenario helpers: fzf command lines with explicit environment, screen predicates
"""

from .config import HarnessConfig, load_config
from .errors import (
    HarnessError,
    TempChannelTimeout,
    Timeout,
    TmuxCommandError,
    WaitExceeded,
    WindowNotFound,
)
from .keys import Key, ctrl, meta, normalize_key
from .scenario import (
    fzf_command,
    has_line,
    line_contains,
    line_equals,
    prompt_ready,
    selected_item,
    shell_returned,
)
from .session import Session, trim_capture
from .temp_channel import TempChannel, read_once
from .tmux import TmuxClient

__all__ = [
    # Config
    "HarnessConfig",
    "load_config",
    # Errors
    "HarnessError",
    "TempChannelTimeout",
    "Timeout",
    "TmuxCommandError",
    "WaitExceeded",
    "WindowNotFound",
    # Keys
    "Key",
    "ctrl",
    "meta",
    "normalize_key",
    # Session & channel
    "Session",
    "trim_capture",
    "TempChannel",
    "read_once",
    "TmuxClient",
    # Scenarios
    "fzf_command",
    "has_line",
    "line_contains",
    "line_equals",
    "prompt_ready",
    "selected_item",
    "shell_returned",
]
