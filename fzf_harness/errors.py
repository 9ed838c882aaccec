from __future__ import annotations

from pathlib import Path
from typing import Sequence


class HarnessError(RuntimeError):
    """Base class for every error raised by the harness."""


class TmuxCommandError(HarnessError):
    """Raised when a tmux command that must succeed exits non-zero."""

    def __init__(self, argv: Sequence[str], returncode: int, stderr: str = "") -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = (stderr or "").strip()
        detail = f": {self.stderr}" if self.stderr else ""
        super().__init__(f"tmux command failed (exit {returncode}): {' '.join(self.argv)}{detail}")


class TempChannelTimeout(HarnessError):
    """Raised when a temp record never became readable within the wait bound."""

    def __init__(self, path: str | Path, waited: float) -> None:
        self.path = Path(path)
        self.waited = waited
        super().__init__(f"failed to read {self.path} within {waited:.2f}s")


class WindowNotFound(HarnessError):
    """Raised when tmux can no longer capture the window backing a session."""

    def __init__(self, window_id: str, stderr: str = "") -> None:
        self.window_id = window_id
        self.stderr = (stderr or "").strip()
        detail = f" ({self.stderr})" if self.stderr else ""
        super().__init__(f"window not found: {window_id}{detail}")


class WaitExceeded(HarnessError):
    """Raised when a polled condition does not hold before its timeout.

    The last observed screen is kept on the exception so callers (or the
    pytest report hook in ``tests/conftest.py``) can decide how to show it.
    """

    RULE = "=" * 10

    def __init__(self, timeout: float, lines: Sequence[str] | None = None, description: str = "condition") -> None:
        self.timeout = timeout
        self.lines = list(lines or [])
        self.description = description
        super().__init__(f"timeout: {description} not met within {timeout}s")

    def format_screen(self) -> str:
        body = [f"{idx:>2}: {line}" for idx, line in enumerate(self.lines)]
        return "\n".join([self.RULE, *body, self.RULE])


# Name used by scenario code for the read-once failure.
Timeout = TempChannelTimeout
