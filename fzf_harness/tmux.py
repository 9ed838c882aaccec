"""Thin subprocess wrapper around the tmux commands the harness relies on.

Every call goes through ``tmux -L <socket>`` so harness windows live on their
own server and never mix with the user's interactive sessions.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .errors import TmuxCommandError

logger = logging.getLogger(__name__)


def tmux_base_args(socket_name: str = "", binary: str = "tmux") -> list[str]:
    socket_name = (socket_name or "").strip()
    if not socket_name:
        return [binary]
    return [binary, "-L", socket_name]


def escape_key_arg(key: str) -> str:
    """Protect a trailing ";" that tmux would otherwise read as a command separator.

    tmux turns a trailing ``\\;`` back into a literal ``;``.
    """
    if key.endswith(";"):
        return key[:-1] + "\\;"
    return key


class TmuxClient:
    def __init__(self, socket_name: str = "", binary: str = "tmux") -> None:
        self.socket_name = socket_name
        self.binary = binary

    def __repr__(self) -> str:
        return f"TmuxClient(socket_name={self.socket_name!r})"

    def run(self, args: Sequence[str]) -> subprocess.CompletedProcess[str]:
        argv = [*tmux_base_args(self.socket_name, self.binary), *args]
        logger.debug(f"tmux {' '.join(args)}")
        return subprocess.run(argv, capture_output=True, text=True, check=False)

    def _checked(self, args: Sequence[str]) -> str:
        result = self.run(args)
        if result.returncode != 0:
            raise TmuxCommandError(
                [*tmux_base_args(self.socket_name, self.binary), *args],
                result.returncode,
                result.stderr,
            )
        return result.stdout

    def has_session(self, name: str) -> bool:
        return self.run(["has-session", "-t", name]).returncode == 0

    def ensure_session(self, name: str, *, width: int = 80, height: int = 24) -> bool:
        """Create the detached hosting session unless it already exists.

        Returns True when a new session was created.
        """
        if self.has_session(name):
            return False
        self._checked(["new-session", "-d", "-s", name, "-x", str(width), "-y", str(height)])
        logger.info(f"created tmux session {name} ({width}x{height})")
        return True

    def new_window(self, session: str, command: str) -> str:
        out = self._checked(["new-window", "-d", "-P", "-F", "#{window_id}", "-t", f"{session}:", command])
        window_id = out.strip().splitlines()[0] if out.strip() else ""
        if not window_id:
            raise TmuxCommandError(["new-window", "-t", session], 0, "no window id returned")
        return window_id

    def list_windows(self, fmt: str = "#{window_id}") -> List[str]:
        result = self.run(["list-windows", "-a", "-F", fmt])
        if result.returncode != 0:
            # No server running means no windows.
            return []
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def send_keys(self, target: str, keys: Sequence[str]) -> int:
        return self.run(["send-keys", "-t", target, *(escape_key_arg(key) for key in keys)]).returncode

    def capture_to_file(self, target: str, path: str | Path) -> subprocess.CompletedProcess[str]:
        return self.run(["capture-pane", "-t", target, ";", "save-buffer", str(path)])

    def pane_height(self, target: str) -> int:
        raw = self._checked(["display-message", "-p", "-t", target, "#{pane_height}"]).strip()
        try:
            return int(raw)
        except ValueError:
            raise TmuxCommandError(["display-message", "-t", target], 0, f"unexpected pane height {raw!r}") from None

    def kill_window(self, target: str) -> int:
        return self.run(["kill-window", "-t", target]).returncode

    def list_sessions(self) -> List[Tuple[str, Optional[float]]]:
        result = self.run(["list-sessions", "-F", "#{session_name}\t#{session_created}"])
        if result.returncode != 0:
            return []
        sessions: List[Tuple[str, Optional[float]]] = []
        for line in result.stdout.splitlines():
            parts = line.split("\t")
            name = parts[0].strip()
            if not name:
                continue
            created: Optional[float] = None
            if len(parts) > 1:
                try:
                    created = float(parts[1].strip())
                except ValueError:
                    created = None
            sessions.append((name, created))
        return sessions

    def kill_session(self, name: str) -> int:
        return self.run(["kill-session", "-t", name]).returncode

    def kill_server(self) -> int:
        return self.run(["kill-server"]).returncode
