"""A tmux window driving an interactive shell for fzf scenarios.

The window's redraws are only observable as the cumulative rendered screen,
so every wait here is the same loop: capture, test a predicate, sleep a fixed
interval, give up after a timeout with the last screen attached to the error.
"""

from __future__ import annotations

import logging
import os
import shlex
import time
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .config import HarnessConfig
from .errors import HarnessError, WaitExceeded, WindowNotFound
from .keys import Key, normalize_keys
from .temp_channel import TempChannel
from .tmux import TmuxClient

logger = logging.getLogger(__name__)

Predicate = Callable[[List[str]], bool]


def trim_capture(text: str, max_lines: int) -> List[str]:
    """Keep the first ``max_lines`` lines and drop trailing blank lines."""
    lines = text.splitlines()[: max(0, max_lines)]
    while lines and lines[-1] == "":
        lines.pop()
    return lines


def init_script(rcfile: str, prompt: str) -> str:
    """Startup file body: load the fzf key bindings if present, then pin the prompt.

    The prompt is assigned last so a system-wide bashrc read before this file
    cannot replace it.
    """
    quoted = shlex.quote(os.path.expanduser(rcfile))
    return "\n".join(
        [
            f"[ -f {quoted} ] && . {quoted}",
            f"PS1={shlex.quote(prompt)}",
            "PROMPT_COMMAND=",
            "",
        ]
    )


def write_init_file(shell: str, config: HarnessConfig) -> Path:
    path = Path(config.init_file_for(shell))
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(init_script(config.rcfile_for(shell), config.prompt), encoding="utf-8")
    return path


def shell_command(shell: str, config: HarnessConfig) -> str:
    """Command line for a window running ``shell`` with a bare, fixed prompt.

    bash gets ``--rcfile`` pointing at the file written by ``write_init_file``.
    """
    parts = ["env"]
    for name in config.unset_env:
        parts += ["-u", name]
    parts += [f"PS1={config.prompt}", "PROMPT_COMMAND="]
    if _is_bash(shell):
        parts += [shell, "--rcfile", config.init_file_for("bash")]
    else:
        parts.append(shell)
    return shlex.join(parts)


def _is_bash(shell: str) -> bool:
    return os.path.basename(shell) == "bash"


class Session:
    """One tmux window running an interactive shell.

    Creating the object opens the window; ``close`` (graceful) or ``kill``
    (forced) release it. ``send_keys`` and ``capture`` are only meaningful
    while the window is open.
    """

    def __init__(
        self,
        shell: Optional[str] = None,
        *,
        config: Optional[HarnessConfig] = None,
        tmux: Optional[TmuxClient] = None,
    ) -> None:
        self.config = config or HarnessConfig()
        self.shell = shell or self.config.shell
        self.tmux = tmux or TmuxClient(self.config.tmux_socket, self.config.tmux_binary)
        self.capture_channel = TempChannel(
            self.config.capture_path,
            self.config.read_timeout,
            interval=self.config.poll_interval,
        )

        if _is_bash(self.shell):
            write_init_file("bash", self.config)
        self.tmux.ensure_session(self.config.session_name, width=self.config.width, height=self.config.height)
        self.win = self.tmux.new_window(self.config.session_name, shell_command(self.shell, self.config))
        try:
            self.lines = self.tmux.pane_height(self.win)
        except Exception:
            self.kill()
            raise
        logger.info(f"opened window {self.win} ({self.shell}, {self.lines} lines)")

    @classmethod
    def new(cls, shell: str = "bash", **kwargs) -> "Session":
        return cls(shell, **kwargs)

    def __repr__(self) -> str:
        return f"Session(win={self.win!r}, shell={self.shell!r}, lines={self.lines})"

    def __enter__(self) -> "Session":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.kill()

    @property
    def closed(self) -> bool:
        return self.win not in self.tmux.list_windows()

    def send_keys(self, *tokens: str) -> None:
        keys = normalize_keys(tokens)
        if not keys:
            return
        logger.debug(f"send-keys {self.win}: {keys!r}")
        self.tmux.send_keys(self.win, keys)

    def capture(self) -> List[str]:
        result = self.tmux.capture_to_file(self.win, self.capture_channel.path)
        if result.returncode != 0:
            raise WindowNotFound(self.win, result.stderr)
        return trim_capture(self.capture_channel.read_once(), self.lines)

    def wait(
        self,
        condition: Callable[[], bool],
        timeout: Optional[float] = None,
        *,
        description: str = "condition",
        screen: Optional[Callable[[], Sequence[str]]] = None,
    ) -> None:
        """Poll ``condition`` until it holds; raise WaitExceeded after ``timeout``."""
        limit = self.config.default_timeout if timeout is None else timeout
        started = time.monotonic()
        while not condition():
            if time.monotonic() - started > limit:
                lines = list(screen()) if screen is not None else []
                logger.debug(f"wait for {description} on {self.win} timed out after {limit}s")
                raise WaitExceeded(limit, lines, description)
            time.sleep(self.config.poll_interval)

    def until(self, predicate: Predicate, timeout: Optional[float] = None) -> List[str]:
        """Capture until ``predicate(lines)`` is true and return those lines.

        A predicate indexing past the end of a short screen (IndexError) counts
        as not yet satisfied.
        """
        last: List[str] = []

        def check() -> bool:
            nonlocal last
            last = self.capture()
            try:
                return bool(predicate(last))
            except IndexError:
                return False

        self.wait(
            check,
            timeout,
            description=getattr(predicate, "__name__", "predicate"),
            screen=lambda: last,
        )
        return last

    def close(self, timeout: Optional[float] = None) -> None:
        # SIGINT flushes pending tty input, so C-c must not share a write with "exit".
        self.send_keys("C-c")
        self.send_keys("C-u", "exit", Key.ENTER)
        self.wait(
            lambda: self.closed,
            timeout,
            description=f"window {self.win} to close",
            screen=self._last_screen,
        )
        logger.info(f"closed window {self.win}")

    def kill(self) -> None:
        try:
            code = self.tmux.kill_window(self.win)
        except OSError as exc:
            logger.debug(f"kill-window {self.win} failed: {exc}")
            return
        if code != 0:
            logger.debug(f"kill-window {self.win} exited {code}; window already gone")

    def _last_screen(self) -> List[str]:
        try:
            return self.capture()
        except HarnessError:
            return []
