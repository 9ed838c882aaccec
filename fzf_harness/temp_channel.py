"""Read-once-and-delete handoff for files written by the program under test.

The program writes its result asynchronously, so the only readiness signal is
a file that exists and is non-empty. Whatever happens while waiting, the file
is removed before returning so the next reader of the same path starts clean.
"""

from __future__ import annotations

import logging
import shlex
import time
from pathlib import Path
from typing import Optional, Union

from .errors import TempChannelTimeout

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.1
DEFAULT_MAX_WAIT = 5.0
_UNLINK_ATTEMPTS = 50

PathLike = Union[str, Path]


def _try_read(path: Path) -> Optional[str]:
    """Return the file content, or None while it is absent, empty or unreadable."""
    try:
        data = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug(f"temp record not ready: {path} ({type(exc).__name__})")
        return None
    return data or None


def _remove(path: Path) -> None:
    """Unlink ``path`` until it is gone, giving up after ``_UNLINK_ATTEMPTS`` tries.

    The path can survive a persistent failure; that case is logged as a warning
    and never raised.
    """
    attempts = 0
    while path.exists():
        if attempts >= _UNLINK_ATTEMPTS:
            logger.warning(f"temp record still present after {attempts} delete attempts: {path}")
            return
        attempts += 1
        try:
            path.unlink()
        except OSError as exc:
            logger.debug(f"delete failed for {path}: {exc}")
            time.sleep(0.01)


def read_once(path: PathLike, max_wait: float = DEFAULT_MAX_WAIT, *, interval: float = POLL_INTERVAL) -> str:
    """Wait for ``path`` to hold non-empty content, return it and delete the file.

    Raises:
        TempChannelTimeout: nothing readable appeared within ``max_wait`` seconds.
            The file is deleted on this path too.
    """
    target = Path(path)
    started = time.monotonic()
    try:
        data = _try_read(target)
        while data is None:
            waited = time.monotonic() - started
            if waited >= max_wait:
                raise TempChannelTimeout(target, waited)
            time.sleep(interval)
            data = _try_read(target)
        return data
    finally:
        _remove(target)


class TempChannel:
    """A well-known temp record path shared by the scenarios of a test run."""

    def __init__(self, path: PathLike, default_wait: float = DEFAULT_MAX_WAIT, *, interval: float = POLL_INTERVAL) -> None:
        self.path = Path(path)
        self.default_wait = default_wait
        self.interval = interval

    def __repr__(self) -> str:
        return f"TempChannel({str(self.path)!r})"

    def read_once(self, max_wait: Optional[float] = None) -> str:
        wait = self.default_wait if max_wait is None else max_wait
        return read_once(self.path, wait, interval=self.interval)

    def exists(self) -> bool:
        return self.path.exists()

    def drain(self) -> None:
        """Delete any leftover record without reading it."""
        _remove(self.path)

    def redirect(self) -> str:
        return f"> {shlex.quote(str(self.path))}"
