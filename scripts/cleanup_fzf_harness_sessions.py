#!/usr/bin/env python3
"""
Delete stale fzf_harness_* tmux sessions left behind by interrupted test runs.
"""

from __future__ import annotations

import argparse
import json
import time
from typing import Any

from fzf_harness.config import load_config
from fzf_harness.tmux import TmuxClient


def find_stale_sessions(
    sessions: list[tuple[str, float | None]],
    *,
    prefix: str,
    older_than_seconds: float,
    protected: set[str],
    now: float,
) -> list[dict[str, Any]]:
    candidates: list[dict[str, Any]] = []
    for name, created in sessions:
        if not name.startswith(prefix):
            continue
        if name in protected:
            continue
        if created is None:
            continue
        age_seconds = now - created
        if age_seconds >= older_than_seconds:
            candidates.append({"session": name, "age_minutes": round(age_seconds / 60.0, 2)})
    return candidates


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Clean stale fzf harness tmux sessions.")
    parser.add_argument("--config", default="", help="optional harness YAML config")
    parser.add_argument("--socket", default=None, help="tmux socket name (default: from config)")
    parser.add_argument("--prefix", default=None, help="session prefix to match (default: from config)")
    parser.add_argument("--older-than-minutes", type=float, default=60.0, help="age threshold in minutes")
    parser.add_argument("--dry-run", action="store_true", help="list sessions without deleting")
    parser.add_argument("--protected-sessions", default="", help="comma-separated session names never deleted")
    return parser


def main(argv: list[str] | None = None, *, client: TmuxClient | None = None) -> dict[str, Any]:
    args = build_parser().parse_args(argv)
    config = load_config(args.config or None)
    prefix = config.session_prefix if args.prefix is None else args.prefix
    socket_name = config.tmux_socket if args.socket is None else args.socket
    protected = set(config.protected_sessions)
    protected |= {token.strip() for token in args.protected_sessions.split(",") if token.strip()}
    tmux = client or TmuxClient(socket_name, config.tmux_binary)

    candidates = find_stale_sessions(
        tmux.list_sessions(),
        prefix=prefix,
        older_than_seconds=max(0.0, args.older_than_minutes * 60.0),
        protected=protected,
        now=time.time(),
    )

    deleted: list[str] = []
    if not args.dry_run:
        for row in candidates:
            name = str(row["session"])
            tmux.kill_session(name)
            deleted.append(name)

    summary = {
        "socket": socket_name,
        "prefix": prefix,
        "older_than_minutes": args.older_than_minutes,
        "dry_run": args.dry_run,
        "candidate_count": len(candidates),
        "candidates": candidates,
        "deleted_count": len(deleted),
        "deleted": deleted,
    }
    print(json.dumps(summary, indent=2))
    return summary


if __name__ == "__main__":
    main()
