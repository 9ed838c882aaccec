#!/usr/bin/env python3
"""
Preflight checks before running the fzf tmux scenarios.

Checks:
- Environment basics (tmux and fzf on PATH)
- Target safety (hosting session name matches the cleanup prefix guard)
- Temp record paths are writable and not holding stale output
"""

from __future__ import annotations

import argparse
import json
import os
import shutil
from pathlib import Path
from typing import Any

from fzf_harness.config import HarnessConfig, load_config


def check_cmd(name: str) -> bool:
    return shutil.which(name) is not None


def check_temp_path(raw: str) -> tuple[list[str], list[str]]:
    errors: list[str] = []
    warnings: list[str] = []
    path = Path(raw)
    if not path.parent.is_dir():
        errors.append(f"temp directory does not exist: {path.parent}")
    elif not os.access(path.parent, os.W_OK):
        errors.append(f"temp directory is not writable: {path.parent}")
    if path.exists():
        warnings.append(f"stale temp record present: {path}")
    return errors, warnings


def run_checks(config: HarnessConfig) -> dict[str, Any]:
    output: dict[str, Any] = {
        "socket": config.tmux_socket,
        "session": config.session_name,
        "ok": True,
        "errors": [],
        "warnings": [],
    }

    for cmd in (config.tmux_binary, config.fzf_binary):
        if not check_cmd(cmd):
            output["ok"] = False
            output["errors"].append(f"required command not found: {cmd}")

    if config.session_prefix and not config.session_name.startswith(config.session_prefix):
        output["ok"] = False
        output["errors"].append(
            f"session '{config.session_name}' does not match required prefix '{config.session_prefix}'"
        )
    if config.session_name in set(config.protected_sessions):
        output["ok"] = False
        output["errors"].append(f"session '{config.session_name}' is protected")

    for raw in (config.capture_path, config.output_path):
        errors, warnings = check_temp_path(raw)
        if errors:
            output["ok"] = False
        output["errors"].extend(errors)
        output["warnings"].extend(warnings)

    rcfile = Path(os.path.expanduser(config.rcfile_for(config.shell)))
    if config.shell == "bash" and not rcfile.exists():
        output["warnings"].append(f"rc file not found: {rcfile}")
    return output


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Validate environment readiness for fzf tmux scenarios.")
    parser.add_argument("--config", default="", help="optional harness YAML config")
    parser.add_argument("--strict", action="store_true", help="treat warnings as errors")
    args = parser.parse_args(argv)

    output = run_checks(load_config(args.config or None))
    if args.strict and output["warnings"]:
        output["ok"] = False
        output["errors"].append(f"strict mode: warnings present ({len(output['warnings'])})")

    print(json.dumps(output, indent=2))
    raise SystemExit(0 if output["ok"] else 2)


if __name__ == "__main__":
    main()
