from __future__ import annotations

import dataclasses
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from jsonschema import Draft202012Validator


CONFIG_ENV = "FZF_HARNESS_CONFIG"

_ENV_OVERRIDES = {
    "FZF_HARNESS_TMUX_SOCKET": "tmux_socket",
    "FZF_HARNESS_SESSION": "session_name",
    "FZF_HARNESS_FZF": "fzf_binary",
}

_NAME_LIST = {
    "anyOf": [
        {"type": "string"},
        {"type": "array", "items": {"type": "string"}},
    ]
}

CONFIG_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "tmux_binary": {"type": "string", "minLength": 1},
        "tmux_socket": {"type": "string"},
        "session_name": {"type": "string", "minLength": 1},
        "session_prefix": {"type": "string"},
        "width": {"type": "integer", "minimum": 10},
        "height": {"type": "integer", "minimum": 5},
        "shell": {"type": "string", "minLength": 1},
        "prompt": {"type": "string", "minLength": 1},
        "rcfile": {"type": "string"},
        "init_file": {"type": "string", "minLength": 1},
        "unset_env": _NAME_LIST,
        "poll_interval": {"type": "number", "exclusiveMinimum": 0},
        "default_timeout": {"type": "number", "minimum": 0},
        "read_timeout": {"type": "number", "minimum": 0},
        "capture_path": {"type": "string", "minLength": 1},
        "output_path": {"type": "string", "minLength": 1},
        "fzf_binary": {"type": "string", "minLength": 1},
        "protected_sessions": _NAME_LIST,
    },
}


@dataclass(frozen=True)
class HarnessConfig:
    """Protocol constants and environment knobs shared by every session."""

    tmux_binary: str = "tmux"
    tmux_socket: str = "fzf_harness"
    session_name: str = "fzf_harness_test"
    session_prefix: str = "fzf_harness_"
    width: int = 80
    height: int = 24
    shell: str = "bash"
    prompt: str = "FIN"
    rcfile: str = "~/.fzf.{shell}"
    init_file: str = "/tmp/fzf-harness.{shell}rc"
    unset_env: Tuple[str, ...] = ("FZF_DEFAULT_OPTS", "FZF_DEFAULT_COMMAND")
    poll_interval: float = 0.1
    default_timeout: float = 1.0
    read_timeout: float = 5.0
    capture_path: str = "/tmp/fzf-test.txt"
    output_path: str = "/tmp/output"
    fzf_binary: str = "fzf"
    protected_sessions: Tuple[str, ...] = field(default_factory=tuple)

    def with_overrides(self, **overrides: Any) -> "HarnessConfig":
        return dataclasses.replace(self, **overrides)

    def rcfile_for(self, shell: str) -> str:
        return self.rcfile.format(shell=shell)

    def init_file_for(self, shell: str) -> str:
        return os.path.expanduser(self.init_file.format(shell=shell))


def _load_yaml(path: Union[str, Path]) -> Dict[str, Any]:
    import yaml  # lazy import

    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _names(value: Any) -> Tuple[str, ...]:
    if isinstance(value, str):
        return tuple(token.strip() for token in value.split(",") if token.strip())
    return tuple(str(item) for item in value)


def config_from_mapping(data: Dict[str, Any]) -> HarnessConfig:
    """Validate ``data`` against CONFIG_SCHEMA and build a HarnessConfig."""
    if not isinstance(data, dict):
        raise ValueError("harness config must be a mapping")
    errors = sorted(Draft202012Validator(CONFIG_SCHEMA).iter_errors(data), key=lambda e: list(e.path))
    if errors:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.path) or '<root>'}: {err.message}" for err in errors
        )
        raise ValueError(f"invalid harness config: {details}")

    values: Dict[str, Any] = {}
    for key, value in data.items():
        if key in {"unset_env", "protected_sessions"}:
            values[key] = _names(value)
        elif key in {"poll_interval", "default_timeout", "read_timeout"}:
            values[key] = float(value)
        else:
            values[key] = value
    return HarnessConfig(**values)


def load_config(path: Optional[Union[str, Path]] = None) -> HarnessConfig:
    """Load the harness config from YAML, then apply environment overrides.

    ``path`` falls back to ``$FZF_HARNESS_CONFIG``; without either the
    defaults are used.
    """
    source = path or os.environ.get(CONFIG_ENV) or ""
    data: Dict[str, Any] = {}
    if source:
        loaded = _load_yaml(Path(source).expanduser())
        if not isinstance(loaded, dict):
            raise ValueError(f"harness config must be a mapping: {source}")
        data = dict(loaded)
    for env_key, field_name in _ENV_OVERRIDES.items():
        value = (os.environ.get(env_key) or "").strip()
        if value:
            data[field_name] = value
    return config_from_mapping(data)
