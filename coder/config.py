from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any

CONFIG_DIR = Path("~/.coder").expanduser()
CONFIG_FILE = CONFIG_DIR / "config.toml"

DEFAULTS: dict[str, Any] = {
    "llm": {
        "connector": "anthropic",
        "model": "claude-3-7-sonnet-latest",
        "max_tokens": 1024,
    },
    "logging": {
        "level": "WARNING",
    },
}


def load(path: Path | None = None) -> dict[str, Any]:
    """Load config from ~/.coder/config.toml, merging with defaults."""
    path = path or CONFIG_FILE
    config = _deep_merge({}, DEFAULTS)
    if path.exists():
        with open(path, "rb") as f:
            on_disk = tomllib.load(f)
        config = _deep_merge(config, on_disk)
    return config


def save(config: dict[str, Any], path: Path | None = None) -> None:
    """Write config back as TOML: one [table] per section, scalar values only."""
    path = path or CONFIG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dumps(config))


def _deep_merge(base: dict, override: dict) -> dict:
    result = dict(base)
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def dumps(config: dict[str, Any]) -> str:
    tables = []
    for table, values in config.items():
        if not isinstance(values, dict):
            raise ValueError(f"top-level key '{table}' must be a table")
        rows = [f"{key} = {_scalar(value)}" for key, value in values.items()]
        tables.append("\n".join([f"[{table}]", *rows]))
    return "\n\n".join(tables) + "\n"


def _scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        # JSON string escapes are valid TOML basic-string escapes
        return json.dumps(value, ensure_ascii=False)
    raise ValueError(f"unsupported config value {value!r}")
