"""Configuration loading.

Settings come from an optional YAML/JSON file and are then overridden by
`XCUI_*` environment variables. The file is validated against a JSON schema
and every problem is reported at once.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from jsonschema import Draft202012Validator

from xcui_commands.errors import ConfigError

DEFAULT_WDA_URL = "http://127.0.0.1:8100"

CONFIG_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "wda_url": {"type": "string", "minLength": 1},
        "session_id": {"type": ["string", "null"]},
        "udid": {"type": ["string", "null"]},
        "real_device": {"type": "boolean"},
        "command_timeout_s": {"type": "number", "exclusiveMinimum": 0},
        "log_level": {
            "type": "string",
            "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        },
    },
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class CommandsConfig:
    wda_url: str = DEFAULT_WDA_URL
    session_id: Optional[str] = None
    udid: Optional[str] = None
    real_device: bool = False
    command_timeout_s: float = 60.0
    log_level: str = "INFO"


def load_config_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(path)

    if path.suffix.lower() in {".yaml", ".yml"}:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    elif path.suffix.lower() == ".json":
        data = json.loads(path.read_text(encoding="utf-8"))
    else:
        raise ConfigError(f"Unsupported config file extension: {path}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Top-level config must be an object: {path}")
    return data


def validate_config(data: Mapping[str, Any], *, where: str) -> None:
    validator = Draft202012Validator(CONFIG_SCHEMA)
    errors = sorted(validator.iter_errors(dict(data)), key=lambda e: list(e.path))
    if errors:
        msgs = []
        for e in errors:
            loc = "/".join([str(p) for p in e.path])
            msgs.append(f"- {where}:{loc}: {e.message}")
        raise ConfigError("\n".join(msgs))


def _env_bool(name: str, raw: str) -> bool:
    s = raw.strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean (got {raw!r})")


def _env_float(name: str, raw: str) -> float:
    try:
        value = float(raw.strip())
    except ValueError as e:
        raise ConfigError(f"{name} must be a number (got {raw!r})") from e
    if value <= 0:
        raise ConfigError(f"{name} must be positive (got {raw!r})")
    return value


def apply_env_overrides(cfg: CommandsConfig, env: Mapping[str, str]) -> CommandsConfig:
    overrides: Dict[str, Any] = {}
    for key, field_name in (
        ("XCUI_WDA_URL", "wda_url"),
        ("XCUI_SESSION_ID", "session_id"),
        ("XCUI_UDID", "udid"),
    ):
        raw = env.get(key)
        if isinstance(raw, str) and raw.strip():
            overrides[field_name] = raw.strip()

    raw = env.get("XCUI_REAL_DEVICE")
    if raw:
        overrides["real_device"] = _env_bool("XCUI_REAL_DEVICE", raw)
    raw = env.get("XCUI_COMMAND_TIMEOUT_S")
    if raw:
        overrides["command_timeout_s"] = _env_float("XCUI_COMMAND_TIMEOUT_S", raw)
    raw = env.get("XCUI_LOG_LEVEL")
    if raw:
        level = raw.strip().upper()
        if level not in CONFIG_SCHEMA["properties"]["log_level"]["enum"]:
            raise ConfigError(f"XCUI_LOG_LEVEL is not a log level (got {raw!r})")
        overrides["log_level"] = level
    return replace(cfg, **overrides)


def load_config(
    path: Optional[Path] = None, *, env: Optional[Mapping[str, str]] = None
) -> CommandsConfig:
    cfg = CommandsConfig()
    if path is not None:
        data = load_config_file(path)
        validate_config(data, where=str(path))
        cfg = replace(cfg, **data)
    return apply_env_overrides(cfg, os.environ if env is None else env)
