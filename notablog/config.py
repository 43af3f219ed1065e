from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from .errors import ConfigError
from .lib import json as jsonlib

DEFAULT_CONFIG_NAME = "config.json"
DEFAULT_CONCURRENCY = 3
ENV_CONCURRENCY = "NOTABLOG_CONCURRENCY"

_ALLOWED_TOP_LEVEL_KEYS = {"url", "theme", "concurrency", "task_timeout"}


@dataclass(frozen=True)
class Config:
    url: str
    theme: str
    path: Path
    concurrency: int = DEFAULT_CONCURRENCY
    task_timeout: Optional[float] = None


def _ensure_keys(data: dict, *, allowed: Iterable[str], context: str) -> None:
    unknown = set(data.keys()) - set(allowed)
    if unknown:
        keys = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown {context} key(s): {keys}")


def _require_str(raw: dict, key: str) -> str:
    value = raw.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"Config '{key}' must be a non-empty string")
    return value.strip()


def _parse_concurrency(value: object) -> int:
    if isinstance(value, str):
        try:
            value = int(value)
        except ValueError:
            raise ConfigError(f"Invalid concurrency '{value}'") from None
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ConfigError(f"Config 'concurrency' must be a positive integer, got {value!r}")
    return value


def _parse_timeout(value: object) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ConfigError(f"Config 'task_timeout' must be a positive number or null, got {value!r}")
    return float(value)


def load_config(root: Path, *, name: str = DEFAULT_CONFIG_NAME) -> Config:
    config_path = root / name
    if not config_path.exists():
        raise ConfigError(f"Config not found: {config_path}")
    try:
        raw = jsonlib.loads(config_path.read_bytes())
    except jsonlib.JSONDecodeError as exc:
        raise ConfigError(f"Config {config_path} is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigError("Config payload must be a JSON object")
    _ensure_keys(raw, allowed=_ALLOWED_TOP_LEVEL_KEYS, context="config")

    concurrency = _parse_concurrency(raw.get("concurrency", DEFAULT_CONCURRENCY))
    env_concurrency = os.environ.get(ENV_CONCURRENCY)
    if env_concurrency:
        concurrency = _parse_concurrency(env_concurrency)

    return Config(
        url=_require_str(raw, "url"),
        theme=_require_str(raw, "theme"),
        path=config_path,
        concurrency=concurrency,
        task_timeout=_parse_timeout(raw.get("task_timeout")),
    )


__all__ = ["Config", "ConfigError", "DEFAULT_CONCURRENCY", "load_config"]
