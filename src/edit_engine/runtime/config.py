"""Environment-driven settings for the engine and its hosts."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

ENV_PREFIX = "EDIT_ENGINE_"

DEFAULT_IDLE_BATCH_MS = 500
DEFAULT_CLOCK_POLL_MS = 100
DEFAULT_DOCUMENT_NAME = "untitled.txt"


def env(
    name: str, default: Optional[str] = None, *, source: Mapping[str, str] | None = None
) -> Optional[str]:
    values = os.environ if source is None else source
    return values.get(f"{ENV_PREFIX}{name}", default)


def env_flag(name: str, default: bool, *, source: Mapping[str, str] | None = None) -> bool:
    raw = env(name, source=source)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def env_int(name: str, fallback: int, *, source: Mapping[str, str] | None = None) -> int:
    value = env(name, source=source)
    if value is None:
        return fallback
    try:
        return int(value)
    except ValueError:
        return fallback


@dataclass(frozen=True, slots=True)
class EngineConfig:
    idle_batch_ms: int = DEFAULT_IDLE_BATCH_MS
    clock_poll_ms: int = DEFAULT_CLOCK_POLL_MS
    default_name: str = DEFAULT_DOCUMENT_NAME
    log_level: str = "INFO"
    log_file: str = ""
    log_json: bool = False
    log_buffered: bool = False
    log_buffer_size: int = 2048
    console: bool = True
    color: bool = True

    def __post_init__(self) -> None:
        if self.idle_batch_ms <= 0:
            raise ValueError("idle_batch_ms must be positive")
        if self.clock_poll_ms <= 0:
            raise ValueError("clock_poll_ms must be positive")

    @classmethod
    def from_env(cls, source: Mapping[str, str] | None = None) -> "EngineConfig":
        idle = env_int("IDLE_BATCH_MS", DEFAULT_IDLE_BATCH_MS, source=source)
        poll = env_int("CLOCK_POLL_MS", DEFAULT_CLOCK_POLL_MS, source=source)
        return cls(
            idle_batch_ms=idle if idle > 0 else DEFAULT_IDLE_BATCH_MS,
            clock_poll_ms=poll if poll > 0 else DEFAULT_CLOCK_POLL_MS,
            default_name=env("DEFAULT_NAME", source=source) or DEFAULT_DOCUMENT_NAME,
            log_level=(env("LOG_LEVEL", source=source) or "INFO").upper(),
            log_file=env("LOG_FILE", source=source) or "",
            log_json=env_flag("LOG_JSON", False, source=source),
            log_buffered=env_flag("LOG_BUFFERED", False, source=source),
            log_buffer_size=env_int("LOG_BUFFER_SIZE", 2048, source=source),
            console=not env_flag("DISABLE_CONSOLE", False, source=source),
            color=not env_flag("NO_COLOR", False, source=source),
        )


__all__ = [
    "DEFAULT_CLOCK_POLL_MS",
    "DEFAULT_DOCUMENT_NAME",
    "DEFAULT_IDLE_BATCH_MS",
    "ENV_PREFIX",
    "EngineConfig",
    "env",
    "env_flag",
    "env_int",
]
