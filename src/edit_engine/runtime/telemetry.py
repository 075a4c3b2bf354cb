"""Logging, events and profiling spans for the engine, backed by telelog.

Engine code only calls four things from here: ``get_logger``,
``record_event``, the ``span`` context manager and the ``traced``
decorator. Hosts call ``configure`` once at start-up; otherwise the
configuration is built lazily from ``EngineConfig.from_env()`` the first
time a logger is requested.
"""

from __future__ import annotations

from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field, replace
from functools import wraps
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, TypeVar, cast

import telelog  # type: ignore[import]

from .config import EngineConfig, env

tl = cast(Any, telelog)

ROOT_LOGGER = env("LOGGER") or "edit_engine"

F = TypeVar("F", bound=Callable[..., Any])

# Preset name -> EngineConfig overrides.
PRESETS: Dict[str, Dict[str, Any]] = {
    "development": {"log_level": "DEBUG", "console": True, "color": True, "log_json": False},
    "production": {
        "log_level": "INFO",
        "console": False,
        "log_buffered": True,
        "log_file": "edit_engine.log",
    },
    "performance": {
        "log_level": "DEBUG",
        "console": False,
        "log_buffered": True,
        "log_json": True,
        "log_file": "edit_engine-performance.log",
    },
}

_loggers: Dict[str, Any] = {}
_active: Optional[Any] = None


def build_config(settings: EngineConfig) -> Any:
    """Translate engine settings into a ``telelog.Config`` with profiling on."""

    config = tl.Config()
    config.with_min_level(settings.log_level)
    config.with_console_output(settings.console)
    if settings.console:
        config.with_colored_output(settings.color)
    config.with_json_format(settings.log_json)
    if settings.log_file:
        config.with_file_output(settings.log_file)
    if settings.log_buffered:
        config.with_buffering(True)
        config.with_buffer_size(settings.log_buffer_size)
    config.with_profiling(True)
    return config


def preset_settings(preset: str, base: EngineConfig) -> EngineConfig:
    try:
        overrides = dict(PRESETS[preset.lower()])
    except KeyError:
        raise ValueError(f"Unknown preset '{preset}'.") from None
    if base.log_file:
        overrides.pop("log_file", None)
    return replace(base, **overrides)


def configure(
    *,
    config: Optional[Any] = None,
    preset: Optional[str] = None,
    settings: Optional[EngineConfig] = None,
) -> None:
    """Adopt a telelog config, a named preset, or engine settings.

    Loggers handed out earlier keep their old configuration, so hosts
    should call this before the first editor is created.
    """

    global _active
    if config is not None and preset is not None:
        raise ValueError("Provide either `config` or `preset`, not both.")
    if config is None:
        resolved = settings or EngineConfig.from_env()
        if preset is not None:
            resolved = preset_settings(preset, resolved)
        config = build_config(resolved)
    _active = config
    _loggers.clear()


def get_logger(name: Optional[str] = None) -> Any:
    """Cached ``telelog.Logger`` for ``name`` (defaults to the root engine logger)."""

    name = name or ROOT_LOGGER
    logger = _loggers.get(name)
    if logger is None:
        if _active is None:
            configure()
        logger = _loggers[name] = tl.Logger.with_config(name, _active)
    return logger


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple, set)):
        return repr(value)
    return str(value)


def _log(logger: Any, level: str, message: str, fields: Mapping[str, Any]) -> None:
    level = level.lower()
    structured = getattr(logger, f"{level}_with", None)
    if structured is not None:
        structured(message, [(str(k), _text(v)) for k, v in fields.items()])
        return
    plain = getattr(logger, level, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {dict(fields)}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Mapping[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Log ``event::<name>`` with ``data`` as structured fields."""

    _log(get_logger(logger_name), level, f"event::{name}", {"event": name, **(data or {})})


@dataclass
class SpanHandle:
    """Lets the body of a ``span`` attach results to the span's log lines."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def fail(self, reason: str) -> None:
        fields: Dict[str, Any] = {"span": self.span_name, **self.metadata}
        if self.component_name:
            fields["component"] = self.component_name
        fields["reason"] = reason
        _log(self.logger, "error", "span::fail", fields)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Mapping[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile the enclosed block with ``logger.profile(name)``.

    ``component=True`` also tracks the block as a component named ``name``;
    a string names the component explicitly. ``metadata`` is pushed as
    logger context for the duration of the block. An exception escaping
    the block is logged as ``span::fail`` and re-raised.
    """

    logger = get_logger(logger_name)
    component_name = name if component is True else component or None
    context = {key: _text(value) for key, value in (metadata or {}).items()}
    handle = SpanHandle(
        logger=logger,
        span_name=name,
        component_name=component_name,
        metadata=dict(context),
    )

    with ExitStack() as stack:
        for key, value in context.items():
            logger.add_context(key, value)
            stack.callback(logger.remove_context, key)
        if component_name:
            stack.enter_context(logger.track_component(component_name))
        stack.enter_context(logger.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise


def traced(
    name: str, *, component: Optional[str | bool] = None, logger_name: Optional[str] = None
) -> Callable[[F], F]:
    """Decorator form of ``span`` for whole methods."""

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            with span(name, component=component, logger_name=logger_name):
                return func(*args, **kwargs)

        return cast(F, wrapper)

    return decorator


__all__ = [
    "PRESETS",
    "ROOT_LOGGER",
    "SpanHandle",
    "build_config",
    "configure",
    "get_logger",
    "preset_settings",
    "record_event",
    "span",
    "traced",
]
