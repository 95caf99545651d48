"""Telemetry for the editing engine, built on telelog.

Engine modules use four entry points: ``configure`` installs a telelog
config or named preset, ``get_logger`` returns a cached logger,
``record_event`` writes one structured ``event::<name>`` line, and ``span``
profiles a block while attaching its metadata as logger context.

Without an explicit configuration the settings come from ``VIMDOC_*``
environment variables (``LOG_LEVEL``, ``LOG_CONSOLE``, ``LOG_FILE``,
``LOG_JSON``, ``LOG_BUFFERED``, ``PROFILE``).
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterator, MutableMapping, Optional, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "VIMDOC_"
DEFAULT_LOGGER_NAME = os.getenv(f"{ENV_PREFIX}LOGGER", "vimdoc_engine")

# Settings are keyed by the telelog ``Config.with_<key>`` builder they feed.
PRESETS: Dict[str, Dict[str, Any]] = {
    "development": {
        "min_level": "DEBUG",
        "console_output": True,
        "colored_output": True,
        "json_format": False,
    },
    "production": {
        "min_level": "WARNING",
        "console_output": False,
        "file_output": "vimdoc.log",
        "buffering": True,
    },
    "performance": {
        "min_level": "DEBUG",
        "console_output": False,
        "json_format": True,
        "buffering": True,
        "file_output": "vimdoc-performance.log",
    },
}

_loggers: MutableMapping[str, Any] = {}
_config: Optional[Any] = None


def env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def env_flag(name: str, default: bool) -> bool:
    raw = env(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_settings() -> Dict[str, Any]:
    # The Textual host owns the terminal, so console output is opt-in.
    console = env_flag("LOG_CONSOLE", False)
    settings: Dict[str, Any] = {
        "min_level": (env("LOG_LEVEL") or "WARNING").upper(),
        "console_output": console,
        "profiling": env_flag("PROFILE", True),
    }
    if console:
        settings["colored_output"] = not env_flag("NO_COLOR", False)
    if env_flag("LOG_JSON", False):
        settings["json_format"] = True
    if env("LOG_FILE"):
        settings["file_output"] = env("LOG_FILE")
    if env_flag("LOG_BUFFERED", False):
        settings["buffering"] = True
        settings["buffer_size"] = int(env("LOG_BUFFER_SIZE") or "2048")
    return settings


def build_config(settings: Dict[str, Any]) -> Any:
    """Translate a settings mapping into a ``telelog.Config``."""

    config = tl.Config()
    for key, value in settings.items():
        builder = getattr(config, f"with_{key}", None)
        if builder is None:
            raise ValueError(f"Unknown telemetry setting '{key}'")
        builder(value)
    return config


def preset_config(preset: str) -> Any:
    try:
        settings = dict(PRESETS[preset.lower()])
    except KeyError as exc:
        raise ValueError(f"Unknown telemetry preset '{preset}'") from exc
    if "file_output" in settings:
        settings["file_output"] = env("LOG_FILE") or settings["file_output"]
    settings.setdefault("profiling", True)
    return build_config(settings)


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Install a telelog config: explicit, from a preset, or from the env.

    Cached loggers are dropped so the next ``get_logger`` call picks up the
    new settings.
    """

    global _config
    if config is not None and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")
    if preset:
        config = preset_config(preset)
    _config = config if config is not None else build_config(_env_settings())
    _loggers.clear()


def get_logger(name: Optional[str] = None) -> Any:
    global _config
    if _config is None:
        _config = build_config(_env_settings())
    logger_name = name or DEFAULT_LOGGER_NAME
    logger = _loggers.get(logger_name)
    if logger is None:
        logger = _loggers[logger_name] = tl.Logger.with_config(logger_name, _config)
    return logger


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple, set, frozenset)):
        return repr(value)
    return str(value)


def _emit(logger: Any, level: str, message: str, payload: Dict[str, Any]) -> None:
    name = str(level).lower()
    structured: Optional[Callable[..., None]] = getattr(logger, f"{name}_with", None)
    if structured is not None:
        structured(message, [(str(k), _stringify(v)) for k, v in payload.items()])
        return
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {payload}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    payload = {"event": name, **(data or {})}
    _emit(get_logger(logger_name), level, f"event::{name}", payload)


@dataclass
class SpanHandle:
    """Yielded by ``span``; collects metadata reported with the outcome."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _stringify(value)

    def fail(self, reason: str) -> None:
        self._report("error", "span::fail", {"reason": reason})

    def _report(self, level: str, message: str, extra: Dict[str, Any]) -> None:
        payload: Dict[str, Any] = {"span": self.span_name, **self.metadata}
        if self.component_name:
            payload["component"] = self.component_name
        payload.update(extra)
        _emit(self.logger, level, message, payload)


@contextmanager
def _bound_context(logger: Any, values: Dict[str, str]) -> Iterator[None]:
    for key, value in values.items():
        logger.add_context(key, value)
    try:
        yield
    finally:
        for key in values:
            logger.remove_context(key)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block, optionally tracking it as a telelog component.

    ``component=True`` names the component after the span. Exceptions are
    reported through ``SpanHandle.fail`` and re-raised.
    """

    logger = get_logger(logger_name)
    component_name = name if component is True else (component or None)
    context = {key: _stringify(value) for key, value in (metadata or {}).items()}
    handle = SpanHandle(
        logger=logger,
        span_name=name,
        component_name=component_name,
        metadata=dict(context),
    )
    with ExitStack() as stack:
        stack.enter_context(_bound_context(logger, context))
        if component_name:
            stack.enter_context(logger.track_component(component_name))
        stack.enter_context(logger.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise


__all__ = [
    "PRESETS",
    "SpanHandle",
    "build_config",
    "configure",
    "env",
    "env_flag",
    "get_logger",
    "preset_config",
    "record_event",
    "span",
]
