"""Engine configuration."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, FrozenSet, Optional

from vimdoc_engine.modes.controller import EditorMode
from vimdoc_engine.runtime.telemetry import env, env_flag


@dataclass(frozen=True)
class EngineConfig:
    """Immutable settings an :class:`~vimdoc_engine.engine.Engine` is built from."""

    initial_text: str = ""
    key_buffer_timeout_ms: int = 1000
    enabled_modes: FrozenSet[EditorMode] = field(
        default_factory=lambda: frozenset(EditorMode)
    )
    coalesce_insert: bool = True
    history_limit: Optional[int] = None
    search_ignore_case: bool = False

    def __post_init__(self) -> None:
        if self.key_buffer_timeout_ms <= 0:
            raise ValueError("key_buffer_timeout_ms must be positive")
        if self.history_limit is not None and self.history_limit <= 0:
            raise ValueError("history_limit must be positive when set")
        modes = frozenset(EditorMode(m) for m in self.enabled_modes)
        if EditorMode.NORMAL not in modes:
            raise ValueError("enabled_modes must include normal")
        object.__setattr__(self, "enabled_modes", modes)

    @classmethod
    def from_env(cls, **overrides: Any) -> "EngineConfig":
        """Build a config from ``VIMDOC_*`` variables; keyword overrides win."""

        values: dict[str, Any] = {}
        timeout = env("KEY_TIMEOUT_MS")
        if timeout:
            values["key_buffer_timeout_ms"] = int(timeout)
        modes = env("ENABLED_MODES")
        if modes:
            values["enabled_modes"] = frozenset(
                EditorMode(name.strip().lower()) for name in modes.split(",") if name.strip()
            )
        values["coalesce_insert"] = env_flag("COALESCE_INSERT", True)
        limit = env("HISTORY_LIMIT")
        if limit:
            values["history_limit"] = int(limit)
        values["search_ignore_case"] = env_flag("IGNORE_CASE", False)

        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise TypeError(f"Unknown config fields: {sorted(unknown)}")
        values.update(overrides)
        return cls(**values)


__all__ = ["EngineConfig"]
