"""Unified settings — init kwargs, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs   — passed by the caller
  2. Env vars      — ``PRIMED_*`` prefix
  3. TOML file     — ``primed.toml`` discovered via walk-up
  4. Code defaults — baked into :class:`PrimedSettings`

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the walk-up discovery from :mod:`primed.config.discovery`.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from primed.config.discovery import find_config, read_config
from primed.domain.options import CyclePolicy


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``primed.toml`` file."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = read_config(toml_path)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, False

    def __call__(self) -> dict[str, Any]:
        """Return the TOML keys that name settings fields."""
        return {k: v for k, v in self._data.items() if k in self.settings_cls.model_fields}


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class PrimedSettings(BaseSettings):
    """Process settings for the hydration engine.

    Attributes:
        config_path: The ``primed.toml`` that was read, if any.
        cycle_policy: Which trace entries break a required model field cycle.
        warn_on_cycle: Log cycle skips at WARNING instead of DEBUG.
        seal_registry: Seal type and field registries in ``initialize()``.
        load_plugins: Load ``primed.models`` entry points in ``initialize()``.
        configure_logging: Route the ``primed`` logger through structlog in
            ``initialize()``.
        verbose: DEBUG output for the ``primed`` logger.
        log_json: JSON lines instead of the console renderer.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "PRIMED_",
    }

    config_path: Path | None = None

    cycle_policy: CyclePolicy = CyclePolicy.ACTIVE_TRACE
    warn_on_cycle: bool = False

    seal_registry: bool = False
    load_plugins: bool = True

    configure_logging: bool = True
    verbose: bool = False
    log_json: bool = False

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def load(
        cls,
        *,
        config_path: str | Path | None = None,
        start: Path | None = None,
        **overrides: Any,
    ) -> PrimedSettings:
        """Discover ``primed.toml`` (or use *config_path*) and build settings."""
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(start)

        _tls.toml_path = toml_path
        try:
            return cls(config_path=toml_path, **overrides)
        finally:
            _tls.toml_path = None


_settings: PrimedSettings | None = None
_settings_lock = threading.Lock()


def get_settings() -> PrimedSettings:
    """Process-wide settings, loaded once on first use."""
    global _settings
    if _settings is None:
        with _settings_lock:
            if _settings is None:
                _settings = PrimedSettings.load()
    return _settings


def set_settings(settings: PrimedSettings) -> None:
    """Replace the process-wide settings."""
    global _settings
    with _settings_lock:
        _settings = settings


def reset_settings() -> None:
    """Drop the cached settings so the next ``get_settings()`` reloads."""
    global _settings
    with _settings_lock:
        _settings = None
