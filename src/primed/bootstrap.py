"""One-time initialization barrier.

Registration belongs to a single phase that completes before concurrent
hydration begins. ``initialize()`` closes that phase by loading plugin
models and, when configured, sealing the type registry and field store so
late registration fails loudly instead of racing with readers. It also
routes the ``primed`` logger through structlog unless
``configure_logging`` is off.
"""

from __future__ import annotations

import logging
import threading

from pydantic import BaseModel, Field

from primed.config.logging import configure_logging
from primed.config.settings import PrimedSettings, get_settings, set_settings
from primed.engine.hydrator import reset_hydrator
from primed.plugins.manager import PluginManager
from primed.registry.fields import FIELD_STORE, FieldMetadataStore
from primed.registry.types import TYPE_REGISTRY, TypeRegistry

logger = logging.getLogger(__name__)


class InitReport(BaseModel):
    """Outcome of the first ``initialize()`` call."""

    model_config = {"frozen": True}

    plugin_models: list[str] = Field(default_factory=list)
    registered_types: list[str] = Field(default_factory=list)
    sealed: bool = False


_lock = threading.Lock()
_report: InitReport | None = None


def initialize(
    settings: PrimedSettings | None = None,
    *,
    registry: TypeRegistry | None = None,
    fields: FieldMetadataStore | None = None,
) -> InitReport:
    """Run the initialization phase once; later calls return the first report."""
    global _report
    with _lock:
        if _report is not None:
            return _report

        if settings is not None:
            set_settings(settings)
            reset_hydrator()
        settings = get_settings()
        if settings.configure_logging:
            configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        registry = registry if registry is not None else TYPE_REGISTRY
        fields = fields if fields is not None else FIELD_STORE

        plugin_models: list[str] = []
        if settings.load_plugins:
            plugin_models = PluginManager(registry).discover_and_load()

        if settings.seal_registry:
            registry.seal()
            fields.seal()

        _report = InitReport(
            plugin_models=plugin_models,
            registered_types=registry.names(),
            sealed=settings.seal_registry,
        )
        logger.debug(
            "Initialized primed: %d types (%d from plugins), sealed=%s",
            len(_report.registered_types),
            len(plugin_models),
            _report.sealed,
        )
        return _report


def is_initialized() -> bool:
    return _report is not None


def _reset_for_tests() -> None:
    global _report
    with _lock:
        _report = None
