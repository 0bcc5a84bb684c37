"""Plugin discovery and model loading.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
group ``primed.models``. Every plugin implementing ``register_models``
contributes named hydratable types to the type registry.
"""

from __future__ import annotations

import inspect
import logging

import pluggy

from primed.domain.rules import is_model_class
from primed.errors import PrimedError
from primed.plugins.hookspecs import PROJECT_NAME, PrimedHookSpec
from primed.registry.types import NAME_ATTR, TYPE_REGISTRY, TypeRegistry

ENTRY_POINT_GROUP = "primed.models"

logger = logging.getLogger(__name__)


class PluginManager:
    """Manages plugin discovery and model registration."""

    def __init__(self, registry: TypeRegistry | None = None) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(PrimedHookSpec)
        self._registry = registry if registry is not None else TYPE_REGISTRY
        self._loaded: bool = False

    def discover_and_load(self) -> list[str]:
        """Load entry-point plugins and register the models they expose.

        Returns the list of type names registered from plugins.
        """
        self._pm.load_setuptools_entrypoints(ENTRY_POINT_GROUP)
        self._normalize_plugin_instances()
        registered = self.register_models()
        self._loaded = True
        return registered

    def register_plugin(self, plugin: object, name: str | None = None) -> None:
        """Register a plugin instance directly."""
        resolved_name = name or plugin.__class__.__name__
        self._pm.register(plugin, name=resolved_name)
        logger.debug("Registered plugin: %s", resolved_name)

    def unregister(self, plugin: object) -> None:
        self._pm.unregister(plugin)

    @property
    def is_loaded(self) -> bool:
        """Whether discover_and_load() has been called."""
        return self._loaded

    def list_plugin_names(self) -> list[str]:
        return [self._pm.get_name(p) or p.__class__.__name__ for p in self._pm.get_plugins()]

    def register_models(self) -> list[str]:
        """Collect ``register_models`` results from every plugin."""
        registered: list[str] = []
        for plugin in self._pm.get_plugins():
            plugin_name = self._pm.get_name(plugin) or plugin.__class__.__name__
            registered.extend(self._register_plugin_models(plugin, plugin_name))
        return registered

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _normalize_plugin_instances(self) -> None:
        """Replace registered plugin classes with instantiated objects.

        Entry-point loading may register a plugin class directly. Hook dispatch
        against class objects leaves ``self`` unbound and fails at runtime.
        """
        for plugin in list(self._pm.get_plugins()):
            if not inspect.isclass(plugin):
                continue
            if not self._has_hook_impls(plugin):
                continue

            plugin_name = self._pm.get_name(plugin) or plugin.__name__
            self._pm.unregister(plugin)

            try:
                instance = plugin()
            except Exception:
                logger.warning(
                    "Failed to instantiate entry-point plugin %s",
                    plugin_name,
                    exc_info=True,
                )
                continue

            self._pm.register(instance, name=plugin_name)
            logger.debug("Instantiated entry-point plugin: %s", plugin_name)

    def _register_plugin_models(self, plugin: object, plugin_name: str) -> list[str]:
        hook = getattr(plugin, "register_models", None)
        if hook is None:
            return []

        try:
            model_map = hook()
        except Exception:
            logger.warning(
                "Failed to collect models from plugin %s",
                plugin_name,
                exc_info=True,
            )
            return []

        if model_map is None:
            return []
        if not isinstance(model_map, dict):
            logger.warning("Plugin %s returned non-dict model registrations", plugin_name)
            return []

        registered: list[str] = []
        for type_name, model_cls in model_map.items():
            if not isinstance(type_name, str) or not is_model_class(model_cls):
                logger.warning(
                    "Skipping model registration %r from plugin %s",
                    type_name,
                    plugin_name,
                )
                continue
            try:
                self._registry.register(type_name, model_cls)
            except PrimedError:
                logger.warning(
                    "Skipping model registration %r from plugin %s",
                    type_name,
                    plugin_name,
                    exc_info=True,
                )
                continue
            if NAME_ATTR not in model_cls.__dict__:
                setattr(model_cls, NAME_ATTR, type_name)
            registered.append(type_name)
        return registered

    @staticmethod
    def _has_hook_impls(cls: type) -> bool:
        """Check whether *cls* has any methods decorated with ``@hookimpl``.

        Pluggy's ``HookimplMarker("primed")`` sets a ``primed_impl``
        attribute on decorated methods.
        """
        for name in dir(cls):
            if name.startswith("_"):
                continue
            method = getattr(cls, name, None)
            if callable(method) and getattr(method, "primed_impl", None):
                return True
        return False
