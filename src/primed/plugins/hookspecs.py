"""Pluggy hook specifications for model registration.

One setup-time hook lets installed packages contribute hydratable types
to the type registry before hydration starts.
"""

from __future__ import annotations

import pluggy

PROJECT_NAME = "primed"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class PrimedHookSpec:
    """Hook specifications for the primed plugin system."""

    @hookspec
    def register_models(self) -> dict[str, type] | None:
        """Return ``{type_name: model_class}`` to add to the type registry."""
