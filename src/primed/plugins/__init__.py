"""Extension layer — model discovery via pluggy.

Discovery: entry_points in the ``primed.models`` group.
INVARIANT: Plugin failures are warnings, never errors.
"""

from primed.plugins.hookspecs import hookimpl
from primed.plugins.manager import PluginManager

__all__ = ["PluginManager", "hookimpl"]
