"""Engine layer — the recursive hydration algorithm."""

from primed.engine.hydrator import Hydrator, clone, get_hydrator, hydrate, reset_hydrator
from primed.engine.trace import Trace

__all__ = ["Hydrator", "Trace", "clone", "get_hydrator", "hydrate", "reset_hydrator"]
