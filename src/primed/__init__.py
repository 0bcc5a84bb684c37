"""primed — declarative object hydration.

Build fully-populated object graphs from partial payloads: nested models
are hydrated recursively, required fields get defaults from their
factories, forward references are resolved by name, and cyclic type
graphs terminate.
"""

from primed.bootstrap import InitReport, initialize
from primed.domain.options import CyclePolicy, PropertyOptions
from primed.engine.hydrator import Hydrator, clone, hydrate
from primed.errors import (
    ArrayExpectedMismatch,
    ArrayNotExpectedMismatch,
    InvalidFactoryError,
    InvalidPayloadError,
    PrimedError,
    RegistrySealedError,
    ShapeMismatch,
    UnknownTypeReference,
)
from primed.model import Base, define_field, model, primed
from primed.registry import FIELD_STORE, TYPE_REGISTRY

__all__ = [
    "FIELD_STORE",
    "TYPE_REGISTRY",
    "ArrayExpectedMismatch",
    "ArrayNotExpectedMismatch",
    "Base",
    "CyclePolicy",
    "Hydrator",
    "InitReport",
    "InvalidFactoryError",
    "InvalidPayloadError",
    "PrimedError",
    "PropertyOptions",
    "RegistrySealedError",
    "ShapeMismatch",
    "UnknownTypeReference",
    "clone",
    "define_field",
    "hydrate",
    "initialize",
    "model",
    "primed",
]
