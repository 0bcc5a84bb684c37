"""Type registry — maps declared type names to their classes.

Used to resolve forward references supplied as strings. Last registration
for a name wins; there is no duplicate detection.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from primed.errors import RegistrySealedError, UnknownTypeReference

logger = logging.getLogger(__name__)

NAME_ATTR = "__primed_name__"


@dataclass(frozen=True)
class TypeDescriptor:
    """A hydratable type: its stable name and the class that builds it."""

    name: str
    cls: type

    def new(self, payload: Any = None) -> Any:
        """Instantiate through the class constructor."""
        return self.cls(payload)


class TypeRegistry:
    """Registry for mapping ``type_name: str`` → :class:`TypeDescriptor`.

    ``TYPE_REGISTRY`` is the process-wide instance used by the engine.
    Create separate instances for isolation in tests.
    """

    def __init__(self) -> None:
        self._types: dict[str, TypeDescriptor] = {}
        self._sealed = False

    def register(self, name: str, cls: type) -> TypeDescriptor:
        """Register *cls* under *name*, replacing any earlier registration."""
        if self._sealed:
            msg = f"Cannot register type {name!r}: type registry is sealed"
            raise RegistrySealedError(msg)
        descriptor = TypeDescriptor(name=name, cls=cls)
        self._types[name] = descriptor
        logger.debug("Registered type %s -> %s", name, cls.__qualname__)
        return descriptor

    def resolve(self, name: str) -> TypeDescriptor:
        """Look up the descriptor for *name*.

        Raises:
            UnknownTypeReference: If nothing was registered under *name*.
        """
        descriptor = self._types.get(name)
        if descriptor is None:
            raise UnknownTypeReference(name)
        return descriptor

    def get(self, name: str) -> TypeDescriptor | None:
        return self._types.get(name)

    def has(self, name: str) -> bool:
        return name in self._types

    def names(self) -> list[str]:
        """Return all registered type names."""
        return list(self._types)

    @staticmethod
    def name_of(cls: type) -> str:
        """Declared name of *cls*; falls back to its class name."""
        return cls.__dict__.get(NAME_ATTR) or cls.__name__

    def seal(self) -> None:
        """Reject all further registrations."""
        self._sealed = True

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    def clear(self) -> None:
        """Remove all registrations and unseal (testing utility)."""
        self._types.clear()
        self._sealed = False

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __len__(self) -> int:
        return len(self._types)


TYPE_REGISTRY = TypeRegistry()
