"""Exception hierarchy for primed.

INVARIANT: Hydration either fully succeeds or raises one of these at the
point of violation. No partial instance is handed back to the caller.
Cycle skips are never errors.
"""

from __future__ import annotations


class PrimedError(Exception):
    """Base exception for primed."""


class UnknownTypeReference(PrimedError, LookupError):
    """A forward reference names a type that was never registered."""

    def __init__(self, type_name: str) -> None:
        self.type_name = type_name
        super().__init__(f"Type {type_name!r} was never registered")


class ShapeMismatch(PrimedError, TypeError):
    """Payload arity disagrees with a field's declared arity."""

    expected = ""

    def __init__(self, type_name: str, field: str) -> None:
        self.type_name = type_name
        self.field = field
        super().__init__(f"{self.expected} for field {type_name}.{field}")


class ArrayExpectedMismatch(ShapeMismatch):
    expected = "Array expected"


class ArrayNotExpectedMismatch(ShapeMismatch):
    expected = "Array not expected"


class RegistrySealedError(PrimedError):
    """Registration attempted after the initialization barrier."""


class InvalidFactoryError(PrimedError, TypeError):
    """A field factory is neither a type name, a model class nor a callable."""


class InvalidPayloadError(PrimedError, TypeError):
    """A payload is neither a mapping, None, nor an object with attributes."""


class ConfigError(PrimedError):
    """A discovered ``primed.toml`` could not be parsed."""
