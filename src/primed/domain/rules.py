"""Value factories and field rules.

A factory is decided once, when the field is declared:

- ``NamedFactory``: forward reference resolved through the type registry
  on use.
- ``ModelFactory``: another hydratable class, hydrated recursively.
- ``TransformerFactory``: a plain callable taking zero or one argument.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from primed.domain.options import PropertyOptions
from primed.errors import InvalidFactoryError

MODEL_MARKER = "__primed_model__"


def is_model_class(obj: object) -> bool:
    """True when *obj* is a class that opted into hydration."""
    return isinstance(obj, type) and bool(getattr(obj, MODEL_MARKER, False))


@dataclass(frozen=True)
class NamedFactory:
    type_name: str


@dataclass(frozen=True)
class ModelFactory:
    cls: type


@dataclass(frozen=True)
class TransformerFactory:
    func: Callable[..., Any]

    def invoke(self, value: Any = None) -> Any:
        """Call the transformer, passing *value* only when one is present."""
        if value is None:
            return self.func()
        return self.func(value)


Factory = NamedFactory | ModelFactory | TransformerFactory


def make_factory(raw: object) -> Factory:
    """Classify a declared factory into its tagged variant.

    Raises:
        InvalidFactoryError: If *raw* is an empty name or not callable.
    """
    if isinstance(raw, NamedFactory | ModelFactory | TransformerFactory):
        return raw
    if isinstance(raw, str):
        name = raw.strip()
        if not name:
            msg = "Factory type name must not be empty"
            raise InvalidFactoryError(msg)
        return NamedFactory(name)
    if is_model_class(raw):
        return ModelFactory(raw)  # type: ignore[arg-type]
    if callable(raw):
        return TransformerFactory(raw)
    msg = f"Factory must be a type name, a model class or a callable, got {raw!r}"
    raise InvalidFactoryError(msg)


@dataclass(frozen=True)
class FieldRule:
    """Construction rule for one field of a hydratable class."""

    name: str
    factory: Factory
    options: PropertyOptions = field(default_factory=PropertyOptions)

    @property
    def required(self) -> bool:
        return self.options.required

    @property
    def array(self) -> bool:
        return self.options.array
