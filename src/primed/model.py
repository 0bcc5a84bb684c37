"""Registration and construction surface.

Model authors subclass :class:`Base`, declare controlled fields with
:func:`primed`, and register the class under a name with :func:`model`::

    @model
    class Bar(Base):
        golf: Decimal = primed(primed_decimal)
        hotel: int = 2

    @model
    class Baz(Base):
        mike: Decimal = primed(primed_decimal)
        bar: Bar = primed(Bar)
        siblings: list[Baz] = primed("Baz", array=True, required=False)

    Baz({"mike": 5}).bar.golf  # Decimal('0')

Annotated attributes without :func:`primed` are plain pass-through fields:
their class default is copied onto each instance and a payload value for
them is assigned verbatim.
"""

from __future__ import annotations

import reprlib
from collections.abc import Callable
from typing import Any, ClassVar, Self, TypeVar, overload

from primed.domain.options import PropertyOptions
from primed.domain.rules import FieldRule, is_model_class
from primed.engine.hydrator import as_payload, get_hydrator
from primed.registry.fields import FIELD_STORE
from primed.registry.types import NAME_ATTR, TYPE_REGISTRY, TypeRegistry

C = TypeVar("C", bound=type)


class PrimedField:
    """Class-body marker collected by :meth:`Base.__init_subclass__`."""

    __slots__ = ("factory", "options")

    def __init__(self, factory: object, options: PropertyOptions) -> None:
        self.factory = factory
        self.options = options

    def __repr__(self) -> str:
        return f"primed({self.factory!r}, required={self.options.required}, array={self.options.array})"


def primed(
    factory: object,
    *,
    required: bool | None = None,
    array: bool | None = None,
) -> Any:
    """Declare a controlled field inside a :class:`Base` subclass body.

    Args:
        factory: A registered type name, a model class, or a callable
            taking zero or one argument.
        required: Build a default when no value is supplied (default True).
        array: The field holds a list of values (default False).
    """
    return PrimedField(factory, PropertyOptions().merged(required=required, array=array))


def define_field(
    cls: type,
    field_name: str,
    factory: object,
    options: PropertyOptions | None = None,
    *,
    required: bool | None = None,
    array: bool | None = None,
) -> FieldRule:
    """Explicitly attach a field rule to *cls* outside its class body.

    Keyword overrides win over *options*.
    """
    return FIELD_STORE.define_field(
        cls, field_name, factory, options, required=required, array=array
    )


@overload
def model(cls_or_name: C, /) -> C: ...
@overload
def model(cls_or_name: str | None = None, /, *, registry: TypeRegistry | None = None) -> Callable[[C], C]: ...
def model(
    cls_or_name: Any = None,
    /,
    *,
    registry: TypeRegistry | None = None,
) -> Any:
    """Register a hydratable class in the type registry.

    Usable bare (``@model``, registered under the class name) or with an
    explicit name (``@model("Baz")``). The last registration for a name wins.
    """
    target = registry if registry is not None else TYPE_REGISTRY

    def register(cls: C, name: str | None = None) -> C:
        if not is_model_class(cls):
            msg = f"@model requires a Base subclass, got {cls!r}"
            raise TypeError(msg)
        resolved = name or cls.__name__
        setattr(cls, NAME_ATTR, resolved)
        target.register(resolved, cls)
        return cls

    if isinstance(cls_or_name, str):
        return lambda cls: register(cls, cls_or_name)
    if cls_or_name is None:
        return register
    return register(cls_or_name)


class Base:
    """Base class for hydratable models.

    ``Cls(payload)`` hydrates a new instance from a partial mapping;
    keyword arguments are merged over *payload*. ``clone()`` rebuilds a
    structurally independent copy through the same engine.
    """

    __primed_model__: ClassVar[bool] = True

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        for name, value in list(cls.__dict__.items()):
            if isinstance(value, PrimedField):
                FIELD_STORE.define_field(cls, name, value.factory, value.options)
                delattr(cls, name)

    def __init__(self, payload: Any = None, /, **fields: Any) -> None:
        if fields:
            payload = {**as_payload(payload), **fields}
        get_hydrator().populate(self, payload)

    def clone(self) -> Self:
        return get_hydrator().clone(self)

    def as_dict(self) -> dict[str, Any]:
        """Own attributes as a nested dict, models and lists of models unwrapped."""
        return {key: _unwrap(value) for key, value in vars(self).items()}

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return vars(self) == vars(other)

    __hash__ = None  # type: ignore[assignment]

    @reprlib.recursive_repr()
    def __repr__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{type(self).__name__}({fields})"


def _unwrap(value: Any) -> Any:
    if isinstance(value, Base):
        return value.as_dict()
    if isinstance(value, list):
        return [_unwrap(v) for v in value]
    return value
