"""Hydration engine — builds fully-populated instances from partial payloads.

For a class and a payload the engine:

1. checks the arity of every supplied ruled value, in field-name order,
   before building anything;
2. copies declared plain defaults onto the instance, then assigns every
   payload key that is not covered by a field rule and that the class
   declares;
3. extends the trace with the class's name;
4. applies every field rule: resolves named factories, then hydrates or
   transforms supplied values, fills required defaults, and empties
   optional fields.

INVARIANT: A required model field is only ever left unset when hydrating
it would revisit a type already in the cycle window of the trace and no
value was supplied for it.
"""

from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from primed.config.settings import get_settings
from primed.domain.options import CyclePolicy
from primed.domain.rules import Factory, FieldRule, ModelFactory, NamedFactory, TransformerFactory
from primed.engine.trace import Trace
from primed.errors import ArrayExpectedMismatch, ArrayNotExpectedMismatch, InvalidPayloadError
from primed.registry.fields import FIELD_STORE, MISSING, FieldMetadataStore
from primed.registry.types import TYPE_REGISTRY, TypeRegistry

logger = logging.getLogger(__name__)

T = TypeVar("T")


def as_payload(payload: Any) -> Mapping[str, Any]:
    """View *payload* as a read-only mapping.

    ``None`` is empty, mappings pass through, and other objects expose
    their own attributes (this is how ``clone`` reads an instance).
    """
    if payload is None:
        return {}
    if isinstance(payload, Mapping):
        return payload
    if hasattr(payload, "__dict__"):
        return vars(payload)
    msg = f"Payload must be a mapping or an object with attributes, got {type(payload).__name__}"
    raise InvalidPayloadError(msg)


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, str | bytes | bytearray)


class Hydrator:
    """Recursive constructor driven by the type registry and field store.

    Parameters:
        registry: Type registry used to resolve named factories.
        fields: Field metadata store holding the per-class rules.
        cycle_policy: Which trace entries count as a cycle.
        warn_on_cycle: Log cycle skips at WARNING instead of DEBUG.
    """

    def __init__(
        self,
        registry: TypeRegistry | None = None,
        fields: FieldMetadataStore | None = None,
        *,
        cycle_policy: CyclePolicy = CyclePolicy.ACTIVE_TRACE,
        warn_on_cycle: bool = False,
    ) -> None:
        self._registry = registry if registry is not None else TYPE_REGISTRY
        self._fields = fields if fields is not None else FIELD_STORE
        self.cycle_policy = CyclePolicy(cycle_policy)
        self._cycle_level = logging.WARNING if warn_on_cycle else logging.DEBUG

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def hydrate(
        self,
        cls: type[T],
        payload: Any = None,
        trace: Trace | None = None,
        *,
        from_instance: bool = False,
    ) -> T:
        """Build a new *cls* instance without calling ``__init__``."""
        instance = cls.__new__(cls)
        return self.populate(instance, payload, trace, from_instance=from_instance)

    def populate(
        self,
        instance: T,
        payload: Any = None,
        trace: Trace | None = None,
        *,
        from_instance: bool = False,
    ) -> T:
        """Fill *instance* from *payload*; *trace* holds its ancestors.

        With *from_instance* the payload is an already hydrated object, so
        scalar transformer fields take their stored value as one element
        whatever its shape.
        """
        cls = type(instance)
        data = as_payload(payload)
        rules = self._fields.fields_of(cls)

        self._check_shapes(cls, rules, data, from_instance)
        self._assign_plain(instance, cls, data, rules)

        trace = trace if trace is not None else Trace()
        extended = trace.extend(self._registry.name_of(cls))

        for rule in rules.values():
            self._apply_rule(
                instance, cls, rule, data.get(rule.name), trace, extended, from_instance
            )
        return instance

    def clone(self, instance: T) -> T:
        """Rebuild *instance* by hydrating its own class from its attributes."""
        return self.hydrate(type(instance), instance, from_instance=True)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_shapes(
        self,
        cls: type,
        rules: Mapping[str, FieldRule],
        data: Mapping[str, Any],
        from_instance: bool,
    ) -> None:
        # Field-name order, independent of declaration order.
        for name in sorted(rules):
            rule = rules[name]
            value = data.get(name)
            if value is None:
                continue
            if rule.array and not _is_sequence(value):
                raise ArrayExpectedMismatch(self._registry.name_of(cls), name)
            if rule.array or not _is_sequence(value):
                continue
            if from_instance and isinstance(rule.factory, TransformerFactory):
                continue
            raise ArrayNotExpectedMismatch(self._registry.name_of(cls), name)

    def _assign_plain(
        self,
        instance: Any,
        cls: type,
        data: Mapping[str, Any],
        rules: Mapping[str, FieldRule],
    ) -> None:
        plain = self._fields.plain_fields_of(cls)
        for name, default in plain.items():
            if default is not MISSING:
                setattr(instance, name, copy.copy(default))

        own = vars(instance) if hasattr(instance, "__dict__") else {}
        for key, value in data.items():
            if key in rules:
                continue
            if key in plain or key in own:
                setattr(instance, key, value)

    def _apply_rule(
        self,
        instance: Any,
        cls: type,
        rule: FieldRule,
        value: Any,
        trace: Trace,
        extended: Trace,
        from_instance: bool,
    ) -> None:
        factory = self._resolve(rule.factory)
        type_name = self._registry.name_of(cls)

        if value is not None:
            elements = list(value) if rule.array else [value]
            results = [
                self._build(factory, element, extended, from_instance) for element in elements
            ]
            setattr(instance, rule.name, results if rule.array else results[-1])
        elif rule.required:
            if isinstance(factory, ModelFactory) and self._is_cyclic(factory, trace, extended):
                logger.log(
                    self._cycle_level,
                    "Leaving required field %s.%s unset: %s is already under construction (%s)",
                    type_name,
                    rule.name,
                    self._registry.name_of(factory.cls),
                    extended,
                )
                return
            result = self._build(factory, None, extended)
            setattr(instance, rule.name, [result] if rule.array else result)
        elif rule.array:
            setattr(instance, rule.name, [])
        else:
            setattr(instance, rule.name, None)

    def _resolve(self, factory: Factory) -> ModelFactory | TransformerFactory:
        if isinstance(factory, NamedFactory):
            return ModelFactory(self._registry.resolve(factory.type_name).cls)
        return factory

    def _is_cyclic(self, factory: ModelFactory, trace: Trace, extended: Trace) -> bool:
        window = extended if self.cycle_policy is CyclePolicy.ACTIVE_TRACE else trace
        return self._registry.name_of(factory.cls) in window

    def _build(
        self,
        factory: ModelFactory | TransformerFactory,
        element: Any,
        trace: Trace,
        from_instance: bool = False,
    ) -> Any:
        if isinstance(factory, ModelFactory):
            return self.hydrate(factory.cls, element, trace, from_instance=from_instance)
        return factory.invoke(element)


# ----------------------------------------------------------------------
# Process-wide hydrator
# ----------------------------------------------------------------------

_hydrator: Hydrator | None = None
_hydrator_lock = threading.Lock()


def get_hydrator() -> Hydrator:
    """Default hydrator over the process-wide registries and settings."""
    global _hydrator
    if _hydrator is None:
        with _hydrator_lock:
            if _hydrator is None:
                settings = get_settings()
                _hydrator = Hydrator(
                    cycle_policy=settings.cycle_policy,
                    warn_on_cycle=settings.warn_on_cycle,
                )
    return _hydrator


def reset_hydrator() -> None:
    """Forget the default hydrator so it is rebuilt from current settings."""
    global _hydrator
    with _hydrator_lock:
        _hydrator = None


def hydrate(cls: type[T], payload: Any = None) -> T:
    """Build a fully hydrated *cls* from *payload* with a fresh trace."""
    return get_hydrator().hydrate(cls, payload)


def clone(instance: T) -> T:
    """Structurally independent rebuild of *instance*."""
    return get_hydrator().clone(instance)
