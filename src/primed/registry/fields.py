"""Field metadata store — per-class construction rules.

Rules are keyed by class, then by field name. A class's full rule set is
the union of the rules declared on it and on its hydratable bases, with
subclass rules overriding base rules of the same name.
"""

from __future__ import annotations

import inspect
import logging
import typing
from typing import Any, Final

from primed.domain.options import PropertyOptions
from primed.domain.rules import FieldRule, make_factory
from primed.errors import RegistrySealedError

logger = logging.getLogger(__name__)


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


MISSING: Final = _Missing()


def _is_classvar(annotation: object) -> bool:
    if isinstance(annotation, str):
        head = annotation.split("[", 1)[0].strip()
        return head in {"ClassVar", "typing.ClassVar"}
    return annotation is typing.ClassVar or typing.get_origin(annotation) is typing.ClassVar


class FieldMetadataStore:
    """Accumulates :class:`FieldRule` objects per hydratable class."""

    def __init__(self) -> None:
        self._rules: dict[type, dict[str, FieldRule]] = {}
        self._sealed = False

    def define_field(
        self,
        cls: type,
        field_name: str,
        factory: object,
        options: PropertyOptions | None = None,
        *,
        required: bool | None = None,
        array: bool | None = None,
    ) -> FieldRule:
        """Record one rule for *cls*, overwriting any rule of the same name."""
        if self._sealed:
            msg = f"Cannot define field {cls.__name__}.{field_name}: field store is sealed"
            raise RegistrySealedError(msg)
        merged = (options or PropertyOptions()).merged(required=required, array=array)
        rule = FieldRule(name=field_name, factory=make_factory(factory), options=merged)
        self._rules.setdefault(cls, {})[field_name] = rule
        logger.debug(
            "Defined field %s.%s (required=%s, array=%s)",
            cls.__name__,
            field_name,
            merged.required,
            merged.array,
        )
        return rule

    def own_fields_of(self, cls: type) -> dict[str, FieldRule]:
        """Rules declared directly on *cls*."""
        return dict(self._rules.get(cls, {}))

    def fields_of(self, cls: type) -> dict[str, FieldRule]:
        """Accumulated rule set for *cls*, bases first."""
        merged: dict[str, FieldRule] = {}
        for klass in reversed(cls.__mro__):
            merged.update(self._rules.get(klass, {}))
        return merged

    def plain_fields_of(self, cls: type) -> dict[str, Any]:
        """Annotated public attributes not covered by a rule.

        Maps each name to its class-level default, or :data:`MISSING`.
        """
        ruled = self.fields_of(cls)
        plain: dict[str, Any] = {}
        for klass in reversed(cls.__mro__):
            annotations = inspect.get_annotations(klass)
            for name, annotation in annotations.items():
                if name.startswith("_") or name in ruled or _is_classvar(annotation):
                    continue
                plain[name] = getattr(cls, name, MISSING)
        return plain

    def seal(self) -> None:
        """Reject all further field definitions."""
        self._sealed = True

    @property
    def is_sealed(self) -> bool:
        return self._sealed

    def clear(self) -> None:
        """Drop every rule and unseal (testing utility)."""
        self._rules.clear()
        self._sealed = False


FIELD_STORE = FieldMetadataStore()
