"""Tests for FieldMetadataStore."""

from __future__ import annotations

from typing import ClassVar

import pytest

from primed import Base, PropertyOptions
from primed.domain.rules import ModelFactory, NamedFactory, TransformerFactory
from primed.errors import InvalidFactoryError, RegistrySealedError
from primed.registry.fields import MISSING, FieldMetadataStore


class Plain(Base):
    name: str = "n"
    count: int
    shared: ClassVar[int] = 3
    _private: int = 0


class Child(Plain):
    extra: str = "e"


class TestDefineField:
    def test_defaults(self, fields: FieldMetadataStore) -> None:
        rule = fields.define_field(Plain, "value", int)
        assert rule.required is True
        assert rule.array is False
        assert isinstance(rule.factory, TransformerFactory)

    def test_overrides_merge_with_defaults(self, fields: FieldMetadataStore) -> None:
        rule = fields.define_field(Plain, "items", int, array=True)
        assert rule.options == PropertyOptions(required=True, array=True)

    def test_options_object(self, fields: FieldMetadataStore) -> None:
        rule = fields.define_field(Plain, "items", int, PropertyOptions(required=False))
        assert rule.required is False
        assert rule.array is False

    def test_factory_variants(self, fields: FieldMetadataStore) -> None:
        assert isinstance(fields.define_field(Plain, "a", "Plain").factory, NamedFactory)
        assert isinstance(fields.define_field(Plain, "b", Child).factory, ModelFactory)
        assert isinstance(fields.define_field(Plain, "c", len).factory, TransformerFactory)

    def test_redefinition_overwrites(self, fields: FieldMetadataStore) -> None:
        fields.define_field(Plain, "value", int)
        fields.define_field(Plain, "value", str, required=False)
        rules = fields.fields_of(Plain)
        assert list(rules) == ["value"]
        assert rules["value"].required is False

    def test_invalid_factory(self, fields: FieldMetadataStore) -> None:
        with pytest.raises(InvalidFactoryError):
            fields.define_field(Plain, "value", 42)

    def test_empty_name_factory(self, fields: FieldMetadataStore) -> None:
        with pytest.raises(InvalidFactoryError):
            fields.define_field(Plain, "value", "  ")

    def test_sealed(self, fields: FieldMetadataStore) -> None:
        fields.seal()
        assert fields.is_sealed
        with pytest.raises(RegistrySealedError):
            fields.define_field(Plain, "value", int)


class TestFieldsOf:
    def test_empty_for_undeclared_type(self, fields: FieldMetadataStore) -> None:
        assert fields.fields_of(Plain) == {}

    def test_inherits_base_rules(self, fields: FieldMetadataStore) -> None:
        fields.define_field(Plain, "value", int)
        fields.define_field(Child, "other", str)
        assert list(fields.fields_of(Child)) == ["value", "other"]
        assert list(fields.own_fields_of(Child)) == ["other"]

    def test_subclass_overrides_base_rule(self, fields: FieldMetadataStore) -> None:
        fields.define_field(Plain, "value", int)
        fields.define_field(Child, "value", str, array=True)
        assert fields.fields_of(Child)["value"].array is True
        assert fields.fields_of(Plain)["value"].array is False

    def test_clear(self, fields: FieldMetadataStore) -> None:
        fields.define_field(Plain, "value", int)
        fields.clear()
        assert fields.fields_of(Plain) == {}


class TestPlainFieldsOf:
    def test_annotated_public_fields(self, fields: FieldMetadataStore) -> None:
        plain = fields.plain_fields_of(Plain)
        assert plain == {"name": "n", "count": MISSING}

    def test_inherited_annotations(self, fields: FieldMetadataStore) -> None:
        assert list(fields.plain_fields_of(Child)) == ["name", "count", "extra"]

    def test_ruled_names_excluded(self, fields: FieldMetadataStore) -> None:
        fields.define_field(Plain, "name", str)
        assert "name" not in fields.plain_fields_of(Plain)
