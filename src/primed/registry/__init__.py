"""Registry layer — process-wide type and field metadata.

Both registries are populated at class-definition time and are read-only
once hydration starts. See :mod:`primed.bootstrap` for the sealing barrier.
"""

from primed.registry.fields import FIELD_STORE, MISSING, FieldMetadataStore
from primed.registry.types import TYPE_REGISTRY, TypeDescriptor, TypeRegistry

__all__ = [
    "FIELD_STORE",
    "MISSING",
    "TYPE_REGISTRY",
    "FieldMetadataStore",
    "TypeDescriptor",
    "TypeRegistry",
]
