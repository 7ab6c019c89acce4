"""Fields and field types.

- **Field**: runtime value slot owned by a model
- **FieldSchema** / **FieldType** / **FieldBehavior**: declarative layers
- **FieldDescriptor**: merged behavior (schema > type > base)
- **FieldTypeRegistry**: type tag -> FieldType
"""

from .builder import BASE_BEHAVIOR, FieldDescriptor, build_descriptor, merge_layers
from .field import Field
from .registry import (
    STRING,
    FieldTypeRegistry,
    create_default_registry,
    default_registry,
    register_field_type,
)
from .schema import FieldBehavior, FieldSchema, FieldType

__all__ = [
    "BASE_BEHAVIOR",
    "STRING",
    "Field",
    "FieldBehavior",
    "FieldDescriptor",
    "FieldSchema",
    "FieldType",
    "FieldTypeRegistry",
    "build_descriptor",
    "create_default_registry",
    "default_registry",
    "merge_layers",
    "register_field_type",
]
