"""Compose field descriptors from layered behavior records.

A field's behavior is merged from three layers, highest precedence first:

    1. the field's own FieldSchema
    2. the FieldType its schema refers to
    3. BASE_BEHAVIOR

Each attribute (default and every hook) is taken from the first layer that
declares it. The result is a frozen FieldDescriptor that Field instances
read their behavior from.
"""

import logging
from dataclasses import dataclass
from dataclasses import field as dataclass_field
from typing import TYPE_CHECKING, Any

from promised_models.exceptions import ParseNotImplementedError

from .registry import FieldTypeRegistry
from .schema import FieldBehavior, FieldSchema, Hook

if TYPE_CHECKING:
    from .field import Field

logger = logging.getLogger(__name__)


def _parse_not_implemented(field: "Field", value: Any) -> Any:
    raise ParseNotImplementedError(field.name)


def _always_valid(field: "Field") -> bool:
    return True


def _strict_equal(field: "Field", other: Any) -> bool:
    value = field.value
    if value is other:
        return True
    return type(value) is type(other) and value == other


def _serialize_value(field: "Field") -> Any:
    return field.get()


BASE_BEHAVIOR = FieldBehavior(
    default=None,
    parse=_parse_not_implemented,
    validator=_always_valid,
    equals=_strict_equal,
    serializer=_serialize_value,
)


@dataclass(frozen=True)
class FieldDescriptor:
    """Fully resolved behavior of one model field."""

    name: str
    type_name: str
    default: Any
    parse: Hook
    validator: Hook
    equals: Hook
    serializer: Hook
    internal: bool = False
    options: dict[str, Any] = dataclass_field(default_factory=dict)

    def resolve_default(self) -> Any:
        """Get the default value, calling it if it is a producer."""
        if callable(self.default):
            return self.default()
        return self.default


def merge_layers(*layers: FieldBehavior) -> dict[str, Any]:
    """
    Merge behavior layers.

    Args:
        *layers: Layers in precedence order, highest first

    Returns:
        Mapping of attribute name to the value from the first declaring layer
    """
    merged: dict[str, Any] = {}
    for layer in layers:
        for name, value in layer.declared().items():
            merged.setdefault(name, value)
    return merged


def build_descriptor(
    name: str,
    schema: FieldSchema,
    registry: FieldTypeRegistry,
    base: FieldBehavior = BASE_BEHAVIOR,
) -> FieldDescriptor:
    """
    Build the descriptor of a model field.

    Args:
        name: Field name
        schema: The field's schema entry
        registry: Registry used to resolve ``schema.type``
        base: Lowest-precedence behavior layer

    Returns:
        The resolved FieldDescriptor

    Raises:
        UnknownFieldTypeError: If ``schema.type`` is not registered
    """
    field_type = registry.get(schema.type, field=name)
    merged = merge_layers(schema, field_type, base)
    logger.debug(f"Built field '{name}' of type '{schema.type}'")

    return FieldDescriptor(
        name=name,
        type_name=schema.type,
        internal=schema.internal,
        options=schema.options,
        **merged,
    )
