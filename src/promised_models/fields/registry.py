"""Field type registry.

Maps type tags (the ``type`` of a schema entry) to FieldType behaviors.
New field types are added by registering them; neither Field nor Model
needs to change.

A registry is an ordinary object. Models receive one explicitly (the
``registry`` constructor keyword or class attribute) and fall back to
``default_registry``, which is created on import with the built-in types.
"""

import logging
from collections.abc import Iterator
from typing import Any

from promised_models.exceptions import ConfigurationError, UnknownFieldTypeError

from .schema import FieldType

logger = logging.getLogger(__name__)


class FieldTypeRegistry:
    """
    Registry of field types keyed by type tag.

    Example:
        ```python
        registry = create_default_registry()
        registry.register(FieldType(name="integer", default=0, parse=lambda f, v: int(v)))

        class Counter(Model):
            schema = {"count": {"type": "integer"}}

        counter = Counter(registry=registry)
        ```
    """

    def __init__(self, field_types: list[FieldType] | None = None):
        """
        Initialize the registry.

        Args:
            field_types: Field types to register up front
        """
        self._types: dict[str, FieldType] = {}
        for field_type in field_types or []:
            self.register(field_type)

    def register(self, field_type: FieldType, *, replace: bool = False) -> FieldType:
        """
        Register a field type under its name.

        Args:
            field_type: The field type to register
            replace: Allow overwriting an existing registration

        Returns:
            The registered field type

        Raises:
            ConfigurationError: If the tag is taken and replace is False
        """
        if field_type.name in self._types and not replace:
            raise ConfigurationError(
                f"Field type {field_type.name} is already registered",
                recovery_hint="Pass replace=True to override the existing field type",
            )
        self._types[field_type.name] = field_type
        logger.info(f"Registered field type: {field_type.name}")
        return field_type

    def unregister(self, name: str) -> None:
        """
        Remove a field type.

        Args:
            name: Type tag to remove

        Raises:
            UnknownFieldTypeError: If the tag is not registered
        """
        if name not in self._types:
            raise UnknownFieldTypeError(name)
        del self._types[name]
        logger.debug(f"Unregistered field type: {name}")

    def get(self, name: str, field: str | None = None) -> FieldType:
        """
        Resolve a type tag.

        Args:
            name: Type tag from a schema entry
            field: Name of the field being built (for the error message)

        Returns:
            The registered FieldType

        Raises:
            UnknownFieldTypeError: If the tag is not registered
        """
        try:
            return self._types[name]
        except KeyError:
            raise UnknownFieldTypeError(name, field) from None

    def names(self) -> list[str]:
        """Get registered type tags in registration order."""
        return list(self._types)

    def copy(self) -> "FieldTypeRegistry":
        """Get an independent registry with the same field types."""
        return FieldTypeRegistry(list(self._types.values()))

    def __contains__(self, name: object) -> bool:
        return name in self._types

    def __iter__(self) -> Iterator[FieldType]:
        return iter(list(self._types.values()))

    def __len__(self) -> int:
        return len(self._types)


def _parse_string(field: Any, value: Any) -> str:
    if value is None:
        return ""
    return str(value)


STRING = FieldType(name="string", default="", parse=_parse_string)


def create_default_registry() -> FieldTypeRegistry:
    """Create a registry holding the built-in field types."""
    return FieldTypeRegistry([STRING])


# Process-wide registry used by models that are not given one
default_registry = create_default_registry()


def register_field_type(field_type: FieldType, *, replace: bool = False) -> FieldType:
    """
    Register a field type on the default registry.

    Args:
        field_type: The field type to register
        replace: Allow overwriting an existing registration

    Returns:
        The registered field type
    """
    return default_registry.register(field_type, replace=replace)
