"""Configuration-related exceptions.

These indicate programmer errors in a model declaration or in how a model
is addressed. They are raised synchronously and never caught internally:
- ConfigurationError: Base class for configuration errors
- UnknownFieldError: A field name is not declared in the model schema
- UnknownFieldTypeError: A schema refers to an unregistered field type
- ParseNotImplementedError: A field type does not provide a parse rule
- SchemaValidationError: A schema entry is malformed
"""

from typing import Any

from .base import PromisedModelsError


class ConfigurationError(PromisedModelsError):
    """Model declaration is invalid or is used incorrectly."""
    pass


class UnknownFieldError(ConfigurationError):
    """Field name is not declared on the model."""

    def __init__(self, field: str, model: str | None = None):
        """
        Initialize unknown field error.

        Args:
            field: The requested field name
            model: Name of the model class (optional)
        """
        where = f" on {model}" if model else ""
        super().__init__(
            user_message=f"Unknown field {field}{where}",
            technical_message=f"Field '{field}' is not declared in the schema{where}",
            recovery_hint=f"Declare '{field}' in the model schema or fix the field name",
        )
        self.field = field
        self.model = model


class UnknownFieldTypeError(ConfigurationError):
    """Schema refers to a field type missing from the registry."""

    def __init__(self, type_name: str, field: str | None = None):
        """
        Initialize unknown field type error.

        Args:
            type_name: The unregistered type tag
            field: Name of the field declaring the type (optional)
        """
        recovery = f"Register a FieldType named '{type_name}' before building the model"
        technical = f"No field type registered for tag '{type_name}'"
        if field:
            technical += f" (field '{field}')"

        super().__init__(
            user_message=f"Unknown field type {type_name}",
            technical_message=technical,
            recovery_hint=recovery,
        )
        self.type_name = type_name
        self.field = field


class ParseNotImplementedError(ConfigurationError):
    """Field has no parse rule from its type or its schema."""

    def __init__(self, field: str | None = None):
        """
        Initialize parse not implemented error.

        Args:
            field: Name of the field without a parse rule (optional)
        """
        where = f" for field '{field}'" if field else ""
        super().__init__(
            user_message="Not implemented",
            technical_message=f"parse() is not implemented{where}",
            recovery_hint="Give the field type or the field schema a 'parse' hook",
        )
        self.field = field


class SchemaValidationError(ConfigurationError):
    """Schema entry fails validation."""

    def __init__(self, field: str, value: Any, error_msg: str):
        """
        Initialize schema validation error.

        Args:
            field: The field whose schema entry is malformed
            value: The offending schema value
            error_msg: Why the entry is invalid
        """
        super().__init__(
            user_message=f"Invalid schema for field '{field}': {error_msg}",
            technical_message=f"Schema validation failed for {field}={value!r}: {error_msg}",
            recovery_hint=f"Fix the schema entry declared for '{field}'",
        )
        self.field = field
        self.value = value
