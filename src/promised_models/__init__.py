"""promised-models: observable models with change tracking and async validation.

## Public API

- **Model**: record of named, typed fields built from a ``schema``
- **Field**: value slot with commit/revert and debounced change notification
- **FieldSchema** / **FieldType**: declarative field behavior layers
- **FieldTypeRegistry**: type tag -> FieldType (``default_registry`` holds ``string``)
- **ValidationError**: raised by ``await model.validate()`` with the failing fields
- **ModelConfig**: notification settings
- **AsyncioScheduler** / **ManualScheduler**: debounce flush strategies
"""

__version__ = "0.1.0"

from .config import ModelConfig
from .events import AsyncioScheduler, EventKey, ManualScheduler, ModelEvent
from .exceptions import (
    ConfigurationError,
    ParseNotImplementedError,
    PromisedModelsError,
    SchemaValidationError,
    UnknownFieldError,
    UnknownFieldTypeError,
    ValidationError,
)
from .fields import (
    Field,
    FieldSchema,
    FieldType,
    FieldTypeRegistry,
    create_default_registry,
    default_registry,
    register_field_type,
)
from .model import Model

__all__ = [
    # Model
    "Model",
    "ModelConfig",
    # Fields
    "Field",
    "FieldSchema",
    "FieldType",
    "FieldTypeRegistry",
    "create_default_registry",
    "default_registry",
    "register_field_type",
    # Events
    "AsyncioScheduler",
    "EventKey",
    "ManualScheduler",
    "ModelEvent",
    # Errors
    "ConfigurationError",
    "ParseNotImplementedError",
    "PromisedModelsError",
    "SchemaValidationError",
    "UnknownFieldError",
    "UnknownFieldTypeError",
    "ValidationError",
]
