"""
Custom exception hierarchy for promised-models.

## Exception Hierarchy

```
PromisedModelsError (base)
├── ConfigurationError
│   ├── UnknownFieldError
│   ├── UnknownFieldTypeError
│   ├── ParseNotImplementedError
│   └── SchemaValidationError
└── ValidationError
```

Configuration errors are programmer mistakes: they are raised synchronously
from model construction, ``get()`` and ``field()`` and are never caught by
the library. ``ValidationError`` is the expected, recoverable outcome of
``await model.validate()`` and carries the failing fields.

## Usage

```python
from promised_models.exceptions import ValidationError

try:
    await model.validate()
except ValidationError as e:
    for field in e.fields:
        show_error(field.name)
```
"""

from .base import PromisedModelsError
from .config import (
    ConfigurationError,
    ParseNotImplementedError,
    SchemaValidationError,
    UnknownFieldError,
    UnknownFieldTypeError,
)
from .handlers import format_error_for_display, wrap_pydantic_error
from .validation import ValidationError

__all__ = [
    # Base
    "PromisedModelsError",
    # Config
    "ConfigurationError",
    "ParseNotImplementedError",
    "SchemaValidationError",
    "UnknownFieldError",
    "UnknownFieldTypeError",
    # Validation
    "ValidationError",
    # Handlers
    "format_error_for_display",
    "wrap_pydantic_error",
]
