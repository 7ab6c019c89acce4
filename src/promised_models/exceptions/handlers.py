"""
Error conversion helpers.

Low-level errors raised while reading a model declaration (Pydantic
validation of schema entries) are converted to the library's own
exception types so callers only ever deal with PromisedModelsError
subclasses for configuration mistakes.

## Examples

### Converting Pydantic Errors

```python
from pydantic import ValidationError

from promised_models.exceptions import wrap_pydantic_error

try:
    schema = FieldSchema.model_validate(entry)
except ValidationError as e:
    raise wrap_pydantic_error(e, name) from e
```

### Displaying Errors

```python
message, hint = format_error_for_display(error)
```
"""

from typing import Optional

from .base import PromisedModelsError
from .config import SchemaValidationError


def wrap_pydantic_error(error: Exception, field: str) -> PromisedModelsError:
    """
    Convert a Pydantic validation error on a schema entry.

    Args:
        error: The Pydantic ValidationError
        field: Name of the model field whose schema entry failed

    Returns:
        A SchemaValidationError describing every reported problem
    """
    from pydantic import ValidationError

    if isinstance(error, ValidationError):
        errors = error.errors()
        if len(errors) == 1:
            first_error = errors[0]
            loc = ".".join(str(part) for part in first_error.get("loc", ())) or field
            reason = first_error.get("msg", "validation failed")
            return SchemaValidationError(
                field=field,
                value=first_error.get("input"),
                error_msg=f"{loc}: {reason}",
            )
        if errors:
            error_lines = []
            for err in errors:
                loc = ".".join(str(part) for part in err.get("loc", ("unknown",)))
                error_lines.append(f"  - {loc}: {err.get('msg', 'validation failed')}")

            combined_msg = f"{len(errors)} validation errors:\n" + "\n".join(error_lines)
            return SchemaValidationError(field=field, value=None, error_msg=combined_msg)

    return SchemaValidationError(field=field, value=None, error_msg=str(error))


def format_error_for_display(error: Exception) -> tuple[str, Optional[str]]:
    """
    Format an exception for user display.

    Args:
        error: The exception to format

    Returns:
        Tuple of (user_message, recovery_hint or None)
    """
    if isinstance(error, PromisedModelsError):
        return error.user_message, error.recovery_hint

    error_type = type(error).__name__
    return f"{error_type}: {error}", None
