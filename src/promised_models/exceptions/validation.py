"""Model validation failure."""

from collections.abc import Iterable
from typing import TYPE_CHECKING

from .base import PromisedModelsError

if TYPE_CHECKING:
    from promised_models.fields import Field


class ValidationError(PromisedModelsError):
    """
    One or more fields failed validation.

    Raised out of ``Model.validate()`` only; the synchronous model API never
    raises it.

    Attributes:
        fields: Failing Field instances, in field declaration order
    """

    def __init__(self, fields: Iterable["Field"] = ()):
        self.fields: list["Field"] = list(fields)
        names = ", ".join(self.field_names) or "none"
        super().__init__(
            user_message=f"Validation failed for fields: {names}",
            technical_message=f"{len(self.fields)} field(s) failed validation: {names}",
            recoverable=True,
            recovery_hint="Correct the listed fields and validate again",
        )

    @property
    def field_names(self) -> list[str]:
        """Names of the failing fields."""
        return [field.name for field in self.fields]
