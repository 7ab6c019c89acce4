"""Declarative field records.

Three kinds of records describe how a field behaves, and they share one
shape (FieldBehavior):

- the base behavior every field starts from (see builder.py)
- a FieldType: a named, stateless bundle registered under a type tag
- a FieldSchema: the per-field declaration written in a model's schema

Every hook receives the Field instance as its first argument:

    parse(field, raw) -> value
    validator(field) -> bool | Awaitable[bool]
    equals(field, other) -> bool
    serializer(field) -> Any

Pydantic records which attributes were given explicitly
(``model_fields_set``), which is what lets a declared ``default=None``
override a type's default while an omitted one does not.
"""

from collections.abc import Callable, Mapping
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from promised_models.exceptions import wrap_pydantic_error

Hook = Callable[..., Any]

HOOK_NAMES: tuple[str, ...] = ("parse", "validator", "equals", "serializer")


class FieldBehavior(BaseModel):
    """
    Default value and hooks of a field layer.

    Unknown keywords are rejected. The validation hook may be passed as
    either ``validator`` or ``validate``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, extra="forbid")

    default: Any = Field(
        default=None,
        description="Constant default, or a zero-argument callable producing it",
    )
    parse: Hook | None = Field(default=None, description="Convert raw input to a field value")
    validator: Hook | None = Field(
        default=None,
        validation_alias=AliasChoices("validator", "validate"),
        description="Return True/False, or an awaitable resolving to it",
    )
    equals: Hook | None = Field(
        default=None, description="Compare the field value with another value"
    )
    serializer: Hook | None = Field(
        default=None, description="Return the serializable form of the field value"
    )

    def declared(self) -> dict[str, Any]:
        """
        Get the attributes this layer explicitly declares.

        Hooks declared as None count as not declared. A default counts as
        declared whenever it was passed, even as None.

        Returns:
            Mapping of attribute name to declared value
        """
        declared: dict[str, Any] = {}
        if "default" in self.model_fields_set:
            declared["default"] = self.default
        for name in HOOK_NAMES:
            hook = getattr(self, name)
            if hook is not None:
                declared[name] = hook
        return declared


class FieldType(FieldBehavior):
    """
    Reusable field behavior selected by a type tag.

    Example:
        ```python
        integer = FieldType(name="integer", default=0, parse=lambda field, value: int(value))
        registry.register(integer)
        ```
    """

    name: str = Field(min_length=1, description="Type tag used by schemas")


class FieldSchema(FieldBehavior):
    """
    Per-field declaration in a model schema.

    Keyword arguments beyond the known attributes are type-specific options
    and are exposed on the built field as ``field.options``. The validation
    hook may also be given as ``validate``, which is never an option.

    Example:
        ```python
        class User(Model):
            schema = {
                "name": FieldSchema(type="string", max_length=40),
                "token": {"type": "string", "internal": True},
            }
        ```
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, extra="allow")

    type: str = Field(min_length=1, description="Tag of the registered FieldType")
    internal: bool = Field(default=False, description="Exclude the field from to_json()")

    @property
    def options(self) -> dict[str, Any]:
        """Type-specific options passed as extra keywords."""
        return dict(self.model_extra or {})

    @classmethod
    def coerce(cls, name: str, entry: "FieldSchema | Mapping[str, Any] | str") -> "FieldSchema":
        """
        Build a FieldSchema from any accepted declaration form.

        Args:
            name: Field name (used in error messages)
            entry: A FieldSchema, a mapping of its attributes, or a bare type tag

        Returns:
            The validated FieldSchema

        Raises:
            SchemaValidationError: If the entry is malformed
        """
        if isinstance(entry, FieldSchema):
            return entry
        if isinstance(entry, str):
            entry = {"type": entry}
        try:
            return cls.model_validate(entry)
        except ValidationError as e:
            raise wrap_pydantic_error(e, name) from e
