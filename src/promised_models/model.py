"""Observable model built from a declarative field schema."""

import asyncio
import inspect
import logging
from collections.abc import Callable, Iterable, Mapping
from enum import Enum
from typing import Any, ClassVar

from promised_models.config import ModelConfig
from promised_models.events import (
    AsyncioScheduler,
    EventEmitter,
    EventKey,
    ModelEvent,
    NotificationScheduler,
)
from promised_models.exceptions import UnknownFieldError, ValidationError
from promised_models.fields import (
    Field,
    FieldSchema,
    FieldTypeRegistry,
    build_descriptor,
    default_registry,
)

logger = logging.getLogger(__name__)

_UNSET = object()

SchemaEntry = FieldSchema | Mapping[str, Any] | str
Names = str | Enum | Iterable[str | Enum]


def _split_names(names: Names) -> list[str]:
    """Split a space-separated name list (or an iterable of names)."""
    if isinstance(names, Enum):
        return [str(names.value)]
    if isinstance(names, str):
        return names.split()
    result: list[str] = []
    for name in names:
        result.extend(_split_names(name))
    return result


def _first_set(*values: Any) -> Any:
    """Get the first value that is not None."""
    return next((value for value in values if value is not None), None)


class Model:
    """
    Record of named, typed fields with change tracking and validation.

    Subclasses declare their fields in the ``schema`` class attribute; each
    entry names a registered field type and may override its default and
    hooks. Field order follows the schema.

    Event-Driven Architecture:
        Each field change is debounced per field and then emitted as
        ``change`` scoped to the field followed by the unscoped ``change``.
        Listeners receive the Field that changed.
        Notifications are deferred on the running asyncio loop; hosts
        without one should pass a ManualScheduler and call run_pending().

    Error Handling:
        Configuration mistakes (unknown field type, unknown field name,
        malformed schema) raise synchronously. Validation failures only
        surface from ``await model.validate()`` as ValidationError.

    Usage Example:
        ```python
        class User(Model):
            schema = {
                "name": {"type": "string"},
                "password": {"type": "string", "internal": True},
            }

        user = User({"name": "Ann"})
        user.on("name", "change", lambda field: print(field.get()))
        user.set("name", "Bob")
        await user.validate()
        user.commit()
        ```
    """

    schema: ClassVar[dict[str, SchemaEntry]] = {}
    registry: ClassVar[FieldTypeRegistry | None] = None
    config: ClassVar[ModelConfig | None] = None

    def __init__(
        self,
        initial_data: Mapping[str, Any] | None = None,
        *,
        registry: FieldTypeRegistry | None = None,
        scheduler: NotificationScheduler | None = None,
        config: ModelConfig | None = None,
    ):
        """
        Build the model's fields.

        Args:
            initial_data: Raw initial values by field name (missing fields use their default)
            registry: Field type registry (defaults to the class registry, then default_registry)
            scheduler: Notification scheduler (defaults to an AsyncioScheduler)
            config: Runtime settings (defaults to the class config, then ModelConfig())

        Raises:
            UnknownFieldTypeError: If a schema entry names an unregistered type
            SchemaValidationError: If a schema entry is malformed
        """
        data = initial_data or {}
        self._config = _first_set(config, type(self).config, ModelConfig())
        self._registry = _first_set(registry, type(self).registry, default_registry)
        if scheduler is None:
            scheduler = AsyncioScheduler(self._config.notify_delay)
        self._scheduler = scheduler
        self._emitter = EventEmitter(
            propagate_errors=self._config.propagate_listener_errors,
            owner_name=type(self).__name__,
        )

        self.fields: dict[str, Field] = {}
        for name, entry in type(self).schema.items():
            descriptor = build_descriptor(name, FieldSchema.coerce(name, entry), self._registry)
            if name in data:
                self.fields[name] = Field(self, descriptor, self._scheduler, data[name])
            else:
                self.fields[name] = Field(self, descriptor, self._scheduler)

        logger.debug(f"{type(self).__name__} built with fields: {list(self.fields)}")

    @classmethod
    def extend(
        cls, schema: Mapping[str, SchemaEntry], *, name: str | None = None, **attrs: Any
    ) -> type["Model"]:
        """
        Create a subclass with additional or overridden field declarations.

        Args:
            schema: Entries added to (or replacing) the parent schema
            name: Class name of the subclass (defaults to the parent's)
            **attrs: Other class attributes (e.g. registry, config, methods)

        Returns:
            The new model class
        """
        namespace = {"schema": {**cls.schema, **schema}, **attrs}
        return type(name or cls.__name__, (cls,), namespace)

    # =================================================================
    # Field Access
    # =================================================================

    def field(self, name: str) -> Field:
        """
        Get a Field instance by name.

        Raises:
            UnknownFieldError: If the field is not declared
        """
        try:
            return self.fields[name]
        except KeyError:
            raise UnknownFieldError(name, type(self).__name__) from None

    def get(self, name: str) -> Any:
        """
        Get a field value.

        Args:
            name: Field name

        Returns:
            The parsed field value

        Raises:
            UnknownFieldError: If the field is not declared
        """
        return self.field(name).get()

    def set(self, name: str | Mapping[str, Any], value: Any = _UNSET) -> bool | None:
        """
        Set one field, or several from a mapping.

        Args:
            name: Field name, or a mapping of field names to values
            value: New raw value (single-field form)

        Returns:
            Single-field form: True if the field exists, False otherwise.
            Mapping form: None; unknown keys are ignored.
        """
        if value is _UNSET:
            if not isinstance(name, Mapping):
                raise TypeError("set() needs a value, or a mapping of field values")
            for key, item in name.items():
                if not self.set(key, item):
                    logger.debug(f"Ignoring unknown field '{key}' in {type(self).__name__}.set()")
            return None

        field = self.fields.get(name)
        if field is None:
            return False
        field.set(value)
        return True

    def to_json(self) -> dict[str, Any]:
        """Get the serializable values of all non-internal fields."""
        return {
            name: field.to_json()
            for name, field in self.fields.items()
            if not field.internal
        }

    # =================================================================
    # Change Tracking
    # =================================================================

    def is_changed(self) -> bool:
        """Check if any field changed since the last commit."""
        return any(field.is_changed() for field in self.fields.values())

    def commit(self) -> None:
        """Commit the current value of every field."""
        for field in self.fields.values():
            field.commit()

    def revert(self) -> None:
        """Revert every field to its last committed value."""
        for field in self.fields.values():
            field.revert()

    # =================================================================
    # Validation
    # =================================================================

    async def validate(self) -> None:
        """
        Validate every field concurrently.

        All fields are evaluated, even after one is known to be invalid.

        Raises:
            ValidationError: Listing the invalid fields in declaration order
        """
        fields = list(self.fields.values())
        results = await asyncio.gather(*(self._validate_field(field) for field in fields))
        invalid = [field for field, is_valid in zip(fields, results) if not is_valid]
        if invalid:
            logger.debug(f"{type(self).__name__} invalid fields: {[f.name for f in invalid]}")
            raise ValidationError(invalid)

    async def is_valid(self) -> bool:
        """Validate the model and report the outcome as a boolean."""
        try:
            await self.validate()
        except ValidationError:
            return False
        return True

    @staticmethod
    async def _validate_field(field: Field) -> bool:
        result = field.validate()
        if inspect.isawaitable(result):
            result = await result
        return bool(result)

    # =================================================================
    # Event System
    # =================================================================

    def on(
        self,
        fields_or_events: Names,
        events_or_callback: Names | Callable[..., Any],
        callback: Callable[..., Any] | Any = None,
        context: Any = None,
    ) -> None:
        """
        Subscribe to model or field events.

        ``on(events, callback[, context])`` subscribes to unscoped events;
        ``on(fields, events, callback[, context])`` subscribes to each event
        scoped to each field. Both lists are space separated.

        Args:
            fields_or_events: Field names, or event names in the unscoped form
            events_or_callback: Event names, or the callback in the unscoped form
            callback: Listener, or the context in the unscoped form
            context: Token identifying the subscription for ``un`` (defaults to the model)
        """
        fields, events, callback, context = self._resolve_subscription(
            fields_or_events, events_or_callback, callback, context
        )
        for key in self._keys(fields, events):
            self._emitter.on(key, callback, context)

    def un(
        self,
        fields_or_events: Names,
        events_or_callback: Names | Callable[..., Any] | None = None,
        callback: Callable[..., Any] | Any = None,
        context: Any = None,
    ) -> None:
        """
        Unsubscribe from model or field events.

        Takes the same arguments as ``on``. Without a callback, every
        listener of the addressed events is removed.
        """
        if events_or_callback is None:
            for key in self._keys(None, fields_or_events):
                self._emitter.off(key)
            return

        fields, events, callback, context = self._resolve_subscription(
            fields_or_events, events_or_callback, callback, context
        )
        if callback is None:
            context = None
        for key in self._keys(fields, events):
            self._emitter.off(key, callback, context)

    def trigger(self, events: Names, *args: Any, field: Names | None = None) -> None:
        """
        Emit events directly.

        Args:
            events: Space-separated event names
            *args: Arguments passed to listeners
            field: Space-separated field names to scope the events to
        """
        for key in self._keys(field, events):
            self._emitter.emit(key, *args)

    def listener_count(self, event: str | Enum, field: str | None = None) -> int:
        """
        Get the number of listeners of an event (optionally scoped to a field).

        Raises:
            ValueError: If the event name (or a given field name) is blank
        """
        keys = self._keys(field, event)
        if not keys:
            raise ValueError(
                f"listener_count() needs non-empty names, got event={event!r}, field={field!r}"
            )
        return self._emitter.count(keys[0])

    def has_listeners(self) -> bool:
        """Check if anything is subscribed to this model."""
        return self._emitter.has_listeners()

    def dispose(self) -> None:
        """Cancel pending notifications and remove all listeners."""
        for field in self.fields.values():
            field.dispose()
        self._emitter.clear()

    def _resolve_subscription(
        self,
        fields_or_events: Names,
        events_or_callback: Any,
        callback: Any,
        context: Any,
    ) -> tuple[Names | None, Names, Callable[..., Any] | None, Any]:
        if callable(events_or_callback) and not isinstance(events_or_callback, (str, Enum)):
            # unscoped form: (events, callback, context)
            if context is None:
                context = callback
            fields, events, callback = None, fields_or_events, events_or_callback
        else:
            fields, events = fields_or_events, events_or_callback
        if context is None:
            context = self
        return fields, events, callback, context

    @staticmethod
    def _keys(fields: Names | None, events: Names) -> list[EventKey]:
        event_names = _split_names(events)
        if not fields:
            return [EventKey(event) for event in event_names]
        return [
            EventKey(event, field)
            for field in _split_names(fields)
            for event in event_names
        ]

    def _emit_field_change(self, field: Field) -> None:
        self.trigger(ModelEvent.CHANGE, field, field=field.name)
        self.trigger(ModelEvent.CHANGE, field)

    def __contains__(self, name: object) -> bool:
        return name in self.fields

    def __repr__(self) -> str:
        values = ", ".join(f"{name}={field.get()!r}" for name, field in self.fields.items())
        return f"<{type(self).__name__} {values}>"
