"""Field: a single named value slot of a model."""

import logging
from collections.abc import Awaitable
from typing import TYPE_CHECKING, Any

from promised_models.events import NotificationScheduler, ScheduledCall

from .builder import FieldDescriptor

if TYPE_CHECKING:
    from promised_models.model import Model

logger = logging.getLogger(__name__)

_MISSING = object()


class Field:
    """
    Current value, committed value and change notification of one field.

    The value is always the output of the field's parse hook. Mutations
    (``set``, ``revert``) schedule one debounced notification: until the
    scheduler flushes it, further mutations do not schedule another. When
    the flush runs, the owning model emits ``change`` for this field and
    then the unscoped ``change``.

    Attributes:
        model: Owning model (notifications are routed through it)
        name: Field name in the model schema
        descriptor: Resolved behavior of the field
        value: Current value
        committed_value: Value at the last commit
    """

    def __init__(
        self,
        model: "Model",
        descriptor: FieldDescriptor,
        scheduler: NotificationScheduler,
        init_value: Any = _MISSING,
    ):
        """
        Initialize the field.

        Args:
            model: Owning model
            descriptor: Resolved field behavior
            scheduler: Scheduler used to defer change notifications
            init_value: Raw initial value; the descriptor default if omitted
        """
        self.model = model
        self.name = descriptor.name
        self.descriptor = descriptor
        self._scheduler = scheduler
        self._change_pending = False
        self._pending_call: ScheduledCall | None = None

        if init_value is _MISSING:
            init_value = descriptor.resolve_default()
        self.value: Any = self.parse(init_value)
        self.committed_value: Any = self.value

    @property
    def internal(self) -> bool:
        """Whether the field is excluded from ``Model.to_json()``."""
        return self.descriptor.internal

    @property
    def options(self) -> dict[str, Any]:
        """Type-specific schema options."""
        return self.descriptor.options

    @property
    def change_pending(self) -> bool:
        """Whether a change notification is waiting to be flushed."""
        return self._change_pending

    def get(self) -> Any:
        return self.value

    def set(self, value: Any) -> None:
        """
        Set the field value.

        Nothing happens if ``value`` equals the current value.

        Args:
            value: Raw value, passed through ``parse``
        """
        if not self.is_equal(value):
            self.value = self.parse(value)
            self._schedule_change()

    def parse(self, value: Any) -> Any:
        """Convert a raw value to the field's value type."""
        return self.descriptor.parse(self, value)

    def validate(self) -> bool | Awaitable[bool]:
        """
        Check if the field is valid.

        Returns:
            True/False, or an awaitable resolving to True/False
        """
        return self.descriptor.validator(self)

    def is_equal(self, value: Any) -> bool:
        """Check a value to be equal to the field value."""
        return bool(self.descriptor.equals(self, value))

    def is_changed(self) -> bool:
        """Check if the field was changed after the last commit."""
        return not self.is_equal(self.committed_value)

    def commit(self) -> None:
        """Make the current value the baseline for change detection."""
        self.committed_value = self.value

    def revert(self) -> None:
        """Restore the value of the last commit."""
        if not self.is_equal(self.committed_value):
            self.value = self.committed_value
            self._schedule_change()

    def to_json(self) -> Any:
        """Get the serializable representation of the value."""
        return self.descriptor.serializer(self)

    def dispose(self) -> None:
        """Cancel a pending change notification."""
        if self._pending_call is not None:
            self._pending_call.cancel()
        self._pending_call = None
        self._change_pending = False

    def _schedule_change(self) -> None:
        if self._change_pending:
            return
        self._change_pending = True
        call = self._scheduler.schedule(self._flush_change)
        # the scheduler may have run the flush already
        if self._change_pending:
            self._pending_call = call

    def _flush_change(self) -> None:
        if not self._change_pending:
            return
        self._change_pending = False
        self._pending_call = None
        logger.debug(f"Field '{self.name}' changed")
        self.model._emit_field_change(self)

    def __repr__(self) -> str:
        return f"<Field {self.name}={self.value!r}>"
