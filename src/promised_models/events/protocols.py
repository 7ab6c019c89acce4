"""Event names and listener protocol for model notifications."""

from enum import Enum
from typing import Any, NamedTuple, Protocol, runtime_checkable


class ModelEvent(str, Enum):
    """Events emitted by models."""

    CHANGE = "change"  # A field value changed (scoped to the field, then unscoped)


class EventKey(NamedTuple):
    """
    Subscription key.

    ``field`` is None for unscoped events and a field name for events
    scoped to one field.
    """

    event: str
    field: str | None = None

    def __str__(self) -> str:
        if self.field is None:
            return self.event
        return f"{self.event}:{self.field}"


@runtime_checkable
class Listener(Protocol):
    """
    Callable subscribed to model events.

    Change listeners receive the Field that changed. Events emitted with
    ``Model.trigger`` receive whatever arguments were passed to it.
    """

    def __call__(self, *args: Any) -> Any: ...
