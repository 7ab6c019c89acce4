"""Event routing between fields and their model.

- **EventEmitter**: listener registry keyed by EventKey ``(event, field)``
- **ModelEvent**: names of events emitted by models
- **NotificationScheduler**: defers debounced field notifications
  (AsyncioScheduler, ManualScheduler)
"""

from .emitter import EventEmitter
from .protocols import EventKey, Listener, ModelEvent
from .scheduler import AsyncioScheduler, ManualScheduler, NotificationScheduler, ScheduledCall

__all__ = [
    "AsyncioScheduler",
    "EventEmitter",
    "EventKey",
    "Listener",
    "ManualScheduler",
    "ModelEvent",
    "NotificationScheduler",
    "ScheduledCall",
]
