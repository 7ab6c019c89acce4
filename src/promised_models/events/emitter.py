"""Event emitter keyed by structured subscription keys.

Listeners are grouped by EventKey ``(event, field)``, so scoped
(``change`` on field ``name``) and unscoped (``change``) subscriptions live
side by side without encoding the field into the event string.
"""

import logging
from typing import Any, NamedTuple

from .protocols import EventKey, Listener

logger = logging.getLogger(__name__)


class _Subscription(NamedTuple):
    callback: Listener
    context: Any


class EventEmitter:
    """
    Listener registry with ordered, isolated notification.

    Listeners run in registration order over a snapshot of the listener
    list, so a listener may subscribe or unsubscribe while an event is
    being emitted. An exception raised by one listener is logged and does
    not prevent the others from running, unless ``propagate_errors`` is set.

    Example:
        ```python
        emitter = EventEmitter()
        emitter.on(EventKey("change", "name"), on_name_change)
        emitter.emit(EventKey("change", "name"), field)
        ```
    """

    def __init__(self, propagate_errors: bool = False, owner_name: str = "model"):
        """
        Initialize the emitter.

        Args:
            propagate_errors: Re-raise listener exceptions instead of logging them
            owner_name: Name of the owning object for logging
        """
        self._listeners: dict[EventKey, list[_Subscription]] = {}
        self._propagate_errors = propagate_errors
        self._owner_name = owner_name

    def on(self, key: EventKey, callback: Listener, context: Any = None) -> None:
        """
        Subscribe a listener (idempotent for the same callback and context).

        Args:
            key: Event key to listen to
            callback: Listener to call on emission
            context: Token identifying the subscription for ``off``
        """
        subscription = _Subscription(callback, context)
        listeners = self._listeners.setdefault(key, [])
        if subscription in listeners:
            logger.debug(f"{self._owner_name} listener already subscribed to {key}: {callback}")
            return
        listeners.append(subscription)
        logger.debug(f"Subscribed {self._owner_name} listener to {key}: {callback}")

    def off(
        self,
        key: EventKey,
        callback: Listener | None = None,
        context: Any = None,
    ) -> None:
        """
        Unsubscribe listeners.

        Args:
            key: Event key to stop listening to
            callback: Listener to remove; all listeners of the key if None
            context: Only remove the subscription made with this context
        """
        listeners = self._listeners.get(key)
        if not listeners:
            logger.debug(f"No {self._owner_name} listeners to remove from {key}")
            return

        if callback is None:
            remaining = []
        else:
            remaining = [
                sub for sub in listeners
                if not (sub.callback == callback and (context is None or sub.context is context))
            ]

        if len(remaining) == len(listeners):
            logger.warning(
                f"Attempted to unsubscribe unknown {self._owner_name} listener from {key}: {callback}"
            )
        if remaining:
            self._listeners[key] = remaining
        else:
            del self._listeners[key]

    def emit(self, key: EventKey, *args: Any) -> int:
        """
        Call every listener of a key.

        Args:
            key: Event key to emit
            *args: Arguments passed to each listener

        Returns:
            Number of listeners called
        """
        listeners = list(self._listeners.get(key, ()))

        for subscription in listeners:
            try:
                subscription.callback(*args)
            except Exception as e:
                if self._propagate_errors:
                    raise
                logger.error(
                    f"Error in {self._owner_name} listener {subscription.callback} for {key}: {e}",
                    exc_info=True,
                )
        return len(listeners)

    def count(self, key: EventKey) -> int:
        """Get the number of listeners subscribed to a key."""
        return len(self._listeners.get(key, ()))

    def has_listeners(self) -> bool:
        """Check if any listener is subscribed to any key."""
        return bool(self._listeners)

    def clear(self) -> None:
        """Remove all listeners."""
        count = sum(len(listeners) for listeners in self._listeners.values())
        self._listeners.clear()
        if count > 0:
            logger.debug(f"Cleared {count} {self._owner_name} listener(s)")

    def __contains__(self, key: object) -> bool:
        return key in self._listeners

    def __len__(self) -> int:
        return sum(len(listeners) for listeners in self._listeners.values())

    def __bool__(self) -> bool:
        return bool(self._listeners)
