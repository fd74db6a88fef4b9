"""
Event system for the table.

The table owns one emitter and announces exposed cards, shuffles, and round
boundaries on it. Card counters and other observers subscribe; they never
reach into the table directly.
"""

from collections import defaultdict
from enum import Enum
from typing import Any, Callable, Dict, Optional, Union
import logging

logger = logging.getLogger("bjsim.events")


class EventPriority(Enum):
    """Priority levels for event handlers."""

    LOW = 0
    NORMAL = 1
    HIGH = 2
    CRITICAL = 3


class TableEventType(Enum):
    """Events announced by a table."""

    ROUND_STARTED = "round_started"
    CARD_EXPOSED = "card_exposed"
    SHOE_SHUFFLED = "shoe_shuffled"
    ROUND_ENDED = "round_ended"


class EventEmitter:
    """
    Synchronous event emitter with priority-ordered handlers.

    Handlers run inline, highest priority first, in subscription order within
    a priority. A handler that raises is logged and the exception propagates
    to whoever emitted the event.
    """

    def __init__(self):
        """Initialize the event emitter."""
        self._listeners = defaultdict(list)

    def on(
        self,
        event_type: Union[str, Enum],
        callback: Callable,
        priority: EventPriority = EventPriority.NORMAL,
    ) -> Callable:
        """
        Subscribe to an event type.

        Args:
            event_type: The event type to subscribe to (string or enum)
            callback: Function to call when event occurs, signature: fn(event_data)
            priority: Priority level for this handler

        Returns:
            Unsubscribe function that can be called to remove this subscription
        """
        if isinstance(event_type, Enum):
            event_type = event_type.name

        handler = {"callback": callback, "priority": priority.value}
        handlers = self._listeners[event_type]

        # Higher priorities first
        for i, existing in enumerate(handlers):
            if existing["priority"] < priority.value:
                handlers.insert(i, handler)
                break
        else:
            handlers.append(handler)

        def unsubscribe():
            for i, existing in enumerate(self._listeners[event_type]):
                if existing is handler:
                    self._listeners[event_type].pop(i)
                    break

        return unsubscribe

    def once(
        self,
        event_type: Union[str, Enum],
        callback: Callable,
        priority: EventPriority = EventPriority.NORMAL,
    ) -> Callable:
        """
        Subscribe to an event type for a single occurrence.

        Returns:
            Unsubscribe function that can be called to remove this subscription
        """
        unsubscribe_ref = []

        def one_time_handler(event_data):
            try:
                callback(event_data)
            finally:
                unsubscribe_ref[0]()

        unsubscribe_ref.append(self.on(event_type, one_time_handler, priority))
        return unsubscribe_ref[0]

    def emit(self, event_type: Union[str, Enum], data: Dict[str, Any]) -> None:
        """
        Emit an event to all registered listeners.

        Args:
            event_type: The type of event to emit
            data: The data to include with the event
        """
        if isinstance(event_type, Enum):
            event_type = event_type.name

        # Copy so handlers may unsubscribe while being called
        for handler in list(self._listeners.get(event_type, [])):
            try:
                handler["callback"](data)
            except Exception as e:
                logger.error(
                    f"Error in event handler for {event_type}: {e}", exc_info=True
                )
                raise

    def listener_count(self, event_type: Union[str, Enum]) -> int:
        if isinstance(event_type, Enum):
            event_type = event_type.name
        return len(self._listeners.get(event_type, []))

    def remove_all_listeners(
        self, event_type: Optional[Union[str, Enum]] = None
    ) -> None:
        """
        Remove all listeners for a specific event type or all events.

        Args:
            event_type: Optional event type. If None, removes all listeners for all events.
        """
        if event_type is None:
            self._listeners.clear()
        else:
            if isinstance(event_type, Enum):
                event_type = event_type.name
            self._listeners[event_type].clear()
