"""
Event system for token notifications.

Components append `Event`s to the call's buffer while it executes; the token
publishes the buffer on the bus only once the call has committed, so a
rejected call never notifies anyone.
"""
from typing import Dict, List, Callable, Any
import logging
from pydantic import BaseModel, Field
from ...protocol.types.common import EventType

logger = logging.getLogger(__name__)


class Event(BaseModel):
    event_type: EventType
    data: Dict[str, Any] = Field(default_factory=dict)


class EventBus:
    """
    Simple event bus for token events.

    Events are delivered synchronously in the same thread.
    """

    def __init__(self):
        self.listeners: Dict[str, List[Callable]] = {}

    def subscribe(self, event_type: str, callback: Callable) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: Event name (e.g., 'Transfer', 'XmasAirdrop') or '*' for all
            callback: Function called with the event data as keyword arguments
        """
        event_type = _key(event_type)
        if event_type not in self.listeners:
            self.listeners[event_type] = []

        self.listeners[event_type].append(callback)
        logger.debug(f"Subscribed to event: {event_type}")

    def unsubscribe(self, event_type: str, callback: Callable) -> None:
        event_type = _key(event_type)
        if event_type in self.listeners:
            try:
                self.listeners[event_type].remove(callback)
                logger.debug(f"Unsubscribed from event: {event_type}")
            except ValueError:
                logger.warning(f"Callback not found for event: {event_type}")

    def emit(self, event_type: str, **data: Any) -> None:
        """
        Emit an event to all subscribers.

        Wildcard ('*') subscribers receive `event_type` as an extra keyword.
        """
        event_type = _key(event_type)
        listeners = self.listeners.get(event_type, [])
        wildcard = self.listeners.get("*", [])

        if not listeners and not wildcard:
            logger.debug(f"No listeners for event: {event_type}")
            return

        logger.debug(f"Emitting event: {event_type} to {len(listeners) + len(wildcard)} listener(s)")

        for callback in listeners:
            self._deliver(event_type, callback, data)
        for callback in wildcard:
            self._deliver(event_type, callback, dict(data, event_type=event_type))

    def publish(self, events: List[Event]) -> None:
        for event in events:
            self.emit(event.event_type, **event.data)

    def clear(self, event_type: str = None) -> None:
        """
        Clear all listeners for an event type, or all listeners if no type specified.
        """
        if event_type:
            self.listeners.pop(_key(event_type), None)
            logger.debug(f"Cleared listeners for event: {event_type}")
        else:
            self.listeners.clear()
            logger.debug("Cleared all event listeners")

    def _deliver(self, event_type: str, callback: Callable, data: Dict[str, Any]) -> None:
        try:
            callback(**data)
        except Exception as e:
            logger.error(f"Error in event callback for {event_type}: {e}", exc_info=True)


def _key(event_type) -> str:
    return event_type.value if isinstance(event_type, EventType) else str(event_type)


# Global event bus instance
event_bus = EventBus()
