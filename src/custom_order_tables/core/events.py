"""In-process event bus for order record notifications."""

from collections import defaultdict
from typing import Any, Callable, Dict, List

from custom_order_tables.core.logger import setup_logger

logger = setup_logger(__name__)

# Published after every order record write (or skipped no-op update)
ORDER_UPDATED_PROPS = "order_object_updated_props"

EventHandler = Callable[[Dict[str, Any]], None]


class EventBus:
    """Fire-and-forget publish/subscribe.

    Subscribers are called synchronously in subscription order. A failing
    subscriber is logged and does not stop the others or the publisher.
    """

    def __init__(self):
        self._handlers: Dict[str, List[EventHandler]] = defaultdict(list)

    def subscribe(self, event_name: str, handler: EventHandler) -> None:
        """Register a handler for an event name."""
        self._handlers[event_name].append(handler)

    def unsubscribe(self, event_name: str, handler: EventHandler) -> None:
        """Remove a previously registered handler (no-op if absent)."""
        handlers = self._handlers.get(event_name, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event_name: str, payload: Dict[str, Any]) -> int:
        """
        Publish an event to all subscribers.

        Args:
            event_name: Name of the event
            payload: Event payload passed to every handler

        Returns:
            Number of handlers that completed without error
        """
        delivered = 0
        for handler in list(self._handlers.get(event_name, [])):
            try:
                handler(payload)
                delivered += 1
            except Exception as e:
                logger.error(f"Event handler failed for {event_name}: {e}", exc_info=True)

        logger.debug(f"Published {event_name} to {delivered} handler(s)")
        return delivered
