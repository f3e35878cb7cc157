"""
Event bus for Heads Up.

Delivers typed events between services: validates them against the
registry, records them in the tracer and hands them to every subscriber.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, List, Optional, Set
from .events import EventType, BaseEvent
from .registry import EventRegistry
from .tracing import EventTracer

# Type aliases
EventHandler = Callable[[BaseEvent], Awaitable[None]]

def _handler_name(handler: EventHandler) -> str:
    return getattr(handler, "__qualname__", repr(handler))

class EventBus:
    """
    Central event bus for delivering typed events between services.

    Invalid events are logged and dropped. A failing handler is logged and
    never affects the publisher or the other handlers.
    """

    def __init__(self, registry: EventRegistry, tracer: Optional[EventTracer] = None):
        """
        Initialize the event bus.

        Args:
            registry: The event registry for validation and tracking
            tracer: Optional event tracer for observability
        """
        self.registry = registry
        self.tracer = tracer
        self.subscribers: Dict[EventType, List[EventHandler]] = {}
        self.wildcard_subscribers: List[EventHandler] = []
        self.logger = logging.getLogger(__name__)

    async def publish(self, event: BaseEvent, sender: str) -> None:
        """
        Publish an event to all subscribers and wait for them to handle it.

        Args:
            event: The event to publish
            sender: Name of the service publishing the event
        """
        if not event.producer_name:
            event.producer_name = sender

        try:
            self.registry.validate_schema(event)
        except (ValueError, TypeError) as e:
            self.logger.error(f"Event validation failed: {e}")
            return

        if self.tracer:
            self.tracer.record_event(event)

        handlers = self.subscribers.get(event.type, []) + self.wildcard_subscribers
        if not handlers:
            self.logger.debug(f"No subscribers for event type: {event.type}")
            return

        tasks = [asyncio.create_task(self._deliver_event(handler, event)) for handler in handlers]
        await asyncio.gather(*tasks)

    async def _deliver_event(self, handler: EventHandler, event: BaseEvent) -> None:
        try:
            await handler(event)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.logger.error(f"Error delivering event {event.type} to {_handler_name(handler)}: {e}",
                              exc_info=True)

    def subscribe(self, event_type: Optional[EventType], handler: EventHandler, service_name: str) -> None:
        """
        Subscribe a handler to one event type, or to all events if None.

        Args:
            event_type: The event type to subscribe to, or None for all events
            handler: Coroutine function called with each event
            service_name: Name of the subscribing service
        """
        if event_type is None:
            self.wildcard_subscribers.append(handler)
            self.logger.debug(f"Service {service_name} subscribed to all events")
            return

        self.subscribers.setdefault(event_type, []).append(handler)
        self.registry.register_consumer(service_name, event_type)
        self.logger.debug(f"Service {service_name} subscribed to {event_type}")

    def unsubscribe(self, event_type: Optional[EventType], handler: EventHandler) -> None:
        """Remove a handler; unknown handlers are ignored."""
        if event_type is None:
            if handler in self.wildcard_subscribers:
                self.wildcard_subscribers.remove(handler)
        elif handler in self.subscribers.get(event_type, []):
            self.subscribers[event_type].remove(handler)
            if not self.subscribers[event_type]:
                del self.subscribers[event_type]
        else:
            return
        self.logger.debug(f"Handler {_handler_name(handler)} unsubscribed from {event_type or 'all events'}")

    def get_subscribers(self, event_type: EventType) -> Set[EventHandler]:
        """Get specific and wildcard subscribers for an event type."""
        return set(self.subscribers.get(event_type, [])) | set(self.wildcard_subscribers)
