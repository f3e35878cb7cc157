"""
Base service implementation for Heads Up.

Services are long-lived components that talk to each other only through the
event bus. BaseService gives them a common start/stop lifecycle, event
subscription from a class-level table and structured logging.
"""

import asyncio
import structlog
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Coroutine, Dict, Optional, Set
from .events import EventType, BaseEvent
from .registry import ServiceRegistry
from .bus import EventBus

class BaseService(ABC):
    """
    Base class for all services.

    Subclasses declare the events they publish in PRODUCES_EVENTS (event
    type to ``{'schema': ..., 'description': ...}``), the events they handle
    in CONSUMES_EVENTS (event type to handler method name) and the services
    that must already be running in REQUIRED_SERVICES.
    """

    PRODUCES_EVENTS: ClassVar[Dict[EventType, Dict[str, Any]]] = {}
    CONSUMES_EVENTS: ClassVar[Dict[EventType, str]] = {}
    REQUIRED_SERVICES: ClassVar[Set[str]] = set()

    def __init__(self,
                 event_bus: EventBus,
                 service_registry: ServiceRegistry,
                 name: Optional[str] = None,
                 config: Optional[Any] = None):
        """
        Initialize the service.

        Args:
            event_bus: The event bus for publishing and subscribing to events
            service_registry: The service registry for lifecycle tracking
            name: Optional service name (defaults to class name)
            config: Optional ApplicationConfig
        """
        from headsup.events.system import ServiceStateChangedEvent

        self.event_bus = event_bus
        self.service_registry = service_registry
        self.name = name or self.__class__.__name__
        self.config = config

        self.logger = structlog.get_logger(service=self.name)

        self._running = False
        self._lock = asyncio.Lock()
        self._background_tasks: Set[asyncio.Task] = set()

        produced = dict(self.PRODUCES_EVENTS)
        produced.setdefault(EventType.SERVICE_STATE_CHANGED, {
            'schema': ServiceStateChangedEvent,
            'description': "A service changed lifecycle state",
        })
        for event_type, event_info in produced.items():
            event_bus.registry.register_producer(self.name, event_type)
            if 'schema' in event_info and 'description' in event_info:
                event_bus.registry.register_event(
                    event_type,
                    event_info['schema'],
                    event_info['description']
                )

        self.service_registry.register_service(self.name, self)
        for dependency in self.REQUIRED_SERVICES:
            self.service_registry.register_dependency(self.name, dependency)

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """
        Start the service.

        Checks required services, subscribes to consumed events and marks the
        service running. Implementations call super().start() first.
        """
        async with self._lock:
            if self._running:
                self.logger.warning("Service already running")
                return

            for dependency in self.REQUIRED_SERVICES:
                if self.service_registry.get_service_state(dependency) != 'running':
                    raise RuntimeError(f"Required service {dependency} is not running")

            for event_type, handler_name in self.CONSUMES_EVENTS.items():
                self.event_bus.subscribe(event_type, getattr(self, handler_name), self.name)

            self._running = True
            self.service_registry.set_service_state(self.name, 'running')
            self.logger.info("Service started")

        await self.publish_service_state('started')

    async def stop(self) -> None:
        """
        Stop the service.

        Waits for events still being published, unsubscribes and marks the
        service stopped. Implementations call super().stop() at the end.
        """
        async with self._lock:
            if not self._running:
                self.logger.warning("Service already stopped")
                return

            await self.publish_service_state('stopping')
            await self.drain()

            for event_type, handler_name in self.CONSUMES_EVENTS.items():
                self.event_bus.unsubscribe(event_type, getattr(self, handler_name))

            self._running = False
            self.service_registry.set_service_state(self.name, 'stopped')
            self.logger.info("Service stopped")

        await self.event_bus.publish(self._state_event('stopped'), self.name)

    async def publish(self, event: BaseEvent) -> None:
        """
        Publish an event through the bus.

        Args:
            event: The event to publish
        """
        if not self._running:
            self.logger.warning("Attempted publish while stopped", event_type=event.type)
            return

        if not event.producer_name:
            event.producer_name = self.name

        await self.event_bus.publish(event, self.name)

    def publish_soon(self, event: BaseEvent) -> None:
        """
        Publish an event from synchronous code.

        The publish runs as a task on the current loop; stop() waits for it.
        """
        self._spawn(self.publish(event))

    async def drain(self) -> None:
        """Wait for every publish started with publish_soon()."""
        while self._background_tasks:
            results = await asyncio.gather(*list(self._background_tasks), return_exceptions=True)
            for result in results:
                if isinstance(result, Exception):
                    self.logger.error("Background publish failed", error=str(result))

    async def publish_service_state(self, state: str) -> None:
        """
        Publish a service state change event.

        Args:
            state: New state of the service
        """
        await self.publish(self._state_event(state))

    def _state_event(self, state: str) -> BaseEvent:
        from headsup.events.system import ServiceStateChangedEvent

        return ServiceStateChangedEvent(
            producer_name=self.name,
            service_name=self.name,
            state=state
        )

    def _spawn(self, coro: Coroutine) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)
        return task

    @abstractmethod
    async def handle_event(self, event: BaseEvent) -> None:
        """
        Handle an event from the event bus.

        Handlers listed in CONSUMES_EVENTS normally delegate here.

        Args:
            event: The event to handle
        """
