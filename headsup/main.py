"""
Main entry point for Heads Up.

Wires the event system and the sensor, detector and debug services together,
replays orientation samples through them and logs every confirmed pose
change. Handles signals, logging setup and shutdown.
"""

import argparse
import asyncio
import logging
import signal
import sys
import structlog
from typing import Any, Dict, List, Optional

from headsup.core import (
    EventRegistry, ServiceRegistry, EventBus, EventTracer, BaseEvent, EventType, get_config
)
from headsup.core.config import ApplicationConfig, LogLevel
from headsup.events.system import ApplicationStartupCompletedEvent
from headsup.hardware.orientation import OrientationSensor, ReplayOrientationSensor
from headsup.orientation.models import OrientationSample
from headsup.services import OrientationDebugService, OrientationSensorService, PoseDetectorService

APP_NAME = "headsup"

def demo_samples() -> List[OrientationSample]:
    """Portrait for a second, forehead stance for two, a flick back, then portrait."""
    portrait = OrientationSample(alpha=10.0, beta=60.0, gamma=5.0)
    forehead = OrientationSample(alpha=10.0, beta=5.0, gamma=85.0)
    return [portrait] * 20 + [forehead] * 40 + [portrait] + [forehead] * 5 + [portrait] * 30

def setup_logging(level: str = LogLevel.INFO.value):
    """Configure structured logging for the application."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level),
        stream=sys.stdout,
    )

class HeadsUpApplication:
    """
    Main application class for Heads Up.

    Owns the event system and the services, starts them in dependency order
    and stops them in reverse.
    """

    def __init__(self, sensor: OrientationSensor, config: Optional[ApplicationConfig] = None,
                 debug_readout: bool = False):
        self.logger = structlog.get_logger(app=APP_NAME)
        self.config = config or get_config()
        self.sensor = sensor
        self.debug_readout = debug_readout or self.config.debug

        self.event_registry = EventRegistry()
        self.service_registry = ServiceRegistry()
        self.event_registry.register_event(
            EventType.APPLICATION_STARTUP_COMPLETED,
            ApplicationStartupCompletedEvent,
            "All services are running",
        )
        self.event_registry.register_producer(APP_NAME, EventType.APPLICATION_STARTUP_COMPLETED)

        if self.config.event.tracing_enabled:
            self.event_tracer = EventTracer(max_events=self.config.event.max_trace_events)
        else:
            self.event_tracer = None

        self.event_bus = EventBus(self.event_registry, self.event_tracer)
        self.event_bus.subscribe(EventType.POSE_CHANGED, self._on_pose_changed, APP_NAME)

        self.services: Dict[str, Any] = {}
        self.pose_changes = 0
        self._running = True
        self._stop_event = asyncio.Event()

    async def initialize(self):
        """Create and start all services."""
        self.logger.info("Initializing Heads Up")

        try:
            # Consumers first so no sample is published before they listen.
            self.services["detector"] = await self._init_service(PoseDetectorService)
            if self.debug_readout:
                self.services["debug"] = await self._init_service(OrientationDebugService)
            self.services["sensor"] = await self._init_service(OrientationSensorService,
                                                               sensor=self.sensor)

            await self.event_bus.publish(ApplicationStartupCompletedEvent(producer_name=APP_NAME), APP_NAME)
            self.logger.info("Heads Up initialization complete")

        except Exception as e:
            self.logger.error("Failed to initialize application", error=str(e), exc_info=True)
            raise

    async def _init_service(self, service_class, **kwargs):
        """
        Create and start a service.

        Args:
            service_class: The service class to create
            **kwargs: Additional arguments for the service constructor

        Returns:
            The started service instance
        """
        service_name = service_class.__name__
        self.logger.info(f"Initializing service: {service_name}")

        service = service_class(
            event_bus=self.event_bus,
            service_registry=self.service_registry,
            config=self.config,
            **kwargs
        )

        try:
            await asyncio.wait_for(service.start(), timeout=self.config.service.service_startup_timeout)
            return service
        except Exception as e:
            self.logger.error(f"Failed to start service: {service_name}", error=str(e), exc_info=True)
            raise

    async def run(self):
        """Run until the replay finishes or a shutdown is requested."""
        waiters = [asyncio.ensure_future(self._stop_event.wait())]
        if isinstance(self.sensor, ReplayOrientationSensor) and not self.sensor.loop_forever:
            waiters.append(asyncio.ensure_future(self._wait_replay()))

        try:
            await asyncio.wait(waiters, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            self.logger.info("Application task cancelled")
        finally:
            for waiter in waiters:
                waiter.cancel()
            await self.shutdown()

    async def _wait_replay(self):
        await self.sensor.wait_finished()
        # Give a pending confirmation the chance to land.
        await asyncio.sleep(self.config.detector.stability_time)

    async def shutdown(self):
        """Stop all services in reverse start order."""
        if not self._running:
            return

        self._running = False
        self.logger.info("Shutting down Heads Up")

        for name, service in reversed(list(self.services.items())):
            try:
                self.logger.info(f"Stopping service: {name}")
                await asyncio.wait_for(service.stop(), timeout=self.config.service.service_shutdown_timeout)
            except Exception as e:
                self.logger.error(f"Error stopping service {name}: {e}")

        if self.event_tracer is not None:
            self.logger.info("Event summary", **self.event_tracer.get_event_stats())
        self.logger.info("Heads Up shutdown complete", pose_changes=self.pose_changes)

    def handle_signal(self, sig):
        """
        Handle termination signals.

        Args:
            sig: The signal received
        """
        self.logger.info(f"Received signal {sig.name}, shutting down")
        self._stop_event.set()

    async def _on_pose_changed(self, event: BaseEvent) -> None:
        self.pose_changes += 1
        self.logger.info("Pose changed", pose=event.pose, previous_pose=event.previous_pose)

def build_sensor(args: argparse.Namespace, config: ApplicationConfig) -> OrientationSensor:
    interval = args.interval or config.sensor.replay_interval
    if args.replay:
        return ReplayOrientationSensor.from_jsonl(args.replay, interval=interval, loop_forever=args.loop)
    return ReplayOrientationSensor(demo_samples(), interval=interval, loop_forever=args.loop)

def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog=APP_NAME, description="Detect the Heads Up forehead pose")
    parser.add_argument("--replay", metavar="PATH",
                        help="JSON lines file of orientation samples (default: built-in demo)")
    parser.add_argument("--interval", type=float, default=None,
                        help="Seconds between replayed samples")
    parser.add_argument("--loop", action="store_true", help="Replay samples forever")
    parser.add_argument("--debug", action="store_true", help="Log an orientation readout")
    return parser.parse_args(argv)

async def main(argv: Optional[List[str]] = None):
    """Application entry point."""
    args = parse_args(argv)
    config = get_config()
    setup_logging(LogLevel.DEBUG.value if args.debug else config.log_level.value)

    app = HeadsUpApplication(build_sensor(args, config), config=config, debug_readout=args.debug)

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, lambda s=sig: app.handle_signal(s))

    await app.initialize()
    await app.run()

def cli():
    try:
        asyncio.run(main())
    except Exception as e:
        logging.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)

if __name__ == "__main__":
    cli()
