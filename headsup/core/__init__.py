"""
Core framework for Heads Up.

This package provides the building blocks the detector services run on:
- Event system with typed event definitions
- Service registry and lifecycle management
- Configuration management
- Clock and timer abstraction
- Event tracing
"""

from .events import EventType, BaseEvent
from .registry import EventRegistry, ServiceRegistry
from .bus import EventBus
from .tracing import EventTracer
from .service import BaseService
from .clock import Scheduler, Timer, LoopScheduler, ManualScheduler
from .config import get_config, ApplicationConfig, DetectorConfig

__all__ = [
    'EventType',
    'BaseEvent',
    'EventRegistry',
    'ServiceRegistry',
    'EventBus',
    'EventTracer',
    'BaseService',
    'Scheduler',
    'Timer',
    'LoopScheduler',
    'ManualScheduler',
    'get_config',
    'ApplicationConfig',
    'DetectorConfig',
]
