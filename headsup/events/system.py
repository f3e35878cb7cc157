"""
System events for Heads Up.

Application lifecycle, service state and error events.
"""

from typing import Dict, Any, Optional, Literal
from headsup.core.events import BaseEvent, EventType

class ApplicationStartupCompletedEvent(BaseEvent):
    """
    Event published when application startup has completed.

    All services have been started and samples may start flowing.
    """
    type: Literal[EventType.APPLICATION_STARTUP_COMPLETED] = EventType.APPLICATION_STARTUP_COMPLETED

class ServiceStateChangedEvent(BaseEvent):
    """Event published when a service changes lifecycle state."""
    type: Literal[EventType.SERVICE_STATE_CHANGED] = EventType.SERVICE_STATE_CHANGED
    service_name: str
    state: str  # 'started', 'stopping', 'stopped'
    error: Optional[str] = None

class HardwareErrorEvent(BaseEvent):
    """
    Event published when a sample source cannot be used.

    Typically the orientation permission was refused or the sensor is not
    available; the detector then never leaves the NORMAL pose.
    """
    type: Literal[EventType.HARDWARE_ERROR] = EventType.HARDWARE_ERROR
    component: str  # e.g. 'orientation_sensor'
    error_type: str
    error_message: str
    details: Optional[Dict[str, Any]] = None
