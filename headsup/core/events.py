"""
Core event system for Heads Up.

This module defines the base event model and the event type enum that form the
foundation of the typed event system. All events in the system inherit from
BaseEvent.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from enum import Enum
import time
import uuid

class EventType(str, Enum):
    """
    Enum defining all event types in the system.

    String-based so events serialize to JSON without extra work.
    """
    # Orientation events
    ORIENTATION_SAMPLE = "orientation_sample"
    POSE_CHANGED = "pose_changed"

    # Application lifecycle events
    APPLICATION_STARTUP_COMPLETED = "application_startup_completed"

    # System events
    HARDWARE_ERROR = "hardware_error"
    SERVICE_STATE_CHANGED = "service_state_changed"

def generate_trace_id() -> str:
    """Generate a unique trace ID for event tracing."""
    return str(uuid.uuid4())

class BaseEvent(BaseModel):
    """
    Base model for all events with common metadata.

    Subclasses pin ``type`` to a single EventType literal and add their
    payload fields.
    """
    model_config = ConfigDict(extra="allow", use_enum_values=True)

    type: EventType
    producer_name: str = ""
    timestamp: float = Field(default_factory=time.time)
    trace_id: Optional[str] = Field(default_factory=generate_trace_id)
