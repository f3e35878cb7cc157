"""
Event definitions for Heads Up.

Each module defines the events of one functional area.
"""

# Re-export core types
from headsup.core.events import EventType, BaseEvent
