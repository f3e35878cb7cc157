"""
Event tracing for Heads Up.

Keeps a bounded buffer of recently published events so pose changes can be
inspected after the fact, for example when tuning thresholds.
"""

import time
import logging
from collections import deque
from typing import Any, Deque, Dict, List, Optional
from .events import BaseEvent

class EventTracer:
    """
    Records published events in a ring buffer.

    Args:
        max_events: Maximum number of events to keep
    """

    def __init__(self, max_events: int = 1000):
        self.max_events = max_events
        self.events: Deque[Dict[str, Any]] = deque(maxlen=max_events)
        self.logger = logging.getLogger(__name__)

    def record_event(self, event: BaseEvent) -> None:
        """Record an event in the trace buffer."""
        self.events.append({
            'timestamp': time.time(),
            'trace_id': event.trace_id,
            'type': event.type,
            'producer': event.producer_name,
            'event_data': event.model_dump(exclude={'trace_id', 'type', 'producer_name'})
        })
        self.logger.debug(f"Recorded event {event.type} from {event.producer_name}")

    def get_trace(self, trace_id: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Get recorded events, optionally only those of one trace.

        Args:
            trace_id: The trace ID to filter by, or None for all events
        """
        if trace_id is None:
            return list(self.events)
        return [e for e in self.events if e['trace_id'] == trace_id]

    def get_events_by_type(self, event_type: str) -> List[Dict[str, Any]]:
        return [e for e in self.events if e['type'] == event_type]

    def get_event_count(self) -> int:
        return len(self.events)

    def get_event_stats(self) -> Dict[str, Any]:
        """
        Count recorded events per type and per producer.

        Returns:
            Dictionary with ``total_events``, ``event_types`` and ``producers``
        """
        event_types: Dict[str, int] = {}
        producers: Dict[str, int] = {}
        for event in self.events:
            event_types[event['type']] = event_types.get(event['type'], 0) + 1
            producers[event['producer']] = producers.get(event['producer'], 0) + 1

        return {
            'total_events': len(self.events),
            'event_types': event_types,
            'producers': producers,
        }
