"""
Service implementations for Heads Up.

Services communicate only through the event bus:
OrientationSensorService publishes samples, PoseDetectorService turns them
into pose changes and OrientationDebugService logs a readout.
"""

from .sensor_service import OrientationSensorService
from .detector_service import PoseDetectorService
from .debug_service import OrientationDebugService
