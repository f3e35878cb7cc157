"""
Hardware abstraction layer for Heads Up.

Isolates the detector from where orientation samples come from.
"""

from .base import BaseHardware
from .orientation import (
    OrientationSensor,
    CallbackOrientationSensor,
    ReplayOrientationSensor,
    SensorError,
    SensorPermissionError,
    SensorUnavailableError,
)
