"""
Orientation debug readout.

Logs the current alpha/beta/gamma readings together with the outcome of each
pose check, to help calibrate the thresholds on a real device.
"""

from typing import Optional

from headsup.core.config import DetectorConfig
from headsup.core.events import BaseEvent, EventType
from headsup.core.service import BaseService
from headsup.events.orientation import OrientationSampleEvent
from headsup.orientation.classifier import evaluate
from headsup.orientation.models import OrientationSample

def format_angle(value: Optional[float]) -> str:
    """Format one angle for display; unknown is 'N/A', zero is '0.0°'."""
    if value is None:
        return "N/A"
    return f"{value:.1f}°"

def format_readout(sample: OrientationSample) -> str:
    return (f"Alpha: {format_angle(sample.alpha)} "
            f"Beta: {format_angle(sample.beta)} "
            f"Gamma: {format_angle(sample.gamma)}")

class OrientationDebugService(BaseService):
    """Logs a readout every ``sensor.debug_every`` samples."""

    CONSUMES_EVENTS = {
        EventType.ORIENTATION_SAMPLE: 'handle_event',
    }

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.samples_seen = 0
        self.last_readout: Optional[str] = None

    @property
    def debug_every(self) -> int:
        return self.config.sensor.debug_every if self.config is not None else 1

    async def handle_event(self, event: BaseEvent) -> None:
        if not isinstance(event, OrientationSampleEvent):
            return

        self.samples_seen += 1
        if (self.samples_seen - 1) % self.debug_every:
            return

        detector = self.config.detector if self.config is not None else DetectorConfig()
        checks = evaluate(event.sample, detector)
        self.last_readout = format_readout(event.sample)
        self.logger.info(self.last_readout,
                         landscape=checks.is_landscape,
                         near_horizontal=checks.is_near_horizontal,
                         heading_known=checks.is_orientation_known,
                         pose=checks.pose.value)
