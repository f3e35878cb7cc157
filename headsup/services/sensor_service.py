"""
Orientation sensor service.

Owns an OrientationSensor and republishes each of its samples on the event
bus. If the sensor cannot be used (permission refused, no sensor) the
failure is logged and published as a HardwareErrorEvent; the service keeps
running without samples, so the detector simply stays NORMAL.
"""

from typing import Any, Dict

from headsup.core.events import BaseEvent, EventType
from headsup.core.service import BaseService
from headsup.events.orientation import OrientationSampleEvent
from headsup.events.system import HardwareErrorEvent
from headsup.hardware.orientation import OrientationSensor, SensorError
from headsup.orientation.models import OrientationSample

class OrientationSensorService(BaseService):
    """
    Bridges an OrientationSensor onto the event bus.

    Args:
        sensor: The sample source to own
    """

    PRODUCES_EVENTS = {
        EventType.ORIENTATION_SAMPLE: {
            'schema': OrientationSampleEvent,
            'description': "One orientation reading from the device sensor",
        },
        EventType.HARDWARE_ERROR: {
            'schema': HardwareErrorEvent,
            'description': "The orientation sensor could not be used",
        },
    }

    def __init__(self, *args, sensor: OrientationSensor, **kwargs):
        super().__init__(*args, **kwargs)
        self.sensor = sensor

    async def start(self) -> None:
        await super().start()

        self.sensor.add_listener(self._on_sample)
        try:
            await self.sensor.initialize()
            await self.sensor.start()
        except SensorError as e:
            self.sensor.remove_listener(self._on_sample)
            self.logger.error("Orientation sensor unavailable", error=str(e))
            await self.publish(HardwareErrorEvent(
                producer_name=self.name,
                component="orientation_sensor",
                error_type=type(e).__name__,
                error_message=str(e),
            ))

    async def stop(self) -> None:
        self.sensor.remove_listener(self._on_sample)
        if self.sensor.is_initialized():
            await self.sensor.shutdown()
        await super().stop()

    async def _on_sample(self, sample: OrientationSample) -> None:
        await self.publish(OrientationSampleEvent(producer_name=self.name, sample=sample))

    async def handle_event(self, event: BaseEvent) -> None:
        # Produces only.
        pass

    async def check_health(self) -> Dict[str, Any]:
        health = await self.sensor.check_health()
        health["delivering"] = self.sensor.is_delivering
        health["samples_delivered"] = self.sensor.samples_delivered
        return health
