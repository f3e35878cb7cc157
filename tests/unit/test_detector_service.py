"""
Unit tests for the PoseDetectorService.

The service runs on a real event bus with a ManualScheduler, so the tests
control exactly when dwell timers expire.
"""

import unittest
from unittest.mock import MagicMock

from headsup.core.bus import EventBus
from headsup.core.clock import ManualScheduler
from headsup.core.config import ApplicationConfig, DetectorConfig
from headsup.core.events import EventType
from headsup.core.registry import EventRegistry, ServiceRegistry
from headsup.events.orientation import OrientationSampleEvent
from headsup.orientation.models import OrientationSample, Pose
from headsup.services.detector_service import PoseDetectorService

FOREHEAD = OrientationSample(alpha=10, beta=5, gamma=85)
PORTRAIT = OrientationSample(alpha=10, beta=5, gamma=10)

class TestPoseDetectorService(unittest.IsolatedAsyncioTestCase):
    """Test cases for the PoseDetectorService class."""

    async def asyncSetUp(self):
        self.registry = EventRegistry()
        self.registry.register_event(EventType.ORIENTATION_SAMPLE, OrientationSampleEvent, "sample")
        self.bus = EventBus(self.registry)
        self.scheduler = ManualScheduler()
        self.on_target_hook = MagicMock()
        self.config = ApplicationConfig(detector=DetectorConfig(stability_time=0.5))

        self.service = PoseDetectorService(
            event_bus=self.bus,
            service_registry=ServiceRegistry(),
            config=self.config,
            scheduler=self.scheduler,
            on_target_pose=self.on_target_hook,
        )

        self.pose_events = []
        self.bus.subscribe(EventType.POSE_CHANGED, self._collect, "test")
        await self.service.start()

    async def asyncTearDown(self):
        if self.service.is_running:
            await self.service.stop()

    async def _collect(self, event):
        self.pose_events.append(event)

    async def send(self, sample, at):
        """Advance the clock to ``at`` and publish one sample."""
        self.scheduler.advance_to(at)
        await self.bus.publish(OrientationSampleEvent(sample=sample), "test")
        await self.service.drain()

    async def send_every(self, sample, start, end, step=0.05):
        count = int(round((end - start) / step))
        for i in range(count + 1):
            await self.send(sample, start + i * step)

    async def test_sustained_stance_publishes_pose_changed(self):
        await self.send_every(FOREHEAD, 0.0, 0.6)

        self.assertEqual(len(self.pose_events), 1)
        event = self.pose_events[0]
        self.assertEqual(event.pose, Pose.TARGET)
        self.assertEqual(event.previous_pose, Pose.NORMAL)
        self.assertAlmostEqual(event.confirmed_at, 0.5)
        self.assertEqual(event.producer_name, "PoseDetectorService")
        self.on_target_hook.assert_called_once_with()
        self.assertIs(self.service.confirmed_pose, Pose.TARGET)

    async def test_flicker_publishes_nothing(self):
        await self.send(FOREHEAD, 0.0)
        await self.send(PORTRAIT, 0.2)
        self.scheduler.advance_to(0.6)
        await self.service.drain()

        self.assertEqual(self.pose_events, [])
        self.on_target_hook.assert_not_called()

    async def test_round_trip_publishes_both_changes(self):
        await self.send_every(FOREHEAD, 0.0, 0.6)
        await self.send_every(PORTRAIT, 0.65, 1.3)

        self.assertEqual([e.pose for e in self.pose_events], [Pose.TARGET, Pose.NORMAL])
        self.assertEqual(self.pose_events[1].previous_pose, Pose.TARGET)

    async def test_stop_cancels_pending_without_event(self):
        await self.send(FOREHEAD, 0.0)
        await self.service.stop()
        self.scheduler.advance_to(1.0)

        self.assertEqual(self.pose_events, [])
        self.assertEqual(self.scheduler.pending, 0)
        self.assertIs(self.service.confirmed_pose, Pose.NORMAL)

    async def test_samples_ignored_after_stop(self):
        await self.service.stop()
        await self.bus.publish(OrientationSampleEvent(sample=FOREHEAD), "test")
        self.scheduler.advance_to(1.0)
        self.assertEqual(self.pose_events, [])

    async def test_reset_returns_to_normal_silently(self):
        await self.send_every(FOREHEAD, 0.0, 0.6)
        self.service.reset()
        self.scheduler.advance_to(2.0)
        await self.service.drain()

        self.assertIs(self.service.confirmed_pose, Pose.NORMAL)
        self.assertEqual(len(self.pose_events), 1)

    async def test_defaults_without_config(self):
        service = PoseDetectorService(event_bus=self.bus, service_registry=ServiceRegistry(),
                                      name="bare", scheduler=self.scheduler)
        self.assertEqual(service.detector_config.stability_time, 0.5)

if __name__ == "__main__":
    unittest.main()
