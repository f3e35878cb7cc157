"""
Unit tests for the event bus, registry and tracer.
"""

import unittest

from headsup.core.bus import EventBus
from headsup.core.events import EventType
from headsup.core.registry import EventRegistry
from headsup.core.tracing import EventTracer
from headsup.events.orientation import OrientationSampleEvent, PoseChangedEvent
from headsup.orientation.models import OrientationSample, Pose

class TestEventBus(unittest.IsolatedAsyncioTestCase):
    """Test cases for EventBus delivery."""

    def setUp(self):
        self.registry = EventRegistry()
        self.registry.register_event(EventType.ORIENTATION_SAMPLE, OrientationSampleEvent, "sample")
        self.tracer = EventTracer(max_events=5)
        self.bus = EventBus(self.registry, self.tracer)
        self.received = []

    async def _collect(self, event):
        self.received.append(event)

    def _sample_event(self, gamma=85.0):
        return OrientationSampleEvent(sample=OrientationSample(alpha=1, beta=2, gamma=gamma))

    async def test_publish_delivers_to_subscribers(self):
        self.bus.subscribe(EventType.ORIENTATION_SAMPLE, self._collect, "test")
        event = self._sample_event()
        await self.bus.publish(event, "sensor")

        self.assertEqual(self.received, [event])
        self.assertEqual(event.producer_name, "sensor")
        self.assertIn("test", self.registry.get_event_flow(EventType.ORIENTATION_SAMPLE)['consumers'])

    async def test_unregistered_event_is_dropped(self):
        self.bus.subscribe(None, self._collect, "test")
        await self.bus.publish(PoseChangedEvent(pose=Pose.TARGET, previous_pose=Pose.NORMAL,
                                                confirmed_at=1.0), "detector")
        self.assertEqual(self.received, [])
        self.assertEqual(self.tracer.get_event_count(), 0)

    async def test_failing_handler_does_not_block_others(self):
        async def broken(event):
            raise RuntimeError("boom")

        self.bus.subscribe(EventType.ORIENTATION_SAMPLE, broken, "broken")
        self.bus.subscribe(EventType.ORIENTATION_SAMPLE, self._collect, "test")
        with self.assertLogs("headsup.core.bus", level="ERROR"):
            await self.bus.publish(self._sample_event(), "sensor")
        self.assertEqual(len(self.received), 1)

    async def test_unsubscribe(self):
        self.bus.subscribe(EventType.ORIENTATION_SAMPLE, self._collect, "test")
        self.bus.unsubscribe(EventType.ORIENTATION_SAMPLE, self._collect)
        await self.bus.publish(self._sample_event(), "sensor")
        self.assertEqual(self.received, [])
        self.assertEqual(self.bus.get_subscribers(EventType.ORIENTATION_SAMPLE), set())

    async def test_tracer_keeps_most_recent_events(self):
        for gamma in range(8):
            await self.bus.publish(self._sample_event(gamma=float(gamma)), "sensor")

        trace = self.tracer.get_trace()
        self.assertEqual(len(trace), 5)
        self.assertEqual(trace[-1]['event_data']['sample']['gamma'], 7.0)
        stats = self.tracer.get_event_stats()
        self.assertEqual(stats['producers'], {"sensor": 5})

class TestEventRegistry(unittest.TestCase):

    def test_schema_mismatch(self):
        registry = EventRegistry()
        registry.register_event(EventType.POSE_CHANGED, OrientationSampleEvent, "wrong schema")
        event = PoseChangedEvent(pose=Pose.TARGET, previous_pose=Pose.NORMAL, confirmed_at=0.0)
        with self.assertRaises(TypeError):
            registry.validate_schema(event)

    def test_unknown_event_type(self):
        registry = EventRegistry()
        event = PoseChangedEvent(pose=Pose.NORMAL, previous_pose=Pose.TARGET, confirmed_at=0.0)
        with self.assertRaises(ValueError):
            registry.validate_schema(event)

if __name__ == "__main__":
    unittest.main()
