"""
End-to-end tests for the HeadsUpApplication wiring.

These run on the real asyncio clock with a short stability time.
"""

import asyncio
import signal
import unittest

from headsup.core.config import ApplicationConfig, DetectorConfig
from headsup.core.events import EventType
from headsup.hardware.orientation import CallbackOrientationSensor, ReplayOrientationSensor
from headsup.main import HeadsUpApplication, demo_samples, parse_args
from headsup.orientation.models import OrientationSample, Pose

FOREHEAD = OrientationSample(alpha=10, beta=5, gamma=85)
PORTRAIT = OrientationSample(alpha=10, beta=60, gamma=5)

class TestHeadsUpApplication(unittest.IsolatedAsyncioTestCase):
    """Test cases for the HeadsUpApplication class."""

    def _config(self):
        return ApplicationConfig(detector=DetectorConfig(stability_time=0.05))

    async def test_replay_confirms_both_poses(self):
        sensor = ReplayOrientationSensor([FOREHEAD] * 20 + [PORTRAIT] * 20, interval=0.005)
        app = HeadsUpApplication(sensor, config=self._config())

        await app.initialize()
        await asyncio.wait_for(app.run(), timeout=5.0)

        self.assertEqual(app.pose_changes, 2)
        poses = [e['event_data']['pose'] for e in app.event_tracer.get_events_by_type(EventType.POSE_CHANGED)]
        self.assertEqual(poses, [Pose.TARGET.value, Pose.NORMAL.value])
        for service in app.services.values():
            self.assertFalse(service.is_running)

    async def test_signal_stops_the_application(self):
        sensor = CallbackOrientationSensor()
        config = ApplicationConfig(detector=DetectorConfig(stability_time=1.0))
        app = HeadsUpApplication(sensor, config=config, debug_readout=True)
        await app.initialize()
        self.assertIn("debug", app.services)

        run = asyncio.ensure_future(app.run())
        await sensor.push(FOREHEAD)
        await asyncio.sleep(0)
        app.handle_signal(signal.SIGTERM)
        await asyncio.wait_for(run, timeout=2.0)

        self.assertEqual(app.pose_changes, 0)
        self.assertFalse(sensor.is_initialized())

    def test_demo_samples_hold_the_stance(self):
        samples = demo_samples()
        self.assertGreater(len(samples), 40)
        self.assertIn(FOREHEAD.gamma, {s.gamma for s in samples})

    def test_parse_args(self):
        args = parse_args(["--replay", "samples.jsonl", "--interval", "0.02", "--loop"])
        self.assertEqual(args.replay, "samples.jsonl")
        self.assertEqual(args.interval, 0.02)
        self.assertTrue(args.loop)
        self.assertFalse(args.debug)

if __name__ == "__main__":
    unittest.main()
