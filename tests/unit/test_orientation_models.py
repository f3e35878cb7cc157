"""
Unit tests for OrientationSample parsing and the Pose enum.
"""

import math
import unittest

from pydantic import ValidationError

from headsup.orientation.models import DebounceState, OrientationSample, Pose

class TestOrientationSample(unittest.TestCase):
    """Test cases for the OrientationSample model."""

    def test_defaults_are_unknown(self):
        sample = OrientationSample()
        self.assertIsNone(sample.alpha)
        self.assertIsNone(sample.beta)
        self.assertIsNone(sample.gamma)
        self.assertFalse(sample.is_complete)

    def test_zero_is_not_unknown(self):
        sample = OrientationSample(alpha=0, beta=0, gamma=0)
        self.assertEqual(sample.alpha, 0.0)
        self.assertTrue(sample.is_complete)

    def test_non_finite_readings_become_unknown(self):
        sample = OrientationSample(alpha=math.nan, beta=math.inf, gamma=-math.inf)
        self.assertIsNone(sample.alpha)
        self.assertIsNone(sample.beta)
        self.assertIsNone(sample.gamma)

    def test_garbage_readings_become_unknown(self):
        sample = OrientationSample(alpha="north", beta=[1, 2], gamma=True)
        self.assertIsNone(sample.alpha)
        self.assertIsNone(sample.beta)
        self.assertIsNone(sample.gamma)

    def test_overflowing_readings_become_unknown(self):
        sample = OrientationSample(alpha=10 ** 400, beta=5, gamma=-(10 ** 400))
        self.assertIsNone(sample.alpha)
        self.assertEqual(sample.beta, 5.0)
        self.assertIsNone(sample.gamma)

    def test_numeric_strings_are_parsed(self):
        sample = OrientationSample(alpha="12.5", beta="-3", gamma="88")
        self.assertEqual((sample.alpha, sample.beta, sample.gamma), (12.5, -3.0, 88.0))

    def test_from_mapping_with_missing_and_null_keys(self):
        """A raw payload with missing axes parses instead of failing."""
        sample = OrientationSample.from_mapping({"alpha": 10, "gamma": None, "timestamp": 1.5})
        self.assertEqual(sample.alpha, 10.0)
        self.assertIsNone(sample.beta)
        self.assertIsNone(sample.gamma)
        self.assertEqual(sample.timestamp, 1.5)

    def test_from_mapping_with_bad_timestamp(self):
        sample = OrientationSample.from_mapping({"alpha": 10, "beta": 5, "gamma": 85, "timestamp": "soon"})
        self.assertIsNone(sample.timestamp)
        self.assertEqual(sample.gamma, 85.0)

        sample = OrientationSample.from_mapping({"timestamp": math.inf})
        self.assertIsNone(sample.timestamp)

    def test_samples_are_immutable(self):
        sample = OrientationSample(alpha=1, beta=2, gamma=3)
        with self.assertRaises(ValidationError):
            sample.alpha = 5

class TestPose(unittest.TestCase):

    def test_opposite(self):
        self.assertIs(Pose.TARGET.opposite, Pose.NORMAL)
        self.assertIs(Pose.NORMAL.opposite, Pose.TARGET)

    def test_string_values(self):
        self.assertEqual(Pose.TARGET, "target")
        self.assertEqual(Pose.NORMAL.value, "normal")

    def test_initial_debounce_state(self):
        state = DebounceState()
        self.assertIs(state.confirmed_pose, Pose.NORMAL)
        self.assertIsNone(state.pending_transition)

if __name__ == "__main__":
    unittest.main()
