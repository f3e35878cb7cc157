"""
Pose classification.

A sample is in the target pose when the phone is in landscape (``|gamma|``
above the gamma threshold), held nearly level front to back (``|beta|``
below the beta threshold) and the sensor reports a heading at all (alpha is
known). An unknown angle fails its check, so incomplete samples always
classify as NORMAL.
"""

from dataclasses import dataclass

from headsup.core.config import DetectorConfig
from headsup.orientation.models import OrientationSample, Pose

@dataclass(frozen=True)
class PoseChecks:
    """Outcome of each individual pose check for one sample."""
    is_landscape: bool
    is_near_horizontal: bool
    is_orientation_known: bool

    @property
    def pose(self) -> Pose:
        if self.is_landscape and self.is_near_horizontal and self.is_orientation_known:
            return Pose.TARGET
        return Pose.NORMAL

def evaluate(sample: OrientationSample, config: DetectorConfig) -> PoseChecks:
    """
    Run each pose check against a sample.

    Args:
        sample: The orientation reading
        config: Detector thresholds

    Returns:
        PoseChecks with one flag per check
    """
    return PoseChecks(
        is_landscape=sample.gamma is not None and abs(sample.gamma) > config.gamma_threshold,
        is_near_horizontal=sample.beta is not None and abs(sample.beta) < config.beta_threshold,
        # Alpha is device specific; only its presence matters.
        is_orientation_known=sample.alpha is not None,
    )

def classify(sample: OrientationSample, config: DetectorConfig) -> Pose:
    """Classify a single sample as TARGET or NORMAL."""
    return evaluate(sample, config).pose
