"""
Orientation events for Heads Up.

Raw samples coming off the sensor and confirmed pose changes coming out of
the detector.
"""

from typing import Literal
from headsup.core.events import BaseEvent, EventType
from headsup.orientation.models import OrientationSample, Pose

class OrientationSampleEvent(BaseEvent):
    """
    Event published for every orientation reading the sensor delivers.
    """
    type: Literal[EventType.ORIENTATION_SAMPLE] = EventType.ORIENTATION_SAMPLE
    sample: OrientationSample

class PoseChangedEvent(BaseEvent):
    """
    Event published when the detector confirms a pose change.

    Only emitted after the new pose was held for the configured stability
    time.
    """
    type: Literal[EventType.POSE_CHANGED] = EventType.POSE_CHANGED
    pose: Pose
    previous_pose: Pose
    confirmed_at: float  # scheduler time of the confirmation, in seconds
