"""
Data model for orientation samples and detector state.

Angles follow the DeviceOrientation convention:

- alpha: rotation around the vertical axis, 0 to 360 degrees
- beta: front-back tilt, -180 to 180 degrees
- gamma: left-right tilt, -90 to 90 degrees

Any angle may be unknown. Unknown is ``None`` and is never the same thing
as ``0.0``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from headsup.core.clock import Timer

class Pose(str, Enum):
    """Logical poses the classifier can report."""
    NORMAL = "normal"
    TARGET = "target"

    @property
    def opposite(self) -> "Pose":
        return Pose.NORMAL if self is Pose.TARGET else Pose.TARGET

class OrientationSample(BaseModel):
    """
    One instantaneous orientation reading.

    Readings and timestamps that are missing, non-numeric or non-finite
    are stored as unknown (``None``) rather than rejected, so a sample can
    always be built from whatever the platform reported.
    """
    model_config = ConfigDict(frozen=True)

    alpha: Optional[float] = None
    beta: Optional[float] = None
    gamma: Optional[float] = None
    timestamp: Optional[float] = None  # source timestamp in seconds, if any

    @field_validator("alpha", "beta", "gamma", "timestamp", mode="before")
    @classmethod
    def coerce_unknown(cls, v):
        """Map anything that is not a finite number to unknown."""
        if v is None or isinstance(v, bool):
            return None
        try:
            v = float(v)
        except (TypeError, ValueError, OverflowError):
            return None
        return v if math.isfinite(v) else None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "OrientationSample":
        """
        Build a sample from a raw platform payload.

        Args:
            data: Mapping that may hold ``alpha``, ``beta``, ``gamma`` and
                ``timestamp``; missing keys and nulls become unknown

        Returns:
            The parsed OrientationSample
        """
        return cls(
            alpha=data.get("alpha"),
            beta=data.get("beta"),
            gamma=data.get("gamma"),
            timestamp=data.get("timestamp"),
        )

    @property
    def is_complete(self) -> bool:
        """Whether all three angles are known."""
        return None not in (self.alpha, self.beta, self.gamma)

@dataclass
class PendingTransition:
    """An armed, cancellable confirmation of a pose change."""
    target_pose: Pose
    scheduled_at: float
    deadline: float
    timer: Optional[Timer] = field(default=None, repr=False, compare=False)

    def cancel(self) -> None:
        if self.timer is not None:
            self.timer.cancel()

@dataclass
class DebounceState:
    """
    Mutable state owned by one DebounceStateMachine.

    At most one transition is pending, and it never targets the pose that
    is already confirmed.
    """
    confirmed_pose: Pose = Pose.NORMAL
    pending_transition: Optional[PendingTransition] = None
