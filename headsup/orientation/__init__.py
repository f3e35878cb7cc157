"""
Orientation pose detection core.

Pure classification of orientation samples plus the debounce state machine
that confirms sustained pose changes.
"""

from .models import OrientationSample, Pose, PendingTransition, DebounceState
from .classifier import PoseChecks, classify, evaluate
from .debounce import DebounceStateMachine

__all__ = [
    'OrientationSample',
    'Pose',
    'PendingTransition',
    'DebounceState',
    'PoseChecks',
    'classify',
    'evaluate',
    'DebounceStateMachine',
]
