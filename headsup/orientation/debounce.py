"""
Debounced pose confirmation.

The DebounceStateMachine turns the per-sample classification stream into
pose-change notifications. A new pose is only confirmed after it has been
classified without interruption for ``stability_time`` seconds; a single
sample back in the confirmed pose aborts the pending confirmation.

Repeated samples of the pose already being confirmed leave the pending
timer alone; the dwell time is measured from the first sample of the run.
"""

import dataclasses
from functools import partial
from typing import Callable, Optional

import structlog

from headsup.core.clock import LoopScheduler, Scheduler
from headsup.core.config import DetectorConfig
from headsup.orientation.classifier import classify
from headsup.orientation.models import DebounceState, OrientationSample, PendingTransition, Pose

PoseCallback = Callable[[], None]

class DebounceStateMachine:
    """
    Converts a classification stream into dwell-confirmed pose changes.

    Exactly one of ``on_target_pose`` / ``on_normal_pose`` runs per confirmed
    change. The machine owns at most one outstanding timer at a time.

    Args:
        config: Detector thresholds and stability time
        on_target_pose: Called when TARGET is confirmed
        on_normal_pose: Called when NORMAL is confirmed
        scheduler: Clock and timer source (defaults to the running asyncio loop)
    """

    def __init__(self,
                 config: DetectorConfig,
                 on_target_pose: PoseCallback,
                 on_normal_pose: PoseCallback,
                 scheduler: Optional[Scheduler] = None):
        self._config = config
        self._on_target_pose = on_target_pose
        self._on_normal_pose = on_normal_pose
        self._scheduler = scheduler or LoopScheduler()
        self._state = DebounceState()
        self.logger = structlog.get_logger(component="debounce")

    @property
    def config(self) -> DetectorConfig:
        return self._config

    @property
    def confirmed_pose(self) -> Pose:
        """The last pose reported through a callback (NORMAL initially)."""
        return self._state.confirmed_pose

    @property
    def pending_transition(self) -> Optional[PendingTransition]:
        return self._state.pending_transition

    @property
    def state(self) -> DebounceState:
        """
        Shallow snapshot of the internal state.

        The pending transition in the copy is the live object; do not mutate it.
        """
        return dataclasses.replace(self._state)

    def on_sample(self, sample: OrientationSample, now: float) -> Pose:
        """
        Feed one orientation sample.

        Args:
            sample: The orientation reading
            now: Current time on the scheduler's clock, in seconds

        Returns:
            The pose this sample was classified as
        """
        pose = classify(sample, self._config)
        pending = self._state.pending_transition

        if pose == self._state.confirmed_pose:
            if pending is not None:
                self._cancel_pending(reason="returned to confirmed pose")
            return pose

        if pending is not None:
            if pending.target_pose == pose:
                if now >= pending.deadline:
                    # Deadline reached but the timer has not run yet.
                    self.on_timer_fire(pending)
                return pose
            self._cancel_pending(reason="classification changed")

        self._schedule(pose, now)
        return pose

    def on_timer_fire(self, transition: PendingTransition) -> None:
        """
        Confirm a pending transition.

        Called by the scheduler when the transition's deadline is reached.
        Transitions that are no longer pending are ignored.
        """
        if self._state.pending_transition is not transition:
            return

        transition.cancel()
        previous = self._state.confirmed_pose
        self._state.confirmed_pose = transition.target_pose
        self._state.pending_transition = None

        self.logger.info("Pose confirmed",
                         pose=transition.target_pose.value,
                         previous_pose=previous.value,
                         dwell=round(self._scheduler.now() - transition.scheduled_at, 3))

        if transition.target_pose is Pose.TARGET:
            self._on_target_pose()
        else:
            self._on_normal_pose()

    def reset(self) -> None:
        """Drop any pending transition and return to NORMAL without notifying."""
        self.close()
        self._state.confirmed_pose = Pose.NORMAL

    def close(self) -> None:
        """Cancel any pending transition, leaving the confirmed pose as is."""
        if self._state.pending_transition is not None:
            self._cancel_pending(reason="detector closed")

    def _schedule(self, pose: Pose, now: float) -> None:
        transition = PendingTransition(
            target_pose=pose,
            scheduled_at=now,
            deadline=now + self._config.stability_time,
        )
        transition.timer = self._scheduler.call_at(
            transition.deadline, partial(self.on_timer_fire, transition)
        )
        self._state.pending_transition = transition
        self.logger.debug("Pose transition scheduled",
                          pose=pose.value, deadline=round(transition.deadline, 3))

    def _cancel_pending(self, reason: str) -> None:
        transition = self._state.pending_transition
        transition.cancel()
        self._state.pending_transition = None
        self.logger.debug("Pose transition cancelled",
                          pose=transition.target_pose.value, reason=reason)
