"""
Pose detector service.

Feeds every OrientationSampleEvent into a DebounceStateMachine and publishes
a PoseChangedEvent whenever the machine confirms a new pose. The state
machine lives from start() to stop(); stopping cancels any pending
confirmation without publishing anything.
"""

from typing import Callable, Optional

from headsup.core.clock import LoopScheduler, Scheduler
from headsup.core.config import DetectorConfig
from headsup.core.events import BaseEvent, EventType
from headsup.core.service import BaseService
from headsup.events.orientation import OrientationSampleEvent, PoseChangedEvent
from headsup.orientation.debounce import DebounceStateMachine
from headsup.orientation.models import Pose

class PoseDetectorService(BaseService):
    """
    Turns orientation samples into debounced pose-change events.

    Args:
        scheduler: Clock and timer source (defaults to the asyncio loop)
        on_target_pose: Optional hook run when TARGET is confirmed
        on_normal_pose: Optional hook run when NORMAL is confirmed
    """

    PRODUCES_EVENTS = {
        EventType.POSE_CHANGED: {
            'schema': PoseChangedEvent,
            'description': "A pose change was held for the stability time",
        },
    }

    CONSUMES_EVENTS = {
        EventType.ORIENTATION_SAMPLE: 'handle_event',
    }

    def __init__(self, *args,
                 scheduler: Optional[Scheduler] = None,
                 on_target_pose: Optional[Callable[[], None]] = None,
                 on_normal_pose: Optional[Callable[[], None]] = None,
                 **kwargs):
        super().__init__(*args, **kwargs)
        self.scheduler = scheduler or LoopScheduler()
        self._on_target_pose_hook = on_target_pose
        self._on_normal_pose_hook = on_normal_pose
        self._machine: Optional[DebounceStateMachine] = None

    @property
    def detector_config(self) -> DetectorConfig:
        if self.config is not None:
            return self.config.detector
        return DetectorConfig()

    @property
    def confirmed_pose(self) -> Pose:
        """Confirmed pose of the running detector, NORMAL when stopped."""
        if self._machine is None:
            return Pose.NORMAL
        return self._machine.confirmed_pose

    async def start(self) -> None:
        await super().start()
        config = self.detector_config
        self._machine = DebounceStateMachine(
            config,
            on_target_pose=self._on_target_pose,
            on_normal_pose=self._on_normal_pose,
            scheduler=self.scheduler,
        )
        self.logger.info("Pose detector armed",
                         gamma_threshold=config.gamma_threshold,
                         beta_threshold=config.beta_threshold,
                         stability_time=config.stability_time)

    async def stop(self) -> None:
        if self._machine is not None:
            self._machine.close()
            self._machine = None
        await super().stop()

    async def handle_event(self, event: BaseEvent) -> None:
        if self._machine is None or not isinstance(event, OrientationSampleEvent):
            return
        self._machine.on_sample(event.sample, self.scheduler.now())

    def reset(self) -> None:
        """Return the detector to NORMAL without publishing anything."""
        if self._machine is not None:
            self._machine.reset()

    def _on_target_pose(self) -> None:
        self._announce(Pose.TARGET)
        if self._on_target_pose_hook is not None:
            self._on_target_pose_hook()

    def _on_normal_pose(self) -> None:
        self._announce(Pose.NORMAL)
        if self._on_normal_pose_hook is not None:
            self._on_normal_pose_hook()

    def _announce(self, pose: Pose) -> None:
        self.publish_soon(PoseChangedEvent(
            producer_name=self.name,
            pose=pose,
            previous_pose=pose.opposite,
            confirmed_at=self.scheduler.now(),
        ))
