"""
Orientation sample sources.

An OrientationSensor pushes OrientationSample values to its listeners while
delivery is started. Asking the platform for permission to read orientation
data happens in ``initialize()``; a refusal raises SensorPermissionError and
no samples are ever delivered.

Two sources are provided:

- CallbackOrientationSensor: external code (a platform binding, a websocket
  handler) calls ``push()`` with each reading.
- ReplayOrientationSensor: replays a recorded sequence at a fixed interval,
  for demos and tests.
"""

import asyncio
import inspect
import json
from abc import abstractmethod
from pathlib import Path
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Union

from headsup.hardware.base import BaseHardware
from headsup.orientation.models import OrientationSample

SampleListener = Callable[[OrientationSample], Union[None, Awaitable[None]]]

class SensorError(RuntimeError):
    """Base class for sample source failures."""

class SensorPermissionError(SensorError):
    """Permission to read device orientation was refused."""

class SensorUnavailableError(SensorError):
    """The sensor cannot deliver samples (missing, or not initialized)."""

class OrientationSensor(BaseHardware):
    """
    Push-style source of orientation samples.

    Listeners are plain callables or coroutine functions taking one
    OrientationSample. They are called in registration order and awaited
    one after another, so samples reach every listener in order.
    """

    def __init__(self, config: Optional[Any] = None, name: Optional[str] = None):
        super().__init__(config, name)
        self._listeners: List[SampleListener] = []
        self._delivering = False
        self.samples_delivered = 0

    @property
    def is_delivering(self) -> bool:
        return self._delivering

    def add_listener(self, listener: SampleListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: SampleListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def request_permission(self) -> bool:
        """
        Ask the platform for permission to read orientation data.

        Sources without a permission model grant it unconditionally. Any
        error raised here is reported as SensorUnavailableError by
        ``initialize()``.

        Returns:
            True if samples may be read
        """
        return True

    async def _initialize_impl(self) -> None:
        try:
            granted = await self.request_permission()
        except SensorError:
            raise
        except Exception as e:
            raise SensorUnavailableError(f"Orientation permission request failed: {e}") from e
        if not granted:
            raise SensorPermissionError("Permission to read device orientation was denied")

    async def _shutdown_impl(self) -> None:
        await self.stop()

    async def start(self) -> None:
        """
        Start delivering samples to listeners.

        Raises:
            SensorUnavailableError: If the sensor was not initialized or the
                source failed to start
        """
        if not self._initialized:
            raise SensorUnavailableError(f"{self.name} must be initialized before starting")
        if self._delivering:
            self.logger.warning("Orientation sensor already started")
            return

        self._delivering = True
        try:
            await self._start_delivery()
        except SensorError:
            self._delivering = False
            raise
        except Exception as e:
            self._delivering = False
            raise SensorUnavailableError(f"{self.name} could not start delivery: {e}") from e
        self.logger.info("Orientation sensor started")

    async def stop(self) -> None:
        """Stop delivering samples. Stopping a stopped sensor does nothing."""
        if not self._delivering:
            return
        self._delivering = False
        await self._stop_delivery()
        self.logger.info("Orientation sensor stopped", samples=self.samples_delivered)

    async def push(self, sample: OrientationSample) -> None:
        """
        Deliver one sample to every listener.

        Samples pushed while delivery is stopped are dropped. A failing
        listener is logged and does not stop delivery to the others.
        """
        if not self._delivering:
            return

        self.samples_delivered += 1
        for listener in list(self._listeners):
            try:
                result = listener(sample)
                if inspect.isawaitable(result):
                    await result
            except asyncio.CancelledError:
                raise
            except Exception as e:
                self.logger.error("Orientation listener failed", error=str(e), exc_info=True)

    @abstractmethod
    async def _start_delivery(self) -> None:
        """Begin producing samples."""

    @abstractmethod
    async def _stop_delivery(self) -> None:
        """Stop producing samples."""

class CallbackOrientationSensor(OrientationSensor):
    """
    Sensor fed from outside through ``push()``.

    Args:
        permission_granted: Answer to give when asked for permission
    """

    def __init__(self, permission_granted: bool = True,
                 config: Optional[Any] = None, name: Optional[str] = None):
        super().__init__(config, name)
        self.permission_granted = permission_granted

    async def request_permission(self) -> bool:
        return self.permission_granted

    async def _start_delivery(self) -> None:
        pass

    async def _stop_delivery(self) -> None:
        pass

class ReplayOrientationSensor(OrientationSensor):
    """
    Replays a fixed sequence of samples.

    Args:
        samples: Samples to deliver, in order
        interval: Seconds between consecutive samples
        loop_forever: Start over at the end instead of finishing
    """

    def __init__(self,
                 samples: Iterable[OrientationSample],
                 interval: float = 0.05,
                 loop_forever: bool = False,
                 config: Optional[Any] = None,
                 name: Optional[str] = None):
        super().__init__(config, name)
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.samples = list(samples)
        self.interval = interval
        self.loop_forever = loop_forever
        self._task: Optional[asyncio.Task] = None

    @classmethod
    def from_jsonl(cls, path: Union[str, Path], **kwargs) -> "ReplayOrientationSensor":
        """
        Load samples from a JSON lines file.

        Each non-blank line is an object with optional ``alpha``, ``beta``,
        ``gamma`` and ``timestamp`` keys.

        Raises:
            ValueError: If a line is not a JSON object
        """
        samples = []
        with open(path, "r", encoding="utf-8") as f:
            for line_no, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                data = json.loads(line)
                if not isinstance(data, dict):
                    raise ValueError(f"{path}:{line_no}: expected a JSON object")
                samples.append(OrientationSample.from_mapping(data))
        return cls(samples, **kwargs)

    async def _start_delivery(self) -> None:
        self._task = asyncio.get_running_loop().create_task(self._replay())

    async def _stop_delivery(self) -> None:
        task, self._task = self._task, None
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass

    async def wait_finished(self) -> None:
        """Wait until a non-looping replay has delivered every sample."""
        if self._task is not None:
            await asyncio.shield(self._task)

    async def _replay(self) -> None:
        while True:
            for sample in self.samples:
                await self.push(sample)
                await asyncio.sleep(self.interval)
            if not self.loop_forever or not self.samples:
                break
        self.logger.debug("Replay finished", samples=len(self.samples))
