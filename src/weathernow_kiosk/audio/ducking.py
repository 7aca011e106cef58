"""
Background audio ducking

Lowers the background music while an announcement is narrated and brings it
back afterwards. Volume changes are ramped in fixed steps instead of jumping,
which avoids audible clicks.

The music volume is shared with the user's volume control: a change made
while ducked becomes the level restored by the next ``unduck()``.
"""

import asyncio
from typing import Awaitable, Callable, Optional, Protocol, runtime_checkable

from loguru import logger


@runtime_checkable
class AudioDucker(Protocol):
    """Anything that can temporarily lower background audio."""

    async def duck(self) -> None: ...

    async def unduck(self) -> None: ...


class VolumeControl(Protocol):
    """Background audio collaborator exposing a 0.0-1.0 volume."""

    volume: float


class DuckCoordinator:
    """
    Ramps a VolumeControl down for narration and back up afterwards.

    Tolerates a missing collaborator: with ``volume_control=None`` every call
    is a no-op, so kiosks without background music need no special casing.
    """

    def __init__(
        self,
        volume_control: Optional[VolumeControl] = None,
        duck_ratio: float = 0.15,
        duck_ms: int = 600,
        unduck_ms: int = 1000,
        steps: int = 20,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._volume_control = volume_control
        self.duck_ratio = duck_ratio
        self.duck_ms = duck_ms
        self.unduck_ms = unduck_ms
        self.steps = max(1, steps)
        self._sleep = sleep

        self._ducked = False
        self._normal_volume = volume_control.volume if volume_control is not None else 1.0
        self._ramp_task: Optional[asyncio.Task] = None

    @property
    def is_ducked(self) -> bool:
        return self._ducked

    @property
    def normal_volume(self) -> float:
        """Volume restored by the next unduck()."""
        return self._normal_volume

    async def duck(self) -> None:
        """Ramp down to duck_ratio of the current volume. No-op if already ducked."""
        if self._volume_control is None or self._ducked:
            return
        self._ducked = True
        target = self._volume_control.volume * self.duck_ratio
        logger.debug(f"🔉 Ducking music to {target:.2f}")
        self._start_ramp(target, self.duck_ms)

    async def unduck(self) -> None:
        """Ramp back to the normal volume. No-op if not ducked."""
        if self._volume_control is None or not self._ducked:
            return
        self._ducked = False
        logger.debug(f"🔊 Restoring music to {self._normal_volume:.2f}")
        self._start_ramp(self._normal_volume, self.unduck_ms)

    def set_user_volume(self, volume: float) -> None:
        """
        Apply a user volume change.

        While ducked the change is only remembered; it takes effect when the
        music is unducked.
        """
        volume = max(0.0, min(1.0, volume))
        self._normal_volume = volume
        if self._volume_control is None:
            return
        if not self._ducked:
            self._cancel_ramp()
            self._volume_control.volume = volume

    async def wait_for_ramp(self) -> None:
        """Wait until the running ramp (if any) has finished."""
        task = self._ramp_task
        if task is not None and not task.done():
            await asyncio.gather(task, return_exceptions=True)

    async def close(self) -> None:
        self._cancel_ramp()
        await self.wait_for_ramp()

    def _start_ramp(self, target: float, duration_ms: int) -> None:
        self._cancel_ramp()
        self._ramp_task = asyncio.create_task(self._ramp(target, duration_ms), name="volume-ramp")

    def _cancel_ramp(self) -> None:
        if self._ramp_task is not None and not self._ramp_task.done():
            self._ramp_task.cancel()

    async def _ramp(self, target: float, duration_ms: int) -> None:
        start = self._volume_control.volume
        step_seconds = duration_ms / 1000 / self.steps
        for step in range(1, self.steps + 1):
            await self._sleep(step_seconds)
            level = start + (target - start) * step / self.steps
            self._volume_control.volume = max(0.0, min(1.0, level))
