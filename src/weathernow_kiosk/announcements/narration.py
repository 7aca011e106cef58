"""
Announcement narration

At most one utterance speaks at a time. Starting a new narration cancels the
current one first; the background music is ducked for as long as a
narration is the current one and restored when it finishes or fails.
"""

import asyncio
from typing import Optional, Protocol

from loguru import logger

from ..audio.ducking import AudioDucker
from ..models import AnnouncementType

EMERGENCY_RATE = 1.1
EMERGENCY_PITCH = 1.1


class SpeechEngine(Protocol):
    """Speech synthesizer used for narration."""

    async def speak(self, text: str, rate: float = 1.0, pitch: float = 1.0) -> None: ...

    def stop(self) -> None: ...


def voice_for(ann_type: AnnouncementType) -> tuple:
    """(rate, pitch) for an announcement type."""
    if ann_type == AnnouncementType.EMERGENCY:
        return EMERGENCY_RATE, EMERGENCY_PITCH
    return 1.0, 1.0


class Narrator:
    """Owns the single "current narration" slot."""

    def __init__(self, engine: Optional[SpeechEngine], ducker: Optional[AudioDucker] = None):
        self._engine = engine
        self._ducker = ducker
        self._current: Optional[asyncio.Task] = None

    @property
    def current(self) -> Optional[asyncio.Task]:
        return self._current

    @property
    def is_speaking(self) -> bool:
        return self._current is not None and not self._current.done()

    def narrate(self, text: str, ann_type: AnnouncementType = AnnouncementType.INFO) -> Optional[asyncio.Task]:
        """
        Start narrating, replacing any narration in progress.

        Returns:
            The narration task (resolves when speech ends or fails), or None
            when no speech engine is configured
        """
        if self._engine is None:
            return None

        self.cancel()
        rate, pitch = voice_for(ann_type)
        task = asyncio.create_task(self._run(text, rate, pitch), name="narration")
        self._current = task
        return task

    def cancel(self) -> None:
        """Cancel the current narration, if any."""
        previous = self._current
        if previous is not None and not previous.done():
            previous.cancel()
            self._engine.stop()

    async def _run(self, text: str, rate: float, pitch: float) -> None:
        me = asyncio.current_task()
        try:
            if self._ducker is not None:
                await self._ducker.duck()
            await self._engine.speak(text, rate=rate, pitch=pitch)
        except asyncio.CancelledError:
            logger.debug("🗣️ Narration superseded")
            raise
        except Exception as e:
            logger.warning(f"🗣️ Narration failed: {e}")
        finally:
            # A superseded narration leaves the music ducked for its successor
            if self._current is me:
                self._current = None
                if self._ducker is not None:
                    await self._ducker.unduck()

    async def close(self) -> None:
        task = self._current
        self.cancel()
        if task is not None:
            await asyncio.gather(task, return_exceptions=True)
