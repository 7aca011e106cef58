"""
Announcement delivery pipeline

Turns each announcement into its visible and audible effect exactly once:
- chime for the announcement type
- banner or popup on the display
- optional narration (with background music ducked)
- auto-dismiss after ``duration`` seconds, if set

Every dismissal (manual, timer, click outside a popup) asks the server to
delete the record. That delete is best-effort: a failure is logged and
dropped. Redelivery is prevented by the pipeline's own record of delivered
ids, not by server state.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Dict, Optional, Set

import httpx
from loguru import logger

from ..audio.chime import ChimePlayer
from ..models import Announcement, DisplayMode
from ..network.messages_client import MessagesClient
from .display import AnnouncementDisplay
from .narration import Narrator

# Bound on remembered ids; older ones are covered by the id floor
MAX_REMEMBERED_IDS = 1000
KEEP_REMEMBERED_IDS = 500


class DismissReason(str, Enum):
    MANUAL = "manual"
    TIMEOUT = "timeout"
    OUTSIDE_CLICK = "outside_click"


@dataclass
class ActiveAnnouncement:
    """An announcement currently on screen."""
    announcement: Announcement
    timer: Optional[asyncio.Task] = None


class DeliveryPipeline:
    """Renders announcements and reconciles dismissals with the server."""

    def __init__(
        self,
        display: AnnouncementDisplay,
        client: Optional[MessagesClient] = None,
        chime: Optional[ChimePlayer] = None,
        narrator: Optional[Narrator] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._display = display
        self._client = client
        self._chime = chime
        self._narrator = narrator
        self._sleep = sleep

        self._delivered: Set[int] = set()
        self._id_floor = 0  # Ids at or below this were pruned from _delivered
        self._active: Dict[int, ActiveAnnouncement] = {}
        self._tasks: Set[asyncio.Task] = set()
        self._stopped = False

    @property
    def active_ids(self) -> list:
        return sorted(self._active)

    def was_delivered(self, message_id: int) -> bool:
        return message_id <= self._id_floor or message_id in self._delivered

    def deliver(self, announcement: Announcement) -> bool:
        """
        Show an announcement.

        Returns:
            False if this id was already delivered (or the pipeline is stopped)
        """
        if self._stopped:
            return False
        if self.was_delivered(announcement.id):
            logger.debug(f"Skipping already delivered announcement #{announcement.id}")
            return False

        self._remember(announcement.id)
        logger.info(
            f"📢 Delivering {announcement.type.value} {announcement.display.value} #{announcement.id}"
        )

        if self._chime is not None:
            self._spawn(self._chime.play(announcement.type), f"chime-{announcement.id}")

        active = ActiveAnnouncement(announcement)
        self._active[announcement.id] = active
        if announcement.display == DisplayMode.POPUP:
            self._display.show_popup(announcement)
        else:
            self._display.show_banner(announcement)

        if announcement.duration > 0:
            active.timer = asyncio.create_task(
                self._auto_dismiss(announcement.id, announcement.duration),
                name=f"auto-dismiss-{announcement.id}",
            )

        if announcement.tts and self._narrator is not None:
            self._narrator.narrate(announcement.spoken_text, announcement.type)

        return True

    def dismiss(self, message_id: int, reason: DismissReason = DismissReason.MANUAL) -> bool:
        """
        Remove an announcement from the screen and delete it on the server.

        Returns:
            False if the announcement was not on screen (already dismissed)
        """
        active = self._active.pop(message_id, None)
        if active is None:
            return False

        timer = active.timer
        if timer is not None and timer is not asyncio.current_task() and not timer.done():
            timer.cancel()

        self._display.hide(active.announcement)
        logger.info(f"Dismissed #{message_id} ({reason.value})")

        if self._client is not None:
            self._spawn(self._delete_on_server(message_id), f"delete-{message_id}")
        return True

    def outside_click(self, message_id: int) -> bool:
        """
        Handle a click outside a popup.

        Emergency popups and banners ignore it; other popups are dismissed.
        """
        active = self._active.get(message_id)
        if active is None:
            return False
        announcement = active.announcement
        if announcement.display != DisplayMode.POPUP or announcement.is_emergency:
            return False
        return self.dismiss(message_id, DismissReason.OUTSIDE_CLICK)

    async def stop(self) -> None:
        """Cancel timers, narration and pending server calls."""
        self._stopped = True
        pending = [a.timer for a in self._active.values() if a.timer is not None]
        pending.extend(self._tasks)
        for task in pending:
            task.cancel()
        if self._narrator is not None:
            await self._narrator.close()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._tasks.clear()
        logger.info("Delivery pipeline stopped")

    async def _auto_dismiss(self, message_id: int, duration: int) -> None:
        await self._sleep(duration)
        self.dismiss(message_id, DismissReason.TIMEOUT)

    async def _delete_on_server(self, message_id: int) -> None:
        try:
            await self._client.delete(message_id)
        except httpx.HTTPError as e:
            logger.debug(f"Delete of #{message_id} on server failed: {e}")
        except Exception:
            logger.opt(exception=True).warning(f"Unexpected error deleting #{message_id} on server")

    def _spawn(self, coro, name: str) -> None:
        task = asyncio.create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _remember(self, message_id: int) -> None:
        self._delivered.add(message_id)
        if len(self._delivered) > MAX_REMEMBERED_IDS:
            ordered = sorted(self._delivered)
            dropped = ordered[:-KEEP_REMEMBERED_IDS]
            self._id_floor = max(self._id_floor, dropped[-1])
            self._delivered = set(ordered[-KEEP_REMEMBERED_IDS:])
