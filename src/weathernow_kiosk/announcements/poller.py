"""
Announcement poller

Periodically asks the server for announcements newer than the last one seen
and hands each new record to the delivery pipeline, in ascending id order.

Failures never advance the cursor and never end the loop. Against a real
server the poller backs off exponentially and resets on the next success.
Without a backend (no server URL, or a local ``file:`` page) a failed poll
suspends polling for good instead of retrying forever.
"""

import asyncio
from typing import Awaitable, Callable, Optional

import httpx
from loguru import logger

from ..network.messages_client import MessagesClient, MessagesClientError
from .delivery import DeliveryPipeline


class ClientPoller:
    """Cursor-based polling loop with an owned, cancellable task."""

    def __init__(
        self,
        client: MessagesClient,
        pipeline: DeliveryPipeline,
        interval: float = 5.0,
        max_backoff: float = 60.0,
        has_backend: bool = True,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self._client = client
        self._pipeline = pipeline
        self.interval = interval
        self.max_backoff = max_backoff
        self.has_backend = has_backend
        self._sleep = sleep

        self.last_seen_id = 0
        self._failures = 0
        self._running = False
        self._stopped = False
        self._suspended = False
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_suspended(self) -> bool:
        return self._suspended

    @property
    def failures(self) -> int:
        return self._failures

    def next_delay(self) -> float:
        """Seconds until the next poll: the interval, backed off after failures."""
        if self._failures == 0:
            return self.interval
        return min(self.interval * (2 ** self._failures), self.max_backoff)

    def start(self) -> None:
        """Start the polling task (immediate first poll)."""
        if self._running or self._suspended:
            return
        self._running = True
        self._stopped = False
        self._task = asyncio.create_task(self._poll_loop(), name="announcement-poller")
        logger.info(f"Announcement poller started (interval={self.interval}s)")

    async def stop(self) -> None:
        """Cancel the polling task and wait for it to end."""
        self._running = False
        self._stopped = True
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        logger.info("Announcement poller stopped")

    async def _poll_loop(self) -> None:
        while self._running and not self._suspended:
            try:
                await self.poll_once()
            except Exception:
                logger.opt(exception=True).warning("Announcement poll crashed")
            if not self._running or self._suspended:
                break
            await self._sleep(self.next_delay())

    async def poll_once(self) -> int:
        """
        Run one poll cycle.

        Returns:
            Number of announcements handed to the pipeline
        """
        try:
            announcements = await self._client.fetch_since(self.last_seen_id)
        except (httpx.HTTPError, MessagesClientError) as e:
            self._on_failure(e)
            return 0

        # Stopped while the request was in flight: drop the result
        if self._stopped:
            return 0

        if self._failures:
            logger.info(f"Announcement server reachable again after {self._failures} failed poll(s)")
        self._failures = 0

        delivered = 0
        for announcement in sorted(announcements, key=lambda a: a.id):
            if announcement.id <= self.last_seen_id:
                continue
            self.last_seen_id = announcement.id
            if self._pipeline.deliver(announcement):
                delivered += 1
        return delivered

    def _on_failure(self, error: Exception) -> None:
        self._failures += 1
        if not self.has_backend:
            self._suspended = True
            logger.info(f"Polling suspended, no announcement server: {error}")
            return
        logger.debug(
            f"Poll failed ({self._failures}x), retrying in {self.next_delay():.0f}s: {error}"
        )
