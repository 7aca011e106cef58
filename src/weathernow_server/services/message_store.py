"""
In-memory announcement store.

Holds the ordered announcement records for the lifetime of the process and
the next-id counter. Ids are handed out strictly increasing and are never
reused: deleting or clearing records leaves the counter untouched.

One store is created per application in ``main.create_app`` and lives on
``app.state.message_store``.
"""

import threading
import time
from dataclasses import asdict, dataclass
from typing import Dict, List

from loguru import logger

ANNOUNCEMENT_TYPES = ("info", "warning", "emergency")
DISPLAY_MODES = ("banner", "popup")


@dataclass(frozen=True)
class AnnouncementDraft:
    """Validated input for a new announcement (no id yet)."""
    text: str
    title: str = ""
    type: str = "info"
    display: str = "banner"
    duration: int = 0
    tts: bool = False


@dataclass(frozen=True)
class Announcement:
    """A stored announcement record."""
    id: int
    text: str
    title: str
    type: str
    display: str
    duration: int
    tts: bool
    created: int  # epoch milliseconds, informational only

    def to_dict(self) -> dict:
        return asdict(self)


class MessageStore:
    """Process-lifetime collection of announcements keyed by id."""

    def __init__(self):
        self._messages: Dict[int, Announcement] = {}
        self._next_id = 1
        # FastAPI runs sync dependencies in a thread pool, so reading the
        # counter and appending must happen under one lock.
        self._lock = threading.Lock()

    @property
    def next_id(self) -> int:
        return self._next_id

    def __len__(self) -> int:
        return len(self._messages)

    def append(self, draft: AnnouncementDraft) -> Announcement:
        """
        Store a new announcement.

        The draft must already be validated (non-empty text).

        Returns:
            The stored record with its assigned id and creation timestamp
        """
        with self._lock:
            record = Announcement(
                id=self._next_id,
                text=draft.text,
                title=draft.title,
                type=draft.type,
                display=draft.display,
                duration=draft.duration,
                tts=draft.tts,
                created=int(time.time() * 1000),
            )
            self._next_id += 1
            self._messages[record.id] = record

        logger.info(f"📢 New {record.type} {record.display} #{record.id}: {record.text[:80]}")
        return record

    def list_since(self, cursor: int = 0) -> List[Announcement]:
        """Return all records with id > cursor in ascending id order."""
        with self._lock:
            records = [m for m in self._messages.values() if m.id > cursor]
        return sorted(records, key=lambda m: m.id)

    def delete(self, message_id: int) -> None:
        """Remove a record. Deleting an unknown id is not an error."""
        with self._lock:
            removed = self._messages.pop(message_id, None)
        if removed:
            logger.debug(f"🗑️ Announcement #{message_id} deleted")

    def clear(self) -> None:
        """Remove all records. The id counter keeps counting."""
        with self._lock:
            count = len(self._messages)
            self._messages.clear()
        logger.info(f"🧹 Cleared {count} announcement(s), next id stays {self._next_id}")
