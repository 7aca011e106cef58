"""
Announcement record as received from the server.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


class AnnouncementType(str, Enum):
    """Urgency of an announcement"""
    INFO = "info"
    WARNING = "warning"
    EMERGENCY = "emergency"


class DisplayMode(str, Enum):
    """How an announcement is rendered"""
    BANNER = "banner"
    POPUP = "popup"


TYPE_ICONS = {
    AnnouncementType.INFO: "ℹ️",
    AnnouncementType.WARNING: "⚠️",
    AnnouncementType.EMERGENCY: "🚨",
}

TYPE_LABELS = {
    AnnouncementType.INFO: "Information",
    AnnouncementType.WARNING: "Weather Notice",
    AnnouncementType.EMERGENCY: "EMERGENCY ALERT",
}


@dataclass(frozen=True)
class Announcement:
    """One admin-authored message with its delivery metadata."""
    id: int
    text: str
    title: str = ""
    type: AnnouncementType = AnnouncementType.INFO
    display: DisplayMode = DisplayMode.BANNER
    duration: int = 0
    tts: bool = False
    created: int = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Announcement":
        """
        Build a record from the server's JSON.

        Unknown ``type``/``display`` values fall back to info/banner.

        Raises:
            ValueError: if id or text are missing or malformed
        """
        try:
            message_id = int(data["id"])
            text = str(data["text"])
            duration = max(0, int(data.get("duration") or 0))
            created = int(data.get("created") or 0)
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Malformed announcement: {data!r}") from e

        try:
            ann_type = AnnouncementType(data.get("type", "info"))
        except ValueError:
            ann_type = AnnouncementType.INFO
        try:
            display = DisplayMode(data.get("display", "banner"))
        except ValueError:
            display = DisplayMode.BANNER

        return cls(
            id=message_id,
            text=text,
            title=str(data.get("title") or ""),
            type=ann_type,
            display=display,
            duration=duration,
            tts=bool(data.get("tts", False)),
            created=created,
        )

    @property
    def is_emergency(self) -> bool:
        return self.type == AnnouncementType.EMERGENCY

    @property
    def spoken_text(self) -> str:
        """Text for narration: ``"{title}. {text}"`` or just the text."""
        if self.title:
            return f"{self.title}. {self.text}"
        return self.text

    @property
    def banner_text(self) -> str:
        if self.title:
            return f"{self.title}: {self.text}"
        return self.text

    @property
    def icon(self) -> str:
        return TYPE_ICONS[self.type]

    @property
    def heading(self) -> str:
        """Popup heading, falling back to a label for the type."""
        return self.title or TYPE_LABELS[self.type]
