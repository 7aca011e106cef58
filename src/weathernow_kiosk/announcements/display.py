"""
Announcement display surface

The pipeline renders through this interface; the actual dashboard (browser
page, framebuffer, ...) implements it. ``LogDisplay`` is the headless default.
"""

from typing import Protocol

from loguru import logger

from ..models import Announcement


class AnnouncementDisplay(Protocol):
    """Where banners and popups are shown."""

    def show_banner(self, announcement: Announcement) -> None: ...

    def show_popup(self, announcement: Announcement) -> None: ...

    def hide(self, announcement: Announcement) -> None: ...


class LogDisplay:
    """Headless display that writes announcements to the log."""

    def show_banner(self, announcement: Announcement) -> None:
        logger.info(f"{announcement.icon} [banner #{announcement.id}] {announcement.banner_text}")

    def show_popup(self, announcement: Announcement) -> None:
        logger.info(
            f"{announcement.icon} [popup #{announcement.id}] {announcement.heading}\n{announcement.text}"
        )

    def hide(self, announcement: Announcement) -> None:
        logger.info(f"[#{announcement.id}] dismissed")
