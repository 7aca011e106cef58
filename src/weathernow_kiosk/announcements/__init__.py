"""Announcement polling, delivery and narration"""
from .delivery import DeliveryPipeline, DismissReason
from .display import AnnouncementDisplay, LogDisplay
from .narration import Narrator
from .poller import ClientPoller

__all__ = [
    "DeliveryPipeline",
    "DismissReason",
    "AnnouncementDisplay",
    "LogDisplay",
    "Narrator",
    "ClientPoller",
]
