"""Announcement server communication"""
from .messages_client import MessagesClient, MessagesClientError

__all__ = ["MessagesClient", "MessagesClientError"]
