"""
HTTP client for the WeatherNow announcement API

Wraps an httpx AsyncClient for the two calls a kiosk makes:
polling for new announcements and deleting dismissed ones.
"""

from typing import List, Optional

import httpx

from ..models import Announcement

ADMIN_HEADER = "x-admin-password"


class MessagesClientError(Exception):
    """The server answered with something that is not an announcement list."""


class MessagesClient:
    """Talks to ``/api/messages`` on the announcement server."""

    def __init__(
        self,
        base_url: str,
        admin_password: Optional[str] = None,
        timeout: float = 10.0,
        verify_tls: bool = True,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Args:
            base_url: HTTP base URL (e.g., http://192.168.1.100:3000)
            admin_password: Sent on deletes; without it the server refuses them
            timeout: Per-request timeout in seconds
            verify_tls: Set False only for self-signed certificates
            transport: Optional httpx transport (tests, in-process servers)
        """
        self.base_url = base_url.rstrip("/")
        self._admin_password = admin_password
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            verify=verify_tls,
            transport=transport,
            headers={"Cache-Control": "no-store"},
        )

    async def fetch_since(self, cursor: int) -> List[Announcement]:
        """
        Fetch announcements with id > cursor.

        Raises:
            httpx.HTTPError: on connection problems or non-2xx status
            MessagesClientError: if the body is not a list of announcements
        """
        response = await self._client.get("/api/messages", params={"since": cursor})
        response.raise_for_status()

        try:
            payload = response.json()
        except ValueError as e:
            raise MessagesClientError(f"Invalid JSON from server: {e}") from e
        if not isinstance(payload, list):
            raise MessagesClientError(f"Expected a list, got {type(payload).__name__}")

        try:
            return [Announcement.from_dict(item) for item in payload]
        except (ValueError, TypeError, AttributeError) as e:
            raise MessagesClientError(str(e)) from e

    async def delete(self, message_id: int) -> None:
        """
        Ask the server to delete an announcement.

        Raises:
            httpx.HTTPError: on connection problems or non-2xx status
        """
        headers = {ADMIN_HEADER: self._admin_password or ""}
        response = await self._client.delete(f"/api/messages/{message_id}", headers=headers)
        response.raise_for_status()

    async def close(self) -> None:
        await self._client.aclose()
