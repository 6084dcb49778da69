"""HipChat room notification client for posting alerts."""

from typing import Protocol

import httpx
import structlog

from .formatter import Notification

log = structlog.get_logger()

DEFAULT_API_URL = "https://api.hipchat.com"


class Dispatcher(Protocol):
    """Anything that can deliver a notification to a room."""

    room_id: str

    def send(self, notification: Notification) -> bool:
        """Post the notification, returning True on success."""
        ...


class HipChatClient:
    """Simple HipChat v2 room notification client."""

    def __init__(
        self,
        auth_token: str,
        room_id: str,
        api_url: str = DEFAULT_API_URL,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ):
        self.room_id = room_id
        self.url = f"{api_url.rstrip('/')}/v2/room/{room_id}/notification"
        self.timeout = timeout
        self._auth_token = auth_token
        self._client = client

    def send(self, notification: Notification) -> bool:
        """Send a room notification.

        Args:
            notification: The rendered notification

        Returns:
            True if successful, False otherwise
        """
        payload = {
            "from": notification.sender,
            "message": notification.body,
            "color": notification.color.value,
            "notify": notification.notify,
            "message_format": notification.message_format.value,
        }
        headers = {"Authorization": f"Bearer {self._auth_token}"}

        try:
            if self._client is not None:
                response = self._client.post(
                    self.url, json=payload, headers=headers, timeout=self.timeout
                )
            else:
                response = httpx.post(
                    self.url, json=payload, headers=headers, timeout=self.timeout
                )
            response.raise_for_status()
            log.debug("HipChat notification sent", room=self.room_id)
            return True
        except httpx.HTTPStatusError as e:
            log.error("HipChat API error", room=self.room_id, status=e.response.status_code)
            return False
        except httpx.RequestError as e:
            log.error("HipChat request failed", room=self.room_id, error=str(e))
            return False
