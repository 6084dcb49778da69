"""Exceptions raised by chat-alerts."""


class ChatAlertsError(Exception):
    """Base class for chat-alerts errors."""

    pass


class ConfigurationError(ChatAlertsError, ValueError):
    """Raised when an appender cannot be built from its configuration."""

    pass


class DispatchError(ChatAlertsError):
    """Raised when a notification could not be posted.

    Carries the room the notification was meant for and the rendered body,
    so the operator can see what was lost.
    """

    def __init__(self, room_id: str, body: str):
        self.room_id = room_id
        self.body = body
        super().__init__(f"Failed to post notification to room {room_id}: {body}")
