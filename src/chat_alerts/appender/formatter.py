"""Build finished notifications from log events."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import tzinfo
from enum import Enum

from chat_alerts.errors import ConfigurationError

from .colors import Color, ColorPolicy
from .events import LogEvent
from .templating import render

MAX_SENDER_LENGTH = 15
MAX_BODY_LENGTH = 10000
HTML_LINE_BREAK = "<br />"


class MessageFormat(Enum):
    """How the chat service should interpret the body."""

    HTML = "html"
    TEXT = "text"

    @classmethod
    def parse(cls, name: str) -> MessageFormat:
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ConfigurationError(
                f"Unknown message format {name!r} (expected html or text)"
            ) from None


@dataclass(frozen=True)
class Notification:
    """A rendered notification, ready for dispatch."""

    sender: str
    body: str
    color: Color
    notify: bool
    message_format: MessageFormat


def format_notification(
    sender_template: str,
    message_template: str,
    event: LogEvent,
    policy: ColorPolicy,
    message_format: MessageFormat = MessageFormat.HTML,
    notify: bool = True,
    tz: tzinfo | None = None,
) -> Notification:
    """Render a log event into a notification.

    The sender is cut to 15 characters and the body to 10000 (no ellipsis).
    For HTML the body's newlines are then replaced with ``<br />``.
    """
    sender = render(sender_template, event, tz)[:MAX_SENDER_LENGTH]
    body = render(message_template, event, tz)[:MAX_BODY_LENGTH]

    if message_format is MessageFormat.HTML:
        body = body.replace("\n", HTML_LINE_BREAK)

    return Notification(
        sender=sender,
        body=body,
        color=policy.pick(event.level),
        notify=notify,
        message_format=message_format,
    )
