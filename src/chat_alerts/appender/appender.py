"""Appender that turns log events into chat room notifications."""

import logging
from datetime import tzinfo

import structlog

from chat_alerts.errors import DispatchError
from chat_alerts.metrics import NOTIFICATIONS_FAILED, NOTIFICATIONS_SENT

from .colors import ColorPolicy
from .events import LogEvent
from .formatter import MessageFormat, format_notification
from .hipchat import Dispatcher
from .rate_limiter import RateLimiter

# Loggers whose records are never forwarded: our own, and the HTTP stack
# we post through (forwarding those would feed back into the room).
IGNORED_LOGGERS = ("chat_alerts", "httpx", "httpcore")

log = structlog.get_logger()


class ChatAppender:
    """Rate-limits, renders and dispatches log events."""

    def __init__(
        self,
        dispatcher: Dispatcher,
        sender_template: str,
        message_template: str,
        policy: ColorPolicy,
        message_format: MessageFormat = MessageFormat.HTML,
        notify: bool = True,
        rate_limiter: RateLimiter | None = None,
        tz: tzinfo | None = None,
    ):
        self.dispatcher = dispatcher
        self.sender_template = sender_template
        self.message_template = message_template
        self.policy = policy
        self.message_format = message_format
        self.notify = notify
        self.rate_limiter = rate_limiter or RateLimiter()
        self.tz = tz

    def append(self, event: LogEvent, now_millis: int | None = None) -> bool:
        """Post an event to the room unless the rate limiter drops it.

        Args:
            event: The log event
            now_millis: Arrival time for rate limiting (default: now)

        Returns:
            True if posted, False if dropped by the rate limiter

        Raises:
            DispatchError: If the dispatcher failed. Not retried.
        """
        # The limiter lock is released before any network I/O
        if not self.rate_limiter.admit(now_millis):
            return False

        notification = format_notification(
            self.sender_template,
            self.message_template,
            event,
            self.policy,
            message_format=self.message_format,
            notify=self.notify,
            tz=self.tz,
        )

        room = self.dispatcher.room_id
        try:
            sent = self.dispatcher.send(notification)
        except Exception as e:
            NOTIFICATIONS_FAILED.labels(room=room).inc()
            raise DispatchError(room, notification.body) from e

        if not sent:
            NOTIFICATIONS_FAILED.labels(room=room).inc()
            raise DispatchError(room, notification.body)

        NOTIFICATIONS_SENT.labels(room=room).inc()
        return True


class ChatLogHandler(logging.Handler):
    """stdlib logging handler that forwards records to a ChatAppender.

    Dispatch failures are logged and reported through
    ``Handler.handleError`` so the calling code never sees them.
    """

    def __init__(self, appender: ChatAppender, level: int = logging.NOTSET):
        super().__init__(level)
        self.appender = appender

    def handle(self, record: logging.LogRecord) -> logging.LogRecord | bool:
        """Filter and emit without taking the handler lock.

        The appender's only shared state is its rate limiter, which locks
        itself; posting must not serialize the threads that log.
        """
        rv = self.filter(record)
        if isinstance(rv, logging.LogRecord):
            record = rv
        if rv:
            self.emit(record)
        return rv

    def emit(self, record: logging.LogRecord) -> None:
        if record.name.split(".")[0] in IGNORED_LOGGERS:
            return
        try:
            self.appender.append(LogEvent.from_record(record))
        except DispatchError as e:
            log.error("Chat notification failed", room=e.room_id, body=e.body)
            self.handleError(record)
        except Exception:
            self.handleError(record)
