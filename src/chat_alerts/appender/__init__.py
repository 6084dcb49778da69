"""Chat room appender for log events.

Provides rate limiting, template rendering, color selection, and posting.
"""

from .appender import ChatAppender, ChatLogHandler
from .colors import DEFAULT_POLICY, Color, ColorPolicy, ColorRule
from .events import Level, LogEvent, SourceLocation, StackFrame, ThrownError
from .formatter import MessageFormat, Notification, format_notification
from .hipchat import Dispatcher, HipChatClient
from .rate_limiter import RateLimiter
from .templating import render

__all__ = [
    # Appender
    "ChatAppender",
    "ChatLogHandler",
    # Events
    "Level",
    "LogEvent",
    "SourceLocation",
    "StackFrame",
    "ThrownError",
    # Templating
    "render",
    # Colors
    "Color",
    "ColorPolicy",
    "ColorRule",
    "DEFAULT_POLICY",
    # Formatter
    "format_notification",
    "MessageFormat",
    "Notification",
    # Dispatch
    "Dispatcher",
    "HipChatClient",
    # Rate limiter
    "RateLimiter",
]
