"""Rate-limited chat room notifications for log events."""

__version__ = "0.1.0"
