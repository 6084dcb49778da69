"""Logging setup for applications that post log events to chat.

Sets up structlog on top of stdlib logging (pretty console output on a TTY,
JSON otherwise) and attaches the chat handler next to the console handler.
"""

import logging
import sys
from typing import cast

import structlog

from chat_alerts.appender import ChatLogHandler


def configure_logging(level: str = "INFO", json: bool | None = None) -> None:
    """Configure structured console logging.

    Args:
        level: Root log level ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
        json: Force JSON (True) or console (False) output; default is
            console output when stderr is a TTY
    """
    log_level = getattr(logging, level.upper())
    if json is None:
        json = not sys.stderr.isatty()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processor=renderer,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    root_logger = logging.getLogger()
    # Keep any chat handler already attached
    for existing in list(root_logger.handlers):
        if not isinstance(existing, ChatLogHandler):
            root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)


def attach_chat_handler(
    handler: ChatLogHandler, logger: logging.Logger | None = None
) -> ChatLogHandler:
    """Attach a chat handler to a logger (default: the root logger).

    Any chat handler previously attached to the same logger is removed,
    so calling this twice does not double-post.
    """
    target = logger if logger is not None else logging.getLogger()
    for existing in list(target.handlers):
        if isinstance(existing, ChatLogHandler):
            target.removeHandler(existing)
    target.addHandler(handler)
    return handler


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a logger instance.

    Args:
        name: Optional logger name (usually __name__ from calling module)

    Returns:
        Configured structlog logger
    """
    return cast(structlog.BoundLogger, structlog.get_logger(name))
