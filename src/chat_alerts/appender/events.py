"""Log event model consumed by the appender."""

from __future__ import annotations

import logging
import os
import traceback
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import IntEnum
from types import TracebackType

import structlog

from chat_alerts.errors import ConfigurationError


class Level(IntEnum):
    """Log severity levels, ordered from least to most severe."""

    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40
    FATAL = 50

    @classmethod
    def parse(cls, name: str) -> Level:
        """Look up a level by name (case-insensitive).

        Accepts the stdlib spellings WARNING and CRITICAL as aliases.

        Raises:
            ConfigurationError: If the name is not a known level
        """
        key = name.strip().upper()
        key = _LEVEL_ALIASES.get(key, key)
        try:
            return cls[key]
        except KeyError:
            raise ConfigurationError(f"Unknown log level: {name!r}") from None

    @classmethod
    def from_levelno(cls, levelno: int) -> Level:
        """Map a stdlib numeric level onto the nearest level at or below it."""
        if levelno < logging.DEBUG:
            return cls.TRACE
        if levelno < logging.INFO:
            return cls.DEBUG
        if levelno < logging.WARNING:
            return cls.INFO
        if levelno < logging.ERROR:
            return cls.WARN
        if levelno < logging.CRITICAL:
            return cls.ERROR
        return cls.FATAL


_LEVEL_ALIASES = {"WARNING": "WARN", "CRITICAL": "FATAL"}


@dataclass(frozen=True)
class SourceLocation:
    """Where a log call (or stack frame) originated."""

    class_name: str
    method: str
    file: str
    line: int

    def __str__(self) -> str:
        return f"{self.class_name}.{self.method}({self.file}:{self.line})"


# Stack frames share the shape of a source location
StackFrame = SourceLocation


@dataclass(frozen=True)
class ThrownError:
    """An exception attached to a log event."""

    type_name: str
    message: str
    frames: tuple[StackFrame, ...] = ()

    @classmethod
    def from_exc_info(
        cls,
        exc_type: type[BaseException],
        exc: BaseException,
        tb: TracebackType | None,
    ) -> ThrownError:
        """Build from a ``sys.exc_info()`` triple."""
        frames = tuple(
            StackFrame(
                class_name=frame.f_globals.get("__name__", ""),
                method=frame.f_code.co_name,
                file=os.path.basename(frame.f_code.co_filename),
                line=lineno,
            )
            for frame, lineno in traceback.walk_tb(tb)
        )
        if exc_type.__module__ == "builtins":
            type_name = exc_type.__qualname__
        else:
            type_name = f"{exc_type.__module__}.{exc_type.__qualname__}"
        return cls(type_name=type_name, message=str(exc), frames=frames)


@dataclass(frozen=True)
class LogEvent:
    """A single log event, as handed over by the logging pipeline."""

    level: Level
    message: str
    timestamp_millis: int
    marker: str | None = None
    source: SourceLocation | None = None
    context: Mapping[str, str] = field(default_factory=dict)
    context_stack: Sequence[str] = ()
    thrown: ThrownError | None = None

    @classmethod
    def from_record(cls, record: logging.LogRecord) -> LogEvent:
        """Convert a stdlib ``LogRecord``.

        The marker, context and context stack are read from attributes set
        through ``extra=``: ``marker``, ``context`` and ``context_stack``.
        Values bound with ``structlog.contextvars`` are merged into the
        context, with ``extra`` taking precedence.
        """
        context = {k: str(v) for k, v in structlog.contextvars.get_contextvars().items()}
        extra_context = getattr(record, "context", None)
        if isinstance(extra_context, Mapping):
            context.update({str(k): str(v) for k, v in extra_context.items()})

        thrown = None
        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc, tb = record.exc_info
            thrown = ThrownError.from_exc_info(exc_type, exc, tb)

        marker = getattr(record, "marker", None)
        return cls(
            level=Level.from_levelno(record.levelno),
            message=record.getMessage(),
            timestamp_millis=int(record.created * 1000),
            marker=str(marker) if marker is not None else None,
            source=SourceLocation(
                class_name=record.name,
                method=record.funcName or "",
                file=record.filename,
                line=record.lineno,
            ),
            context=context,
            context_stack=_context_stack(getattr(record, "context_stack", None)),
            thrown=thrown,
        )


def _context_stack(value: object) -> tuple[str, ...]:
    # A bare string is one entry, not a sequence of characters
    if not value:
        return ()
    if isinstance(value, str):
        return (value,)
    if isinstance(value, Sequence):
        return tuple(str(s) for s in value)
    return (str(value),)
