"""Placeholder substitution for notification templates.

A template is a plain string containing any of the tokens below. Rendering
scans the template once; each token found is evaluated a single time and
every occurrence receives that value. Substituted text is never re-scanned,
so a message containing ``$level`` is posted verbatim.

Tokens:
    $class    simple name of the logging class/module
    $level    level name (WARN, ERROR, ...)
    $message  formatted log message
    $marker   marker name
    $source   newline + ``class.method(file:line)``
    $context  ``key=value`` lines, then ``contextStack=[...]``
    $stack    exception type and message, one ``at ...`` line per frame
    $date     event date, YYYY-MM-DD
    $time     event time, HH:MM:SS
"""

import re
from collections.abc import Callable
from datetime import datetime, tzinfo

from .events import LogEvent


def _class(event: LogEvent, tz: tzinfo | None) -> str:
    if event.source is None:
        return ""
    return event.source.class_name.split(".")[-1]


def _level(event: LogEvent, tz: tzinfo | None) -> str:
    return event.level.name


def _message(event: LogEvent, tz: tzinfo | None) -> str:
    return event.message


def _marker(event: LogEvent, tz: tzinfo | None) -> str:
    return event.marker or ""


def _source(event: LogEvent, tz: tzinfo | None) -> str:
    if event.source is None:
        return ""
    return f"\n{event.source}"


def _context(event: LogEvent, tz: tzinfo | None) -> str:
    lines = [f"{key}={value}" for key, value in event.context.items()]
    if event.context_stack:
        lines.append(f"contextStack=[{', '.join(event.context_stack)}]")
    return "\n".join(lines)


def _stack(event: LogEvent, tz: tzinfo | None) -> str:
    thrown = event.thrown
    if thrown is None:
        return ""
    frames = "".join(f"\nat {frame}" for frame in thrown.frames)
    return f"{thrown.type_name}: {thrown.message}{frames}"


def _timestamp(event: LogEvent, tz: tzinfo | None) -> datetime:
    return datetime.fromtimestamp(event.timestamp_millis / 1000, tz=tz)


def _date(event: LogEvent, tz: tzinfo | None) -> str:
    return _timestamp(event, tz).strftime("%Y-%m-%d")


def _time(event: LogEvent, tz: tzinfo | None) -> str:
    return _timestamp(event, tz).strftime("%H:%M:%S")


# Token -> resolver, in evaluation order
TOKENS: dict[str, Callable[[LogEvent, tzinfo | None], str]] = {
    "$class": _class,
    "$level": _level,
    "$message": _message,
    "$marker": _marker,
    "$source": _source,
    "$context": _context,
    "$stack": _stack,
    "$date": _date,
    "$time": _time,
}

# No token is a prefix of another, so alternation order does not matter
_TOKEN_PATTERN = re.compile("|".join(re.escape(token) for token in TOKENS))


def render(template: str, event: LogEvent, tz: tzinfo | None = None) -> str:
    """Render a template against a log event.

    Args:
        template: Template text containing zero or more tokens
        event: The log event supplying values
        tz: Zone for $date/$time (default: local time)

    Returns:
        The rendered text. Missing event fields render as empty strings.
    """
    resolved: dict[str, str] = {}

    def substitute(match: re.Match) -> str:
        token = match.group(0)
        if token not in resolved:
            resolved[token] = TOKENS[token](event, tz)
        return resolved[token]

    return _TOKEN_PATTERN.sub(substitute, template)
