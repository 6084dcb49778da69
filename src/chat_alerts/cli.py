"""CLI for chat-alerts.

Usage:
    chat-alerts render --level WARN "disk low"
    chat-alerts colors --policy "red: FATAL, ERROR; purple" ERROR INFO
    chat-alerts send --level ERROR "deploy failed"
    chat-alerts test
"""

import logging
from pathlib import Path

import click

from chat_alerts.appender import ColorPolicy, Level, LogEvent, MessageFormat, format_notification
from chat_alerts.config import AppenderConfig, create_appender
from chat_alerts.errors import ChatAlertsError, ConfigurationError
from chat_alerts.logging import configure_logging, get_logger

log = get_logger(__name__)

LEVEL_NAMES = [level.name for level in Level]


def make_event(
    level: str, message: str, marker: str | None = None, logger_name: str = "chat-alerts"
) -> LogEvent:
    """Build a log event as if ``message`` had been logged by ``logger_name``."""
    record = logging.LogRecord(
        name=logger_name,
        level=Level.parse(level).value,
        pathname=__file__,
        lineno=0,
        msg=message,
        args=None,
        exc_info=None,
        func="main",
    )
    if marker:
        record.marker = marker
    return LogEvent.from_record(record)


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=False, path_type=Path),
    default=Path.home() / ".chat-alerts" / "config.yaml",
    help="Config file path",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, config_path: Path, verbose: bool) -> None:
    """Post log events to a chat room."""
    configure_logging("DEBUG" if verbose else "WARNING")
    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = AppenderConfig.from_file(config_path)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e


@main.command("render")
@click.argument("message")
@click.option("--level", "-l", default="INFO", type=click.Choice(LEVEL_NAMES, case_sensitive=False))
@click.option("--marker", help="Marker name for $marker")
@click.option("--logger", "logger_name", default="chat-alerts", help="Logger name for $class")
@click.pass_context
def render_cmd(
    ctx: click.Context, message: str, level: str, marker: str | None, logger_name: str
) -> None:
    """Render MESSAGE with the configured templates, without posting."""
    config: AppenderConfig = ctx.obj["config"]
    try:
        notification = format_notification(
            config.from_template,
            config.message_template,
            make_event(level, message, marker, logger_name),
            ColorPolicy.parse(config.color_policy),
            message_format=MessageFormat.parse(config.message_format),
            notify=config.notify,
        )
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"From:   {notification.sender}")
    click.echo(f"Color:  {notification.color.value}")
    click.echo(f"Notify: {notification.notify}")
    click.echo(f"Format: {notification.message_format.value}")
    click.echo("")
    click.echo(notification.body)


@main.command("colors")
@click.argument("levels", nargs=-1)
@click.option("--policy", help="Color policy (default: from config)")
@click.pass_context
def colors_cmd(ctx: click.Context, levels: tuple[str, ...], policy: str | None) -> None:
    """Show which color each level gets (default: all levels)."""
    config: AppenderConfig = ctx.obj["config"]
    try:
        color_policy = ColorPolicy.parse(policy if policy is not None else config.color_policy)
        selected = [Level.parse(name) for name in levels] or list(Level)
    except ConfigurationError as e:
        raise click.ClickException(str(e)) from e

    for level in selected:
        click.echo(f"{level.name:<6} {color_policy.pick(level).value}")


@main.command("send")
@click.argument("message")
@click.option("--level", "-l", default="INFO", type=click.Choice(LEVEL_NAMES, case_sensitive=False))
@click.option("--marker", help="Marker name for $marker")
@click.pass_context
def send_cmd(ctx: click.Context, message: str, level: str, marker: str | None) -> None:
    """Post MESSAGE to the configured room.

    Requires CHAT_ALERTS_AUTH_TOKEN and CHAT_ALERTS_ROOM_ID (or the config file).
    """
    _post(ctx.obj["config"], make_event(level, message, marker))
    click.echo("Message sent!")


@main.command("test")
@click.pass_context
def test_cmd(ctx: click.Context) -> None:
    """Send a test notification to verify the room settings."""
    _post(ctx.obj["config"], make_event("INFO", "Appender is configured correctly."))
    click.echo("Test notification sent successfully!")


def _post(config: AppenderConfig, event: LogEvent) -> None:
    try:
        appender = create_appender(config)
        appender.append(event)
    except ChatAlertsError as e:
        log.debug("Post failed", error=str(e))
        raise click.ClickException(str(e)) from e
