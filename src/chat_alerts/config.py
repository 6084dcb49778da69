"""Configuration loading for chat-alerts."""

import math
import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from chat_alerts.appender import (
    DEFAULT_POLICY,
    ChatAppender,
    ChatLogHandler,
    ColorPolicy,
    Dispatcher,
    HipChatClient,
    Level,
    MessageFormat,
    RateLimiter,
)
from chat_alerts.appender.hipchat import DEFAULT_API_URL
from chat_alerts.errors import ConfigurationError

DEFAULT_FROM = "$class"
DEFAULT_MESSAGE = "$level: $message $marker <i>$source</i> $context $stack"

ENV_PREFIX = "CHAT_ALERTS_"

_TRUE = {"1", "true", "yes", "on"}

_STRING_SETTINGS = (
    "from_template",
    "message_template",
    "color_policy",
    "message_format",
    "level",
)


def _env(name: str) -> str | None:
    return os.environ.get(ENV_PREFIX + name)


@dataclass
class AppenderConfig:
    """Appender configuration."""

    auth_token: str | None = None
    room_id: str | None = None
    from_template: str = DEFAULT_FROM
    message_template: str = DEFAULT_MESSAGE
    notify: bool = True
    color_policy: str = DEFAULT_POLICY
    message_format: str = "html"
    rate: float = math.inf
    per: float = 1.0
    api_url: str = DEFAULT_API_URL
    level: str = "INFO"

    @classmethod
    def from_env(cls) -> "AppenderConfig":
        """Load configuration from CHAT_ALERTS_* environment variables."""
        config = cls(auth_token=_env("AUTH_TOKEN"), room_id=_env("ROOM_ID"))

        if (value := _env("FROM")) is not None:
            config.from_template = value
        if (value := _env("MESSAGE")) is not None:
            config.message_template = value
        if (value := _env("NOTIFY")) is not None:
            config.notify = _to_bool("notify", value)
        if (value := _env("COLOR")) is not None:
            config.color_policy = value
        if (value := _env("FORMAT")) is not None:
            config.message_format = value
        if (value := _env("RATE")) is not None:
            config.rate = _to_rate(value)
        if (value := _env("PER")) is not None:
            config.per = _to_per(value)
        if (value := _env("API_URL")) is not None:
            config.api_url = value
        if (value := _env("LEVEL")) is not None:
            config.level = value

        return config

    @classmethod
    def from_file(cls, path: Path) -> "AppenderConfig":
        """Load configuration from a YAML file, with env var overrides.

        Settings live under a top-level ``hipchat`` key. Environment
        variables win over the file; the auth token should normally come
        from the environment.
        """
        config = cls.from_env()

        if not path.exists():
            return config

        with open(path) as f:
            data = yaml.safe_load(f) or {}
        section = data.get("hipchat") or {}

        def from_file_unless_env(env_name: str, attr: str, key: str) -> None:
            if _env(env_name) is None and key in section:
                setattr(config, attr, section[key])

        if config.auth_token is None and section.get("auth_token") is not None:
            config.auth_token = str(section["auth_token"])
        if config.room_id is None and section.get("room_id") is not None:
            config.room_id = str(section["room_id"])
        from_file_unless_env("FROM", "from_template", "from")
        from_file_unless_env("MESSAGE", "message_template", "message")
        from_file_unless_env("COLOR", "color_policy", "color")
        from_file_unless_env("FORMAT", "message_format", "format")
        from_file_unless_env("API_URL", "api_url", "api_url")
        from_file_unless_env("LEVEL", "level", "level")

        if _env("NOTIFY") is None and "notify" in section:
            config.notify = _to_bool("notify", section["notify"])
        # rate/per may come from YAML as ints, strings or null
        if _env("RATE") is None and "rate" in section:
            config.rate = _to_rate(section["rate"])
        if _env("PER") is None and "per" in section:
            config.per = _to_per(section["per"])

        return config

    def validate(self) -> None:
        """Check the configuration without building anything.

        Raises:
            ConfigurationError: On the first invalid setting
        """
        if not self.auth_token:
            raise ConfigurationError("A HipChat auth_token is required")
        if not self.room_id:
            raise ConfigurationError("No HipChat room_id provided")
        for name in _STRING_SETTINGS:
            value = getattr(self, name)
            if not isinstance(value, str):
                raise ConfigurationError(f"{name} must be a string, got {value!r}")
        if not math.isfinite(self.per) or self.per <= 0:
            raise ConfigurationError("Per must be a positive number of seconds")
        if self.rate < 0:
            raise ConfigurationError("Rate must not be negative")
        MessageFormat.parse(self.message_format)
        ColorPolicy.parse(self.color_policy)
        Level.parse(self.level)


def _to_bool(name: str, value: object) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in _TRUE
    raise ConfigurationError(f"{name} must be true or false, got {value!r}")


def _to_rate(value: object) -> float:
    # Blank, null or "unlimited" means no rate limit
    if value is None or (
        isinstance(value, str) and value.strip().lower() in ("inf", "unlimited", "none", "")
    ):
        return math.inf
    return _to_float("rate", value)


def _to_per(value: object) -> float:
    # Blank or null falls back to the default window
    if value is None or (isinstance(value, str) and value.strip().lower() in ("none", "")):
        return AppenderConfig.per
    return _to_float("per", value)


def _to_float(name: str, value: object) -> float:
    if isinstance(value, bool):
        raise ConfigurationError(f"{name} must be a number, got {value!r}")
    try:
        return float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from None


def create_appender(
    config: AppenderConfig, dispatcher: Dispatcher | None = None
) -> ChatAppender:
    """Build an appender from configuration.

    Args:
        config: Appender configuration
        dispatcher: Transport to post through (default: HipChatClient)

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    config.validate()
    if dispatcher is None:
        dispatcher = HipChatClient(
            auth_token=config.auth_token,  # type: ignore[arg-type]
            room_id=config.room_id,  # type: ignore[arg-type]
            api_url=config.api_url,
        )

    return ChatAppender(
        dispatcher=dispatcher,
        sender_template=config.from_template,
        message_template=config.message_template,
        policy=ColorPolicy.parse(config.color_policy),
        message_format=MessageFormat.parse(config.message_format),
        notify=config.notify,
        rate_limiter=RateLimiter(rate=config.rate, per=config.per),
    )


def create_handler(
    config: AppenderConfig, dispatcher: Dispatcher | None = None
) -> ChatLogHandler:
    """Build a logging handler from configuration.

    The handler's threshold is ``config.level``.
    """
    appender = create_appender(config, dispatcher)
    level = Level.parse(config.level)
    # Level values line up with the stdlib numeric levels
    return ChatLogHandler(appender, level=level.value)
