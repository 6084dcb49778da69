"""Severity to notification color policy."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from chat_alerts.errors import ConfigurationError

from .events import Level


class Color(Enum):
    """Room notification colors accepted by the chat service."""

    YELLOW = "yellow"
    RED = "red"
    GREEN = "green"
    PURPLE = "purple"
    GRAY = "gray"
    RANDOM = "random"  # Hue chosen by the chat service

    @classmethod
    def parse(cls, name: str) -> Color:
        """Look up a color by name (case-insensitive)."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            legal = ", ".join(c.value for c in cls)
            raise ConfigurationError(
                f"Unknown color {name!r} (expected one of: {legal})"
            ) from None


DEFAULT_COLOR = Color.YELLOW

DEFAULT_POLICY = "red: FATAL, ERROR; yellow: WARN; purple"


@dataclass(frozen=True)
class ColorRule:
    """Use ``color`` for any level in ``levels``."""

    color: Color
    levels: frozenset[Level]


@dataclass(frozen=True)
class ColorPolicy:
    """Ordered color rules with a fallback color.

    Rules are checked top to bottom; the first one listing the level wins.
    """

    rules: tuple[ColorRule, ...] = ()
    default: Color = DEFAULT_COLOR

    @classmethod
    def parse(cls, spec: str, default: Color = DEFAULT_COLOR) -> ColorPolicy:
        """Build a policy from a string like ``red: FATAL, ERROR; yellow: WARN; purple``.

        Segments are separated by ``;``. Each is either ``color: LEVEL, ...``
        or, as the last segment only, a bare ``color`` used as the default.

        Raises:
            ConfigurationError: On an empty or unknown color, an unknown
                level, or a bare color that is not the last segment
        """
        segments = [s.strip() for s in spec.split(";")]
        segments = [s for s in segments if s]

        rules: list[ColorRule] = []
        for index, segment in enumerate(segments):
            color_name, sep, level_names = segment.partition(":")
            if not color_name.strip():
                raise ConfigurationError(f"Color segment has no color name: {segment!r}")
            color = Color.parse(color_name)

            if not sep:
                if index != len(segments) - 1:
                    raise ConfigurationError(
                        f"Bare color {segment!r} must be the last segment of {spec!r}"
                    )
                default = color
                continue

            levels = frozenset(
                Level.parse(name) for name in level_names.split(",") if name.strip()
            )
            rules.append(ColorRule(color=color, levels=levels))

        return cls(rules=tuple(rules), default=default)

    def pick(self, level: Level) -> Color:
        """Return the color for a level."""
        for rule in self.rules:
            if level in rule.levels:
                return rule.color
        return self.default
