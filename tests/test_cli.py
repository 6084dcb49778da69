"""Tests for the chat-alerts CLI."""

import logging

import httpx
import pytest
from click.testing import CliRunner

from chat_alerts.cli import main, make_event
from chat_alerts.appender import Level

POLICY = "red: FATAL, ERROR; yellow: WARN; purple"

ENV_VARS = [
    "AUTH_TOKEN",
    "ROOM_ID",
    "FROM",
    "MESSAGE",
    "NOTIFY",
    "COLOR",
    "FORMAT",
    "RATE",
    "PER",
    "API_URL",
    "LEVEL",
]


@pytest.fixture
def config_args(tmp_path, monkeypatch: pytest.MonkeyPatch):
    """Point the CLI at an empty config dir with no CHAT_ALERTS_* env."""
    for name in ENV_VARS:
        monkeypatch.delenv(f"CHAT_ALERTS_{name}", raising=False)
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield ["--config", str(tmp_path / "config.yaml")]
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


def test_make_event() -> None:
    event = make_event("warn", "disk low", marker="OPS", logger_name="myapp.disk")

    assert event.level == Level.WARN
    assert event.message == "disk low"
    assert event.marker == "OPS"
    assert event.source is not None
    assert event.source.class_name == "myapp.disk"


def test_render(config_args: list[str]) -> None:
    result = CliRunner().invoke(
        main, config_args + ["render", "--level", "WARN", "--logger", "myapp.disk", "disk low"]
    )

    assert result.exit_code == 0, result.output
    assert "From:   disk" in result.output
    assert "Color:  yellow" in result.output
    assert "WARN: disk low" in result.output


def test_colors(config_args: list[str]) -> None:
    result = CliRunner().invoke(
        main, config_args + ["colors", "--policy", POLICY, "ERROR", "INFO"]
    )

    assert result.exit_code == 0, result.output
    lines = [line.split() for line in result.output.splitlines()]
    assert lines == [["ERROR", "red"], ["INFO", "purple"]]


def test_colors_all_levels(config_args: list[str]) -> None:
    result = CliRunner().invoke(main, config_args + ["colors"])

    assert result.exit_code == 0, result.output
    assert len(result.output.splitlines()) == len(Level)


def test_colors_invalid_policy(config_args: list[str]) -> None:
    result = CliRunner().invoke(main, config_args + ["colors", "--policy", "blue: ERROR"])

    assert result.exit_code != 0
    assert "Unknown color" in result.output


def test_send_requires_token(config_args: list[str]) -> None:
    result = CliRunner().invoke(main, config_args + ["send", "hello"])

    assert result.exit_code != 0
    assert "auth_token" in result.output


def test_send(config_args: list[str], monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHAT_ALERTS_AUTH_TOKEN", "secret")
    monkeypatch.setenv("CHAT_ALERTS_ROOM_ID", "ops")
    posted = []

    def fake_post(url, **kwargs):
        posted.append((url, kwargs["json"]))
        return httpx.Response(204, request=httpx.Request("POST", url))

    monkeypatch.setattr(httpx, "post", fake_post)

    result = CliRunner().invoke(main, config_args + ["send", "--level", "ERROR", "deploy failed"])

    assert result.exit_code == 0, result.output
    assert "Message sent!" in result.output
    assert len(posted) == 1
    url, payload = posted[0]
    assert url == "https://api.hipchat.com/v2/room/ops/notification"
    assert payload["color"] == "red"
    assert payload["message"].startswith("ERROR: deploy failed")


def test_send_failure(config_args: list[str], monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CHAT_ALERTS_AUTH_TOKEN", "secret")
    monkeypatch.setenv("CHAT_ALERTS_ROOM_ID", "ops")

    def fake_post(url, **kwargs):
        return httpx.Response(500, request=httpx.Request("POST", url))

    monkeypatch.setattr(httpx, "post", fake_post)

    result = CliRunner().invoke(main, config_args + ["test"])

    assert result.exit_code != 0
    assert "room ops" in result.output
