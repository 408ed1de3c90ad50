"""Tests for structlog configuration."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator

import pytest
import structlog

from hactl.config.logging import configure_logging, redact_secrets


@pytest.fixture(autouse=True)
def _restore_logging() -> Generator[None]:
    """Restore root logger state after each test."""
    root = logging.getLogger()
    original_handlers = root.handlers[:]
    original_level = root.level
    hactl = logging.getLogger("hactl")
    hactl_level = hactl.level
    yield
    root.handlers = original_handlers
    root.setLevel(original_level)
    hactl.setLevel(hactl_level)


class TestConfigureLogging:
    def test_verbose_enables_debug(self) -> None:
        configure_logging(verbose=True, log_json=False)
        assert logging.getLogger("hactl").level == logging.DEBUG
        assert logging.getLogger().level == logging.WARNING

    def test_non_verbose_sets_warning(self) -> None:
        configure_logging(verbose=False, log_json=False)
        assert logging.getLogger("hactl").level == logging.WARNING

    def test_json_mode_output(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        log = structlog.get_logger("hactl.test")
        log.warning("hub.error", status=404)
        captured = capfd.readouterr()
        parsed = json.loads(captured.err.strip())
        assert parsed["event"] == "hub.error"
        assert parsed["status"] == 404
        assert parsed["level"] == "warning"
        assert parsed["logger"] == "hactl.test"
        assert "timestamp" in parsed

    def test_logs_never_reach_stdout(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        structlog.get_logger("hactl.test").info("operation.invoke", tool="ha_status")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "operation.invoke" in captured.err

    def test_httpx_request_logs_suppressed(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        logging.getLogger("httpx").info("HTTP Request: GET http://ha.local:8123/api/")
        logging.getLogger("httpcore").debug("connect_tcp.started")
        captured = capfd.readouterr()
        assert captured.err == ""

    def test_idempotent_calls(self) -> None:
        """Multiple configure_logging calls don't stack handlers."""
        configure_logging(verbose=True, log_json=False)
        configure_logging(verbose=True, log_json=True)
        assert len(logging.getLogger().handlers) == 1


class TestRedactSecrets:
    def test_token_fields_masked(self) -> None:
        event = redact_secrets(None, "info", {"event": "config.loaded", "token": "abc123"})
        assert event["token"] == "***"

    def test_empty_token_left_alone(self) -> None:
        assert redact_secrets(None, "info", {"token": ""})["token"] == ""

    def test_bearer_in_message_masked(self) -> None:
        event = redact_secrets(None, "debug", {"event": "send headers Authorization: Bearer abc"})
        assert event["event"] == "send headers Authorization: Bearer ***"

    def test_token_never_rendered(self, capfd: pytest.CaptureFixture[str]) -> None:
        configure_logging(verbose=True, log_json=True)
        structlog.get_logger("hactl.test").warning("hub.auth", token="llat-secret")
        logging.getLogger("hactl.raw").warning("retry with Bearer llat-secret")
        captured = capfd.readouterr()
        assert "llat-secret" not in captured.err
        lines = [json.loads(line) for line in captured.err.strip().splitlines()]
        assert lines[0]["token"] == "***"
        assert lines[1]["event"] == "retry with Bearer ***"
