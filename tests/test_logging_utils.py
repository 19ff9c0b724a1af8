"""Tests for logging_utils module."""

import json
import logging
from pathlib import Path

from minish.logging_utils import (
    StructuredTextFormatter,
    log_event,
    setup_logging,
)


def _record(message, name="minish"):
    return logging.LogRecord(name, logging.INFO, __file__, 1, message, None, None)


class TestLogEvent:
    """Test log_event function."""

    def test_emits_json_payload(self, caplog):
        """Test that events are logged as JSON with the event name."""
        with caplog.at_level(logging.INFO, logger="minish"):
            log_event("command_exec", command="ls", argc=1, path=Path("/tmp"))

        payload = json.loads(caplog.records[-1].getMessage())
        assert payload["event"] == "command_exec"
        assert payload["command"] == "ls"
        assert payload["argc"] == 1
        assert payload["path"] == "/tmp"
        assert "ts" in payload

    def test_respects_level(self, caplog):
        """Test that the given level is used."""
        with caplog.at_level(logging.INFO, logger="minish"):
            log_event("command_error", level=logging.WARNING, error="x")

        assert caplog.records[-1].levelno == logging.WARNING


class TestStructuredTextFormatter:
    """Test StructuredTextFormatter."""

    def test_formats_event_block(self):
        """Test block layout and preferred key order."""
        message = json.dumps(
            {"event": "command_exec", "ts": "t", "outcome": "ok", "command": "ls", "zzz": 1}
        )

        text = StructuredTextFormatter().format(_record(message))
        lines = text.splitlines()

        assert lines[0] == "=== command_exec ==="
        keys = [line.split(":", 1)[0] for line in lines[1:]]
        assert keys.index("command") < keys.index("outcome") < keys.index("zzz")

    def test_plain_message(self):
        """Test that non-JSON messages use the logger name as event."""
        text = StructuredTextFormatter().format(_record("hello", name="minish.test"))

        assert text.startswith("=== minish.test ===")
        assert "message: hello" in text

    def test_newlines_escaped(self):
        """Test that multi-line values stay on one line."""
        message = json.dumps({"event": "command_error", "error": "a\nb"})

        text = StructuredTextFormatter().format(_record(message))

        assert "error: a\\nb" in text


class TestSetupLogging:
    """Test setup_logging function."""

    def test_without_file_disables_logging(self, caplog):
        """Test that logging is off when no file is configured."""
        setup_logging(None)

        log_event("command_exec", command="ls")

        assert caplog.records == []

    def test_with_file_writes_events(self, tmp_path):
        """Test that events land in the configured file."""
        log_file = tmp_path / "nested" / "minish.log"

        setup_logging(str(log_file))
        log_event("app_start", cwd="/")

        content = log_file.read_text(encoding="utf-8")
        assert "=== app_start ===" in content
        assert "cwd: /" in content
