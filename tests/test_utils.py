"""Tests for logging setup and filesystem helpers."""

import json
import logging
import stat

from rich.logging import RichHandler

from asaprov.utils import StructuredFormatter, ensure_directory_permissions, setup_logging


def _record(**extra):
    record = logging.LogRecord("asaprov.handlers", logging.INFO, __file__, 1, "Starting job %s", ("job1",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    """Tests for JSON log lines."""

    def test_basic_fields(self):
        data = json.loads(StructuredFormatter().format(_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "asaprov.handlers"
        assert data["message"] == "Starting job job1"
        assert data["timestamp"].endswith("Z")
        assert "resource" not in data

    def test_resource_and_operation_extras(self):
        data = json.loads(StructuredFormatter().format(_record(resource="job1", operation="start")))

        assert data["resource"] == "job1"
        assert data["operation"] == "start"


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_pretty_uses_rich(self):
        logger = setup_logging("DEBUG", "pretty")

        assert logger.name == "asaprov"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0], RichHandler)
        assert logger.handlers[0].console.stderr

    def test_structured_with_file(self, tmp_path):
        log_file = tmp_path / "logs" / "asaprov.log"

        logger = setup_logging("INFO", "structured", log_file=log_file)
        logger.info("hello", extra={"operation": "apply"})
        for handler in logger.handlers:
            handler.flush()

        line = log_file.read_text().strip().splitlines()[-1]
        assert json.loads(line)["operation"] == "apply"
        assert all(isinstance(h.formatter, StructuredFormatter) for h in logger.handlers)

    def test_repeated_setup_replaces_handlers(self):
        setup_logging("INFO", "pretty")
        logger = setup_logging("WARNING", "pretty", console_output=False)

        assert logger.handlers == []


def test_ensure_directory_permissions(tmp_path):
    directory = tmp_path / "a" / "b"

    ensure_directory_permissions(directory)

    assert stat.S_IMODE(directory.stat().st_mode) == 0o700
