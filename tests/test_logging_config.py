"""Tests for logging configuration and formatters."""

import json
import logging
import sys

import pytest

from ibbi_tracker.config import LoggingConfig
from ibbi_tracker.logging import ComponentLoggerAdapter, get_logger
from ibbi_tracker.logging.config import (
    ContextualFilter,
    JSONFormatter,
    KeyValueFormatter,
    configure_logging,
)
from ibbi_tracker.logging.context import clear_log_context, log_context


@pytest.fixture(autouse=True)
def clean_context():
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)


def make_record(message="Wrote batch", level=logging.INFO, **extra):
    record = logging.LogRecord("ibbi_tracker.test", level, "test.py", 1, message, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Tests for JSON output."""

    def test_mandatory_and_extra_fields(self):
        record = make_record(event="store.written", count=3, kind="assignments")

        log_obj = json.loads(JSONFormatter().format(record))

        assert log_obj["level"] == "INFO"
        assert log_obj["message"] == "Wrote batch"
        assert log_obj["timestamp"].endswith("Z")
        assert log_obj["event"] == "store.written"
        assert log_obj["count"] == 3

    def test_exception_info_is_included(self):
        try:
            raise ValueError("bad row")
        except ValueError:
            record = logging.LogRecord("t", logging.ERROR, "t.py", 1, "failed", (), sys.exc_info())

        log_obj = json.loads(JSONFormatter().format(record))

        assert "ValueError: bad row" in log_obj["exc_info"]


class TestKeyValueFormatter:
    """Tests for key-value output."""

    def test_extras_are_sorted_and_quoted(self):
        formatter = KeyValueFormatter("[%(levelname)s] %(message)s")
        record = make_record(event="run.skipped", reason="already ran today", skipped=True, service="ibbi-tracker")

        output = formatter.format(record)

        assert output.startswith("[INFO] Wrote batch ")
        assert 'reason="already ran today"' in output
        assert "skipped=true" in output
        assert "service=" not in output
        assert output.index("event=") < output.index("reason=")


class TestContextualFilter:
    """Tests for record enrichment."""

    def test_adds_static_fields_and_context(self):
        record = make_record()

        with log_context(run_id="abc"):
            ContextualFilter(environment="test").filter(record)

        assert record.service == "ibbi-tracker"
        assert record.environment == "test"
        assert record.run_id == "abc"

    def test_explicit_extra_wins_over_context(self):
        record = make_record(extractor="announcements")

        with log_context(extractor="assignments"):
            ContextualFilter().filter(record)

        assert record.extractor == "announcements"


class TestGetLogger:
    """Tests for the component adapter."""

    def test_component_is_merged_with_extra(self, caplog):
        logger = get_logger("ibbi_tracker.test_component", component="store")

        with caplog.at_level(logging.INFO, logger="ibbi_tracker.test_component"):
            logger.info("hello", extra={"event": "store.written"})

        assert isinstance(logger, ComponentLoggerAdapter)
        assert caplog.records[0].component == "store"
        assert caplog.records[0].event == "store.written"

    def test_without_component_returns_plain_logger(self):
        assert isinstance(get_logger("ibbi_tracker.plain"), logging.Logger)


class TestConfigureLogging:
    """Tests for configure_logging."""

    def test_json_to_stdout(self, restore_root_logger, capsys):
        configure_logging(level="INFO", format_type="json", environment="test")
        logging.getLogger("ibbi_tracker.x").info("hello", extra={"event": "test.event"})

        lines = [json.loads(line) for line in capsys.readouterr().out.strip().splitlines()]

        assert lines[-1]["message"] == "hello"
        assert lines[-1]["environment"] == "test"
        assert lines[-1]["service"] == "ibbi-tracker"

    def test_log_file_receives_records(self, restore_root_logger, tmp_path):
        log_file = tmp_path / "logs" / "tracker.log"

        configure_logging(level="INFO", format_type="key-value", log_file=str(log_file))
        logging.getLogger("ibbi_tracker.x").info("to file")
        for handler in restore_root_logger.handlers:
            handler.flush()

        assert "to file" in log_file.read_text(encoding="utf-8")

    def test_invalid_level_raises(self, restore_root_logger):
        with pytest.raises(ValueError, match="Invalid log level"):
            configure_logging(level="LOUD")

    def test_invalid_format_raises(self, restore_root_logger):
        with pytest.raises(ValueError, match="Invalid log format"):
            configure_logging(format_type="xml")

    def test_stream_override_keeps_stdout_clean(self, restore_root_logger, capsys):
        configure_logging(level="INFO", format_type="key-value", stream=sys.stderr)
        logging.getLogger("ibbi_tracker.x").info("to stderr")

        captured = capsys.readouterr()

        assert captured.out == ""
        assert "to stderr" in captured.err

    def test_accepts_default_logging_config(self, restore_root_logger):
        defaults = LoggingConfig()

        configure_logging(level=defaults.level, format_type=defaults.format, stream=sys.stderr)

        assert restore_root_logger.level == logging.INFO
