"""
Unit tests for structured logging configuration.
"""

import json
import logging
from pathlib import Path

from hsdp_api.logging_config import (
    clear_correlation_id,
    get_correlation_id,
    get_logger,
    log_request_sent,
    log_response_classified,
    set_correlation_id,
    setup_logging,
)


def read_entries(log_file: Path):
    return [json.loads(line) for line in log_file.read_text().splitlines() if line]


class TestLoggingConfiguration:
    """Test structured logging configuration functionality."""

    def test_setup_logging_default(self):
        """Test setup_logging with default parameters."""
        setup_logging()

        logger = get_logger("test")
        assert hasattr(logger, 'info') and hasattr(logger, 'warning') and hasattr(logger, 'error')

    def test_setup_logging_with_level(self):
        setup_logging(level="DEBUG")
        assert logging.getLogger().level == logging.DEBUG

    def test_unknown_level_falls_back_to_info(self):
        setup_logging(level="chatty")
        assert logging.getLogger().level == logging.INFO

    def test_setup_logging_json_format(self, temp_dir: Path):
        """Test setup_logging with JSON format."""
        log_file = temp_dir / "logs" / "test.log"
        setup_logging(level="INFO", log_file=log_file, json_format=True)

        get_logger("test").info("test_message", key="value")

        entry = read_entries(log_file)[0]
        assert entry["event"] == "test_message"
        assert entry["key"] == "value"
        assert entry["logger"] == "hsdp_api.test"
        assert "timestamp" in entry
        assert entry["level"] == "info"

    def test_setup_logging_human_format(self, temp_dir: Path):
        log_file = temp_dir / "test.log"
        setup_logging(level="INFO", log_file=log_file, json_format=False)

        get_logger("test").info("test_message", key="value")

        content = log_file.read_text()
        assert "test_message" in content
        assert "key" in content


class TestCorrelationId:
    def test_correlation_id_management(self):
        """Test correlation ID context management."""
        assert get_correlation_id() is None

        assert set_correlation_id("test-correlation-id") == "test-correlation-id"
        assert get_correlation_id() == "test-correlation-id"

        clear_correlation_id()
        assert get_correlation_id() is None

    def test_correlation_id_auto_generation(self):
        correlation_id = set_correlation_id()
        assert correlation_id
        assert get_correlation_id() == correlation_id
        clear_correlation_id()

    def test_correlation_id_in_logs(self, temp_dir: Path):
        log_file = temp_dir / "test.log"
        setup_logging(level="INFO", log_file=log_file, json_format=True)

        set_correlation_id("test-correlation-123")
        get_logger("test").info("test_message")
        clear_correlation_id()

        assert read_entries(log_file)[0]["correlation_id"] == "test-correlation-123"


class TestTransportLogHelpers:
    def test_log_request_sent(self, temp_dir: Path):
        log_file = temp_dir / "test.log"
        setup_logging(level="DEBUG", log_file=log_file, json_format=True)

        log_request_sent(get_logger("test"), "PUT", "https://example.org/Patient/1", 42)

        entry = read_entries(log_file)[0]
        assert entry["event_type"] == "request_sent"
        assert entry["method"] == "PUT"
        assert entry["content_length"] == 42
        assert entry["level"] == "debug"

    def test_log_request_sent_without_body(self, temp_dir: Path):
        log_file = temp_dir / "test.log"
        setup_logging(level="DEBUG", log_file=log_file, json_format=True)

        log_request_sent(get_logger("test"), "GET", "https://example.org/Patient/1")

        assert "content_length" not in read_entries(log_file)[0]

    def test_successful_response_logged_at_debug(self, temp_dir: Path):
        log_file = temp_dir / "test.log"
        setup_logging(level="DEBUG", log_file=log_file, json_format=True)

        log_response_classified(
            get_logger("test"), "GET", "https://example.org/Patient/1", 200, True, 12.5
        )

        entry = read_entries(log_file)[0]
        assert entry["event_type"] == "response_classified"
        assert entry["status_code"] == 200
        assert entry["duration_ms"] == 12.5
        assert entry["level"] == "debug"

    def test_failed_response_logged_at_warning(self, temp_dir: Path):
        """Non-success statuses stay visible at the default INFO level."""
        log_file = temp_dir / "test.log"
        setup_logging(level="INFO", log_file=log_file, json_format=True)

        log_response_classified(
            get_logger("test"), "GET", "https://example.org/Patient/1", 404, False, 3.0
        )

        entry = read_entries(log_file)[0]
        assert entry["success"] is False
        assert entry["level"] == "warning"
