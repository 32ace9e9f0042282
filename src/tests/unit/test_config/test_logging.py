"""Tests for logging configuration."""

import tempfile
from pathlib import Path

from structlog.testing import capture_logs

from devnote_search.config.logging import (
    configure_logging,
    configure_logging_from_settings,
    get_logger,
    log_performance,
)
from devnote_search.config.settings import LoggingConfig


def test_configure_logging_with_file():
    """Test logging configuration with file output."""
    with tempfile.NamedTemporaryFile(suffix=".log", delete=False) as f:
        temp_file = f.name

    try:
        logger = configure_logging(level="INFO", log_file=temp_file)
        logger.info("Test message", key="value")

        content = Path(temp_file).read_text()
        assert "Test message" in content
    finally:
        Path(temp_file).unlink(missing_ok=True)


def test_configure_logging_from_settings():
    logger = configure_logging_from_settings(LoggingConfig(level="DEBUG", json_format=False))

    assert logger is not None


def test_log_performance_emits_metric():
    with capture_logs() as captured:
        log_performance(get_logger("perf-test"), "search", 12.5, query="spring")

    assert captured[0]["event"] == "Performance metric"
    assert captured[0]["operation"] == "search"
    assert captured[0]["duration_ms"] == 12.5
    assert captured[0]["metric_type"] == "performance"


def test_log_performance_silent_when_disabled():
    configure_logging_from_settings(LoggingConfig(enable_performance=False))
    try:
        with capture_logs() as captured:
            log_performance(get_logger("perf-test"), "search", 12.5)
            get_logger("perf-test").info("Search completed")

        assert [entry["event"] for entry in captured] == ["Search completed"]
    finally:
        configure_logging()
