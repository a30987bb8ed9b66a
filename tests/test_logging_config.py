"""
Tests for the logging configuration.

Outside DEBUG_MODE, recording telemetry and selecting strategies must not
touch the filesystem: no debug_flow.txt writes and no processing.log file.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add project root to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from textlab import logging_config  # noqa: E402
from textlab.strategy import TextCharacteristics, new_strategy_selector  # noqa: E402
from textlab.telemetry import CostRecord, TelemetryStore  # noqa: E402


@pytest.fixture
def logs_dir(tmp_path, monkeypatch):
    """Point both log files at a temporary directory and reset the debug file."""
    logs = tmp_path / "logs"
    monkeypatch.setattr(logging_config, "DEBUG_LOG_FILE", logs / "debug_flow.txt")
    monkeypatch.setattr(logging_config, "LOG_FILE", logs / "processing.log")
    monkeypatch.setattr(logging_config._debug_file_logger, "_log_file", None)
    monkeypatch.setattr(logging_config._debug_file_logger, "_disabled", False)
    return logs


@pytest.fixture
def fresh_logger(monkeypatch):
    """The TextLab logger with its handlers detached for the test."""
    logger = logging.getLogger('TextLab')
    original_level = logger.level
    monkeypatch.setattr(logger, "handlers", [])
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.setLevel(original_level)


class TestDebugFileLogger:
    """Tests for the debug_flow.txt writer."""

    def test_no_file_writes_outside_debug_mode(self, logs_dir, monkeypatch):
        monkeypatch.setattr(logging_config, "DEBUG_MODE", False)

        store = TelemetryStore()
        store.record("X", None, CostRecord())
        selector = new_strategy_selector()
        chars = TextCharacteristics(length=2000, language="en", domain="general", complexity=0.5)
        strategy = selector.select_strategy(chars)
        selector.record_outcome(chars, strategy, 0.9, success=True)
        logging_config.debug_log("[TEST] dropped")

        assert not logs_dir.exists()

    def test_debug_mode_writes_file(self, logs_dir, monkeypatch):
        monkeypatch.setattr(logging_config, "DEBUG_MODE", True)

        logging_config.debug_log("[TEST] kept")
        logging_config.close_debug_log()

        content = (logs_dir / "debug_flow.txt").read_text(encoding="utf-8")
        assert "[TEST] kept" in content


class TestStandardLogging:
    """Tests for the standard logger handlers."""

    def test_no_log_file_outside_debug_mode(self, logs_dir, fresh_logger, monkeypatch):
        monkeypatch.setattr(logging_config, "DEBUG_MODE", False)

        logger = logging_config._setup_standard_logging()

        assert not any(isinstance(h, logging.FileHandler) for h in logger.handlers)
        assert not logs_dir.exists()

    def test_debug_mode_log_file_is_created_lazily(self, logs_dir, fresh_logger, monkeypatch):
        monkeypatch.setattr(logging_config, "DEBUG_MODE", True)

        logger = logging_config._setup_standard_logging()

        file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1
        assert not (logs_dir / "processing.log").exists()

        logger.warning("first record")
        file_handlers[0].flush()
        assert (logs_dir / "processing.log").exists()
