import logging
import os
from logging.handlers import RotatingFileHandler
from unittest.mock import patch

from rich.logging import RichHandler

from walletfetch import log_utils


class TestLogUtils:
    """Test suite for log_utils module."""

    def setup_method(self):
        """Reset logger state before each test."""
        for handler in log_utils.logger.handlers[:]:
            log_utils.logger.removeHandler(handler)
            handler.close()

        log_utils._file_handler = None

        log_utils._initialize_logger()

    def teardown_method(self):
        self.setup_method()

    def test_logger_initialization(self):
        """Test that logger is properly initialized."""
        assert log_utils.logger.name == "walletfetch"
        assert not log_utils.logger.propagate
        assert len(log_utils.logger.handlers) == 1
        assert isinstance(log_utils.logger.handlers[0], RichHandler)

    def test_console_handler_prints_brackets_literally(self):
        """Rich markup is disabled so "[download]" prefixes are not parsed."""
        assert log_utils.logger.handlers[0].markup is False

    def test_logger_initialization_with_env_var(self):
        """Test logger initialization with environment variable."""
        with patch.dict(os.environ, {"WALLETFETCH_LOG_LEVEL": "DEBUG"}):
            log_utils._initialize_logger()
            assert log_utils.logger.level == logging.DEBUG
            assert log_utils.logger.handlers[0].level == logging.DEBUG

    def test_logger_initialization_with_invalid_env_var(self):
        """Test logger initialization with invalid environment variable."""
        with patch.dict(os.environ, {"WALLETFETCH_LOG_LEVEL": "INVALID"}):
            log_utils._initialize_logger()
            assert log_utils.logger.level == logging.INFO

    def test_set_log_level_valid(self):
        """Test setting valid log levels."""
        log_utils.set_log_level("debug")
        assert log_utils.logger.level == logging.DEBUG
        assert log_utils.logger.handlers[0].level == logging.DEBUG

        log_utils.set_log_level("WARNING")
        assert log_utils.logger.level == logging.WARNING

    def test_set_log_level_invalid(self):
        """Test setting invalid log level keeps the current one."""
        original_level = log_utils.logger.level

        log_utils.set_log_level("NOPE")

        assert log_utils.logger.level == original_level

    def test_add_file_logging(self, tmp_path):
        """Test file logging writes to walletfetch.log."""
        log_dir = tmp_path / "logs"

        log_utils.add_file_logging(log_dir, "DEBUG")
        log_utils.set_log_level("DEBUG")
        log_utils.logger.debug("file logging works")
        log_utils._file_handler.flush()

        log_file = log_dir / "walletfetch.log"
        assert log_file.exists()
        assert "file logging works" in log_file.read_text(encoding="utf-8")
        assert log_utils._file_handler.level == logging.DEBUG

    def test_add_file_logging_replaces_previous_handler(self, tmp_path):
        """Test reconfiguring file logging keeps a single file handler."""
        log_utils.add_file_logging(tmp_path / "first")
        log_utils.add_file_logging(tmp_path / "second", "bogus")

        file_handlers = [
            h
            for h in log_utils.logger.handlers
            if isinstance(h, RotatingFileHandler)
        ]
        assert len(file_handlers) == 1
        assert file_handlers[0].level == logging.INFO
        assert file_handlers[0].baseFilename.endswith(
            os.path.join("second", "walletfetch.log")
        )
