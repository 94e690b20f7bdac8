"""Tests for logging setup."""

import logging

import pytest

from docscheck.logging_config import FILE_FORMAT, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)


class TestSetupLogging:
    """Test cases for setup_logging."""

    def test_level_and_console_format(self, restore_root_logger):
        setup_logging(level="debug")

        assert restore_root_logger.level == logging.DEBUG
        console = restore_root_logger.handlers[0]
        assert console.formatter._fmt == "%(message)s"
        assert logging.getLogger("playwright").level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, restore_root_logger):
        setup_logging(level="LOUD")
        assert restore_root_logger.level == logging.INFO

    def test_log_file(self, restore_root_logger, tmp_path):
        """Test the file handler is added with a timestamped format."""
        log_file = tmp_path / "logs" / "docscheck.log"

        setup_logging(log_file=str(log_file))
        logging.getLogger("docscheck.test").info("Checking: http://localhost:3000/")
        for handler in restore_root_logger.handlers:
            handler.flush()

        assert restore_root_logger.handlers[1].formatter._fmt == FILE_FORMAT
        content = log_file.read_text(encoding="utf-8")
        assert "docscheck.test - INFO - Checking: http://localhost:3000/" in content
