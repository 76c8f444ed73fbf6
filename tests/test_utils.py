"""
Tests for package logging.
"""

import logging

import pytest

from parflow.utils import LoggingConfig, get_logger, setup_parflow_logging


def file_handlers():
    return [h for h in logging.getLogger("parflow").handlers if isinstance(h, logging.FileHandler)]


@pytest.fixture
def package_logger():
    """Restore the package logger after a test attached files or changed levels."""
    logger = logging.getLogger("parflow")
    level = logger.level
    yield logger
    for handler in file_handlers():
        logger.removeHandler(handler)
        handler.close()
    LoggingConfig.set_level(logging.getLevelName(level))


class TestLogging:
    """Test logger setup after the package import configured it."""

    def test_initialized_on_import(self):
        assert LoggingConfig._initialized
        assert get_logger("parflow.test").name == "parflow.test"

    def test_log_dir_after_import_writes_file(self, package_logger, temp_dir):
        log_file = setup_parflow_logging(log_dir=str(temp_dir / "logs"))
        assert log_file == (temp_dir / "logs" / "parflow.log").resolve()

        get_logger("parflow.test").info("round decoded")
        assert "round decoded" in log_file.read_text(encoding="utf-8")

    def test_file_handler_attached_once(self, package_logger, temp_dir):
        setup_parflow_logging(log_dir=str(temp_dir))
        setup_parflow_logging(log_dir=str(temp_dir))
        assert len(file_handlers()) == 1

    def test_set_level_applies_to_file_handler(self, package_logger, temp_dir):
        log_file = setup_parflow_logging(log_dir=str(temp_dir))
        LoggingConfig.set_level("WARNING")
        get_logger("parflow.test").info("hidden")
        get_logger("parflow.test").warning("shown")
        content = log_file.read_text(encoding="utf-8")
        assert "shown" in content
        assert "hidden" not in content

    def test_console_only_without_log_dir(self, package_logger):
        assert setup_parflow_logging() is None
        assert file_handlers() == []
