"""Tests for logging setup."""

import logging

import pytest

from uniprot_proxy.logging_config import (
    ROOT_LOGGER_NAME,
    LogTimer,
    get_logger,
    setup_logging,
)


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Remove handlers installed by setup_logging."""
    yield
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()


class TestLogging:
    """Test cases for logging configuration."""

    def test_get_logger_namespace(self):
        """Test module loggers live under the package logger."""
        assert get_logger('fetcher').name == "uniprot_proxy.fetcher"

    def test_console_only_by_default(self):
        """Test no file handler without a log directory."""
        loggers = setup_logging()
        handlers = loggers['main'].handlers

        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.StreamHandler)
        assert handlers[0].level == logging.INFO

    def test_quiet_console(self):
        """Test quiet mode only lets errors through to the console."""
        loggers = setup_logging(log_level="DEBUG", quiet=True)

        assert loggers['main'].handlers[0].level == logging.ERROR

    def test_repeated_setup_replaces_handlers(self):
        """Test handlers do not accumulate."""
        setup_logging()
        loggers = setup_logging()

        assert len(loggers['main'].handlers) == 1

    def test_log_file(self, tmp_path):
        """Test messages are written to the rotating log file."""
        setup_logging(log_level="DEBUG", log_file="test.log", log_dir=str(tmp_path), console=False)

        get_logger('fetcher').info("Loading: https://www.uniprot.org/uniprot/P69905.xml")
        for handler in logging.getLogger(ROOT_LOGGER_NAME).handlers:
            handler.flush()

        content = (tmp_path / "test.log").read_text()
        assert "uniprot_proxy.fetcher" in content
        assert "P69905" in content

    def test_log_timer(self):
        """Test elapsed time is recorded."""
        with LogTimer("operation") as timer:
            pass

        assert timer.elapsed >= 0.0

    def test_log_timer_on_error(self):
        """Test the timer does not swallow exceptions."""
        with pytest.raises(ValueError):
            with LogTimer("operation"):
                raise ValueError("boom")
