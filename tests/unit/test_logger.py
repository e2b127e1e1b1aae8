"""Unit tests for the logging setup.

Design Principles:
    - Isolated: The root logger is restored after each test
    - Coverage: Level propagation to module loggers, single sink, file output
"""

import logging

import pytest

from observability.logger import configure_logger, get_logger


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    level, handlers = root.level, list(root.handlers)
    yield
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if handler not in handlers:
            handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestGetLogger:
    """Tests for get_logger()."""

    def test_module_logger_has_no_own_handler_or_level(self):
        logger = get_logger("ingestion.stream.decoder")
        assert logger.handlers == []
        assert logger.level == logging.NOTSET
        assert logger.propagate is True


class TestConfigureLogger:
    """Tests for configure_logger()."""

    def test_debug_level_reaches_module_loggers(self):
        """Test the configured level enables DEBUG on module loggers."""
        from ingestion.stream import decoder

        configure_logger(level="DEBUG")
        assert decoder.logger.isEnabledFor(logging.DEBUG)

    def test_warning_level_silences_info(self):
        configure_logger(level="warning")
        assert not get_logger("libs.api.retrieval_client").isEnabledFor(logging.INFO)

    def test_unknown_level_falls_back_to_info(self):
        configure_logger(level="VERBOSE")
        assert logging.getLogger().level == logging.INFO

    def test_single_console_handler_after_reconfiguration(self):
        configure_logger()
        configure_logger()
        assert len(logging.getLogger().handlers) == 1

    def test_log_file(self, tmp_path):
        """Test records are written once to the configured file."""
        log_file = tmp_path / "client.log"
        configure_logger(level="DEBUG", log_file=str(log_file))

        get_logger("ingestion.stream.decoder").debug("Skipping unparseable event line: 'x'")
        for handler in logging.getLogger().handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert content.count("Skipping unparseable event line") == 1
        assert "ingestion.stream.decoder - DEBUG" in content
