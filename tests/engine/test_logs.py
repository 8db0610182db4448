"""Tests for logging helpers."""

import logging

import pytest

from modelgen.logs import configure_logging, get_logger


@pytest.fixture
def restore_logger():
    logger = logging.getLogger("modelgen")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


class TestGetLogger:
    def test_short_names(self):
        assert get_logger("modelgen.regions.merge").name == "modelgen.merge"

    def test_root(self):
        assert get_logger().name == "modelgen"
        assert get_logger("modelgen").name == "modelgen"

    def test_library_is_silent_by_default(self):
        handlers = logging.getLogger("modelgen").handlers
        assert any(isinstance(h, logging.NullHandler) for h in handlers)


class TestConfigureLogging:
    def test_levels(self, restore_logger):
        configure_logging(verbose=True)
        assert restore_logger.level == logging.DEBUG

        configure_logging(quiet=True)
        assert restore_logger.level == logging.WARNING

        configure_logging()
        assert restore_logger.level == logging.INFO

    def test_single_stream_handler(self, restore_logger):
        configure_logging()
        configure_logging()

        streams = [h for h in restore_logger.handlers if isinstance(h, logging.StreamHandler)]
        assert len(streams) == 1
        assert restore_logger.propagate is False
