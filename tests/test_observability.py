"""
Tests for logging setup.
"""

import logging
from pathlib import Path

import pytest

from npm_facade.core.observability.logging_config import (
    PACKAGE_LOGGER,
    _parse_level,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _restore_package_logger():
    logger = logging.getLogger(PACKAGE_LOGGER)
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield
    for handler in list(logger.handlers):
        if handler not in saved[0]:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(saved[1])
    logger.propagate = saved[2]


class TestParseLevel:
    def test_names(self):
        assert _parse_level("debug") == logging.DEBUG
        assert _parse_level("ERROR") == logging.ERROR

    def test_fallback(self):
        assert _parse_level(None) == logging.WARNING
        assert _parse_level("chatty") == logging.WARNING


class TestSetupLogging:
    def test_console_level(self):
        logger = setup_logging("INFO")
        assert logger.name == PACKAGE_LOGGER
        assert logger.level == logging.INFO
        streams = [h for h in logger.handlers if isinstance(h, logging.StreamHandler)
                   and not isinstance(h, logging.FileHandler)]
        assert len(streams) == 1

    def test_repeated_setup_does_not_stack(self):
        setup_logging("INFO")
        logger = setup_logging("DEBUG")
        consoles = [h for h in logger.handlers if type(h) is logging.StreamHandler]
        assert len(consoles) == 1
        assert logger.level == logging.DEBUG

    def test_file_handler(self, tmp_path: Path):
        log_file = tmp_path / "npm.log"
        logger = setup_logging("ERROR", log_file=str(log_file), log_file_level="DEBUG")
        assert logger.level == logging.DEBUG
        logging.getLogger("npm_facade.core.services.command_factory").debug("npm ping → npm ping")
        for handler in logger.handlers:
            handler.flush()
        assert "npm ping" in log_file.read_text(encoding="utf-8")

    def test_library_default_is_silent(self):
        import npm_facade  # noqa: F401

        assert any(isinstance(h, logging.NullHandler) for h in logging.getLogger(PACKAGE_LOGGER).handlers)
