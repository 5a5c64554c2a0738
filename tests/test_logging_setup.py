"""Tests for package logging configuration."""

import io
import logging

import pytest

from budgetkit import logging_setup


@pytest.fixture
def pkg_logger(monkeypatch):
    logger = logging.getLogger("budgetkit")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    monkeypatch.setattr(logging_setup, "_configured", False)
    logger.handlers = []
    yield logger
    logger.handlers = handlers
    logger.propagate = propagate
    logger.setLevel(level)


def test_get_logger_is_silent_until_configured(pkg_logger):
    logging_setup.get_logger("budgetkit.domain.csv_import")
    assert any(isinstance(h, logging.NullHandler) for h in pkg_logger.handlers)


def test_configure_logging_writes_to_stream(pkg_logger):
    stream = io.StringIO()
    logging_setup.configure_logging("info", stream=stream, fmt="%(levelname)s %(message)s")

    logging_setup.get_logger("budgetkit.domain.csv_import").info("csv_import:uploaded batch_id=%d", 7)

    assert stream.getvalue() == "INFO csv_import:uploaded batch_id=7\n"
    assert not any(isinstance(h, logging.NullHandler) for h in pkg_logger.handlers)


def test_configure_logging_twice_only_changes_level(pkg_logger):
    stream = io.StringIO()
    logging_setup.configure_logging("WARNING", stream=stream)
    logging_setup.configure_logging("DEBUG")

    assert len(pkg_logger.handlers) == 1
    assert pkg_logger.level == logging.DEBUG


def test_level_from_environment(pkg_logger, monkeypatch):
    monkeypatch.setenv("BUDGETKIT_LOG_LEVEL", "ERROR")
    logging_setup.configure_logging(stream=io.StringIO())
    assert pkg_logger.level == logging.ERROR


def test_unknown_level(pkg_logger):
    with pytest.raises(ValueError, match="Unknown log level"):
        logging_setup.configure_logging("LOUD")
