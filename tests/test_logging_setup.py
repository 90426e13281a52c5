"""Tests for package logging configuration."""

import io
import logging

import pytest

from tranxhistory import logging_setup


def _own_handlers(logger):
    """Handlers the package installs, ignoring any a test runner attaches."""
    return [h for h in logger.handlers if type(h) in (logging.StreamHandler, logging.NullHandler)]


@pytest.fixture
def fresh_logging(monkeypatch):
    """Run a test against an unconfigured package logger, then restore it."""
    logger = logging.getLogger("tranxhistory")
    saved_handlers = list(logger.handlers)
    saved_level, saved_propagate = logger.level, logger.propagate
    monkeypatch.setattr(logging_setup, "_CONFIGURED", False)
    for handler in _own_handlers(logger):
        logger.removeHandler(handler)

    yield logger

    for handler in _own_handlers(logger):
        logger.removeHandler(handler)
    for handler in saved_handlers:
        if handler not in logger.handlers:
            logger.addHandler(handler)
    logger.setLevel(saved_level)
    logger.propagate = saved_propagate


def test_get_logger_is_silent_by_default(fresh_logging):
    logging_setup.get_logger("tranxhistory.cli")
    handlers = _own_handlers(fresh_logging)
    assert len(handlers) == 1
    assert isinstance(handlers[0], logging.NullHandler)


def test_configure_logging_once(fresh_logging):
    stream = io.StringIO()
    logging_setup.configure_logging("info", stream=stream)
    logging_setup.configure_logging("debug", stream=stream)

    logging_setup.get_logger("tranxhistory.cli").info("hello")
    logging_setup.get_logger("tranxhistory.cli").debug("hidden")

    assert "hello" in stream.getvalue()
    assert "hidden" not in stream.getvalue()
    handlers = _own_handlers(fresh_logging)
    assert len(handlers) == 1
    assert type(handlers[0]) is logging.StreamHandler


def test_level_from_environment(fresh_logging, monkeypatch):
    monkeypatch.setenv(logging_setup.LOG_LEVEL_ENV, "error")
    logging_setup.configure_logging(stream=io.StringIO())
    assert fresh_logging.level == logging.ERROR


def test_unknown_level_falls_back_to_warning(fresh_logging, monkeypatch):
    monkeypatch.setenv(logging_setup.LOG_LEVEL_ENV, "chatty")
    logging_setup.configure_logging("loud", stream=io.StringIO())
    assert fresh_logging.level == logging.WARNING
