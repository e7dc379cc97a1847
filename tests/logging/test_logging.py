"""Tests for the package logger configuration."""

import logging
from io import StringIO

import pytest

from citygraph.logging import (
    LOG_LEVEL_ENV,
    ROOT_LOGGER_NAME,
    disable_debug_logging,
    enable_debug_logging,
    get_logger,
    parse_level,
    reset_logging,
    set_global_log_level,
    setup_root_logger,
)


@pytest.fixture(autouse=True)
def _fresh_logging(monkeypatch):
    monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
    reset_logging()
    yield
    reset_logging()


def _capture(logger):
    capture = StringIO()
    handler = logging.StreamHandler(capture)
    handler.setLevel(logging.DEBUG)
    logger.handlers.clear()
    logger.addHandler(handler)
    return capture


def test_debug_toggles():
    logger = get_logger("citygraph.test")
    capture = _capture(logger)

    logger.info("info-1")
    logger.debug("debug-1")
    assert "info-1" in capture.getvalue()
    assert "debug-1" not in capture.getvalue()

    enable_debug_logging()
    logger.debug("debug-2")
    assert "debug-2" in capture.getvalue()

    disable_debug_logging()
    logger.debug("debug-3")
    assert "debug-3" not in capture.getvalue()


def test_global_level_reaches_existing_and_new_children():
    first = get_logger("citygraph.algorithms.scc")
    assert first.getEffectiveLevel() == logging.INFO

    set_global_log_level(logging.WARNING)
    assert first.getEffectiveLevel() == logging.WARNING
    assert get_logger("citygraph.benchmark").getEffectiveLevel() == logging.WARNING


def test_level_names_accepted():
    set_global_log_level("debug")
    assert logging.getLogger(ROOT_LOGGER_NAME).level == logging.DEBUG


def test_parse_level():
    assert parse_level(logging.ERROR) == logging.ERROR
    assert parse_level(" Warning ") == logging.WARNING
    with pytest.raises(ValueError, match="Unknown log level"):
        parse_level("chatty")


def test_setup_is_idempotent():
    handler = logging.StreamHandler(StringIO())
    setup_root_logger(level=logging.INFO, handler=handler)
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    assert root_logger.handlers == [handler]

    setup_root_logger(level=logging.DEBUG)
    assert root_logger.handlers == [handler]
    assert root_logger.level == logging.INFO


def test_environment_sets_initial_level(monkeypatch):
    monkeypatch.setenv(LOG_LEVEL_ENV, "DEBUG")
    reset_logging()
    get_logger("citygraph.test.env")

    assert logging.getLogger(ROOT_LOGGER_NAME).level == logging.DEBUG


def test_bad_environment_level_warns_and_uses_info(monkeypatch, capsys):
    monkeypatch.setenv(LOG_LEVEL_ENV, "loud")
    reset_logging()
    get_logger("citygraph.test.env")

    assert logging.getLogger(ROOT_LOGGER_NAME).level == logging.INFO
    err = capsys.readouterr().err
    assert f"invalid {LOG_LEVEL_ENV}='loud'" in err


def test_custom_format():
    capture = StringIO()
    fmt = "LEVEL:%(levelname)s|NAME:%(name)s|MSG:%(message)s"
    setup_root_logger(level=logging.INFO, format_string=fmt, handler=logging.StreamHandler(capture))

    get_logger("citygraph.test.format").info("hello")
    out = capture.getvalue()
    assert "LEVEL:INFO|NAME:citygraph.test.format|MSG:hello" in out


def test_records_reach_caplog(caplog):
    with caplog.at_level(logging.INFO, logger=ROOT_LOGGER_NAME):
        get_logger("citygraph.test.caplog").info("visible")
    assert "visible" in caplog.text
