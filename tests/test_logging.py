"""Tests for logging utilities."""

import logging
from io import StringIO

import pytest

from qtangle import CNOT, H, Qubit
from qtangle.logging import configure_logging, get_logger, set_log_level


@pytest.fixture
def captured():
    """Route all qtangle loggers to a buffer at DEBUG level."""
    stream = StringIO()
    configure_logging(level=logging.DEBUG, stream=stream)
    try:
        yield stream
    finally:
        configure_logging(level=logging.WARNING)


def test_get_logger_returns_namespaced_logger():
    logger = get_logger("test_module")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "qtangle.test_module"
    assert get_logger("qtangle.backend.group").name == "qtangle.backend.group"
    assert get_logger().name == "qtangle"


def test_get_logger_caching():
    assert get_logger("test_module") is get_logger("test_module")
    assert get_logger("module1") is not get_logger("module2")


def test_logger_does_not_propagate():
    assert get_logger("test_module").propagate is False


def test_set_log_level():
    logger = get_logger("test_module")
    try:
        set_log_level(logging.INFO)
        assert logger.level == logging.INFO
        set_log_level("DEBUG")
        assert logger.level == logging.DEBUG
        set_log_level("error")
        assert logger.level == logging.ERROR
    finally:
        set_log_level(logging.WARNING)


def test_configure_logging_captures_output(captured):
    get_logger("test_module").debug("Debug message")
    assert "[DEBUG] qtangle.test_module: Debug message" in captured.getvalue()


def test_configure_logging_applies_to_new_loggers(captured):
    get_logger("created_after_configure").info("late message")
    assert "late message" in captured.getvalue()


def test_custom_format():
    stream = StringIO()
    try:
        configure_logging(level=logging.INFO, format_string="%(levelname)s|%(message)s", stream=stream)
        get_logger("test_module").info("formatted")
        assert "INFO|formatted" in stream.getvalue()
    finally:
        configure_logging(level=logging.WARNING)


def test_engine_logs_merge_split_and_collapse(captured):
    a, b = Qubit(), Qubit()
    H(a)
    CNOT(b, a)
    a.measure()
    output = captured.getvalue()
    assert "merged groups of 1 and 1 qubits" in output
    assert "collapsed 1 of 2 qubits" in output

    c, d = Qubit(), Qubit()
    CNOT(c, d)
    assert "split group of 2 qubits" in captured.getvalue()


def test_engine_is_quiet_by_default():
    stream = StringIO()
    try:
        configure_logging(level=logging.WARNING, stream=stream)
        a, b = Qubit(), Qubit()
        CNOT(a, b)
        assert stream.getvalue() == ""
    finally:
        configure_logging(level=logging.WARNING)
