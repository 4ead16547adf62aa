"""Fail-soft helpers and logging setup."""

import logging

import pytest

from label_scanner.cross_cutting.error_handling import handle_exception, FailureGuard, describe_error
from label_scanner.cross_cutting.logging import setup_logging, resolve_level, ScanLogger, ROOT_LOGGER_NAME
from label_scanner.domain.exceptions import ModelConnectionError


def test_describe_error():
    assert describe_error(ValueError("bad")) == "ValueError: bad"
    error = ModelConnectionError("offline", provider="groq")
    assert describe_error(error) == "ModelConnectionError: offline {'provider': 'groq'}"


def test_handle_exception_returns_fresh_defaults():
    @handle_exception(default_factory=list)
    def broken():
        raise RuntimeError("boom")

    first = broken()
    first.append("x")
    assert broken() == []

    @handle_exception(default_return="fallback")
    def works():
        return "value"

    assert works() == "value"


def test_failure_guard_suppresses_and_records():
    log = logging.getLogger("tests.guard")
    with FailureGuard(log, context="OCR on a.png", suppress=True) as guard:
        raise ValueError("unreadable")
    assert guard.failed
    assert isinstance(guard.error, ValueError)

    with FailureGuard(log) as clean:
        pass
    assert not clean.failed


def test_failure_guard_reraises_without_suppress():
    with pytest.raises(KeyError):
        with FailureGuard(logging.getLogger("tests.guard")):
            raise KeyError("missing")


def test_setup_logging(tmp_path):
    log_file = tmp_path / "scan.log"
    setup_logging(level="debug", log_file=str(log_file))
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    assert package_logger.level == logging.DEBUG
    assert len(package_logger.handlers) == 2
    assert logging.getLogger("httpx").level == logging.WARNING

    logging.getLogger(f"{ROOT_LOGGER_NAME}.tests").info("hello from the scanner")
    for handler in package_logger.handlers:
        handler.flush()
    assert "hello from the scanner" in log_file.read_text()

    for handler in package_logger.handlers:
        handler.close()
    package_logger.handlers = []


def test_resolve_level():
    assert resolve_level("warning") == logging.WARNING
    assert resolve_level(logging.ERROR) == logging.ERROR
    assert resolve_level("loud") == logging.INFO


def test_scan_logger_durations():
    scan_log = ScanLogger("0123456789abcdef")
    scan_log.stage_start("OCR")
    assert scan_log.stage_end("OCR") >= 0.0
    assert scan_log.stage_end("never started") == 0.0
