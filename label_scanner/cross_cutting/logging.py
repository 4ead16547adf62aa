"""
Logging Configuration

Console and file logging for the scanner, and a per-scan logger that tags
stage timings with the request id.
"""

import logging
import sys
import time
from typing import Dict, Optional, Union


ROOT_LOGGER_NAME = "label_scanner"

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

# HTTP client libraries log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai", "groq", "PIL")


def resolve_level(level: Union[int, str]) -> int:
    """Logging level from a number or a name such as "debug"; unknown names mean INFO."""
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    format_string: Optional[str] = None
) -> None:
    """
    Configure the package logger.

    Console output goes to stderr; stdout carries the scan report.

    Args:
        level: Logging level for the package loggers
        log_file: Optional file that receives the same records
        format_string: Record format (default: time | level | logger | message)
    """
    resolved = resolve_level(level)
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    package_logger.setLevel(resolved)
    package_logger.handlers = []
    for handler in handlers:
        handler.setLevel(resolved)
        handler.setFormatter(formatter)
        package_logger.addHandler(handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(resolved, logging.WARNING))


class ScanLogger:
    """
    Stage-level logging for one scan.

    Stage durations use a monotonic clock.
    """

    def __init__(self, request_id: str):
        self.request_id = request_id
        self.logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.scan.{request_id[:8]}")
        self._started: Dict[str, float] = {}

    def stage_start(self, stage_name: str) -> None:
        self._started[stage_name] = time.monotonic()
        self.logger.debug(f"Stage '{stage_name}' started")

    def stage_end(self, stage_name: str, success: bool = True) -> float:
        """Log the end of a stage and return its duration in milliseconds."""
        started = self._started.pop(stage_name, None)
        elapsed_ms = (time.monotonic() - started) * 1000 if started is not None else 0.0

        if success:
            self.logger.info(f"Stage '{stage_name}' completed in {elapsed_ms:.2f}ms")
        else:
            self.logger.warning(f"Stage '{stage_name}' failed after {elapsed_ms:.2f}ms")
        return elapsed_ms

    def stage_skipped(self, stage_name: str, reason: str) -> None:
        self.logger.warning(f"Stage '{stage_name}' skipped: {reason}")

    def summary(self, source: str, warnings: int, errors: int, elapsed_ms: float) -> None:
        """Log the outcome of the scan."""
        self.logger.info(
            f"Scan finished: source={source}, warnings={warnings}, "
            f"errors={errors}, total={elapsed_ms:.0f}ms"
        )
