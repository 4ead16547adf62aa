"""
Error Handling

Fail-soft helpers for the scan sources. A failing OCR call, model request or
lookup is logged and replaced by an empty result so the scan falls through to
the next source instead of crashing.
"""

from typing import Callable, TypeVar, Optional
from functools import wraps
import logging
import traceback

from ..domain.exceptions import DomainException


logger = logging.getLogger(__name__)

T = TypeVar("T")


def describe_error(error: BaseException) -> str:
    """One-line description of an error; domain errors include their details."""
    if isinstance(error, DomainException):
        return f"{error} {error.details}" if error.details else str(error)
    return f"{error.__class__.__name__}: {error}"


def handle_exception(
    default_return: Optional[T] = None,
    log_level: int = logging.WARNING,
    default_factory: Optional[Callable[[], T]] = None
) -> Callable:
    """
    Decorator returning a default value when the wrapped call fails.

    Args:
        default_return: Value returned on failure
        log_level: Logging level for the failure message
        default_factory: Builds a fresh default per failure; use it for
            mutable defaults such as lists or records

    Returns:
        Decorated function
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                logger.log(log_level, f"{func.__qualname__} failed, using default: {describe_error(e)}")
                if not isinstance(e, DomainException):
                    logger.debug(traceback.format_exc())
                return default_factory() if default_factory is not None else default_return
        return wrapper
    return decorator


class FailureGuard:
    """
    Context manager that records a failure and optionally swallows it.

    Only Exception subclasses are captured; interrupts always propagate.

    Usage:
        result = OcrResult.empty(image.filename)
        with FailureGuard(logger, context=f"OCR on {image.filename}", suppress=True):
            result = engine.recognize(image)
    """

    def __init__(
        self,
        logger: logging.Logger,
        context: str = "",
        suppress: bool = False,
        log_level: int = logging.ERROR
    ):
        """
        Initialize the guard.

        Args:
            logger: Logger for the failure message
            context: Prefix naming the guarded operation
            suppress: Swallow the exception after logging it
            log_level: Logging level for the failure message
        """
        self.logger = logger
        self.context = context
        self.suppress = suppress
        self.log_level = log_level
        self.error: Optional[Exception] = None

    def __enter__(self) -> "FailureGuard":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if not isinstance(exc_val, Exception):
            return False

        self.error = exc_val
        prefix = f"[{self.context}] " if self.context else ""
        self.logger.log(self.log_level, prefix + describe_error(exc_val))
        if not isinstance(exc_val, DomainException):
            self.logger.debug("".join(traceback.format_exception(exc_type, exc_val, exc_tb)))

        return self.suppress

    @property
    def failed(self) -> bool:
        """Whether the guarded block raised."""
        return self.error is not None
