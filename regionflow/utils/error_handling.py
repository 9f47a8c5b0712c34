"""
Error Handling Utilities

Exception types raised by the region pipeline and a logging decorator used at
its public entry points. Contract violations propagate; nothing here swallows
an exception.
"""

import logging
from functools import wraps
from typing import Callable

logger = logging.getLogger(__name__)


class RegionflowError(Exception):
    """Base class for regionflow errors."""
    pass


class InvalidInputError(RegionflowError, ValueError):
    """Raised when points, grid parameters or labels are unusable."""
    pass


class OutOfRangeError(InvalidInputError):
    """Raised when an absolute-mode value falls below the zero anchor under the error policy."""

    def __init__(self, axis: str, count: int, minimum: float):
        self.axis = axis
        self.count = count
        self.minimum = minimum
        super().__init__(
            f"{count} value(s) on axis '{axis}' fall below the absolute-mode anchor 0 "
            f"(minimum observed: {minimum})"
        )


class RegionInvariantError(RegionflowError, RuntimeError):
    """
    Raised when region tables break the k x k completeness invariant.

    This signals a programming error (e.g. a density table built without the
    completion step) and is never recovered from inside the library.
    """
    pass


def log_function_entry(func: Callable) -> Callable:
    """
    Decorator to log function entry and exit.
    
    Args:
        func: Function to log
        
    Returns:
        Wrapped function with logging
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        logger.debug(f"Entering {func.__name__}")
        try:
            result = func(*args, **kwargs)
            logger.debug(f"Exiting {func.__name__} successfully")
            return result
        except Exception as e:
            logger.error(f"Error in {func.__name__}: {e}")
            raise
    return wrapper
