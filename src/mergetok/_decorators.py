"""Reusable decorators for vocabulary loading utilities."""

import time
import functools
import logging
from typing import Callable

log = logging.getLogger(__name__)


def measure_time(func: Callable) -> Callable:
    """Log execution time for the wrapped callable."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        """Call ``func`` and always log elapsed time."""
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        # log even if parsing throws
        finally:
            elapsed = time.perf_counter() - start
            log.info(f"{func.__name__} completed in {elapsed * 1000:.2f} ms")

    return wrapper
