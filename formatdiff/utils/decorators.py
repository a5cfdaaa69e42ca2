"""
Decorator utilities for cross-cutting concerns in formatdiff.

- Operation logging
- Execution timing
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable

from .logging import get_logger

__all__ = ["log_operation", "time_execution"]


def log_operation(operation_name: str, log_level: str = "INFO") -> Callable:
    """
    Log operation start, completion and failure.

    Args:
        operation_name: Human-readable name of the operation
        log_level: Logging level for start/completion (DEBUG, INFO, WARNING)

    Usage:
        @log_operation("tool resolution", log_level="DEBUG")
        def resolve(...):
            pass
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            log = get_logger(operation=operation_name)
            log_func = getattr(log, log_level.lower())

            log_func(f"Starting {operation_name}")
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                log.debug(
                    f"Failed {operation_name}: {e}",
                    extra={"error": str(e)},
                )
                raise
            log_func(f"Completed {operation_name}")
            return result

        return wrapper

    return decorator


def time_execution(
    log_threshold: float = 0.1,
    operation_name: str | None = None,
) -> Callable:
    """
    Measure and log execution time for operations.

    Args:
        log_threshold: Minimum execution time (seconds) to log
        operation_name: Custom operation name (defaults to function name)
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start_time = time.time()

            try:
                return func(*args, **kwargs)
            finally:
                execution_time = time.time() - start_time

                if execution_time >= log_threshold:
                    op_name = operation_name or func.__name__
                    get_logger(operation=op_name).info(
                        f"{op_name} completed in {execution_time:.2f}s",
                        extra={"duration_s": round(execution_time, 3)},
                    )

        return wrapper

    return decorator
