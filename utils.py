"""
Retry helpers for catalog reads.
"""
import functools
import logging
import random
import time
from typing import Callable, Optional, Tuple, Type

from sqlalchemy.exc import (
    DisconnectionError,
    InterfaceError,
    OperationalError,
    TimeoutError as SQLAlchemyTimeoutError,
)

logger = logging.getLogger(__name__)

# Transient database errors that should be retried
TRANSIENT_DB_ERRORS: Tuple[Type[Exception], ...] = (
    OperationalError,
    InterfaceError,
    SQLAlchemyTimeoutError,
    DisconnectionError,
    ConnectionError,
    TimeoutError,
)

TRANSIENT_ERROR_PATTERNS: Tuple[str, ...] = (
    "connection refused",
    "connection reset",
    "connection timed out",
    "timeout",
    "too many connections",
    "server closed the connection",
    "connection pool exhausted",
    "could not connect",
    "temporarily unavailable",
    "database is locked",  # SQLite
    "40001",  # Serialization failure (PostgreSQL)
)


def is_transient_error(exc: Exception) -> bool:
    """Check if an exception is a transient error that should be retried."""
    if isinstance(exc, TRANSIENT_DB_ERRORS):
        return True

    error_msg = str(exc).lower()
    return any(pattern in error_msg for pattern in TRANSIENT_ERROR_PATTERNS)


def backoff_delay(
    attempt: int,
    base_delay: float,
    max_delay: float,
    exponential_backoff: bool = True,
    jitter: bool = True,
) -> float:
    if exponential_backoff:
        delay = min(base_delay * (2 ** attempt), max_delay)
    else:
        delay = base_delay

    if jitter:
        delay = delay * (0.5 + random.random())  # 50-150% of delay
    return delay


def retry_sync(
    max_retries: int = 3,
    base_delay: float = 0.5,
    max_delay: float = 10.0,
    exponential_backoff: bool = True,
    jitter: bool = True,
    retry_on: Optional[Tuple[Type[Exception], ...]] = None,
    sleep: Callable[[float], None] = time.sleep,
):
    """
    Decorator that retries a synchronous call on transient failures.

    Args:
        max_retries: Maximum number of retry attempts
        base_delay: Initial delay between retries in seconds
        max_delay: Maximum delay between retries in seconds
        exponential_backoff: Whether to use exponential backoff
        jitter: Whether to add random jitter to delays
        retry_on: Tuple of exception types to retry on (defaults to transient DB errors)
        sleep: Sleep function, replaceable in tests
    """
    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    if retry_on:
                        should_retry = isinstance(e, retry_on)
                    else:
                        should_retry = is_transient_error(e)

                    if not should_retry or attempt >= max_retries:
                        raise

                    delay = backoff_delay(attempt, base_delay, max_delay, exponential_backoff, jitter)
                    logger.warning(
                        f"Retry {attempt + 1}/{max_retries} for {func.__name__} "
                        f"after {delay:.2f}s due to: {type(e).__name__}: {str(e)[:100]}"
                    )
                    sleep(delay)

        return wrapper
    return decorator
