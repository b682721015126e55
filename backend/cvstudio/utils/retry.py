"""
Retry utility with exponential backoff for collaborator API reads
"""
import logging
import random
import time
from functools import wraps
from typing import Callable, Tuple, Type

import requests

logger = logging.getLogger(__name__)


def _backoff(attempt: int, initial_delay: float, max_delay: float, exponential_base: float, jitter: bool) -> float:
    delay = min(initial_delay * (exponential_base ** attempt), max_delay)
    if jitter:
        # Jitter keeps parallel editors from retrying in lockstep
        delay += delay * 0.1 * random.random()
    return delay


def retry_with_backoff(
    max_retries: int = 3,
    initial_delay: float = 1.0,
    max_delay: float = 60.0,
    exponential_base: float = 2.0,
    jitter: bool = True,
    retryable_exceptions: Tuple[Type[Exception], ...] = (
        requests.exceptions.ConnectionError,
        requests.exceptions.Timeout,
    ),
):
    """
    Decorator to retry a function with exponential backoff.

    Only use it on idempotent calls: document and catalog reads. Saves are
    never wrapped, a failed save is left for the next edit to re-attempt.

    Args:
        max_retries: Maximum number of retry attempts
        initial_delay: Initial delay in seconds
        max_delay: Maximum delay in seconds
        exponential_base: Base for exponential backoff
        jitter: Add random jitter to the delay
        retryable_exceptions: Exceptions that should trigger retry
    """
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except retryable_exceptions as e:
                    if attempt >= max_retries:
                        logger.error("retry.exhausted", extra={
                            "function": func.__name__,
                            "attempts": attempt + 1,
                            "error": str(e),
                        })
                        raise
                    delay = _backoff(attempt, initial_delay, max_delay, exponential_base, jitter)
                    logger.warning("retry.scheduled", extra={
                        "function": func.__name__,
                        "attempt": attempt + 1,
                        "max_attempts": max_retries + 1,
                        "delay": round(delay, 2),
                        "error": str(e),
                    })
                    time.sleep(delay)

        return wrapper
    return decorator
