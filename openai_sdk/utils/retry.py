"""Opt-in retry for callers. The client itself never retries."""

from __future__ import annotations

import functools
import logging
import time

from ..core.errors import APIConnectionError, InternalServerError, RateLimitError

logger = logging.getLogger(__name__)


def with_retry(
    max_retries: int = 3,
    backoff_factor: float = 1.0,
    retry_on: tuple = (RateLimitError, InternalServerError, APIConnectionError),
    sleep=time.sleep,
):
    """Decorator to add retry logic to any function."""
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            for attempt in range(max_retries + 1):
                try:
                    return func(*args, **kwargs)
                except retry_on as e:
                    if attempt >= max_retries:
                        raise
                    wait = backoff_factor * (2 ** attempt)
                    logger.warning("%s failed (%s); retrying in %.1fs", func.__name__, e, wait)
                    sleep(wait)
        return wrapper
    return decorator
