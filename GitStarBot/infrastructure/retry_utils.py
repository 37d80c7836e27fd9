"""
Retry utilities with exponential backoff for transient GitHub API errors.
"""

import time
import logging
from typing import Callable, Tuple, Type, TypeVar
from functools import wraps

logger = logging.getLogger(__name__)

T = TypeVar('T')


def exponential_backoff(
    max_retries: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    exponential_base: float = 2.0,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
) -> Callable:
    """
    Decorator for exponential backoff retry logic.

    Only exceptions listed in ``retry_on`` are retried; anything else
    propagates on the first attempt.

    Args:
        max_retries: Maximum number of retry attempts
        base_delay: Initial delay in seconds
        max_delay: Maximum delay between retries
        exponential_base: Multiplier for exponential growth
        retry_on: Exception types considered transient
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> T:
            retries = 0
            while True:
                try:
                    return func(*args, **kwargs)
                except retry_on as e:
                    if retries >= max_retries:
                        logger.error(
                            f"Giving up on {func.__name__} after {retries} retries"
                        )
                        raise

                    delay = min(base_delay * exponential_base ** retries, max_delay)
                    retries += 1
                    logger.warning(
                        f"{func.__name__} failed ({e}), "
                        f"retry {retries}/{max_retries} in {delay:.1f}s"
                    )
                    time.sleep(delay)

        return wrapper
    return decorator
