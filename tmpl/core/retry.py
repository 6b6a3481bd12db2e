"""Retry decorator for network operations with exponential backoff."""
import time
import functools
from typing import Tuple, Type
from tmpl.core.logger import get_logger

logger = get_logger(__name__)


def retry(
    max_attempts: int = 3,
    delay: float = 1.0,
    backoff: float = 2.0,
    exceptions: Tuple[Type[Exception], ...] = (Exception,),
):
    """Retry decorator with exponential backoff.

    Args:
        max_attempts: Maximum number of attempts. A callable receiving the
            bound instance may also be given, so methods can read it from
            their own configuration.
        delay: Initial delay in seconds between retries
        backoff: Backoff multiplier for each retry
        exceptions: Tuple of exception types to catch and retry

    Example:
        @retry(max_attempts=3, delay=1, exceptions=(requests.ConnectionError,))
        def fetch(url):
            ...
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            attempts = max_attempts(args[0]) if callable(max_attempts) else max_attempts
            attempts = max(1, attempts)
            current_delay = delay

            for attempt in range(1, attempts + 1):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    if attempt == attempts:
                        logger.error(
                            f"{func.__name__} failed after {attempts} attempts: {e}"
                        )
                        raise

                    logger.warning(
                        f"{func.__name__} failed (attempt {attempt}/{attempts}): {e}"
                    )
                    logger.info(f"Retrying in {current_delay:.1f}s...")
                    time.sleep(current_delay)
                    current_delay *= backoff

            return None

        return wrapper

    return decorator
