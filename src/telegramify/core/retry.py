from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable, Coroutine, TypeVar, cast

from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .exceptions import TransientError

T = TypeVar("T")

AsyncCallable = Callable[..., Coroutine[Any, Any, T]]


def retry_transient(
    max_attempts: int = 3,
    base_wait: float = 0.5,
    max_wait: float = 5.0,
) -> Callable[[AsyncCallable[T]], AsyncCallable[T]]:
    """
    Decorator for retrying transient errors with exponential backoff.

    Args:
        max_attempts: Maximum number of attempts, including the first one.
        base_wait: Base wait time in seconds before exponential backoff.
        max_wait: Maximum wait time in seconds between attempts.

    Returns:
        A decorator that wraps async functions with retry logic. The last
        error is re-raised once attempts are exhausted.
    """
    logger = logging.getLogger(__name__)

    def decorator(func: AsyncCallable[T]) -> AsyncCallable[T]:
        @wraps(func)
        @retry(
            stop=stop_after_attempt(max(1, max_attempts)),
            wait=wait_exponential(multiplier=base_wait, max=max_wait, exp_base=2),
            retry=retry_if_exception_type(TransientError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            return cast(T, await func(*args, **kwargs))

        return wrapper

    return decorator
