"""
Retry policy for Gemini calls.

Transient server failures (HTTP 500/503 or an "Internal error" marker) are
retried with exponential backoff; everything else is re-raised on the spot.

Usage:
    policy = RetryPolicy()
    result = await policy.run(lambda: client.generate(...))
"""

import asyncio
import logging
from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Awaitable, Callable, Optional, TypeVar

from .errors import ThesynError

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRYABLE_STATUS_CODES = (500, 503)
RETRYABLE_MARKERS = ("500", "Internal error")


def is_retryable(error: BaseException) -> bool:
    """Classify an error as transient (retry) or terminal (raise)."""
    # Our own errors describe the reply, not the transport
    if isinstance(error, ThesynError):
        return False

    for attr in ("code", "status", "status_code"):
        value = getattr(error, attr, None)
        if isinstance(value, int) and value in RETRYABLE_STATUS_CODES:
            return True

    message = str(error)
    return any(marker in message for marker in RETRYABLE_MARKERS)


@dataclass
class RetryPolicy:
    """Exponential backoff without jitter for transient failures."""
    max_retries: int = 3
    initial_delay_ms: float = 1000
    multiplier: float = 2.0
    sleep: Callable[[float], Awaitable[Any]] = field(default=asyncio.sleep, repr=False)

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        """
        Run an async operation, retrying transient failures.

        Args:
            operation: Zero-argument callable returning a fresh awaitable per attempt

        Returns:
            The operation's result

        Raises:
            The terminal error, or the last transient error once the budget is spent
        """
        retries_left = self.max_retries
        delay_ms = self.initial_delay_ms

        while True:
            try:
                return await operation()
            except Exception as e:
                if retries_left <= 0 or not is_retryable(e):
                    raise

                logger.warning(
                    f"Retrying operation in {delay_ms:.0f}ms "
                    f"({retries_left} attempts left): {e}"
                )
                await self.sleep(delay_ms / 1000)
                delay_ms *= self.multiplier
                retries_left -= 1


def with_retry(policy: Optional[RetryPolicy] = None):
    """
    Decorator form of RetryPolicy.run for async functions.

    Usage:
        @with_retry(RetryPolicy(max_retries=2))
        async def fetch():
            ...
    """
    policy = policy or RetryPolicy()

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            return await policy.run(lambda: func(*args, **kwargs))
        return wrapper
    return decorator
