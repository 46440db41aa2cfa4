# ================================================================================
# Retry Engine
# ================================================================================
#
# Re-invokes a fallible async operation under a bounded retry policy.
#
# Key Features:
#   - Fixed-delay or exponential backoff (factor 2 by default)
#   - Hard upper bound on attempts, no unbounded retry
#   - Last real failure is re-raised (or wrapped in RetryExhaustedError)
#   - Decorator form for page-object methods
#
# Usage:
#   result = await retry(lambda: page.locator("#odds").text_content(),
#                        RetryPolicy.exponential(max_attempts=3, base_delay=0.1))
#
# ================================================================================

import asyncio
from dataclasses import dataclass
from enum import Enum
from functools import wraps
from typing import Any, Awaitable, Callable, Optional, TypeVar

from loguru import logger

from .errors import RetryExhaustedError


T = TypeVar("T")


class Backoff(str, Enum):
    """Growth strategy for the delay between attempts."""
    NONE = "none"
    EXPONENTIAL = "exponential"


@dataclass(frozen=True)
class RetryPolicy:
    """
    Configuration for retry behavior.

    Attributes:
        max_attempts: Total number of attempts (>= 1)
        base_delay: Delay before the second attempt, in seconds
        backoff: Fixed (NONE) or EXPONENTIAL growth
        factor: Multiplier for exponential backoff
    """
    max_attempts: int = 3
    base_delay: float = 1.0
    backoff: Backoff = Backoff.EXPONENTIAL
    factor: float = 2.0

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.base_delay < 0:
            raise ValueError(f"base_delay must be >= 0, got {self.base_delay}")
        object.__setattr__(self, "backoff", Backoff(self.backoff))

    @classmethod
    def fixed(cls, max_attempts: int = 3, base_delay: float = 1.0) -> "RetryPolicy":
        return cls(max_attempts=max_attempts, base_delay=base_delay, backoff=Backoff.NONE)

    @classmethod
    def exponential(
        cls,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        factor: float = 2.0,
    ) -> "RetryPolicy":
        return cls(
            max_attempts=max_attempts,
            base_delay=base_delay,
            backoff=Backoff.EXPONENTIAL,
            factor=factor,
        )

    @classmethod
    def single(cls) -> "RetryPolicy":
        """One attempt, no retry."""
        return cls(max_attempts=1, base_delay=0.0, backoff=Backoff.NONE)

    def delay_for(self, attempt: int) -> float:
        """Delay to sleep after failed attempt number `attempt` (0-based)."""
        if self.backoff is Backoff.EXPONENTIAL:
            return self.base_delay * (self.factor ** attempt)
        return self.base_delay

    def total_delay(self) -> float:
        """Sum of all sleeps when every attempt fails."""
        return sum(self.delay_for(i) for i in range(self.max_attempts - 1))


DEFAULT_POLICY = RetryPolicy()


async def retry(
    operation: Callable[[], Awaitable[T]],
    policy: Optional[RetryPolicy] = None,
    description: str = "",
    wrap_exhausted: bool = False,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> T:
    """
    Invoke `operation` until it succeeds or the policy is spent.

    Args:
        operation: Zero-argument callable returning an awaitable
        policy: RetryPolicy controlling attempts and delays
        description: Human-readable name for logging
        wrap_exhausted: Raise RetryExhaustedError (chained) instead of the
            last failure once every attempt failed
        sleep: Awaitable sleep used between attempts

    Returns:
        Result of the first successful attempt

    Raises:
        The last failure, or RetryExhaustedError when `wrap_exhausted` is set
    """
    policy = policy or DEFAULT_POLICY
    name = description or getattr(operation, "__name__", "operation")
    last_exception: Optional[BaseException] = None

    for attempt in range(policy.max_attempts):
        try:
            return await operation()
        except Exception as e:
            last_exception = e
            if attempt < policy.max_attempts - 1:
                delay = policy.delay_for(attempt)
                logger.warning(
                    f"Attempt {attempt + 1}/{policy.max_attempts} failed for "
                    f"{name}: {str(e)[:200]}. Retrying in {delay:.2f}s..."
                )
                await sleep(delay)

    if policy.max_attempts > 1:
        logger.error(
            f"All {policy.max_attempts} attempts failed for {name}: "
            f"{str(last_exception)[:200]}"
        )
    if wrap_exhausted:
        raise RetryExhaustedError(name, policy.max_attempts, last_exception) from last_exception
    raise last_exception


def with_retry(policy: Optional[RetryPolicy] = None, wrap_exhausted: bool = False):
    """
    Decorator for adding retry logic to async element actions.

    Args:
        policy: RetryPolicy object for controlling retry behavior
        wrap_exhausted: See `retry`
    """
    def decorator(func: Callable[..., Awaitable[T]]):
        @wraps(func)
        async def wrapper(*args, **kwargs) -> T:
            return await retry(
                lambda: func(*args, **kwargs),
                policy,
                description=func.__name__,
                wrap_exhausted=wrap_exhausted,
            )
        return wrapper
    return decorator


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    delay: float = 1.0,
) -> T:
    """Exponential backoff; `max_retries` retries after the first attempt."""
    return await retry(operation, RetryPolicy.exponential(max_retries + 1, delay))


async def retry_with_fixed_delay(
    operation: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    delay: float = 1.0,
) -> T:
    """Fixed delay; `max_retries` retries after the first attempt."""
    return await retry(operation, RetryPolicy.fixed(max_retries + 1, delay))


__all__ = [
    "Backoff",
    "RetryPolicy",
    "DEFAULT_POLICY",
    "retry",
    "with_retry",
    "retry_with_backoff",
    "retry_with_fixed_delay",
]
