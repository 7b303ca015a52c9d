"""Client-side rate limiting.

A rate limiter only delays requests, it never rejects them. The
:class:`~odata_simple_client.datasource.DataSource` awaits
``until_ready()`` before every outbound request, including each
follow-up page of a paged fetch.

Example:
    ```python
    from odata_simple_client import DataSource, TokenBucketRateLimiter

    datasource = DataSource(
        client,
        "oda.ft.dk",
        "/api",
        rate_limiter=TokenBucketRateLimiter.per_second(2),
    )
    ```

Sharing one limiter between several DataSource objects shares the quota
between them.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class RateLimiter(Protocol):
    """Anything that can suspend the caller until one request is permitted.

    Implementations must be safe to share between concurrent tasks.
    """

    async def until_ready(self) -> None: ...


class TokenBucketRateLimiter:
    """Token bucket refilled at ``rate`` tokens per second.

    The bucket starts full. Each request takes one token; when the bucket
    is empty the caller sleeps until the next token arrives. Waiters are
    served one at a time in arrival order.

    Args:
        rate: Tokens added per second
        capacity: Maximum burst size (default: ``max(1, int(rate))``)
        clock: Monotonic clock in seconds, replaceable for tests
        sleep: Coroutine used to wait, replaceable for tests
    """

    def __init__(
        self,
        rate: float,
        *,
        capacity: int | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if rate <= 0:
            raise ValueError(f"rate must be positive, got {rate}")
        if capacity is not None and capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")

        self.rate = float(rate)
        self.capacity = capacity if capacity is not None else max(1, int(rate))
        self._clock = clock
        self._sleep = sleep
        self._tokens = float(self.capacity)
        self._updated_at = clock()
        self._lock = asyncio.Lock()

    @classmethod
    def per_second(cls, requests: int) -> "TokenBucketRateLimiter":
        """Allow ``requests`` per second with a burst of the same size."""
        if requests < 1:
            raise ValueError(f"requests must be at least 1, got {requests}")
        return cls(rate=requests, capacity=requests)

    @property
    def available(self) -> float:
        """Tokens available right now."""
        self._refill()
        return self._tokens

    def _refill(self) -> None:
        now = self._clock()
        elapsed = now - self._updated_at
        if elapsed > 0:
            self._tokens = min(float(self.capacity), self._tokens + elapsed * self.rate)
        self._updated_at = now

    async def until_ready(self) -> None:
        """Wait until a token is available, then take it."""
        async with self._lock:
            while True:
                self._refill()
                if self._tokens >= 1:
                    self._tokens -= 1
                    return

                delay = (1 - self._tokens) / self.rate
                logger.debug(f"Rate limit reached, waiting {delay:.3f}s")
                await self._sleep(delay)
