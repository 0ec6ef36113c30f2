"""
Async Utilities for Concurrent Provider Calls.

Provides:
- Parallel execution with per-task isolation (TaskGroup)
- Circuit breaker for fault tolerance
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, TypeVar

from .exceptions import ServiceUnavailableError

if TYPE_CHECKING:
    from collections.abc import Awaitable

logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# Concurrent Fan-Out
# =============================================================================


async def gather_with_errors(
    *coros: Awaitable[T],
    return_exceptions: bool = False,
) -> list[T | Exception]:
    """
    Run provider or embedding calls concurrently under one TaskGroup.

    Results are returned in the same order as ``coros`` regardless of
    completion order.

    Args:
        *coros: Awaitables to run, one task each
        return_exceptions: If True, each failing coroutine yields its exception
            in place of a result and never cancels its siblings

    Returns:
        One entry per awaitable, a result or (with return_exceptions) the
        exception it raised

    Example:
        outcomes = await gather_with_errors(
            pexels.search(query),
            giphy.search(query),
            return_exceptions=True,
        )
    """
    if not return_exceptions:
        async with asyncio.TaskGroup() as tg:
            tasks = [tg.create_task(coro) for coro in coros]
        return [task.result() for task in tasks]

    results: list[T | Exception] = [None] * len(coros)  # type: ignore[list-item]

    async def safe_run(coro: Awaitable[T], index: int) -> None:
        try:
            results[index] = await coro
        except Exception as e:
            results[index] = e

    async with asyncio.TaskGroup() as tg:
        for i, coro in enumerate(coros):
            tg.create_task(safe_run(coro, i))

    return results


# =============================================================================
# Circuit Breaker
# =============================================================================


@dataclass
class CircuitBreaker:
    """
    Stops calling a provider that keeps failing.

    closed: requests pass; successes slowly forget earlier failures
    open: after failure_threshold failures, requests fail fast with
        ServiceUnavailableError until recovery_timeout has elapsed
    half_open: up to half_open_max_calls probes; one success closes again

    Example:
        breaker = CircuitBreaker(failure_threshold=5, name="Pexels")

        async with breaker:
            data = await client.get(url)
    """

    failure_threshold: int = 5
    recovery_timeout: float = 30.0
    half_open_max_calls: int = 3
    name: str = "API"

    _failure_count: int = field(init=False, default=0)
    _last_failure_time: float | None = field(init=False, default=None)
    _state: str = field(init=False, default="closed")
    _half_open_calls: int = field(init=False, default=0)
    _lock: asyncio.Lock = field(init=False, default_factory=asyncio.Lock)

    @property
    def state(self) -> str:
        return self._state

    @property
    def is_open(self) -> bool:
        """True while requests are being rejected."""
        if self._state == "open":
            if self._last_failure_time is not None:
                if time.monotonic() - self._last_failure_time > self.recovery_timeout:
                    return False  # next caller probes in half_open
            return True
        return False

    async def __aenter__(self) -> CircuitBreaker:
        async with self._lock:
            if self.is_open:
                raise ServiceUnavailableError("circuit breaker is open", source=self.name)

            if self._state == "open":
                self._state = "half_open"
                self._half_open_calls = 0

            if self._state == "half_open":
                if self._half_open_calls >= self.half_open_max_calls:
                    raise ServiceUnavailableError(
                        "circuit breaker is half-open (max calls reached)", source=self.name
                    )
                self._half_open_calls += 1

        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        async with self._lock:
            if exc_val is not None:
                self._failure_count += 1
                self._last_failure_time = time.monotonic()

                if self._failure_count >= self.failure_threshold:
                    self._state = "open"
                    logger.warning(f"{self.name}: circuit breaker opened after {self._failure_count} failures")
            elif self._state == "half_open":
                self._state = "closed"
                self._failure_count = 0
                logger.info(f"{self.name}: circuit breaker closed (recovered)")
            elif self._state == "closed":
                self._failure_count = max(0, self._failure_count - 1)
