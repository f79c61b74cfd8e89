from __future__ import annotations

import asyncio
import functools
import inspect
import logging
import math
import random
import time
from dataclasses import dataclass, field, replace
from datetime import timedelta
from typing import Any, Awaitable, Callable, Optional, TypeVar, Union

from .logging import RETRY_LOGGER

T = TypeVar("T")

RetryListener = Callable[[str, BaseException], None]

log = logging.getLogger(RETRY_LOGGER)


class OperationNotAwaitable(TypeError):
    """
    run() was given a callable that does not return an awaitable.
    """


@dataclass(frozen=True)
class RetryPolicy:
    """
    Calls a fallible operation multiple times with exponential backoff.

    After the first failure the policy waits `base_delay` seconds, and every
    later wait is the previous one times `delay_factor`. With jitter enabled
    the actual sleep is drawn from [delay/2, delay).

    Returns the first successful result, or raises the last error.
    """
    name: str
    attempts: int = 3
    base_delay: float = 0.0
    delay_factor: float = 1.0
    enable_jitter: bool = False

    on_retry: Optional[RetryListener] = field(default=None, compare=False, repr=False)
    sleep: Optional[Callable[[float], Awaitable[None]]] = field(default=None, compare=False, repr=False)
    rng: Optional[Callable[[], float]] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if isinstance(self.base_delay, timedelta):
            object.__setattr__(self, "base_delay", self.base_delay.total_seconds())
        self._check()

    def with_attempts(self, attempts: int) -> "RetryPolicy":
        return replace(self, attempts=attempts)

    def with_base_delay(self, base_delay: Union[float, timedelta]) -> "RetryPolicy":
        if isinstance(base_delay, timedelta):
            base_delay = base_delay.total_seconds()
        return replace(self, base_delay=float(base_delay))

    def with_delay_factor(self, delay_factor: float) -> "RetryPolicy":
        return replace(self, delay_factor=float(delay_factor))

    def with_jitter(self, enabled: bool = True) -> "RetryPolicy":
        return replace(self, enable_jitter=enabled)

    def with_listener(self, on_retry: Optional[RetryListener]) -> "RetryPolicy":
        return replace(self, on_retry=on_retry)

    def _check(self) -> None:
        if isinstance(self.attempts, bool) or not isinstance(self.attempts, int):
            raise ValueError(f"attempts must be an integer, got {self.attempts!r}")
        if self.attempts < 1:
            raise ValueError("attempts must be greater than 0")
        # NaN fails both comparisons
        if not (self.base_delay >= 0 and self.delay_factor >= 0):
            raise ValueError("retry delay cannot be negative")

    def apply_jitter(self, delay: float) -> float:
        if not self.enable_jitter:
            return delay
        rng = self.rng or random.random
        # [0.5, 1.0)
        jittered = delay * (0.5 + rng() / 2.0)
        # rng() close to 1.0 can round the product up to delay
        if delay > 0 and jittered >= delay:
            return math.nextafter(delay, 0.0)
        return jittered

    def _notify(self, err: Exception, attempt: int, wait: float) -> None:
        if self.on_retry is None:
            log.warning(
                "failed retryable operation %s (attempt %d/%d), retrying in %.3fs: %r",
                self.name, attempt, self.attempts, wait, err,
            )
            return
        try:
            self.on_retry(self.name, err)
        except Exception:
            log.debug("retry listener failed for %s", self.name, exc_info=True)

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        """
        Run an async operation under this policy.

        Raises ValueError before the first attempt if the policy is
        misconfigured. Cancellation is never retried.
        """
        self._check()
        sleep = self.sleep or asyncio.sleep
        delay = self.base_delay
        for attempt in range(1, self.attempts):
            try:
                return await _invoke(operation)
            except OperationNotAwaitable:
                raise
            except Exception as e:
                wait = self.apply_jitter(delay)
                self._notify(e, attempt, wait)
            await sleep(wait)
            delay *= self.delay_factor
        return await _invoke(operation)

    def run_sync(self, operation: Callable[[], T]) -> T:
        """
        Blocking twin of run(), for code that lives on a worker thread.
        """
        self._check()
        delay = self.base_delay
        for attempt in range(1, self.attempts):
            try:
                return operation()
            except Exception as e:
                wait = self.apply_jitter(delay)
                self._notify(e, attempt, wait)
            time.sleep(wait)
            delay *= self.delay_factor
        return operation()


async def _invoke(operation: Callable[[], Awaitable[T]]) -> T:
    pending = operation()
    if not inspect.isawaitable(pending):
        raise OperationNotAwaitable(
            f"operation returned {type(pending).__name__}, not an awaitable; use run_sync() for blocking callables"
        )
    return await pending


def retrying(policy: RetryPolicy) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator form: every call of the wrapped function goes through `policy`.
    """
    def decorate(fn: Callable[..., Any]) -> Callable[..., Any]:
        if inspect.iscoroutinefunction(fn):
            @functools.wraps(fn)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                return await policy.run(lambda: fn(*args, **kwargs))
            return async_wrapper

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            return policy.run_sync(lambda: fn(*args, **kwargs))
        return wrapper

    return decorate
