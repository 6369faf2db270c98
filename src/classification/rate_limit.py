"""Pacing policies for calls to rate-limited external services."""

import logging
import threading
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Callable, Iterator

logger = logging.getLogger(__name__)


class RateLimiter(ABC):
    """Gate around a single external call."""

    @abstractmethod
    @contextmanager
    def acquire(self) -> Iterator[None]:
        """Block until the call may start; release when the block exits."""


class FixedIntervalLimiter(RateLimiter):
    """Max concurrency of 1 with a fixed pause between successive calls.

    The interval is measured from the end of one call to the start of the
    next, so the first call never waits.
    """

    def __init__(
        self,
        interval_seconds: float,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        if interval_seconds < 0:
            raise ValueError("interval_seconds must be non-negative")
        self.interval_seconds = interval_seconds
        self._sleep = sleep
        self._clock = clock
        self._lock = threading.Lock()
        self._last_call_end: float | None = None

    @contextmanager
    def acquire(self) -> Iterator[None]:
        with self._lock:
            if self._last_call_end is not None:
                wait = self.interval_seconds - (self._clock() - self._last_call_end)
                if wait > 0:
                    logger.debug(f"Pacing external call, sleeping {wait:.3f}s")
                    self._sleep(wait)
            try:
                yield
            finally:
                self._last_call_end = self._clock()
