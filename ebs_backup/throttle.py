"""
Pacing for EC2 API calls.

EC2 enforces per-account request rate limits, so the gateway waits a fixed
delay before every call. The sleep function is injectable for tests.
"""

from __future__ import annotations

import logging
import time
from typing import Callable

from .config import DEFAULT_API_DELAY_SECONDS


class Throttle:
    """Fixed inter-call delay applied before each EC2 request."""

    def __init__(
        self,
        delay_seconds: float = DEFAULT_API_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if delay_seconds < 0:
            raise ValueError(f"delay_seconds must be >= 0, got {delay_seconds}")
        self.delay_seconds = delay_seconds
        self._sleep = sleep
        self.calls = 0

    def wait(self) -> None:
        """Block for the configured delay."""
        self.calls += 1
        if self.delay_seconds <= 0:
            return
        logging.debug("Throttling %.3fs before EC2 call #%d", self.delay_seconds, self.calls)
        self._sleep(self.delay_seconds)
