# MIT License © 2025 Motohiro Suzuki
from __future__ import annotations

import time
from datetime import timedelta
from typing import Callable, Optional, Union

from pake.protocol.errors import Timeout

Clock = Callable[[], float]
TimeoutSpec = Union[int, float, timedelta]


def to_seconds(timeout: TimeoutSpec) -> float:
    if isinstance(timeout, timedelta):
        seconds = timeout.total_seconds()
    elif isinstance(timeout, (int, float)) and not isinstance(timeout, bool):
        seconds = float(timeout)
    else:
        raise TypeError(f"timeout must be seconds or timedelta, got {type(timeout).__name__}")
    if seconds < 0:
        raise ValueError("timeout must be >= 0")
    return seconds


class Deadline:
    """
    Absolute deadline on a monotonic clock.

    expires_at = clock() + timeout at construction (and at rearm()).
    A zero timeout is already expired.
    """

    def __init__(self, timeout: TimeoutSpec, clock: Optional[Clock] = None) -> None:
        self._clock: Clock = clock or time.monotonic
        self.timeout = to_seconds(timeout)
        self.expires_at = self._clock() + self.timeout

    def remaining(self) -> float:
        return max(0.0, self.expires_at - self._clock())

    def expired(self) -> bool:
        return self._clock() >= self.expires_at

    def check(self) -> None:
        if self.expired():
            raise Timeout(f"deadline exceeded ({self.timeout:.3f}s)")

    def rearm(self) -> None:
        self.expires_at = self._clock() + self.timeout
