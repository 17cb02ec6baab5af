"""Strictly increasing nonces for authenticated requests."""

import threading
import time
from collections.abc import Callable


class NonceGenerator:
    """
    Nonce source derived from the wall clock in nanoseconds.

    If the clock has not moved past the previous nonce (coarse clocks,
    clock steps backwards, concurrent callers) the previous value + 1 is
    returned, so nonces never repeat or decrease.
    """

    def __init__(self, clock: Callable[[], int] = time.time_ns) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._last = 0

    def next(self) -> int:
        with self._lock:
            candidate = self._clock()
            self._last = candidate if candidate > self._last else self._last + 1
            return self._last

    def scaled(self, divisor: int) -> int:
        """
        Next nonce expressed in a coarser unit, still strictly increasing.

        Exchanges that expect millisecond or microsecond nonces get
        next() // divisor, bumped past the previous scaled value if needed.
        """
        with self._lock:
            candidate = self._clock() // divisor
            current = self._last // divisor
            value = candidate if candidate > current else current + 1
            self._last = value * divisor
            return value
