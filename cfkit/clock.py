"""Clock source for write and delete timestamps."""

import threading
import time


class MicrosecondsClock:
    """Strictly increasing wall-clock timestamps in microseconds.

    Two calls never return the same value, even when they land in the
    same microsecond.
    """

    def __init__(self) -> None:
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            now = time.time_ns() // 1000
            if now <= self._last:
                now = self._last + 1
            self._last = now
            return now
