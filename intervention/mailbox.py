"""
Single-slot mailbox for asynchronous hand-tracking results.

The hand model delivers results on its own thread, at its own cadence. The
per-frame check only ever wants the newest one, so results are not queued:
each delivery overwrites the slot (last write wins). A check can therefore
see a result up to `frame_skip` frames old. That staleness is bounded by the
scheduler and accepted for real-time throughput; `age_seconds()` exposes it.
"""

import threading
import time
from typing import Generic, TypeVar

T = TypeVar("T")


class ResultMailbox(Generic[T]):
    """Thread-safe, last-write-wins slot."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value: T | None = None
        self._written_at: float | None = None
        self._writes = 0

    def put(self, value: T) -> None:
        with self._lock:
            self._value = value
            self._written_at = time.monotonic()
            self._writes += 1

    def peek(self) -> T | None:
        """Latest value without clearing it (checks may read the same result twice)."""
        with self._lock:
            return self._value

    def clear(self) -> None:
        with self._lock:
            self._value = None
            self._written_at = None

    @property
    def writes(self) -> int:
        """Total deliveries since construction, including overwritten ones."""
        with self._lock:
            return self._writes

    def age_seconds(self) -> float | None:
        with self._lock:
            if self._written_at is None:
                return None
            return time.monotonic() - self._written_at
