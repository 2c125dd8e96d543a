from __future__ import annotations

import threading

from .rules import DEFAULT_MAX_ERRORS


class ErrorTracker:
    """
    Counts rejected lines against a fixed budget.

    The counter only grows; once it reaches ``max_errors`` the run must stop.
    Increments and checks are lock-guarded so one tracker can be shared by
    several workers.
    """

    def __init__(self, max_errors: int = DEFAULT_MAX_ERRORS):
        if max_errors < 1:
            raise ValueError("max_errors must be at least 1")
        self.max_errors = max_errors
        self._count = 0
        self._lock = threading.Lock()

    @property
    def count(self) -> int:
        with self._lock:
            return self._count

    def record_error(self) -> int:
        with self._lock:
            self._count += 1
            return self._count

    def budget_exhausted(self) -> bool:
        with self._lock:
            return self._count >= self.max_errors
