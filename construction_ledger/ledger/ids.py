"""
Identity generation for stages, expenses and payments.

Ids look like ``stage-1697353200000-0007``: a prefix, a millisecond
timestamp and a per-generator counter. The counter makes rapid successive
calls distinct even when the clock has not moved, and ids from one
generator sort in creation order.
"""

import time
from typing import Callable, Optional


class IdGenerator:
    """Produces unique string ids."""

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        """
        Args:
            clock: Returns seconds since the epoch. Defaults to time.time.
        """
        self._clock = clock or time.time
        self._counter = 0
        self._last_ms = 0

    def next_id(
        self,
        prefix: str,
        taken: Optional[Callable[[str], bool]] = None,
    ) -> str:
        """
        Return a fresh id.

        Args:
            prefix: Entity kind, e.g. "stage".
            taken: Optional predicate; ids it reports as taken are skipped.
                Guards against ids loaded from storage by an earlier process.
        """
        while True:
            # Never step backwards if the wall clock does.
            now_ms = max(int(self._clock() * 1000), self._last_ms)
            self._last_ms = now_ms
            self._counter += 1
            candidate = f"{prefix}-{now_ms}-{self._counter:04d}"
            if taken is None or not taken(candidate):
                return candidate
