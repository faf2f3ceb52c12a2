"""System clock implementation."""

import time

from ..ports.clock import ClockPort


class SystemClock(ClockPort):
    """Default clock implementation using system wall time."""

    def now_ns(self) -> int:
        """Nanoseconds since the Unix epoch."""
        return time.time_ns()
