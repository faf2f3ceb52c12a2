"""Clock port abstraction for message timestamps."""

from abc import ABC, abstractmethod


class ClockPort(ABC):
    """Abstract clock interface.

    Lets tests pin the envelope timestamp instead of reading system time.
    """

    @abstractmethod
    def now_ns(self) -> int:
        """Get the current time as nanoseconds since the Unix epoch."""
        ...
