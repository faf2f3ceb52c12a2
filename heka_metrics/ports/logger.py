"""Logger port for exporter diagnostics."""

from abc import ABC, abstractmethod
from typing import Any


class LoggerPort(ABC):
    """Where the exporter reports connection events and skipped data.

    Keyword arguments carry structured context such as ``endpoint``,
    ``metric`` or ``field``. Context keys must not clash with
    ``logging.LogRecord`` attributes (``name``, ``msg``, ``message``...),
    since adapters over stdlib logging pass them as ``extra``.
    """

    @abstractmethod
    def debug(self, message: str, **kwargs: Any) -> None:
        """Per-cycle detail, such as a successful flush."""
        ...

    @abstractmethod
    def info(self, message: str, **kwargs: Any) -> None:
        """Lifecycle events: start, stop, connect."""
        ...

    @abstractmethod
    def warning(self, message: str, **kwargs: Any) -> None:
        """Recovered problems: a skipped field, a send that will be retried."""
        ...

    @abstractmethod
    def error(self, message: str, **kwargs: Any) -> None:
        """A lost flush cycle."""
        ...

    @abstractmethod
    def exception(self, message: str, exc_info: Exception | None = None, **kwargs: Any) -> None:
        """An error with its traceback."""
        ...
