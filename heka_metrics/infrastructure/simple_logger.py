"""Simple logger implementation over the standard logging module."""

import logging
from typing import Any

from ..ports.logger import LoggerPort


class SimpleLogger(LoggerPort):
    """Logger implementation using Python's standard logging.

    Keyword context is passed through as ``extra`` for structured handlers
    and is also appended to the message as ``[key=value ...]`` so the
    endpoint or field shows up with a plain console formatter.
    """

    def __init__(self, name: str = "heka_metrics", level: int = logging.INFO):
        """Initialize the logger.

        Args:
            name: Logger name (default: "heka_metrics")
            level: Logging level (default: INFO)
        """
        self._logger = logging.getLogger(name)
        self._logger.setLevel(level)

        if not self._logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
            handler.setFormatter(formatter)
            self._logger.addHandler(handler)

    @staticmethod
    def render(message: str, context: dict[str, Any]) -> str:
        """Append keyword context to a message."""
        if not context:
            return message
        pairs = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{message} [{pairs}]"

    def _log(
        self,
        level: int,
        message: str,
        context: dict[str, Any],
        exc_info: Exception | bool | None = None,
    ) -> None:
        if not self._logger.isEnabledFor(level):
            return
        self._logger.log(level, self.render(message, context), exc_info=exc_info, extra=context)

    def debug(self, message: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, message, kwargs)

    def exception(self, message: str, exc_info: Exception | None = None, **kwargs: Any) -> None:
        """Log an error with its traceback, the active one by default."""
        self._log(logging.ERROR, message, kwargs, exc_info=exc_info or True)
