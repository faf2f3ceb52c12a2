"""Metrics exporter - periodic flush of a registry to the collector."""

from __future__ import annotations

import asyncio
import contextlib
import threading

from ..domain.exceptions import SerializationError, TransportError
from ..ports.logger import LoggerPort
from ..ports.message_encoder import MessageEncoderPort
from ..ports.registry import MetricsRegistryPort
from .resilient_sender import ResilientSender
from .snapshot_encoder import SnapshotEncoder


class MetricsExporter:
    """Drives flush cycles until stopped.

    Each cycle waits for the interval (or a stop request), snapshots the
    registry, serializes the message and hands the bytes to the sender.
    Failures are logged and contained to their cycle; missed cycles are
    not resent.
    """

    def __init__(
        self,
        sender: ResilientSender,
        encoder: SnapshotEncoder,
        serializer: MessageEncoderPort,
        logger: LoggerPort | None = None,
    ) -> None:
        """Initialize the exporter.

        Args:
            sender: Sender owning the collector connection
            encoder: Builds a message from the registry
            serializer: Turns a message into wire bytes
            logger: Logger for flush failures
        """
        self._sender = sender
        self._encoder = encoder
        self._serializer = serializer
        self._logger = logger or self._create_default_logger()

        self._stop_event = asyncio.Event()
        self._stop_requested = threading.Event()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._running = False

    def _create_default_logger(self) -> LoggerPort:
        from ..infrastructure.simple_logger import SimpleLogger

        return SimpleLogger()

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def sender(self) -> ResilientSender:
        return self._sender

    async def run(self, registry: MetricsRegistryPort, interval: float) -> None:
        """Flush ``registry`` every ``interval`` seconds until :meth:`stop`.

        Blocks the calling task. A stop that lands while waiting ends the
        loop without another flush; a flush already in progress completes.
        The stop signal is single-use: once stopped, the exporter stays
        stopped and a later ``run`` returns immediately.

        Raises:
            ValueError: If the interval is not positive
            RuntimeError: If the exporter is already running
        """
        if interval <= 0:
            raise ValueError("Flush interval must be positive")
        if self._running:
            raise RuntimeError("Exporter is already running")

        self._loop = asyncio.get_running_loop()
        self._running = True
        if self._stop_requested.is_set():
            self._stop_event.set()

        self._logger.info(
            "Started metrics exporter",
            endpoint=str(self._sender.endpoint),
            interval=f"{interval}s",
        )
        try:
            while not await self._wait_for_stop(interval):
                await self.flush(registry)
        finally:
            self._running = False
            self._loop = None
            await self._sender.close()
            self._logger.info("Stopped metrics exporter", endpoint=str(self._sender.endpoint))

    async def _wait_for_stop(self, interval: float) -> bool:
        """Wait for the interval or a stop request; True means stop."""
        if self._stop_event.is_set():
            return True
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=interval)
        except TimeoutError:
            pass
        return self._stop_event.is_set()

    async def flush(self, registry: MetricsRegistryPort) -> bool:
        """Run a single flush cycle.

        Returns:
            True if the message reached the sender's connection
        """
        try:
            message = self._encoder.encode(registry)
        except Exception as e:
            # Registry failures are contained to this cycle like any other.
            self._logger.error(
                f"Error encoding metrics: {e}",
                endpoint=str(self._sender.endpoint),
                error_type=type(e).__name__,
            )
            return False

        try:
            data = self._serializer.encode(message)
        except SerializationError as e:
            self._logger.error(
                f"Error encoding message: {e.message}",
                endpoint=str(self._sender.endpoint),
                field_count=len(message.fields),
            )
            return False

        try:
            await self._sender.send(data)
        except TransportError as e:
            self._logger.error(
                f"Error sending message: {e.message}",
                endpoint=str(self._sender.endpoint),
            )
            return False

        self._logger.debug(
            "Flushed metrics",
            endpoint=str(self._sender.endpoint),
            field_count=len(message.fields),
            size=len(data),
        )
        return True

    def stop(self) -> None:
        """Ask the loop to exit. Idempotent and safe from any thread."""
        if self._stop_requested.is_set():
            return
        self._stop_requested.set()

        loop = self._loop
        if loop is None or loop.is_closed():
            return
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is loop:
            self._stop_event.set()
        else:
            # The loop may close between the check above and this call.
            with contextlib.suppress(RuntimeError):
                loop.call_soon_threadsafe(self._stop_event.set)
