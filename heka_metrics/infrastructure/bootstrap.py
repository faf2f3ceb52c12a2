"""Bootstrap module for wiring an exporter from configuration."""

from __future__ import annotations

from collections.abc import Callable
from uuid import UUID, uuid4

from ..application.exporter import MetricsExporter
from ..application.resilient_sender import ResilientSender
from ..application.snapshot_encoder import SnapshotEncoder
from ..domain.models import ProcessIdentity
from ..ports.clock import ClockPort
from ..ports.logger import LoggerPort
from .config import ExporterConfig
from .serialization import create_message_encoder
from .simple_logger import SimpleLogger
from .system_clock import SystemClock
from .transports import AsyncioConnector


def create_exporter(
    config: ExporterConfig,
    logger: LoggerPort | None = None,
    clock: ClockPort | None = None,
    id_factory: Callable[[], UUID] = uuid4,
) -> MetricsExporter:
    """Build a ready-to-run exporter with the default adapters.

    Args:
        config: Validated exporter configuration
        logger: Logger shared by all components (default: SimpleLogger)
        clock: Timestamp source (default: SystemClock)
        id_factory: Message id generator

    Returns:
        An exporter whose ``run`` should be scheduled as a task
    """
    logger = logger or SimpleLogger()
    sender = ResilientSender(
        config.endpoint,
        connector=AsyncioConnector(connect_timeout=config.connect_timeout),
        logger=logger,
    )
    encoder = SnapshotEncoder(
        ProcessIdentity.current(config.msg_type),
        clock=clock or SystemClock(),
        id_factory=id_factory,
        logger=logger,
    )
    serializer = create_message_encoder(config.use_msgpack)
    return MetricsExporter(sender, encoder, serializer, logger=logger)
