"""Infrastructure layer - Concrete adapters for the exporter ports."""

from .bootstrap import create_exporter
from .config import ExporterConfig
from .in_memory_registry import InMemoryRegistry
from .serialization import JsonMessageEncoder, MsgpackMessageEncoder, create_message_encoder
from .simple_logger import SimpleLogger
from .system_clock import SystemClock
from .transports import AsyncioConnector, TcpConnection, UdpConnection

__all__ = [
    "AsyncioConnector",
    "ExporterConfig",
    "InMemoryRegistry",
    "JsonMessageEncoder",
    "MsgpackMessageEncoder",
    "SimpleLogger",
    "SystemClock",
    "TcpConnection",
    "UdpConnection",
    "create_exporter",
    "create_message_encoder",
]
