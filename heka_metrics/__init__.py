"""heka-metrics - Periodic export of an in-process metrics registry over TCP/UDP."""

from .application.exporter import MetricsExporter
from .application.resilient_sender import ResilientSender
from .application.snapshot_encoder import SnapshotEncoder
from .infrastructure.bootstrap import create_exporter
from .infrastructure.config import ExporterConfig
from .infrastructure.in_memory_registry import InMemoryRegistry

__all__ = [
    "ExporterConfig",
    "InMemoryRegistry",
    "MetricsExporter",
    "ResilientSender",
    "SnapshotEncoder",
    "create_exporter",
]
__version__ = "0.1.0"
