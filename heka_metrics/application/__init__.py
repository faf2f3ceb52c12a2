"""Application layer - Snapshot encoding, sending and the flush loop."""

from .exporter import MetricsExporter
from .resilient_sender import ResilientSender
from .snapshot_encoder import SnapshotEncoder

__all__ = ["MetricsExporter", "ResilientSender", "SnapshotEncoder"]
