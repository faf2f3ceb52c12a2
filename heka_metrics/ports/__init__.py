"""Ports layer - Interfaces for external collaborators."""

from .clock import ClockPort
from .logger import LoggerPort
from .message_encoder import MessageEncoderPort
from .registry import MetricsRegistryPort
from .transport import ConnectionPort, ConnectorPort

__all__ = [
    "ClockPort",
    "ConnectionPort",
    "ConnectorPort",
    "LoggerPort",
    "MessageEncoderPort",
    "MetricsRegistryPort",
]
