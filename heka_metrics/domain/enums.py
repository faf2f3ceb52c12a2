"""Domain enums for type safety and consistency."""

from enum import Enum


class MetricKind(str, Enum):
    """Closed set of metric kinds a registry can hold."""

    COUNTER = "counter"
    GAUGE = "gauge"
    GAUGE_FLOAT = "gauge_float"
    HISTOGRAM = "histogram"
    METER = "meter"
    TIMER = "timer"


class FieldValueType(str, Enum):
    """Numeric type of a message field on the wire."""

    INTEGER = "integer"  # int64
    DOUBLE = "double"  # float64


class SenderState(str, Enum):
    """Connection state of the resilient sender."""

    DISCONNECTED = "disconnected"
    CONNECTED = "connected"


class TransportScheme(str, Enum):
    """Supported collector transports."""

    TCP = "tcp"
    UDP = "udp"
