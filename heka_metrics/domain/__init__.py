"""Domain layer - Metric snapshots, messages and errors."""

from .enums import FieldValueType, MetricKind, SenderState, TransportScheme
from .exceptions import (
    ConfigError,
    ConnectError,
    FieldEncodingError,
    HekaMetricsError,
    SendError,
    SerializationError,
    TransportError,
)
from .metrics import (
    CANONICAL_QUANTILES,
    CounterMetric,
    GaugeFloatMetric,
    GaugeMetric,
    HistogramMetric,
    HistogramSnapshot,
    MeterMetric,
    MeterSnapshot,
    Metric,
    TimerMetric,
    TimerSnapshot,
)
from .models import (
    DEFAULT_SEVERITY,
    LOGGER_LABEL,
    MessageField,
    MetricsMessage,
    ProcessIdentity,
)
from .value_objects import Endpoint

__all__ = [
    "CANONICAL_QUANTILES",
    "DEFAULT_SEVERITY",
    "LOGGER_LABEL",
    "ConfigError",
    "ConnectError",
    "CounterMetric",
    "Endpoint",
    "FieldEncodingError",
    "FieldValueType",
    "GaugeFloatMetric",
    "GaugeMetric",
    "HekaMetricsError",
    "HistogramMetric",
    "HistogramSnapshot",
    "MessageField",
    "MeterMetric",
    "MeterSnapshot",
    "Metric",
    "MetricKind",
    "MetricsMessage",
    "ProcessIdentity",
    "SendError",
    "SenderState",
    "SerializationError",
    "TimerMetric",
    "TimerSnapshot",
    "TransportError",
    "TransportScheme",
]
