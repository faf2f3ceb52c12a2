"""Snapshot encoder - flattens a registry into one outbound message.

Every metric kind maps onto a fixed set of dotted field names:

- counter ``name``       -> ``name`` (int64)
- gauge ``name``         -> ``name`` (int64)
- float gauge ``name``   -> ``name`` (float64)
- histogram ``name``     -> ``name.histogram.<stat>``
- meter ``name``         -> ``name.count`` and ``name.<rate>``
- timer ``name``         -> ``name.timer.<stat>``

Distribution values are bound to names by position. A name without a
value, or a value the message rejects, is skipped and logged; it never
aborts the rest of the message.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from uuid import UUID, uuid4

from ..domain.exceptions import FieldEncodingError
from ..domain.metrics import (
    CANONICAL_QUANTILES,
    CounterMetric,
    GaugeFloatMetric,
    GaugeMetric,
    HistogramMetric,
    HistogramSnapshot,
    MeterMetric,
    Metric,
    TimerMetric,
)
from ..domain.models import (
    DEFAULT_SEVERITY,
    LOGGER_LABEL,
    MessageField,
    MetricsMessage,
    ProcessIdentity,
)
from ..ports.clock import ClockPort
from ..ports.logger import LoggerPort
from ..ports.registry import MetricsRegistryPort

DISTRIBUTION_FIELDS = (
    "50-percentile",
    "75-percentile",
    "95-percentile",
    "99-percentile",
    "999-percentile",
    "mean",
    "std-dev",
)
METER_RATE_FIELDS = ("one-minute", "five-minute", "fifteen-minute", "mean")
TIMER_RATE_FIELDS = ("one-minute", "five-minute", "fifteen-minute", "mean-rate")
EXTREMA_FIELDS = ("count", "min", "max")


class SnapshotEncoder:
    """Builds a :class:`MetricsMessage` from the current registry state."""

    def __init__(
        self,
        identity: ProcessIdentity,
        clock: ClockPort | None = None,
        id_factory: Callable[[], UUID] = uuid4,
        logger: LoggerPort | None = None,
    ) -> None:
        """Initialize the encoder.

        Args:
            identity: Process id, hostname and type label for the envelope
            clock: Source of the envelope timestamp
            id_factory: Generator of per-message unique ids
            logger: Logger for skipped fields
        """
        self._identity = identity
        self._clock = clock or self._create_default_clock()
        self._id_factory = id_factory
        self._logger = logger or self._create_default_logger()

    def _create_default_clock(self) -> ClockPort:
        from ..infrastructure.system_clock import SystemClock

        return SystemClock()

    def _create_default_logger(self) -> LoggerPort:
        from ..infrastructure.simple_logger import SimpleLogger

        return SimpleLogger()

    @property
    def identity(self) -> ProcessIdentity:
        return self._identity

    def encode(self, registry: MetricsRegistryPort) -> MetricsMessage:
        """Snapshot the registry into a new message.

        Metrics are visited in name order so equal registries produce equal
        field lists.
        """
        message = MetricsMessage(
            timestamp=self._clock.now_ns(),
            uuid=self._id_factory(),
            logger=LOGGER_LABEL,
            type=self._identity.msg_type,
            pid=self._identity.pid,
            severity=DEFAULT_SEVERITY,
            hostname=self._identity.hostname,
            payload="",
        )
        for name, metric in sorted(registry.each(), key=lambda item: item[0]):
            self._add_metric(message, name, metric)
        return message

    def _add_metric(self, message: MetricsMessage, name: str, metric: Metric) -> None:
        match metric:
            case CounterMetric():
                self._add_field(message, name, metric.count, MessageField.integer)
            case GaugeMetric():
                self._add_field(message, name, metric.value, MessageField.integer)
            case GaugeFloatMetric():
                self._add_field(message, name, metric.value, MessageField.double)
            case HistogramMetric():
                self._add_distribution(message, f"{name}.histogram", metric.snapshot)
            case MeterMetric():
                m = metric.snapshot
                self._add_field(message, f"{name}.count", m.count, MessageField.integer)
                self._add_float_mapping(
                    message, name, METER_RATE_FIELDS, [m.rate1, m.rate5, m.rate15, m.rate_mean]
                )
            case TimerMetric():
                t = metric.snapshot
                self._add_distribution(
                    message,
                    f"{name}.timer",
                    t,
                    TIMER_RATE_FIELDS,
                    [t.rate1, t.rate5, t.rate15, t.rate_mean],
                )
            case _:
                self._logger.warning(
                    "Skipping metric of unknown kind",
                    metric=name,
                    metric_type=type(metric).__name__,
                )

    def _add_distribution(
        self,
        message: MetricsMessage,
        prefix: str,
        snapshot: HistogramSnapshot,
        rate_names: Sequence[str] = (),
        rate_values: Sequence[float] = (),
    ) -> None:
        names = [*DISTRIBUTION_FIELDS, *rate_names]
        values = snapshot.percentiles(CANONICAL_QUANTILES)
        values.extend([snapshot.mean, snapshot.std_dev, *rate_values])
        self._add_float_mapping(message, prefix, names, values)

        for suffix, value in zip(
            EXTREMA_FIELDS, (snapshot.count, snapshot.min, snapshot.max), strict=True
        ):
            self._add_field(message, f"{prefix}.{suffix}", value, MessageField.integer)

    def _add_float_mapping(
        self,
        message: MetricsMessage,
        prefix: str,
        names: Sequence[str],
        values: Sequence[float],
    ) -> None:
        for i, suffix in enumerate(names):
            field_name = f"{prefix}.{suffix}"
            if i >= len(values):
                self._logger.warning("Skipping field with no value", field=field_name)
                continue
            self._add_field(message, field_name, values[i], MessageField.double)

    def _add_field(
        self,
        message: MetricsMessage,
        field_name: str,
        value: object,
        build: Callable[[str, object], MessageField],
    ) -> None:
        try:
            message.add_field(build(field_name, value))
        except FieldEncodingError as e:
            self._logger.warning(
                f"Skipping field: {e.message}",
                field=field_name,
                value=repr(value),
            )
