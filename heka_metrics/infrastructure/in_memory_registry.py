"""In-memory metrics registry.

A small registry for applications that do not already keep their own.
It implements the registry port by turning every live instrument into a
snapshot variant when the exporter iterates it.
"""

from __future__ import annotations

import math
import threading
import time
from collections import deque
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager

from ..domain.enums import MetricKind
from ..domain.metrics import (
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
from ..ports.registry import MetricsRegistryPort

TICK_INTERVAL = 5.0
DEFAULT_SAMPLE_SIZE = 1028


class EWMA:
    """Exponentially-weighted moving average of an event rate per second."""

    def __init__(self, minutes: float):
        self.alpha = 1 - math.exp(-TICK_INTERVAL / 60.0 / minutes)
        self.rate = 0.0
        self._uncounted = 0
        self._initialized = False

    def update(self, n: int) -> None:
        self._uncounted += n

    def tick(self) -> None:
        instant_rate = self._uncounted / TICK_INTERVAL
        self._uncounted = 0
        if self._initialized:
            self.rate += self.alpha * (instant_rate - self.rate)
        else:
            self.rate = instant_rate
            self._initialized = True


class Meter:
    """Counts events and tracks their 1, 5 and 15 minute rates."""

    def __init__(self, time_fn: Callable[[], float] = time.monotonic):
        self._time_fn = time_fn
        self._start = time_fn()
        self._last_tick = self._start
        self._count = 0
        self._m1 = EWMA(1)
        self._m5 = EWMA(5)
        self._m15 = EWMA(15)

    def mark(self, n: int = 1) -> None:
        if n < 0:
            raise ValueError("Meter events cannot be negative")
        self._tick_if_necessary()
        self._count += n
        for ewma in (self._m1, self._m5, self._m15):
            ewma.update(n)

    def snapshot(self) -> MeterSnapshot:
        self._tick_if_necessary()
        elapsed = self._time_fn() - self._start
        return MeterSnapshot(
            count=self._count,
            rate1=self._m1.rate,
            rate5=self._m5.rate,
            rate15=self._m15.rate,
            rate_mean=self._count / elapsed if elapsed > 0 else 0.0,
        )

    def _tick_if_necessary(self) -> None:
        age = self._time_fn() - self._last_tick
        if age < TICK_INTERVAL:
            return
        ticks = int(age // TICK_INTERVAL)
        self._last_tick += ticks * TICK_INTERVAL
        for _ in range(ticks):
            for ewma in (self._m1, self._m5, self._m15):
                ewma.tick()


class InMemoryRegistry(MetricsRegistryPort):
    """Thread-safe in-memory registry of named instruments.

    Histograms and timers keep the most recent ``sample_size`` samples.
    A name belongs to exactly one metric kind for the registry's lifetime
    (until it is unregistered or the registry is reset).
    """

    def __init__(
        self,
        sample_size: int = DEFAULT_SAMPLE_SIZE,
        time_fn: Callable[[], float] = time.monotonic,
    ):
        """Initialize an empty registry.

        Args:
            sample_size: Samples kept per histogram or timer
            time_fn: Monotonic clock in seconds, used for meter rates
        """
        if sample_size < 1:
            raise ValueError("Sample size must be at least 1")
        self._sample_size = sample_size
        self._time_fn = time_fn
        self._lock = threading.Lock()
        self._kinds: dict[str, MetricKind] = {}
        self._counters: dict[str, int] = {}
        self._gauges: dict[str, int] = {}
        self._float_gauges: dict[str, float] = {}
        self._histograms: dict[str, deque[int]] = {}
        self._meters: dict[str, Meter] = {}
        self._timers: dict[str, tuple[deque[int], Meter]] = {}
        self._static: dict[str, Metric] = {}

    def _claim(self, name: str, kind: MetricKind) -> None:
        if name in self._static:
            raise ValueError(
                f"Metric '{name}' is already registered as a {self._kinds[name].value} snapshot"
            )
        existing = self._kinds.setdefault(name, kind)
        if existing is not kind:
            raise ValueError(f"Metric '{name}' is already registered as a {existing.value}")

    def increment(self, name: str, value: int = 1) -> None:
        """Add to a counter; negative values decrement it."""
        with self._lock:
            self._claim(name, MetricKind.COUNTER)
            self._counters[name] = self._counters.get(name, 0) + value

    def gauge(self, name: str, value: int) -> None:
        """Set an integer gauge."""
        with self._lock:
            self._claim(name, MetricKind.GAUGE)
            self._gauges[name] = int(value)

    def gauge_float(self, name: str, value: float) -> None:
        """Set a floating point gauge."""
        with self._lock:
            self._claim(name, MetricKind.GAUGE_FLOAT)
            self._float_gauges[name] = float(value)

    def record(self, name: str, value: int) -> None:
        """Record a histogram sample."""
        with self._lock:
            self._claim(name, MetricKind.HISTOGRAM)
            samples = self._histograms.setdefault(name, deque(maxlen=self._sample_size))
            samples.append(int(value))

    def mark(self, name: str, n: int = 1) -> None:
        """Mark ``n`` events on a meter.

        Raises:
            ValueError: If ``n`` is negative
        """
        if n < 0:
            raise ValueError("Meter events cannot be negative")
        with self._lock:
            self._claim(name, MetricKind.METER)
            meter = self._meters.get(name)
            if meter is None:
                meter = self._meters[name] = Meter(self._time_fn)
            meter.mark(n)

    def update_timer(self, name: str, duration_ns: int) -> None:
        """Record one timed event of ``duration_ns`` nanoseconds."""
        with self._lock:
            self._claim(name, MetricKind.TIMER)
            entry = self._timers.get(name)
            if entry is None:
                entry = self._timers[name] = (
                    deque(maxlen=self._sample_size),
                    Meter(self._time_fn),
                )
            durations, meter = entry
            durations.append(int(duration_ns))
            meter.mark()

    @contextmanager
    def timer(self, name: str) -> Iterator[None]:
        """Context manager recording the block's duration into a timer."""
        start = time.perf_counter_ns()
        try:
            yield
        finally:
            self.update_timer(name, time.perf_counter_ns() - start)

    def register(self, name: str, metric: Metric) -> None:
        """Register a ready-made snapshot under ``name``.

        Registering again under the same name replaces the snapshot. A name
        held by a live instrument cannot be registered.
        """
        with self._lock:
            if name in self._kinds and name not in self._static:
                raise ValueError(
                    f"Metric '{name}' is already registered as a live {self._kinds[name].value}"
                )
            self._kinds[name] = metric.kind
            self._static[name] = metric

    def unregister(self, name: str) -> None:
        """Remove a metric of any kind."""
        with self._lock:
            self._kinds.pop(name, None)
            for store in (
                self._counters,
                self._gauges,
                self._float_gauges,
                self._histograms,
                self._meters,
                self._timers,
                self._static,
            ):
                store.pop(name, None)

    def reset(self) -> None:
        """Remove all metrics."""
        with self._lock:
            self._kinds.clear()
            self._counters.clear()
            self._gauges.clear()
            self._float_gauges.clear()
            self._histograms.clear()
            self._meters.clear()
            self._timers.clear()
            self._static.clear()

    def each(self) -> Iterable[tuple[str, Metric]]:
        """Snapshot every metric; the result is detached from later updates."""
        with self._lock:
            metrics: list[tuple[str, Metric]] = []
            metrics.extend((n, CounterMetric(count=c)) for n, c in self._counters.items())
            metrics.extend((n, GaugeMetric(value=v)) for n, v in self._gauges.items())
            metrics.extend((n, GaugeFloatMetric(value=v)) for n, v in self._float_gauges.items())
            metrics.extend(
                (n, HistogramMetric(snapshot=HistogramSnapshot.from_values(samples)))
                for n, samples in self._histograms.items()
            )
            metrics.extend(
                (n, MeterMetric(snapshot=meter.snapshot())) for n, meter in self._meters.items()
            )
            metrics.extend(
                (n, TimerMetric(snapshot=TimerSnapshot.from_durations(durations, meter.snapshot())))
                for n, (durations, meter) in self._timers.items()
            )
            metrics.extend(self._static.items())
            return metrics
