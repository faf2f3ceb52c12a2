"""Tests for the in-memory registry."""

import math

import pytest

from heka_metrics.domain.enums import MetricKind
from heka_metrics.domain.metrics import (
    CounterMetric,
    GaugeFloatMetric,
    GaugeMetric,
    HistogramMetric,
    MeterMetric,
    TimerMetric,
)
from heka_metrics.infrastructure.in_memory_registry import (
    EWMA,
    TICK_INTERVAL,
    InMemoryRegistry,
    Meter,
)
from heka_metrics.ports.registry import MetricsRegistryPort


class FakeTime:
    """Manually advanced monotonic clock."""

    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_time():
    return FakeTime()


@pytest.fixture
def metrics(fake_time):
    return InMemoryRegistry(time_fn=fake_time)


class TestEWMA:
    """Test cases for the moving average."""

    def test_first_tick_sets_instant_rate(self):
        """Test the first tick adopts the instant rate."""
        ewma = EWMA(1)
        ewma.update(10)
        ewma.tick()

        assert ewma.rate == pytest.approx(10 / TICK_INTERVAL)

    def test_decay(self):
        """Test an idle tick decays towards zero."""
        ewma = EWMA(1)
        ewma.update(5)
        ewma.tick()
        ewma.tick()

        assert ewma.rate == pytest.approx(math.exp(-TICK_INTERVAL / 60.0))

    def test_alpha_by_window(self):
        """Test longer windows decay more slowly."""
        assert EWMA(1).alpha > EWMA(5).alpha > EWMA(15).alpha


class TestMeter:
    """Test cases for the meter."""

    def test_rates_before_first_tick(self, fake_time):
        """Test rates are zero until the first tick."""
        meter = Meter(fake_time)
        meter.mark(3)
        fake_time.advance(1.0)

        snapshot = meter.snapshot()
        assert snapshot.count == 3
        assert snapshot.rate1 == 0.0
        assert snapshot.rate_mean == pytest.approx(3.0)

    def test_rates_after_tick(self, fake_time):
        """Test rates after one tick interval."""
        meter = Meter(fake_time)
        meter.mark(5)
        fake_time.advance(TICK_INTERVAL)

        snapshot = meter.snapshot()
        assert snapshot.rate1 == pytest.approx(1.0)
        assert snapshot.rate5 == pytest.approx(1.0)
        assert snapshot.rate15 == pytest.approx(1.0)
        assert snapshot.rate_mean == pytest.approx(1.0)

    def test_missed_ticks_are_caught_up(self, fake_time):
        """Test several elapsed intervals are all applied."""
        meter = Meter(fake_time)
        meter.mark(5)
        fake_time.advance(TICK_INTERVAL * 3)

        rate = meter.snapshot().rate1
        assert rate == pytest.approx(math.exp(-TICK_INTERVAL / 60.0) ** 2)

    def test_negative_mark_rejected(self, fake_time):
        """Test a meter only counts forward."""
        meter = Meter(fake_time)

        with pytest.raises(ValueError, match="negative"):
            meter.mark(-1)
        assert meter.snapshot().count == 0

    def test_no_elapsed_time(self, fake_time):
        """Test the mean rate is zero when no time has passed."""
        meter = Meter(fake_time)
        meter.mark()

        assert meter.snapshot().rate_mean == 0.0


class TestInMemoryRegistry:
    """Test cases for InMemoryRegistry."""

    def test_implements_port(self, metrics):
        """Test the registry implements MetricsRegistryPort."""
        assert isinstance(metrics, MetricsRegistryPort)

    def test_empty(self, metrics):
        """Test a new registry yields nothing."""
        assert list(metrics.each()) == []

    def test_counter(self, metrics):
        """Test counters accumulate and can go down."""
        metrics.increment("requests")
        metrics.increment("requests", 4)
        metrics.increment("requests", -2)

        assert dict(metrics.each()) == {"requests": CounterMetric(count=3)}

    def test_gauges(self, metrics):
        """Test both gauge kinds keep the last value."""
        metrics.gauge("connections", 3)
        metrics.gauge("connections", 7)
        metrics.gauge_float("load", 0.25)

        snapshot = dict(metrics.each())
        assert snapshot["connections"] == GaugeMetric(value=7)
        assert snapshot["load"] == GaugeFloatMetric(value=0.25)

    def test_histogram(self, metrics):
        """Test histogram samples are summarised."""
        for value in (10, 20, 30, 40):
            metrics.record("payload", value)

        metric = dict(metrics.each())["payload"]
        assert isinstance(metric, HistogramMetric)
        assert metric.snapshot.count == 4
        assert metric.snapshot.min == 10
        assert metric.snapshot.max == 40
        assert metric.snapshot.mean == pytest.approx(25.0)

    def test_sample_size_bounds_reservoir(self, fake_time):
        """Test only the most recent samples are kept."""
        metrics = InMemoryRegistry(sample_size=2, time_fn=fake_time)
        for value in (1, 2, 3):
            metrics.record("payload", value)

        snapshot = dict(metrics.each())["payload"].snapshot
        assert snapshot.count == 2
        assert snapshot.min == 2

    def test_invalid_sample_size(self):
        """Test the sample size must be positive."""
        with pytest.raises(ValueError, match="Sample size"):
            InMemoryRegistry(sample_size=0)

    def test_meter(self, metrics, fake_time):
        """Test meters report counts and rates."""
        metrics.mark("events", 10)
        fake_time.advance(TICK_INTERVAL)

        metric = dict(metrics.each())["events"]
        assert isinstance(metric, MeterMetric)
        assert metric.snapshot.count == 10
        assert metric.snapshot.rate1 == pytest.approx(2.0)

    def test_timer(self, metrics, fake_time):
        """Test timers combine durations and rates."""
        for duration in (100, 200, 300):
            metrics.update_timer("latency", duration)
        fake_time.advance(TICK_INTERVAL)

        metric = dict(metrics.each())["latency"]
        assert isinstance(metric, TimerMetric)
        assert metric.snapshot.count == 3
        assert metric.snapshot.min == 100
        assert metric.snapshot.max == 300
        assert metric.snapshot.mean == pytest.approx(200.0)
        assert metric.snapshot.rate1 == pytest.approx(3 / TICK_INTERVAL)

    def test_timer_context_manager(self, metrics):
        """Test the context manager records one non-negative duration."""
        with metrics.timer("block"):
            pass

        snapshot = dict(metrics.each())["block"].snapshot
        assert snapshot.count == 1
        assert snapshot.min >= 0

    def test_timer_context_manager_records_on_error(self, metrics):
        """Test the duration is recorded when the block raises."""
        with pytest.raises(RuntimeError), metrics.timer("block"):
            raise RuntimeError("boom")

        assert dict(metrics.each())["block"].snapshot.count == 1

    def test_name_bound_to_one_kind(self, metrics):
        """Test a name cannot change kind."""
        metrics.increment("x")

        with pytest.raises(ValueError, match="already registered as a counter"):
            metrics.gauge("x", 1)

    def test_register_snapshot(self, metrics):
        """Test ready-made snapshots are exported as given."""
        metrics.register("external", GaugeMetric(value=9))

        assert dict(metrics.each()) == {"external": GaugeMetric(value=9)}
        with pytest.raises(ValueError, match="gauge"):
            metrics.increment("external")

    def test_negative_mark_rejected(self, metrics):
        """Test the registry refuses a negative meter mark and stays exportable."""
        metrics.mark("events", 2)

        with pytest.raises(ValueError, match="negative"):
            metrics.mark("events", -1)
        assert dict(metrics.each())["events"].snapshot.count == 2

    def test_live_instrument_rejects_snapshot_name(self, metrics):
        """Test a registered snapshot name cannot also be a live instrument."""
        metrics.register("x", CounterMetric(count=5))

        with pytest.raises(ValueError, match="counter snapshot"):
            metrics.increment("x")
        assert [name for name, _ in metrics.each()] == ["x"]
        assert dict(metrics.each())["x"] == CounterMetric(count=5)

    def test_snapshot_rejects_live_instrument_name(self, metrics):
        """Test a live instrument name cannot be registered as a snapshot."""
        metrics.increment("x")

        with pytest.raises(ValueError, match="live counter"):
            metrics.register("x", CounterMetric(count=5))
        assert list(metrics.each()) == [("x", CounterMetric(count=1))]

    def test_register_replaces_snapshot(self, metrics):
        """Test registering a snapshot again replaces it."""
        metrics.register("x", CounterMetric(count=5))
        metrics.register("x", GaugeMetric(value=2))

        assert list(metrics.each()) == [("x", GaugeMetric(value=2))]

    def test_unregister(self, metrics):
        """Test a removed name is free for another kind."""
        metrics.increment("x")
        metrics.unregister("x")
        metrics.gauge("x", 5)

        assert dict(metrics.each()) == {"x": GaugeMetric(value=5)}

    def test_unregister_unknown_name(self, metrics):
        """Test removing an unknown name is a no-op."""
        metrics.unregister("missing")
        assert list(metrics.each()) == []

    def test_reset(self, metrics):
        """Test reset clears every kind."""
        metrics.increment("a")
        metrics.record("b", 1)
        metrics.mark("c")
        metrics.reset()

        assert list(metrics.each()) == []

    def test_snapshots_are_detached(self, metrics):
        """Test later updates do not change an earlier snapshot."""
        metrics.increment("a")
        before = dict(metrics.each())
        metrics.increment("a")

        assert before["a"].count == 1
        assert dict(metrics.each())["a"].count == 2

    def test_kinds(self, metrics):
        """Test every variant reports its kind."""
        metrics.increment("counter")
        metrics.gauge("gauge", 1)
        metrics.gauge_float("gauge_float", 1.0)
        metrics.record("histogram", 1)
        metrics.mark("meter")
        metrics.update_timer("timer", 1)

        assert {name: metric.kind for name, metric in metrics.each()} == {
            "counter": MetricKind.COUNTER,
            "gauge": MetricKind.GAUGE,
            "gauge_float": MetricKind.GAUGE_FLOAT,
            "histogram": MetricKind.HISTOGRAM,
            "meter": MetricKind.METER,
            "timer": MetricKind.TIMER,
        }
