"""Metric snapshot value objects.

A registry exposes its instruments as one of six closed variants. Each
variant is an immutable point-in-time read of the instrument, so encoding
never races with concurrent updates to the live metric.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .enums import MetricKind

# Quantiles every distribution snapshot is computed at, ascending.
CANONICAL_QUANTILES: tuple[float, ...] = (0.5, 0.75, 0.95, 0.99, 0.999)


def sample_quantiles(sorted_values: Sequence[int], quantiles: Iterable[float]) -> dict[float, float]:
    """Interpolated quantiles of an already sorted sample.

    Uses ``pos = q * (n + 1)``: positions below the first sample clamp to the
    smallest value, positions at or beyond the last clamp to the largest,
    everything in between interpolates linearly between neighbours.
    """
    n = len(sorted_values)
    result: dict[float, float] = {}
    for q in quantiles:
        if n == 0:
            result[q] = 0.0
            continue
        pos = q * (n + 1)
        if pos < 1.0:
            result[q] = float(sorted_values[0])
        elif pos >= n:
            result[q] = float(sorted_values[-1])
        else:
            lower = float(sorted_values[int(pos) - 1])
            upper = float(sorted_values[int(pos)])
            result[q] = lower + (pos - math.floor(pos)) * (upper - lower)
    return result


class HistogramSnapshot(BaseModel):
    """Distribution statistics of a histogram at one point in time."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    count: int = Field(default=0, ge=0, description="Number of recorded samples")
    min: int = Field(default=0, description="Smallest recorded sample")
    max: int = Field(default=0, description="Largest recorded sample")
    mean: float = Field(default=0.0, description="Arithmetic mean of the samples")
    std_dev: float = Field(default=0.0, ge=0, description="Population standard deviation")
    quantiles: dict[float, float] = Field(
        default_factory=dict, description="Sample value at each computed quantile"
    )

    def percentiles(self, quantiles: Sequence[float]) -> list[float]:
        """Values for the requested quantiles, in request order.

        Quantiles this snapshot was not computed at are left out, so the
        result can be shorter than the request.
        """
        return [self.quantiles[q] for q in quantiles if q in self.quantiles]

    @classmethod
    def stats_from_values(cls, values: Iterable[int]) -> dict:
        """Compute the histogram fields for a raw sample."""
        ordered = sorted(int(v) for v in values)
        if not ordered:
            return {
                "count": 0,
                "min": 0,
                "max": 0,
                "mean": 0.0,
                "std_dev": 0.0,
                "quantiles": dict.fromkeys(CANONICAL_QUANTILES, 0.0),
            }

        mean = sum(ordered) / len(ordered)
        variance = sum((v - mean) ** 2 for v in ordered) / len(ordered)
        return {
            "count": len(ordered),
            "min": ordered[0],
            "max": ordered[-1],
            "mean": mean,
            "std_dev": math.sqrt(variance),
            "quantiles": sample_quantiles(ordered, CANONICAL_QUANTILES),
        }

    @classmethod
    def from_values(cls, values: Iterable[int]) -> HistogramSnapshot:
        """Build a snapshot from raw integer samples."""
        return cls(**cls.stats_from_values(values))


class MeterSnapshot(BaseModel):
    """Event count and decayed rates of a meter at one point in time."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    count: int = Field(default=0, ge=0, description="Total events marked")
    rate1: float = Field(default=0.0, description="One-minute exponentially-weighted rate")
    rate5: float = Field(default=0.0, description="Five-minute exponentially-weighted rate")
    rate15: float = Field(default=0.0, description="Fifteen-minute exponentially-weighted rate")
    rate_mean: float = Field(default=0.0, description="Mean rate since the meter started")


class TimerSnapshot(HistogramSnapshot):
    """Duration distribution combined with meter-style rates."""

    rate1: float = Field(default=0.0, description="One-minute exponentially-weighted rate")
    rate5: float = Field(default=0.0, description="Five-minute exponentially-weighted rate")
    rate15: float = Field(default=0.0, description="Fifteen-minute exponentially-weighted rate")
    rate_mean: float = Field(default=0.0, description="Mean rate since the timer started")

    @classmethod
    def from_durations(cls, durations: Iterable[int], rates: MeterSnapshot) -> TimerSnapshot:
        """Build a timer snapshot from raw durations and the timer's meter."""
        return cls(
            **cls.stats_from_values(durations),
            rate1=rates.rate1,
            rate5=rates.rate5,
            rate15=rates.rate15,
            rate_mean=rates.rate_mean,
        )


class CounterMetric(BaseModel):
    """Integer count."""

    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    kind: Literal[MetricKind.COUNTER] = MetricKind.COUNTER
    count: int


class GaugeMetric(BaseModel):
    """Instantaneous integer value."""

    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    kind: Literal[MetricKind.GAUGE] = MetricKind.GAUGE
    value: int


class GaugeFloatMetric(BaseModel):
    """Instantaneous floating point value."""

    model_config = ConfigDict(frozen=True, extra="forbid", strict=True)

    kind: Literal[MetricKind.GAUGE_FLOAT] = MetricKind.GAUGE_FLOAT
    value: float


class HistogramMetric(BaseModel):
    """Histogram instrument read as a snapshot."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal[MetricKind.HISTOGRAM] = MetricKind.HISTOGRAM
    snapshot: HistogramSnapshot


class MeterMetric(BaseModel):
    """Meter instrument read as a snapshot."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal[MetricKind.METER] = MetricKind.METER
    snapshot: MeterSnapshot


class TimerMetric(BaseModel):
    """Timer instrument read as a snapshot."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: Literal[MetricKind.TIMER] = MetricKind.TIMER
    snapshot: TimerSnapshot


Metric = CounterMetric | GaugeMetric | GaugeFloatMetric | HistogramMetric | MeterMetric | TimerMetric
