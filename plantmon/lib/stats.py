"""Windowed statistics and trend classification.

Statistics are recomputed from scratch for every window; nothing is cached
between calls.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from plantmon.lib.config import Trend
from plantmon.lib.config.constants import TREND_RATIO
from plantmon.lib.reading import Reading


@dataclass(frozen=True, slots=True)
class Statistics:
    avg: float
    min: float
    max: float
    trend: Trend


EMPTY_STATISTICS = Statistics(avg=0, min=0, max=0, trend=Trend.STABLE)


@dataclass(frozen=True, slots=True)
class WindowStats:
    """Per-metric statistics over one window of readings.

    ``water`` is None when no reading in the window had a water sensor value.
    """

    temp: Statistics
    soil: Statistics
    light: Statistics
    humidity: Statistics
    water: Statistics | None
    reading_count: int


def _mean(values: Sequence[float]) -> float:
    """Arithmetic mean, 0 for an empty sequence."""
    if not values:
        return 0.0
    return sum(values) / len(values)


def classify_trend(values: Sequence[float], avg: float) -> Trend:
    """Compare the means of the first and second half of the window.

    The split point is ``len // 2``, so an odd-length window puts the extra
    value in the second half. The change must exceed 5% of the overall
    average to count as rising or falling.
    """
    midpoint = len(values) // 2
    diff = _mean(values[midpoint:]) - _mean(values[:midpoint])
    if diff > avg * TREND_RATIO:
        return Trend.RISING
    if diff < -avg * TREND_RATIO:
        return Trend.FALLING
    return Trend.STABLE


def calculate_stats(values: Sequence[float]) -> Statistics:
    """Compute avg/min/max/trend for one metric."""
    if not values:
        return EMPTY_STATISTICS
    avg = _mean(values)
    return Statistics(
        avg=avg,
        min=min(values),
        max=max(values),
        trend=classify_trend(values, avg),
    )


def compute_statistics(window: Sequence[Reading]) -> WindowStats:
    """Compute statistics for every metric over a time-ordered window.

    Water values of 0 or None mean no sensor is present and are left out of
    the water statistics.
    """
    waters = [r.water for r in window if r.water is not None and r.water > 0]
    return WindowStats(
        temp=calculate_stats([r.temp for r in window]),
        soil=calculate_stats([r.soil for r in window]),
        light=calculate_stats([r.light for r in window]),
        humidity=calculate_stats([r.humidity for r in window]),
        water=calculate_stats(waters) if waters else None,
        reading_count=len(window),
    )
