"""Histograms and gauges that record client activity."""

from __future__ import annotations

import bisect
import math
import threading
from typing import Iterable, Mapping, Sequence

NAMESPACE = "hbasecalls"


def exponential_buckets(start: float, factor: float, count: int) -> list[float]:
    """``count`` bucket bounds, the first ``start``, each ``factor`` times the previous."""
    if count < 1:
        raise ValueError("exponential_buckets needs a positive count")
    if start <= 0:
        raise ValueError("exponential_buckets needs a positive start value")
    if factor <= 1:
        raise ValueError("exponential_buckets needs a factor greater than 1")
    return [start * factor**i for i in range(count)]


class _Series:
    """Counts of one label combination of a histogram."""

    def __init__(self, size: int) -> None:
        self.counts = [0] * size
        self.exemplars: dict[float, tuple[dict[str, str], float]] = {}


class _BoundHistogram:
    """A histogram with its label values fixed."""

    accepts_exemplars = True

    def __init__(self, histogram: Histogram, label_values: tuple[str, ...]) -> None:
        self._histogram = histogram
        self._label_values = label_values

    def observe(self, value: float, exemplar: Mapping[str, str] | None = None) -> None:
        self._histogram.observe(value, *self._label_values, exemplar=exemplar)


class Histogram:
    """Counts observations in buckets, per combination of label values."""

    accepts_exemplars = True

    def __init__(self, name: str, help_text: str, buckets: Iterable[float],
                 labels: Sequence[str] = ()) -> None:
        bounds = [float(b) for b in buckets if not math.isinf(b)]
        if any(a >= b for a, b in zip(bounds, bounds[1:])):
            raise ValueError("histogram buckets must be in increasing order")
        self.name = name
        self.help_text = help_text
        self.buckets = bounds
        self.labels_names = tuple(labels)
        self._series: dict[tuple[str, ...], _Series] = {}
        self._lock = threading.Lock()

    def _key(self, label_values: tuple[str, ...]) -> tuple[str, ...]:
        if len(label_values) != len(self.labels_names):
            raise ValueError(
                f"{self.name}: expected {len(self.labels_names)} label values, "
                f"got {len(label_values)}")
        return tuple(str(v) for v in label_values)

    def _bounds(self) -> list[float]:
        return [*self.buckets, math.inf]

    def labels(self, *args: str) -> _BoundHistogram:
        """An observer for the given label values."""
        return _BoundHistogram(self, self._key(args))

    def observe(self, value: float, *args: str,
                exemplar: Mapping[str, str] | None = None) -> None:
        """Record ``value`` for the label values in ``args``."""
        key = self._key(args)
        index = bisect.bisect_left(self.buckets, value)
        with self._lock:
            series = self._series.get(key)
            if series is None:
                series = self._series[key] = _Series(len(self.buckets) + 1)
            series.counts[index] += 1
            if exemplar is not None:
                series.exemplars[self._bounds()[index]] = (dict(exemplar), float(value))

    def bucket_counts(self, *args: str) -> dict[float, int]:
        """Cumulative count per upper bound, ending with infinity."""
        key = self._key(args)
        with self._lock:
            series = self._series.get(key)
            counts = list(series.counts) if series else [0] * (len(self.buckets) + 1)
        result: dict[float, int] = {}
        running = 0
        for bound, count in zip(self._bounds(), counts):
            running += count
            result[bound] = running
        return result

    def exemplars(self, *args: str) -> dict[float, tuple[dict[str, str], float]]:
        """The latest exemplar per upper bound: its labels and observed value."""
        key = self._key(args)
        with self._lock:
            series = self._series.get(key)
            return dict(series.exemplars) if series else {}


class Gauge:
    """A value that can go up and down."""

    def __init__(self, name: str, help_text: str) -> None:
        self.name = name
        self.help_text = help_text
        self.value = 0.0
        self._lock = threading.Lock()

    def set(self, value: float) -> None:
        with self._lock:
            self.value = float(value)

    def inc(self, amount: float = 1.0) -> None:
        with self._lock:
            self.value += amount

    def dec(self, amount: float = 1.0) -> None:
        with self._lock:
            self.value -= amount


# 40ms doubling up to 40.96s; most requests time out after 30s.
OPERATION_DURATION_SECONDS = Histogram(
    f"{NAMESPACE}_operation_duration_seconds",
    "Time in seconds for operation to complete",
    exponential_buckets(0.04, 2, 11),
    ("operation", "result"),
)

SENDBATCH_SPLIT_COUNT = Histogram(
    f"{NAMESPACE}_sendbatch_split_count",
    "Count of Region Servers hit per SendBatch",
    exponential_buckets(1, 2, 10),
)

CACHED_REGION_TOTAL = Gauge(
    f"{NAMESPACE}_cache_regions_total",
    "Total number of regions in the cache",
)