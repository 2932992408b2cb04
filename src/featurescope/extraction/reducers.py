"""Default feature extractors.

Streaming reducers computing per-column statistics:
- NumericReducer: count, nulls, min/max, mean, standard deviation and,
  when computation is unbounded, median, skewness, kurtosis and a histogram
- TemporalReducer: earliest/latest timestamps and the span between them
- CategoricalReducer: distinct counts, entropy and the value distribution
- PairReducer: relation between a query's dimension and its metric

Mean and variance use Welford's online update so linear-cost extraction never
holds on to the column's values. NaN and infinite numbers count as missing.
"""

from __future__ import annotations

import math
from collections import Counter, defaultdict
from datetime import date
from decimal import Decimal
from typing import Any

import numpy as np
from scipy import stats

from featurescope.core.config import get_settings
from featurescope.extraction.costs import unbounded_computation
from featurescope.extraction.models import ColumnDescriptor, ExtractionOptions, FeatureSet


def _as_number(cell: Any) -> float | None:
    if cell is None or isinstance(cell, bool):
        return None
    if isinstance(cell, int | float | Decimal):
        value = float(cell)
        return value if math.isfinite(value) else None
    return None


class NumericReducer:
    """Statistics for numeric columns."""

    def __init__(self, opts: ExtractionOptions) -> None:
        self._keep_values = unbounded_computation(opts.max_cost)
        self._bins = get_settings().histogram_bins
        self._count = 0
        self._nulls = 0
        self._n = 0
        self._mean = 0.0
        self._m2 = 0.0
        self._min = math.inf
        self._max = -math.inf
        self._values: list[float] = []

    def step(self, cell: Any) -> None:
        self._count += 1
        value = _as_number(cell)
        if value is None:
            self._nulls += 1
            return

        self._n += 1
        delta = value - self._mean
        self._mean += delta / self._n
        self._m2 += delta * (value - self._mean)
        self._min = min(self._min, value)
        self._max = max(self._max, value)
        if self._keep_values:
            self._values.append(value)

    def complete(self) -> FeatureSet:
        features: FeatureSet = {
            "count": self._count,
            "nil%": self._nulls / self._count if self._count else 0.0,
        }
        if self._n == 0:
            return features

        features.update(
            {
                "min": self._min,
                "max": self._max,
                "range": self._max - self._min,
                "mean": self._mean,
                "sd": math.sqrt(self._m2 / (self._n - 1)) if self._n > 1 else 0.0,
            }
        )

        if self._keep_values:
            values = np.asarray(self._values, dtype=float)
            features["median"] = float(np.median(values))
            # Higher moments are undefined for constant or tiny samples
            if self._n > 2 and self._max > self._min:
                features["skewness"] = float(stats.skew(values))
                features["kurtosis"] = float(stats.kurtosis(values))
            counts, _ = np.histogram(values, bins=self._bins)
            features["histogram"] = [int(c) for c in counts]

        return features


class TemporalReducer:
    """Earliest, latest and span of date/timestamp columns."""

    def __init__(self, opts: ExtractionOptions) -> None:
        self._count = 0
        self._nulls = 0
        self._earliest: date | None = None
        self._latest: date | None = None

    def step(self, cell: Any) -> None:
        self._count += 1
        if not isinstance(cell, date):
            self._nulls += 1
            return
        if self._earliest is None or cell < self._earliest:
            self._earliest = cell
        if self._latest is None or cell > self._latest:
            self._latest = cell

    def complete(self) -> FeatureSet:
        features: FeatureSet = {
            "count": self._count,
            "nil%": self._nulls / self._count if self._count else 0.0,
        }
        if self._earliest is None or self._latest is None:
            return features

        span = self._latest - self._earliest
        features.update(
            {
                "earliest": self._earliest.isoformat(),
                "latest": self._latest.isoformat(),
                "span-days": span.total_seconds() / 86400,
            }
        )
        return features


class CategoricalReducer:
    """Frequency based statistics for everything that is not numeric or temporal."""

    def __init__(self, opts: ExtractionOptions) -> None:
        self._top_k = get_settings().top_values_limit
        self._count = 0
        self._nulls = 0
        self._counter: Counter[str] = Counter()

    def step(self, cell: Any) -> None:
        self._count += 1
        if cell is None:
            self._nulls += 1
            return
        self._counter[str(cell)] += 1

    def complete(self) -> FeatureSet:
        non_null = self._count - self._nulls
        features: FeatureSet = {
            "count": self._count,
            "nil%": self._nulls / self._count if self._count else 0.0,
            "distinct-count": len(self._counter),
        }
        if non_null == 0:
            return features

        shares = {value: n / non_null for value, n in self._counter.items()}
        features.update(
            {
                "cardinality": len(self._counter) / non_null,
                "entropy": float(stats.entropy(list(shares.values()), base=2)),
                "distribution": shares,
                "top-values": [[value, n] for value, n in self._counter.most_common(self._top_k)],
            }
        )
        return features


class PairReducer:
    """Relation between a dimension (breakout) and a metric (aggregation).

    Cells are rows as produced by alignment: dimension first, metric second.
    Rows that already had the pair in front keep any further columns.
    """

    def __init__(
        self,
        opts: ExtractionOptions,
        dimension: ColumnDescriptor,
        metric: ColumnDescriptor,
    ) -> None:
        self._query = opts.query
        self._metric_numeric = metric.base_type is not None and metric.base_type.is_numeric
        self._correlate = (
            self._metric_numeric
            and dimension.base_type is not None
            and dimension.base_type.is_numeric
            and unbounded_computation(opts.max_cost)
        )
        self._count = 0
        self._nulls = 0
        self._totals: defaultdict[str, float] = defaultdict(float)
        self._xs: list[float] = []
        self._ys: list[float] = []

    def step(self, cell: Any) -> None:
        dimension, metric = cell[0], cell[1]
        self._count += 1
        if dimension is None or metric is None:
            self._nulls += 1
            return
        if not self._metric_numeric:
            return

        y = _as_number(metric)
        if y is None:
            return
        self._totals[str(dimension)] += y
        if self._correlate:
            x = _as_number(dimension)
            if x is not None:
                self._xs.append(x)
                self._ys.append(y)

    def complete(self) -> FeatureSet:
        features: FeatureSet = {
            "count": self._count,
            "nil%": self._nulls / self._count if self._count else 0.0,
        }
        if self._query is not None:
            features["query"] = self._query.sql

        if self._totals:
            total = sum(self._totals.values())
            features["metric-total"] = total
            if total:
                features["share"] = {key: value / total for key, value in self._totals.items()}

        if len(self._xs) >= 3 and len(set(self._xs)) > 1 and len(set(self._ys)) > 1:
            rho, _ = stats.spearmanr(self._xs, self._ys)
            features["correlation"] = float(np.asarray(rho).item())

        return features


def build_feature_extractor(
    opts: ExtractionOptions,
    field: ColumnDescriptor | tuple[ColumnDescriptor, ColumnDescriptor],
) -> NumericReducer | TemporalReducer | CategoricalReducer | PairReducer:
    """Build the default extractor for a column, or for a (dimension, metric) pair."""
    if isinstance(field, tuple):
        dimension, metric = field
        return PairReducer(opts, dimension, metric)

    base_type = field.base_type
    if base_type is not None and base_type.is_numeric:
        return NumericReducer(opts)
    if base_type is not None and base_type.is_temporal:
        return TemporalReducer(opts)
    return CategoricalReducer(opts)

