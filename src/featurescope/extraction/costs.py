"""Cost model for feature extraction.

`max_cost` limits how much work extraction may do along two axes:

- query: how much data may be read
    cache      - only precomputed values
    sample     - read at most a fixed number of rows
    full-scan  - read everything
    joins      - read everything, following joins
- computation: how expensive the feature extractors may be
    linear     - single pass, constant memory
    unbounded  - anything that terminates
    yolo       - anything at all

An unset level means no limit on that axis.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict

from featurescope.core.config import get_settings


class QueryCost(str, Enum):
    """How much data a query may read."""

    CACHE = "cache"
    SAMPLE = "sample"
    FULL_SCAN = "full-scan"
    JOINS = "joins"


class ComputationCost(str, Enum):
    """How expensive feature computation may be."""

    LINEAR = "linear"
    UNBOUNDED = "unbounded"
    YOLO = "yolo"


class MaxCost(BaseModel):
    """Maximal resource expenditure allowed when computing features."""

    model_config = ConfigDict(frozen=True)

    computation: ComputationCost | None = None
    query: QueryCost | None = None


def linear_computation(max_cost: MaxCost | None) -> bool:
    return max_cost is not None and max_cost.computation == ComputationCost.LINEAR


def unbounded_computation(max_cost: MaxCost | None) -> bool:
    return max_cost is None or max_cost.computation in (
        ComputationCost.UNBOUNDED,
        ComputationCost.YOLO,
        None,
    )


def yolo_computation(max_cost: MaxCost | None) -> bool:
    return max_cost is not None and max_cost.computation == ComputationCost.YOLO


def cache_only(max_cost: MaxCost | None) -> bool:
    return max_cost is not None and max_cost.query == QueryCost.CACHE


def sample_only(max_cost: MaxCost | None) -> bool:
    return max_cost is not None and max_cost.query == QueryCost.SAMPLE


def full_scan(max_cost: MaxCost | None) -> bool:
    return max_cost is None or max_cost.query in (QueryCost.FULL_SCAN, QueryCost.JOINS, None)


def allow_joins(max_cost: MaxCost | None) -> bool:
    return max_cost is None or max_cost.query in (QueryCost.JOINS, None)


class CostPolicy:
    """Decides whether extraction runs against a capped sample.

    The cap is fixed per policy instance. Pass it explicitly to override the
    configured default.
    """

    def __init__(self, sample_cap: int | None = None) -> None:
        self._sample_cap = sample_cap if sample_cap is not None else get_settings().sample_cap

    @property
    def sample_cap(self) -> int:
        return self._sample_cap

    def should_sample(self, max_cost: MaxCost | None) -> bool:
        return sample_only(max_cost)

    def query_options(self, max_cost: MaxCost | None) -> dict[str, Any]:
        """Options for dataset access: a row limit when sampling, else nothing."""
        if self.should_sample(max_cost):
            return {"limit": self._sample_cap}
        return {}

    def sampled(self, max_cost: MaxCost | None, row_count: int) -> bool:
        """Whether a retrieved dataset is a sample rather than the full data.

        A dataset shorter than the cap under sampling holds every row, so only
        an exact match with the cap counts as sampled.
        """
        return self.should_sample(max_cost) and row_count == self._sample_cap
