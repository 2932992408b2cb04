"""Tests for the extraction cost model."""

import pytest

from featurescope.extraction.costs import (
    ComputationCost,
    CostPolicy,
    MaxCost,
    QueryCost,
    allow_joins,
    cache_only,
    full_scan,
    linear_computation,
    sample_only,
    unbounded_computation,
    yolo_computation,
)

SAMPLE = MaxCost(query=QueryCost.SAMPLE)


class TestCostPredicates:
    """Tests for the max-cost predicates."""

    def test_unset_cost_is_unlimited(self):
        """No max cost means full scans, joins and unbounded computation."""
        assert full_scan(None)
        assert allow_joins(None)
        assert unbounded_computation(None)
        assert not sample_only(None)
        assert not cache_only(None)
        assert not linear_computation(None)

    @pytest.mark.parametrize(
        ("query", "sample", "scan", "joins"),
        [
            (QueryCost.CACHE, False, False, False),
            (QueryCost.SAMPLE, True, False, False),
            (QueryCost.FULL_SCAN, False, True, False),
            (QueryCost.JOINS, False, True, True),
            (None, False, True, True),
        ],
    )
    def test_query_levels(self, query, sample, scan, joins):
        """Each query level selects its predicate."""
        max_cost = MaxCost(query=query)
        assert sample_only(max_cost) is sample
        assert full_scan(max_cost) is scan
        assert allow_joins(max_cost) is joins

    def test_computation_levels(self):
        """Each computation level selects its predicate."""
        assert linear_computation(MaxCost(computation=ComputationCost.LINEAR))
        assert not unbounded_computation(MaxCost(computation=ComputationCost.LINEAR))
        assert unbounded_computation(MaxCost(computation=ComputationCost.UNBOUNDED))
        assert unbounded_computation(MaxCost(computation=ComputationCost.YOLO))
        assert yolo_computation(MaxCost(computation=ComputationCost.YOLO))
        assert not yolo_computation(MaxCost(computation=ComputationCost.UNBOUNDED))

    def test_levels_parse_from_strings(self):
        """Levels can be given by name."""
        max_cost = MaxCost.model_validate({"computation": "linear", "query": "full-scan"})
        assert max_cost.computation == ComputationCost.LINEAR
        assert max_cost.query == QueryCost.FULL_SCAN


class TestCostPolicy:
    """Tests for CostPolicy."""

    def test_default_cap_from_settings(self):
        """The cap defaults to the configured sample size."""
        assert CostPolicy().sample_cap == 10_000

    def test_query_options_when_sampling(self):
        """Sampling adds a row limit."""
        policy = CostPolicy(sample_cap=500)
        assert policy.should_sample(SAMPLE)
        assert policy.query_options(SAMPLE) == {"limit": 500}

    def test_query_options_without_sampling(self):
        """No limit without sampling."""
        policy = CostPolicy(sample_cap=500)
        assert policy.query_options(None) == {}
        assert policy.query_options(MaxCost(query=QueryCost.FULL_SCAN)) == {}

    def test_sampled_requires_exact_cap(self):
        """Only a dataset of exactly cap rows under sampling counts as a sample."""
        policy = CostPolicy(sample_cap=10_000)
        assert policy.sampled(SAMPLE, 10_000)
        assert not policy.sampled(SAMPLE, 9_999)
        assert not policy.sampled(SAMPLE, 0)

    def test_not_sampled_without_sampling_policy(self):
        """Full reads are never samples."""
        policy = CostPolicy(sample_cap=10_000)
        assert not policy.sampled(None, 10_000)
        assert not policy.sampled(MaxCost(query=QueryCost.FULL_SCAN), 10_000)
