"""Tests for comparing two assets."""

import pytest

from featurescope.comparison.contributors import Contributor
from featurescope.comparison.distance import DistanceResult
from featurescope.comparison.engine import compare_features
from featurescope.core.exceptions import IncompatibleAssetsError
from featurescope.core.models.base import DataType, TableRef
from featurescope.extraction.costs import CostPolicy, MaxCost, QueryCost
from featurescope.extraction.dispatcher import FeatureExtractor
from featurescope.extraction.models import (
    ColumnAsset,
    ColumnDescriptor,
    Dataset,
    ExtractionOptions,
    SegmentAsset,
    TableAsset,
)
from featurescope.extraction.sources import DuckDBDatasetSource, DuckDBQueryExecutor

ORDERS = TableRef(table_name="orders")
ARCHIVE = TableRef(table_name="orders_archive")


def table_dataset(amounts, regions) -> Dataset:
    return Dataset(
        cols=[
            ColumnDescriptor(name="region", base_type=DataType.VARCHAR),
            ColumnDescriptor(name="amount", base_type=DataType.DOUBLE),
        ],
        rows=list(zip(regions, amounts, strict=True)),
    )


class FixedDistance:
    """Distance function returning canned results in call order."""

    def __init__(self, *results: DistanceResult) -> None:
        self.results = list(results)
        self.calls: list[tuple[dict, dict]] = []

    def __call__(self, a, b) -> DistanceResult:
        self.calls.append((a, b))
        return self.results[len(self.calls) - 1]


@pytest.fixture
def two_tables(make_source, make_executor):
    source = make_source(
        {
            TableAsset(table=ORDERS): table_dataset([1.0, 2.0, 3.0], ["EU", "US", "US"]),
            TableAsset(table=ARCHIVE): table_dataset([1.0, 2.0, 300.0], ["EU", "EU", "EU"]),
            ColumnAsset(table=ORDERS, name="amount"): Dataset(
                cols=[ColumnDescriptor(name="amount", base_type=DataType.DOUBLE)],
                rows=[(1.0,), (2.0,), (3.0,)],
            ),
            ColumnAsset(table=ARCHIVE, name="amount"): Dataset(
                cols=[ColumnDescriptor(name="amount", base_type=DataType.DOUBLE)],
                rows=[(1.0,), (2.0,), (3.0,)],
            ),
        }
    )
    return FeatureExtractor(source, make_executor({}), cost_policy=CostPolicy(sample_cap=3))


class TestPerFieldComparison:
    """Comparisons of assets with per-column features."""

    def test_pairs_constituents_by_name(self, two_tables):
        """Columns are compared with their namesakes."""
        distance = FixedDistance(DistanceResult(distance=0.1), DistanceResult(distance=0.2))
        result = compare_features(
            two_tables,
            ExtractionOptions(),
            TableAsset(table=ORDERS),
            TableAsset(table=ARCHIVE),
            distance=distance,
        )
        assert list(result.comparison) == ["region", "amount"]
        left, right = result.constituents
        assert distance.calls[0] == (left.constituents["region"], right.constituents["region"])

    def test_significant_if_any_field_is(self, two_tables):
        """One significant column makes the comparison significant."""
        distance = FixedDistance(
            DistanceResult(distance=0.1), DistanceResult(distance=0.9, significant=True)
        )
        result = compare_features(
            two_tables,
            ExtractionOptions(),
            TableAsset(table=ORDERS),
            TableAsset(table=ARCHIVE),
            distance=distance,
        )
        assert result.significant is True

    def test_not_significant_if_no_field_is(self, two_tables):
        """No significant column, no significant comparison."""
        distance = FixedDistance(DistanceResult(distance=0.1), DistanceResult(distance=0.1))
        result = compare_features(
            two_tables,
            ExtractionOptions(),
            TableAsset(table=ORDERS),
            TableAsset(table=ARCHIVE),
            distance=distance,
        )
        assert result.significant is False

    def test_default_distance_finds_differences(self, two_tables):
        """Differing tables yield per-column contributors."""
        result = compare_features(
            two_tables, ExtractionOptions(), TableAsset(table=ORDERS), TableAsset(table=ARCHIVE)
        )
        assert result.significant is True
        assert result.top_contributors
        assert all(c.field in {"region", "amount"} for c in result.top_contributors)
        assert all(c.contribution is not None for c in result.top_contributors)

    def test_field_missing_on_second_side_is_skipped(self, make_source, make_executor):
        """Columns only on the first side are left out."""
        wide = Dataset(
            cols=[ColumnDescriptor(name="a"), ColumnDescriptor(name="b")],
            rows=[("x", "y")],
        )
        narrow = Dataset(cols=[ColumnDescriptor(name="a")], rows=[("x",)])
        source = make_source({TableAsset(table=ORDERS): wide, TableAsset(table=ARCHIVE): narrow})
        extractor = FeatureExtractor(source, make_executor({}))
        result = compare_features(
            extractor, ExtractionOptions(), TableAsset(table=ORDERS), TableAsset(table=ARCHIVE)
        )
        assert list(result.comparison) == ["a"]


class TestSingleComparison:
    """Comparisons of column assets."""

    def test_identical_columns(self, two_tables):
        """Identical columns are at distance zero."""
        result = compare_features(
            two_tables,
            ExtractionOptions(),
            ColumnAsset(table=ORDERS, name="amount"),
            ColumnAsset(table=ARCHIVE, name="amount"),
        )
        assert isinstance(result.comparison, DistanceResult)
        assert result.comparison.distance == 0.0
        assert result.significant is False
        assert result.top_contributors == []

    def test_significance_passed_through(self, two_tables):
        """A column comparison keeps the distance's verdict."""
        distance = FixedDistance(
            DistanceResult(distance=0.3, significant=True, top_contributors={"mean": 0.3})
        )
        result = compare_features(
            two_tables,
            ExtractionOptions(),
            ColumnAsset(table=ORDERS, name="amount"),
            ColumnAsset(table=ARCHIVE, name="amount"),
            distance=distance,
        )
        assert result.significant is True
        assert result.top_contributors == [Contributor(feature="mean", difference=0.3)]
        left, right = distance.calls[0]
        assert left["table"] == ORDERS
        assert right["table"] == ARCHIVE


class TestSampleFlag:
    """Comparison sample flag."""

    def test_sample_if_either_side_sampled(self, two_tables):
        """A sample on either side marks the comparison."""
        # Cap is 3: both tables have exactly 3 rows
        result = compare_features(
            two_tables,
            ExtractionOptions(max_cost=MaxCost(query=QueryCost.SAMPLE)),
            TableAsset(table=ORDERS),
            TableAsset(table=ARCHIVE),
        )
        assert result.sample is True

    def test_not_sampled_without_sampling(self, two_tables):
        """Full reads are not samples."""
        result = compare_features(
            two_tables, ExtractionOptions(), TableAsset(table=ORDERS), TableAsset(table=ARCHIVE)
        )
        assert result.sample is False


class TestIncompatibleAssets:
    """Composite and leaf assets cannot be compared."""

    def test_table_against_column(self, two_tables):
        """A table cannot be compared with a column."""
        with pytest.raises(IncompatibleAssetsError):
            compare_features(
                two_tables,
                ExtractionOptions(),
                TableAsset(table=ORDERS),
                ColumnAsset(table=ORDERS, name="amount"),
            )


class TestDuckDBComparison:
    """End-to-end comparison of two segments."""

    def test_segments(self, duckdb_conn):
        """Two segments of one table differ in their region."""
        extractor = FeatureExtractor(
            DuckDBDatasetSource(duckdb_conn), DuckDBQueryExecutor(duckdb_conn)
        )
        result = compare_features(
            extractor,
            ExtractionOptions(),
            SegmentAsset(name="eu", table=ORDERS, filter="region = 'EU'"),
            SegmentAsset(name="us", table=ORDERS, filter="region = 'US'"),
        )
        assert set(result.comparison) == {"region", "amount", "ordered_on"}
        assert result.comparison["region"].significant is True
        assert result.significant is True
        assert any(c.field == "region" for c in result.top_contributors)
