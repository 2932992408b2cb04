"""Feature extraction for columns, tables, queries and segments.

Every asset kind fetches its dataset through the injected collaborators,
runs the fused aggregator over it and returns the same ExtractionResult
envelope.

Usage:
    extractor = FeatureExtractor(source, executor)
    result = extractor.extract(ExtractionOptions(), TableAsset(table=TableRef(table_name="orders")))
"""

from __future__ import annotations

from collections.abc import Callable

from featurescope.core.logging import get_logger, log_context
from featurescope.core.models.base import ColumnRole
from featurescope.extraction.aggregator import (
    ReducerFactory,
    dataset_to_features,
    field_to_features,
)
from featurescope.extraction.alignment import ensure_alignment
from featurescope.extraction.costs import CostPolicy
from featurescope.extraction.models import (
    Asset,
    AssetKind,
    ColumnAsset,
    ColumnDescriptor,
    Dataset,
    ExtractionOptions,
    ExtractionResult,
    QueryAsset,
    SegmentAsset,
    TableAsset,
)
from featurescope.extraction.reducers import build_feature_extractor
from featurescope.extraction.sources import DatasetSource, QueryExecutor

logger = get_logger(__name__)

Extracted = tuple[ExtractionResult, Dataset]


def tag_query_columns(asset: QueryAsset, dataset: Dataset) -> Dataset:
    """Tag the query's declared metric and dimension columns with their roles.

    Only applies when the query carries visualization settings and at least
    one column has no role yet. The first declared metric and dimension are
    matched by column name.
    """
    settings = asset.visualization_settings
    if settings is None or all(col.role != ColumnRole.NONE for col in dataset.cols):
        return dataset

    aggregation = settings.graph_metrics[0] if settings.graph_metrics else None
    breakout = settings.graph_dimensions[0] if settings.graph_dimensions else None

    cols = []
    for col in dataset.cols:
        if col.name == aggregation:
            col = col.model_copy(update={"role": ColumnRole.AGGREGATION})
        elif col.name == breakout:
            col = col.model_copy(update={"role": ColumnRole.BREAKOUT})
        cols.append(col)
    return Dataset(cols=cols, rows=dataset.rows)


def relation_fields(
    cols: list[ColumnDescriptor],
) -> tuple[ColumnDescriptor, ColumnDescriptor] | None:
    """Pick the (dimension, metric) pair relation features are computed on.

    The dimension is the first breakout; the metric the first aggregation,
    falling back to the second breakout. Returns None when either is missing.
    """
    breakouts = [col for col in cols if col.role == ColumnRole.BREAKOUT]
    aggregations = [col for col in cols if col.role == ColumnRole.AGGREGATION]

    if not breakouts:
        return None
    if aggregations:
        return breakouts[0], aggregations[0]
    if len(breakouts) > 1:
        return breakouts[0], breakouts[1]
    return None


class FeatureExtractor:
    """Computes feature sets for any asset kind.

    Args:
        source: Dataset access for column, table and segment assets
        executor: Query execution for query assets
        build_reducer: Factory for per-column (and per-pair) extractors
        cost_policy: Decides on sampling; defaults to the configured cap
    """

    def __init__(
        self,
        source: DatasetSource,
        executor: QueryExecutor,
        *,
        build_reducer: ReducerFactory = build_feature_extractor,
        cost_policy: CostPolicy | None = None,
    ) -> None:
        self._source = source
        self._executor = executor
        self._build_reducer = build_reducer
        self._cost_policy = cost_policy or CostPolicy()
        self._dispatch: dict[AssetKind, Callable[[ExtractionOptions, Asset], Extracted]] = {
            AssetKind.COLUMN: self._extract_column,
            AssetKind.TABLE: self._extract_table,
            AssetKind.QUERY: self._extract_query,
            AssetKind.SEGMENT: self._extract_segment,
        }

    @property
    def cost_policy(self) -> CostPolicy:
        return self._cost_policy

    def extract(self, opts: ExtractionOptions, asset: Asset) -> ExtractionResult:
        """Fetch the asset's dataset and compute its features.

        Args:
            opts: Extraction options; `max_cost` governs sampling
            asset: Column, table, query or segment

        Returns:
            ExtractionResult for the asset
        """
        with log_context(asset_kind=asset.kind.value):
            logger.debug("extraction_started")
            result, dataset = self._dispatch[asset.kind](opts, asset)
            logger.info("extraction_completed", rows=dataset.row_count, sample=result.sample)
        return result

    def _sampled(self, opts: ExtractionOptions, dataset: Dataset) -> bool:
        return self._cost_policy.sampled(opts.max_cost, dataset.row_count)

    def _extract_column(self, opts: ExtractionOptions, asset: ColumnAsset) -> Extracted:
        dataset = self._source.fetch(asset, self._cost_policy.query_options(opts.max_cost))
        field = next(
            (col for col in dataset.cols if col.name == asset.name),
            ColumnDescriptor(name=asset.name),
        )
        features = field_to_features(
            opts, field, (row[0] for row in dataset.rows), self._build_reducer
        )
        result = ExtractionResult(
            features={"table": asset.table, **features},
            sample=self._sampled(opts, dataset),
        )
        return result, dataset

    def _extract_table(self, opts: ExtractionOptions, asset: TableAsset) -> Extracted:
        dataset = self._source.fetch(asset, self._cost_policy.query_options(opts.max_cost))
        result = ExtractionResult(
            constituents=dataset_to_features(opts, dataset, self._build_reducer),
            features={"table": asset.table},
            sample=self._sampled(opts, dataset),
        )
        return result, dataset

    def _extract_segment(self, opts: ExtractionOptions, asset: SegmentAsset) -> Extracted:
        dataset = self._source.fetch(asset, self._cost_policy.query_options(opts.max_cost))
        result = ExtractionResult(
            constituents=dataset_to_features(opts, dataset, self._build_reducer),
            features={"table": asset.table, "segment": asset},
            sample=self._sampled(opts, dataset),
        )
        return result, dataset

    def _extract_query(self, opts: ExtractionOptions, asset: QueryAsset) -> Extracted:
        dataset = tag_query_columns(asset, self._executor.execute(asset.definition))

        fields = relation_fields(dataset.cols)
        if fields is None:
            logger.warning(
                "query_field_pair_incomplete",
                query=asset.name,
                columns=[col.name for col in dataset.cols],
            )
            relation_features = {}
        else:
            relation_features = field_to_features(
                opts.model_copy(update={"query": asset.definition}),
                fields,
                ensure_alignment(fields, dataset.cols, dataset.rows),
                self._build_reducer,
            )

        result = ExtractionResult(
            constituents=dataset_to_features(opts, dataset, self._build_reducer),
            features={**relation_features, "card": asset, "table": asset.table},
            dataset=dataset,
            sample=self._sampled(opts, dataset),
        )
        return result, dataset
