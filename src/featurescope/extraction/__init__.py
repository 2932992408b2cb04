"""Feature extraction module.

Computes feature sets for analytical assets:
- Column: features of a single column
- Table / Segment: per-column features of a (filtered) table
- Query: per-column features plus features of the dimension/metric relation

Datasets are read once; all columns are reduced in the same pass.
"""

from featurescope.extraction.aggregator import (
    FusedReducer,
    Reducer,
    ReducerFactory,
    dataset_to_features,
    field_to_features,
)
from featurescope.extraction.alignment import ensure_alignment, index_of
from featurescope.extraction.costs import ComputationCost, CostPolicy, MaxCost, QueryCost
from featurescope.extraction.dispatcher import FeatureExtractor
from featurescope.extraction.models import (
    Asset,
    AssetKind,
    ColumnAsset,
    ColumnDescriptor,
    Dataset,
    ExtractionOptions,
    ExtractionResult,
    FeatureSet,
    QueryAsset,
    QueryDefinition,
    SegmentAsset,
    TableAsset,
    VisualizationSettings,
)
from featurescope.extraction.reducers import build_feature_extractor
from featurescope.extraction.sources import (
    DatasetSource,
    DuckDBDatasetSource,
    DuckDBQueryExecutor,
    QueryExecutor,
)

__all__ = [
    # Main entry point
    "FeatureExtractor",
    # Aggregation
    "FusedReducer",
    "Reducer",
    "ReducerFactory",
    "build_feature_extractor",
    "dataset_to_features",
    "ensure_alignment",
    "field_to_features",
    "index_of",
    # Costs
    "ComputationCost",
    "CostPolicy",
    "MaxCost",
    "QueryCost",
    # Sources
    "DatasetSource",
    "DuckDBDatasetSource",
    "DuckDBQueryExecutor",
    "QueryExecutor",
    # Models
    "Asset",
    "AssetKind",
    "ColumnAsset",
    "ColumnDescriptor",
    "Dataset",
    "ExtractionOptions",
    "ExtractionResult",
    "FeatureSet",
    "QueryAsset",
    "QueryDefinition",
    "SegmentAsset",
    "TableAsset",
    "VisualizationSettings",
]
