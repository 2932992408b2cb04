"""featurescope - feature extraction and comparison for analytical assets.

Computes statistical feature sets for columns, tables, queries and segments
and explains the differences between two of them.

Example:
    import duckdb
    from featurescope import FeatureExtractor, ExtractionOptions, compare_features
    from featurescope.extraction import DuckDBDatasetSource, DuckDBQueryExecutor

    conn = duckdb.connect("warehouse.duckdb")
    extractor = FeatureExtractor(DuckDBDatasetSource(conn), DuckDBQueryExecutor(conn))
    result = compare_features(extractor, ExtractionOptions(), table_2023, table_2024)
    result.top_contributors
"""

__version__ = "0.1.0"

from featurescope.comparison import ComparisonResult, Contributor, compare_features
from featurescope.extraction import ExtractionOptions, ExtractionResult, FeatureExtractor

__all__ = [
    "ComparisonResult",
    "Contributor",
    "ExtractionOptions",
    "ExtractionResult",
    "FeatureExtractor",
    "compare_features",
    "__version__",
]
