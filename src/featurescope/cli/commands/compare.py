"""Compare command - explain the differences between two assets."""

from __future__ import annotations

import json

import duckdb
import typer
from pydantic_core import to_jsonable_python
from rich.table import Table as RichTable

from featurescope.cli.common import (
    AssetArg,
    DatabaseArg,
    DimensionOption,
    JsonFlag,
    MetricOption,
    SampleFlag,
    VerboseOption,
    console,
    max_cost_for,
    parse_asset,
    setup_logging,
)
from featurescope.comparison import ComparisonResult, DistanceResult, compare_features
from featurescope.core.config import get_settings
from featurescope.core.exceptions import AssetSpecError, IncompatibleAssetsError
from featurescope.extraction import (
    DuckDBDatasetSource,
    DuckDBQueryExecutor,
    ExtractionOptions,
    FeatureExtractor,
)
from featurescope.xray import trim_decimals, x_ray


def compare(
    database: DatabaseArg,
    left: AssetArg,
    right: AssetArg,
    sample: SampleFlag = False,
    metric: MetricOption = None,
    dimension: DimensionOption = None,
    json_output: JsonFlag = False,
    verbose: VerboseOption = 0,
) -> None:
    """Compare the feature sets of two assets.

    Lists the features that contribute most to the difference.

    Examples:

        featurescope compare warehouse.duckdb table:orders_2023 table:orders_2024

        featurescope compare warehouse.duckdb "segment:orders:region = 'EU'"
        "segment:orders:region = 'US'" --json
    """
    setup_logging(verbose)

    try:
        a = parse_asset(left, metric=metric, dimension=dimension)
        b = parse_asset(right, metric=metric, dimension=dimension)
    except AssetSpecError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e

    conn = duckdb.connect(str(database), read_only=True)
    try:
        extractor = FeatureExtractor(DuckDBDatasetSource(conn), DuckDBQueryExecutor(conn))
        opts = ExtractionOptions(max_cost=max_cost_for(sample))
        result = x_ray(compare_features(extractor, opts, a, b))
    except IncompatibleAssetsError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e
    finally:
        conn.close()

    if json_output:
        payload = {
            "constituents": [
                {"features": side.features, "constituents": side.constituents}
                for side in result.constituents
            ],
            "comparison": result.comparison,
            "top_contributors": result.top_contributors,
            "sample": result.sample,
            "significant": result.significant,
        }
        trimmed = trim_decimals(get_settings().decimal_places, to_jsonable_python(payload))
        console.print_json(json.dumps(trimmed))
        return

    _print_comparison(result)


def _print_comparison(result: ComparisonResult) -> None:
    if isinstance(result.comparison, DistanceResult):
        console.print(f"Distance: {result.comparison.distance:.3f}")
    else:
        table = RichTable(title="Per-column distance", show_header=True, header_style="bold")
        table.add_column("Column")
        table.add_column("Distance", justify="right")
        table.add_column("Significant")
        for name, distance in result.comparison.items():
            table.add_row(name, f"{distance.distance:.3f}", "yes" if distance.significant else "")
        console.print(table)

    if result.top_contributors:
        table = RichTable(title="Top contributors", show_header=True, header_style="bold")
        table.add_column("Column")
        table.add_column("Feature")
        table.add_column("Score", justify="right")
        for contributor in result.top_contributors:
            score = (
                contributor.contribution
                if contributor.contribution is not None
                else contributor.difference
            )
            table.add_row(contributor.field or "", contributor.feature, f"{score or 0.0:.3f}")
        console.print(table)

    status = "[red]significant[/red]" if result.significant else "[green]not significant[/green]"
    console.print(f"Difference is {status}.")
    if result.sample:
        console.print("[yellow]Features were computed on a sample.[/yellow]")
