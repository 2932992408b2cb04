"""Extract command - compute the features of one asset."""

from __future__ import annotations

import json
from typing import Any

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
from featurescope.core.exceptions import AssetSpecError
from featurescope.extraction import (
    DuckDBDatasetSource,
    DuckDBQueryExecutor,
    ExtractionOptions,
    FeatureExtractor,
    FeatureSet,
)
from featurescope.xray import x_ray


def extract(
    database: DatabaseArg,
    asset: AssetArg,
    sample: SampleFlag = False,
    metric: MetricOption = None,
    dimension: DimensionOption = None,
    json_output: JsonFlag = False,
    verbose: VerboseOption = 0,
) -> None:
    """Compute the feature set of an asset.

    Examples:

        featurescope extract warehouse.duckdb table:orders

        featurescope extract warehouse.duckdb column:orders.amount --sample

        featurescope extract warehouse.duckdb "query:SELECT region, SUM(amount) AS total
        FROM orders GROUP BY region" --metric total --dimension region --json
    """
    setup_logging(verbose)

    try:
        parsed = parse_asset(asset, metric=metric, dimension=dimension)
    except AssetSpecError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1) from e

    conn = duckdb.connect(str(database), read_only=True)
    try:
        extractor = FeatureExtractor(DuckDBDatasetSource(conn), DuckDBQueryExecutor(conn))
        result = x_ray(extractor.extract(ExtractionOptions(max_cost=max_cost_for(sample)), parsed))
    finally:
        conn.close()

    if json_output:
        payload = {
            "features": result.features,
            "constituents": result.constituents,
            "sample": result.sample,
        }
        console.print_json(json.dumps(to_jsonable_python(payload)))
        return

    _print_features(asset, result.features)
    if result.constituents:
        for name, features in result.constituents.items():
            _print_features(name, features)
    if result.sample:
        console.print("[yellow]Features were computed on a sample.[/yellow]")


def _format(value: Any) -> str:
    if isinstance(value, dict):
        return f"{len(value)} entries"
    return str(value)


def _print_features(title: str, features: FeatureSet) -> None:
    table = RichTable(title=title, show_header=True, header_style="bold")
    table.add_column("Feature")
    table.add_column("Value")
    for name, value in features.items():
        table.add_row(name, _format(value))
    console.print(table)
