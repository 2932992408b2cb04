"""Shared CLI utilities and constants."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console

from featurescope.core.exceptions import AssetSpecError
from featurescope.core.logging import configure_logging
from featurescope.core.models.base import TableRef
from featurescope.extraction.costs import MaxCost, QueryCost
from featurescope.extraction.models import (
    Asset,
    ColumnAsset,
    QueryAsset,
    QueryDefinition,
    SegmentAsset,
    TableAsset,
    VisualizationSettings,
)

# Load .env file from current directory
load_dotenv()

# Shared console instance
console = Console()

DatabaseArg = Annotated[
    Path,
    typer.Argument(
        help="DuckDB database file",
        exists=True,
        dir_okay=False,
        file_okay=True,
        resolve_path=True,
    ),
]

AssetArg = Annotated[
    str,
    typer.Argument(
        help="Asset, e.g. table:orders, column:orders.amount or query:<sql>",
    ),
]

SampleFlag = Annotated[
    bool,
    typer.Option(
        "--sample",
        help="Only read a capped sample of rows",
    ),
]

JsonFlag = Annotated[
    bool,
    typer.Option(
        "--json",
        help="Output as JSON for scripting",
    ),
]

MetricOption = Annotated[
    str | None,
    typer.Option(
        "--metric",
        help="Metric column of query assets",
    ),
]

DimensionOption = Annotated[
    str | None,
    typer.Option(
        "--dimension",
        help="Dimension column of query assets",
    ),
]

VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-v=INFO, -vv=DEBUG)",
    ),
]


def setup_logging(verbosity: int = 0, log_format: str = "console") -> None:
    """Configure structured logging based on verbosity level.

    Args:
        verbosity: 0=WARNING, 1=INFO, 2+=DEBUG
        log_format: "console" for development, "json" for production
    """
    if verbosity >= 2:
        level = "DEBUG"
    elif verbosity >= 1:
        level = "INFO"
    else:
        level = "WARNING"

    configure_logging(
        log_level=level,
        log_format=log_format,
        show_timestamps=verbosity >= 1,
        color=log_format == "console",
    )


def _table_ref(name: str) -> TableRef:
    schema, _, table = name.rpartition(".")
    return TableRef(table_name=table, schema_name=schema or None)


def parse_asset(
    spec: str,
    *,
    metric: str | None = None,
    dimension: str | None = None,
) -> Asset:
    """Parse an asset specification.

    Accepted forms:
        table:<table>
        column:<table>.<column>
        segment:<table>:<predicate>
        query:<sql>

    Raises:
        AssetSpecError: If the specification is malformed
    """
    kind, sep, rest = spec.partition(":")
    if not sep or not rest:
        raise AssetSpecError(spec, "expected <kind>:<reference>")

    if kind == "table":
        return TableAsset(table=_table_ref(rest))
    if kind == "column":
        table, _, column = rest.rpartition(".")
        if not table:
            raise AssetSpecError(spec, "expected column:<table>.<column>")
        return ColumnAsset(table=_table_ref(table), name=column)
    if kind == "segment":
        table, sep, predicate = rest.partition(":")
        if not sep or not predicate:
            raise AssetSpecError(spec, "expected segment:<table>:<predicate>")
        return SegmentAsset(name=predicate, table=_table_ref(table), filter=predicate)
    if kind == "query":
        hints = None
        if metric or dimension:
            hints = VisualizationSettings(
                graph_metrics=(metric,) if metric else (),
                graph_dimensions=(dimension,) if dimension else (),
            )
        return QueryAsset(
            name=rest,
            definition=QueryDefinition(sql=rest),
            visualization_settings=hints,
        )
    raise AssetSpecError(spec, f"unknown asset kind {kind!r}")


def max_cost_for(sample: bool) -> MaxCost | None:
    return MaxCost(query=QueryCost.SAMPLE) if sample else None
