"""Extraction Models.

Data structures flowing through feature extraction:
- Assets: the four kinds of analysed entities (column, table, query, segment)
- ColumnDescriptor / Dataset: what dataset access hands back
- ExtractionOptions: cost limits and the query handed to relation extractors
- ExtractionResult: the uniform envelope returned for every asset kind
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from featurescope.core.models.base import ColumnRole, DataType, TableRef
from featurescope.extraction.costs import MaxCost

# A feature set maps feature names to whatever the extractor computed
FeatureSet = dict[str, Any]


class AssetKind(str, Enum):
    """Kinds of assets features can be extracted from."""

    COLUMN = "column"
    TABLE = "table"
    QUERY = "query"
    SEGMENT = "segment"


# === Assets ===


class ColumnAsset(BaseModel):
    """A single column of a table."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[AssetKind.COLUMN] = AssetKind.COLUMN
    table: TableRef
    name: str


class TableAsset(BaseModel):
    """A whole table."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[AssetKind.TABLE] = AssetKind.TABLE
    table: TableRef


class SegmentAsset(BaseModel):
    """A table filtered by a stored predicate."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[AssetKind.SEGMENT] = AssetKind.SEGMENT
    name: str
    table: TableRef
    filter: str  # SQL boolean expression over the table's columns


class QueryDefinition(BaseModel):
    """Definition of a query whose result is analysed."""

    model_config = ConfigDict(frozen=True)

    sql: str


class VisualizationSettings(BaseModel):
    """Visualization hints declared on a saved query.

    Only the first metric and the first dimension are used to tag columns.
    """

    model_config = ConfigDict(frozen=True)

    graph_metrics: tuple[str, ...] = ()
    graph_dimensions: tuple[str, ...] = ()


class QueryAsset(BaseModel):
    """A saved or ad hoc query."""

    model_config = ConfigDict(frozen=True)

    kind: Literal[AssetKind.QUERY] = AssetKind.QUERY
    name: str
    definition: QueryDefinition
    table: TableRef | None = None  # Table the query is built on, if any
    visualization_settings: VisualizationSettings | None = None


Asset = Annotated[
    ColumnAsset | TableAsset | QueryAsset | SegmentAsset,
    Field(discriminator="kind"),
]


# === Datasets ===


class ColumnDescriptor(BaseModel):
    """Metadata for one column of a dataset.

    Frozen so descriptors compare and hash by value; alignment relies on that.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    role: ColumnRole = ColumnRole.NONE
    remapped: bool = False
    is_primary_key: bool = False
    base_type: DataType | None = None

    @property
    def excluded(self) -> bool:
        """Whether this column is left out of per-column aggregation."""
        return self.remapped or self.is_primary_key


@dataclass
class Dataset:
    """Columns plus rows aligned positionally with them.

    Every row is expected to have exactly len(cols) cells; dataset access
    guarantees this and nothing downstream checks it.
    """

    cols: list[ColumnDescriptor]
    rows: Sequence[Sequence[Any]]

    @property
    def row_count(self) -> int:
        return len(self.rows)


# === Options and results ===


class ExtractionOptions(BaseModel):
    """Options passed to extraction and on to every feature extractor.

    `query` is only set for the relation-level extractor of a query asset.
    """

    model_config = ConfigDict(frozen=True)

    max_cost: MaxCost | None = None
    query: QueryDefinition | None = None


@dataclass
class ExtractionResult:
    """Uniform result envelope for every asset kind.

    `constituents` is None only for column assets. After an x-ray of a
    comparison it may hold a sequence of ExtractionResult instead of a
    column-name mapping. `dataset` is only set for query assets.
    """

    features: FeatureSet
    sample: bool
    constituents: Mapping[str, FeatureSet] | Sequence[ExtractionResult] | None = None
    dataset: Dataset | None = None
