"""Dataset access and query execution.

Extraction only talks to the two protocols below. The DuckDB implementations
read straight from a connection:

    conn = duckdb.connect("warehouse.duckdb")
    extractor = FeatureExtractor(DuckDBDatasetSource(conn), DuckDBQueryExecutor(conn))
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

from featurescope.core.logging import get_logger
from featurescope.core.models.base import DataType, TableRef
from featurescope.extraction.models import (
    AssetKind,
    ColumnAsset,
    ColumnDescriptor,
    Dataset,
    QueryDefinition,
    SegmentAsset,
    TableAsset,
)

if TYPE_CHECKING:
    import duckdb

logger = get_logger(__name__)


class DatasetSource(Protocol):
    """Retrieves the dataset behind a column, table or segment asset."""

    def fetch(
        self,
        asset: ColumnAsset | TableAsset | SegmentAsset,
        query_options: dict[str, Any],
    ) -> Dataset:
        """Fetch the asset's rows.

        `query_options` may carry a `limit` on the number of rows returned.
        """
        ...


class QueryExecutor(Protocol):
    """Executes query definitions."""

    def execute(self, definition: QueryDefinition) -> Dataset:
        """Run the query and return its result."""
        ...


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


def _qualified(table: TableRef) -> str:
    if table.schema_name:
        return f"{_quote(table.schema_name)}.{_quote(table.table_name)}"
    return _quote(table.table_name)


def _map_type(type_code: Any) -> DataType | None:
    """Map a DuckDB column type (e.g. 'DECIMAL(18,3)') onto DataType."""
    name = str(type_code).upper()
    base = name.split("(", 1)[0].strip()
    if base in ("TINYINT", "SMALLINT", "INTEGER", "UTINYINT", "USMALLINT", "UINTEGER"):
        return DataType.INTEGER
    if base in ("BIGINT", "HUGEINT", "UBIGINT", "UHUGEINT"):
        return DataType.BIGINT
    if base in ("FLOAT", "REAL", "DOUBLE"):
        return DataType.DOUBLE
    if base == "TIMESTAMP WITH TIME ZONE":
        return DataType.TIMESTAMPTZ
    if base.startswith("TIMESTAMP"):
        return DataType.TIMESTAMP
    try:
        return DataType(base)
    except ValueError:
        return None


def _to_dataset(
    relation: duckdb.DuckDBPyRelation,
    primary_keys: frozenset[str] = frozenset(),
) -> Dataset:
    cols = [
        ColumnDescriptor(
            name=name,
            base_type=_map_type(type_code),
            is_primary_key=name in primary_keys,
        )
        for name, type_code in zip(relation.columns, relation.types, strict=True)
    ]
    return Dataset(cols=cols, rows=relation.fetchall())


def _limit_clause(query_options: dict[str, Any]) -> str:
    limit = query_options.get("limit")
    return f" LIMIT {int(limit)}" if limit is not None else ""


class DuckDBDatasetSource:
    """Reads column, table and segment datasets from a DuckDB connection."""

    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self._conn = conn

    def primary_keys(self, table: TableRef) -> frozenset[str]:
        """Names of the table's primary key columns."""
        sql = (
            "SELECT constraint_column_names FROM duckdb_constraints() "
            "WHERE table_name = ? AND constraint_type = 'PRIMARY KEY'"
        )
        params: list[Any] = [table.table_name]
        if table.schema_name:
            sql += " AND schema_name = ?"
            params.append(table.schema_name)
        rows = self._conn.execute(sql, params).fetchall()
        return frozenset(name for (names,) in rows for name in names)

    def fetch(
        self,
        asset: ColumnAsset | TableAsset | SegmentAsset,
        query_options: dict[str, Any],
    ) -> Dataset:
        source = _qualified(asset.table)
        if asset.kind == AssetKind.COLUMN:
            sql = f"SELECT {_quote(asset.name)} FROM {source}"
        elif asset.kind == AssetKind.SEGMENT:
            sql = f"SELECT * FROM {source} WHERE {asset.filter}"
        else:
            sql = f"SELECT * FROM {source}"
        sql += _limit_clause(query_options)

        primary_keys = self.primary_keys(asset.table)
        logger.debug("dataset_fetch", kind=asset.kind.value, sql=sql)
        return _to_dataset(self._conn.sql(sql), primary_keys)


class DuckDBQueryExecutor:
    """Executes SQL query definitions on a DuckDB connection."""

    def __init__(self, conn: duckdb.DuckDBPyConnection) -> None:
        self._conn = conn

    def execute(self, definition: QueryDefinition) -> Dataset:
        logger.debug("query_execute", sql=definition.sql)
        return _to_dataset(self._conn.sql(definition.sql))
