"""Base models and types used across all modules.

This module contains the fundamental types that don't belong to any specific
domain module (extraction, comparison).
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

# === Enums ===


class DataType(str, Enum):
    """Supported data types."""

    VARCHAR = "VARCHAR"
    INTEGER = "INTEGER"
    BIGINT = "BIGINT"
    DOUBLE = "DOUBLE"
    DECIMAL = "DECIMAL"
    BOOLEAN = "BOOLEAN"
    DATE = "DATE"
    TIMESTAMP = "TIMESTAMP"
    TIMESTAMPTZ = "TIMESTAMPTZ"
    TIME = "TIME"
    INTERVAL = "INTERVAL"
    JSON = "JSON"
    BLOB = "BLOB"

    @property
    def is_numeric(self) -> bool:
        return self in _NUMERIC_TYPES

    @property
    def is_temporal(self) -> bool:
        return self in _TEMPORAL_TYPES


_NUMERIC_TYPES = frozenset({DataType.INTEGER, DataType.BIGINT, DataType.DOUBLE, DataType.DECIMAL})
_TEMPORAL_TYPES = frozenset({DataType.DATE, DataType.TIMESTAMP, DataType.TIMESTAMPTZ})


class ColumnRole(str, Enum):
    """Role a column plays in a query result."""

    NONE = "none"
    AGGREGATION = "aggregation"  # Metric computed by the query
    BREAKOUT = "breakout"  # Dimension the query groups by


# === Identifiers ===


class TableRef(BaseModel):
    """Reference to a table by name."""

    model_config = ConfigDict(frozen=True)

    table_name: str
    schema_name: str | None = None

    def __str__(self) -> str:
        if self.schema_name:
            return f"{self.schema_name}.{self.table_name}"
        return self.table_name
