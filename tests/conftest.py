"""Shared pytest fixtures for all tests."""

from typing import Any

import duckdb
import pytest

from featurescope.core.models.base import ColumnRole, DataType, TableRef
from featurescope.extraction.models import (
    ColumnDescriptor,
    Dataset,
    ExtractionOptions,
    FeatureSet,
    QueryDefinition,
)


class CountingReducer:
    """Reducer recording every cell it is fed."""

    def __init__(self, field: Any) -> None:
        self.field = field
        self.cells: list[Any] = []
        self.completed = 0

    def step(self, cell: Any) -> None:
        self.cells.append(cell)

    def complete(self) -> FeatureSet:
        self.completed += 1
        return {"steps": len(self.cells), "cells": list(self.cells)}


class CountingFactory:
    """Reducer factory keeping track of the reducers and options it built."""

    def __init__(self) -> None:
        self.reducers: list[CountingReducer] = []
        self.options: list[ExtractionOptions] = []

    def __call__(self, opts: ExtractionOptions, field: Any) -> CountingReducer:
        reducer = CountingReducer(field)
        self.reducers.append(reducer)
        self.options.append(opts)
        return reducer


class InMemorySource:
    """Dataset access returning canned datasets, honouring the row limit."""

    def __init__(self, datasets: dict[Any, Dataset]) -> None:
        self.datasets = datasets
        self.calls: list[tuple[Any, dict[str, Any]]] = []

    def fetch(self, asset: Any, query_options: dict[str, Any]) -> Dataset:
        self.calls.append((asset, query_options))
        dataset = self.datasets[asset]
        limit = query_options.get("limit")
        rows = list(dataset.rows) if limit is None else list(dataset.rows)[:limit]
        return Dataset(cols=dataset.cols, rows=rows)


class InMemoryExecutor:
    """Query execution returning canned datasets keyed by SQL."""

    def __init__(self, datasets: dict[str, Dataset]) -> None:
        self.datasets = datasets
        self.executed: list[QueryDefinition] = []

    def execute(self, definition: QueryDefinition) -> Dataset:
        self.executed.append(definition)
        return self.datasets[definition.sql]


@pytest.fixture
def counting_factory() -> CountingFactory:
    return CountingFactory()


@pytest.fixture
def make_source():
    """Build an InMemorySource from a mapping of asset to dataset."""
    return InMemorySource


@pytest.fixture
def make_executor():
    """Build an InMemoryExecutor from a mapping of SQL to dataset."""
    return InMemoryExecutor


@pytest.fixture
def orders_ref() -> TableRef:
    return TableRef(table_name="orders")


@pytest.fixture
def category_count_cols() -> list[ColumnDescriptor]:
    """Columns of a query grouping a count by category."""
    return [
        ColumnDescriptor(name="Category", base_type=DataType.VARCHAR, role=ColumnRole.BREAKOUT),
        ColumnDescriptor(name="Count", base_type=DataType.BIGINT, role=ColumnRole.AGGREGATION),
    ]


@pytest.fixture
def duckdb_conn():
    """In-memory DuckDB connection with an orders table."""
    conn = duckdb.connect(":memory:")
    conn.execute(
        """
        CREATE TABLE orders (
            id INTEGER PRIMARY KEY,
            region VARCHAR,
            amount DOUBLE,
            ordered_on DATE
        )
        """
    )
    conn.execute(
        """
        INSERT INTO orders
        SELECT
            i,
            CASE WHEN i % 4 = 0 THEN 'EU' ELSE 'US' END,
            (i % 50)::DOUBLE,
            DATE '2024-01-01' + (i % 30)::INTEGER
        FROM range(1, 201) t(i)
        """
    )
    yield conn
    conn.close()
