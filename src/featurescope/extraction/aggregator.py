"""Fused single-pass feature aggregation.

Extractors are stateful folds, one per column. Rather than scanning the
dataset once per column, all extractors are bound to their column index
and fed from a single traversal of the rows, so the cost stays linear in
row count whatever the column count.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol

from featurescope.extraction.models import (
    ColumnDescriptor,
    Dataset,
    ExtractionOptions,
    FeatureSet,
)


class Reducer(Protocol):
    """A stateful fold over the cells of one column (or one column pair)."""

    def step(self, cell: Any) -> None:
        """Consume one cell."""
        ...

    def complete(self) -> FeatureSet:
        """Finalize into a feature set."""
        ...


# Builds a fresh reducer for a column, or for a (dimension, metric) pair
ReducerFactory = Callable[
    [ExtractionOptions, ColumnDescriptor | tuple[ColumnDescriptor, ColumnDescriptor]],
    Reducer,
]


@dataclass
class _Binding:
    name: str
    index: int
    reducer: Reducer


@dataclass
class FusedReducer:
    """One sub-reducer per eligible column, fed from a single pass over rows."""

    bindings: list[_Binding] = field(default_factory=list)

    @classmethod
    def for_columns(
        cls,
        opts: ExtractionOptions,
        cols: Sequence[ColumnDescriptor],
        build_reducer: ReducerFactory,
    ) -> FusedReducer:
        """Bind a reducer to every column that is neither remapped nor a primary key."""
        return cls(
            bindings=[
                _Binding(name=col.name, index=i, reducer=build_reducer(opts, col))
                for i, col in enumerate(cols)
                if not col.excluded
            ]
        )

    def step(self, row: Sequence[Any]) -> None:
        for binding in self.bindings:
            binding.reducer.step(row[binding.index])

    def complete(self) -> dict[str, FeatureSet]:
        return {binding.name: binding.reducer.complete() for binding in self.bindings}


def field_to_features(
    opts: ExtractionOptions,
    field: ColumnDescriptor | tuple[ColumnDescriptor, ColumnDescriptor],
    values: Iterable[Any],
    build_reducer: ReducerFactory,
) -> FeatureSet:
    """Run the extractor for `field` over `values`."""
    reducer = build_reducer(opts, field)
    for value in values:
        reducer.step(value)
    return reducer.complete()


def dataset_to_features(
    opts: ExtractionOptions,
    dataset: Dataset,
    build_reducer: ReducerFactory,
) -> dict[str, FeatureSet]:
    """Compute one feature set per eligible column in a single pass over rows.

    Returns:
        Mapping of column name to feature set, in column order
    """
    fused = FusedReducer.for_columns(opts, dataset.cols, build_reducer)
    for row in dataset.rows:
        fused.step(row)
    return fused.complete()
