"""Column alignment for two-column feature extraction.

Relation-level extractors consume (dimension, metric) pairs positionally.
Query results do not necessarily put those columns first, so rows are
projected onto the requested pair when needed.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from operator import itemgetter
from typing import Any

from featurescope.core.exceptions import AlignmentError
from featurescope.extraction.models import ColumnDescriptor


def index_of[T](pred: Callable[[T], bool], coll: Iterable[T]) -> int | None:
    """Return the index of the first element in `coll` for which `pred` is true."""
    return next((i for i, x in enumerate(coll) if pred(x)), None)


def ensure_alignment(
    fields: Sequence[ColumnDescriptor],
    cols: Sequence[ColumnDescriptor],
    rows: Iterable[Sequence[Any]],
) -> Iterable[Sequence[Any]]:
    """Make rows consumable as (fields[0], fields[1]) pairs.

    If the dataset's first two columns already are `fields`, `rows` is returned
    as is. Otherwise a lazy iterator of 2-tuples is returned, taking for each
    field the cells of the first column equal to it.

    Args:
        fields: The two columns, in the order the extractor expects them
        cols: The dataset's columns
        rows: The dataset's rows

    Returns:
        `rows` itself, or a single-pass iterator over projected pairs

    Raises:
        AlignmentError: If `fields` is not a pair or a field is not among `cols`
    """
    if len(fields) != 2:
        raise AlignmentError(f"Alignment needs exactly two fields, got {len(fields)}")

    if list(cols[:2]) == list(fields):
        return rows

    indices = []
    for field in fields:
        idx = index_of(lambda col, field=field: col == field, cols)
        if idx is None:
            raise AlignmentError(f"Column {field.name!r} is not part of the dataset")
        indices.append(idx)

    return map(itemgetter(*indices), rows)
