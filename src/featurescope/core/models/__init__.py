"""Shared models."""

from featurescope.core.models.base import ColumnRole, DataType, TableRef

__all__ = [
    "ColumnRole",
    "DataType",
    "TableRef",
]
