"""Core module - configuration, logging, and shared models."""

from featurescope.core.config import Settings, get_settings
from featurescope.core.exceptions import (
    AlignmentError,
    AssetSpecError,
    FeatureScopeError,
    IncompatibleAssetsError,
)
from featurescope.core.models.base import ColumnRole, DataType, TableRef

__all__ = [
    # Config
    "Settings",
    "get_settings",
    # Exceptions
    "AlignmentError",
    "AssetSpecError",
    "FeatureScopeError",
    "IncompatibleAssetsError",
    # Models
    "ColumnRole",
    "DataType",
    "TableRef",
]
