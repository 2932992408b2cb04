"""Exceptions raised by featurescope.

Retrieval and query execution errors are not wrapped; they propagate as raised
by the underlying connection.
"""

from __future__ import annotations


class FeatureScopeError(Exception):
    """Base class for featurescope errors."""


class AlignmentError(FeatureScopeError, ValueError):
    """A field pair cannot be aligned against a dataset's columns."""


class IncompatibleAssetsError(FeatureScopeError, ValueError):
    """Two assets cannot be compared with each other."""

    def __init__(self, left: str, right: str):
        self.left = left
        self.right = right
        super().__init__(f"Cannot compare a {left} asset with a {right} asset")


class AssetSpecError(FeatureScopeError, ValueError):
    """An asset specification string could not be parsed."""

    def __init__(self, spec: str, message: str):
        self.spec = spec
        self.message = message
        super().__init__(f"{spec!r}: {message}")
