"""CLI command implementations."""

from featurescope.cli.commands import compare, extract

__all__ = [
    "compare",
    "extract",
]
