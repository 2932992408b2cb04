"""CLI for featurescope.

Extracts and compares feature sets of assets stored in a DuckDB database.

Usage:
    featurescope extract warehouse.duckdb table:orders
    featurescope compare warehouse.duckdb "segment:orders:region = 'EU'" "segment:orders:region = 'US'"
    featurescope compare warehouse.duckdb column:orders.amount column:orders_2023.amount --json

Environment:
    Loads .env file from current directory if present.
    FEATURESCOPE_* variables override settings (e.g. FEATURESCOPE_SAMPLE_CAP).
"""

from featurescope.cli.main import app, main

__all__ = ["app", "main"]
