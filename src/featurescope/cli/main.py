"""Main CLI application entry point."""

from __future__ import annotations

import typer

from featurescope.cli.commands import compare, extract

app = typer.Typer(
    name="featurescope",
    help="Extract and compare statistical features of columns, tables, queries and segments.",
    no_args_is_help=True,
)

# Register commands
app.command()(extract.extract)
app.command()(compare.compare)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
