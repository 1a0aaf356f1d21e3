#!/usr/bin/env python3
"""
Rewind CLI

Main entrypoint for the rewind command-line tool.
"""

import sys

import typer
from rich.console import Console
from rich.table import Table

from cli.commands import history
from rewind.logging_config import setup_logging

app = typer.Typer(
    name="rewind",
    help="Inspect exported lifted-state history",
    add_completion=False,
)

console = Console()

app.command("verify")(history.verify_command)
app.command("summary")(history.summary_command)


@app.command()
def version():
    """Show version information."""
    from cli import __version__
    from rewind import __version__ as engine_version

    table = Table(show_header=False, box=None)
    table.add_row("[bold]Rewind CLI[/bold]", f"v{__version__}")
    table.add_row("Engine", f"v{engine_version}")

    console.print(table)


def main():
    """Main entrypoint."""
    setup_logging(sys.stderr)
    app()


if __name__ == "__main__":
    main()
