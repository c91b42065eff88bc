#!/usr/bin/env python3
"""
Ledger Replicator CLI

Main entrypoint for the ledger-replicator command-line tool.
"""

import typer
from rich.console import Console
from rich.table import Table

from replicator.cli.commands import decode, provision, replay

app = typer.Typer(
    name="ledger-replicator",
    help="Ledger to ledger replication tools",
    add_completion=False,
)

console = Console()

app.command("provision")(provision.provision_command)
app.command("replay")(replay.replay_command)
app.command("decode")(decode.decode_command)


@app.command()
def version():
    """Show version information."""
    from replicator import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]Ledger Replicator[/bold]", f"v{__version__}")

    console.print(table)


def main():
    """Main entrypoint."""
    app()


if __name__ == "__main__":
    main()
