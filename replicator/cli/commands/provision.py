"""
Provision command: create missing destination tables
"""

import json
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from replicator.core.config import DEFAULT_RETRY_LIMIT
from replicator.core.errors import ReplicatorError
from replicator.provision.tables import TableNameSet, TableProvisioner
from replicator.cli.commands import common

console = Console()


def provision_command(
    ledger: str = typer.Option(..., "--ledger", "-L", help="Destination ledger name"),
    tables: str = typer.Option(..., "--tables", "-t", help="Comma-separated table names"),
    region: Optional[str] = typer.Option(None, "--region", help="AWS region"),
    retry_limit: int = typer.Option(DEFAULT_RETRY_LIMIT, "--retry-limit", help="OCC retry limit"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Only report missing tables"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Create every listed table that does not exist in the ledger yet.

    Examples:
        ledger-replicator provision --ledger Mirror --tables "Vehicle, Person"
        ledger-replicator provision --ledger Mirror --tables Vehicle --dry-run
    """
    desired = TableNameSet.parse(tables)
    try:
        client = common.make_client(ledger, region=region, retry_limit=retry_limit)
        with client:
            if dry_run:
                existing = client.list_table_names()
                affected = desired.difference(existing)
            else:
                affected = TableProvisioner(client).reconcile(desired)
    except ReplicatorError as e:
        if json_output:
            print(json.dumps({"success": False, "error": str(e)}))
        else:
            console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(2)

    if json_output:
        key = "missing" if dry_run else "created"
        print(json.dumps({"success": True, "ledger": ledger, key: affected}, indent=2))
        return

    if not affected:
        console.print(f"[green]✓ All {len(desired)} table(s) exist in {ledger}[/green]")
        return

    title = "Missing Tables" if dry_run else "Created Tables"
    table = Table(title=title)
    table.add_column("Table", style="green")
    for name in affected:
        table.add_row(name)
    console.print(table)
