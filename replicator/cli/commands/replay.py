"""
Replay command: replay a saved stream event against a ledger
"""

import json
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from replicator.core.config import DEFAULT_RETRY_LIMIT
from replicator.core.errors import ReplicatorError
from replicator.ledger.client import LedgerClient
from replicator.ledger.memory_client import InMemoryLedgerClient
from replicator.stream.dispatcher import StatementDispatcher
from replicator.stream.records import records_from_event
from replicator.stream.replayer import ChangeReplayer
from replicator.cli.commands import common

console = Console()


def replay_command(
    event_file: str = typer.Argument(..., help="Kinesis event JSON file"),
    ledger: Optional[str] = typer.Option(None, "--ledger", "-L", help="Destination ledger name"),
    region: Optional[str] = typer.Option(None, "--region", help="AWS region"),
    retry_limit: int = typer.Option(DEFAULT_RETRY_LIMIT, "--retry-limit", help="OCC retry limit"),
    group_by_transaction: bool = typer.Option(
        False, "--group-by-transaction", help="Replay each source transaction as one transaction"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Replay into an in-memory ledger"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Replay the records of a saved stream event.

    Examples:
        ledger-replicator replay batch.json --ledger Mirror
        ledger-replicator replay batch.json --dry-run --json
    """
    if not dry_run and not ledger:
        console.print("[red]Error:[/red] --ledger is required unless --dry-run is given")
        raise typer.Exit(2)

    try:
        event = common.load_event(event_file)
        client: LedgerClient
        if dry_run:
            client = InMemoryLedgerClient(retry_limit=retry_limit)
        else:
            client = common.make_client(ledger, region=region, retry_limit=retry_limit)
        with client:
            replayer = ChangeReplayer(StatementDispatcher(client), group_by_transaction=group_by_transaction)
            result = replayer.on_batch(records_from_event(event))
    except FileNotFoundError:
        console.print(f"[red]Error: Event file not found:[/red] {event_file}")
        raise typer.Exit(2)
    except (ReplicatorError, ValueError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(2)

    applied = [s.text for s in client.journal] if isinstance(client, InMemoryLedgerClient) else None

    if json_output:
        output = {
            "success": not result.failed and result.failed_statements == 0,
            "records": result.records,
            "blocks": result.blocks,
            "skipped_records": result.skipped_records,
            "statements": result.statements,
            "read_only": result.read_only,
            "replayed": result.replayed,
            "failed_statements": result.failed_statements,
            "error": result.error,
            "errors": result.errors,
        }
        if applied is not None:
            output["applied"] = applied
        print(json.dumps(output, indent=2))
    else:
        table = Table(title="Replay Summary")
        table.add_column("Metric", style="green")
        table.add_column("Count", style="cyan", justify="right")
        table.add_row("Records", str(result.records))
        table.add_row("Blocks", str(result.blocks))
        table.add_row("Skipped records", str(result.skipped_records))
        table.add_row("Statements", str(result.statements))
        table.add_row("Read-only", str(result.read_only))
        table.add_row("Replayed", str(result.replayed))
        table.add_row("Failed", str(result.failed_statements))
        console.print(table)

        for message in result.errors:
            console.print(f"[yellow]{message}[/yellow]")
        if result.failed:
            console.print(f"[red]Batch aborted:[/red] {result.error}")

    if result.failed or result.failed_statements:
        raise typer.Exit(1)
