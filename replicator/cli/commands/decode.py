"""
Decode command: show what each record of a saved stream event carries
"""

import json

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from replicator.core.errors import DecodeSkip
from replicator.stream.decoder import extract_statements, parse_block
from replicator.stream.dispatcher import should_replay
from replicator.stream.records import records_from_event
from replicator.cli.commands import common

console = Console()


def decode_command(
    event_file: str = typer.Argument(..., help="Kinesis event JSON file"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    List the statements found in each record, and why records are skipped.

    Examples:
        ledger-replicator decode batch.json
        ledger-replicator decode batch.json --json
    """
    try:
        event = common.load_event(event_file)
        records = records_from_event(event)
    except FileNotFoundError:
        console.print(f"[red]Error: Event file not found:[/red] {event_file}")
        raise typer.Exit(2)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(2)

    rows = []
    for record in records:
        row = {
            "partition_key": record.partition_key,
            "sequence_number": record.sequence_number,
        }
        try:
            block = parse_block(record.data)
        except DecodeSkip as e:
            row["skipped"] = str(e)
            rows.append(row)
            continue
        row["transaction_id"] = block.transaction_id
        row["block_timestamp"] = block.block_timestamp.isoformat() if block.block_timestamp else None
        row["statements"] = [
            {"statement": s.text, "replay": should_replay(s.text)}
            for s in extract_statements(block)
        ]
        rows.append(row)

    if json_output:
        print(json.dumps({"records": rows, "count": len(rows)}, indent=2))
        return

    table = Table(title=f"Records: {event_file}")
    table.add_column("Sequence", style="cyan")
    table.add_column("Transaction", style="yellow")
    table.add_column("Statement", style="green")
    table.add_column("Replay", justify="center")

    for row in rows:
        if "skipped" in row:
            table.add_row(row["sequence_number"], "-", f"[dim]skipped: {escape(row['skipped'])}[/dim]", "")
            continue
        if not row["statements"]:
            table.add_row(row["sequence_number"], row["transaction_id"] or "-", "[dim]no statements[/dim]", "")
        for stmt in row["statements"]:
            table.add_row(
                row["sequence_number"],
                row["transaction_id"] or "-",
                escape(stmt["statement"]),
                "yes" if stmt["replay"] else "no",
            )

    console.print(table)
