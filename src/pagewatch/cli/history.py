"""History CLI commands -- list and clear past scans."""

import asyncio
import json
from typing import Optional

import typer
from rich.table import Table

from ..models import Severity
from ..storage import format_relative_time
from . import app
from ._common import console, has_history, open_stores, resolve_config


@app.command()
def history(
    ctx: typer.Context,
    url: Optional[str] = typer.Argument(
        None,
        help="Only show scans of this URL's domain",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    List past scans stored in .pagewatch/store.db, newest first.

    [bold cyan]Examples:[/bold cyan]

      pagewatch history

      pagewatch history https://example.com/ --json
    """
    config = resolve_config(ctx)
    if not has_history(config):
        console.print(
            "[yellow]No history found.[/yellow] "
            "Run [bold]pagewatch audit[/bold] first to record a scan."
        )
        raise typer.Exit(0)

    store, _ = open_stores(config)
    if url:
        entries = asyncio.run(store.list_for_domain(url))
    else:
        entries = sorted(asyncio.run(store.list_all()), key=lambda e: e.timestamp, reverse=True)

    if json_output:
        print(json.dumps([e.to_dict() for e in entries], indent=2))
        return

    if not entries:
        console.print("[yellow]No scans recorded yet.[/yellow]")
        raise typer.Exit(0)

    table = Table(title="Scan History", show_lines=False, pad_edge=True)
    table.add_column("When", style="green")
    table.add_column("Domain", style="bold")
    table.add_column("Audits", style="cyan")
    table.add_column("Issues", justify="right", style="yellow")
    table.add_column("Critical", justify="right", style="red")
    table.add_column("ID", style="dim")

    for e in entries:
        table.add_row(
            format_relative_time(e.timestamp),
            e.domain,
            ", ".join(e.audit_types),
            str(e.issue_count),
            str(e.summary.by_severity.get(Severity.CRITICAL, 0)),
            e.id,
        )

    console.print()
    console.print(table)
    console.print()


@app.command("clear-history")
def clear_history(
    ctx: typer.Context,
    url: Optional[str] = typer.Argument(
        None,
        help="Only clear scans of this URL's domain",
    ),
):
    """Delete recorded scans for one domain, or all of them."""
    config = resolve_config(ctx)
    store, _ = open_stores(config)
    if url:
        asyncio.run(store.clear_domain(url))
        console.print(f"[green]Cleared history for {url}[/green]")
    else:
        asyncio.run(store.clear_all())
        console.print("[green]Cleared all history[/green]")
