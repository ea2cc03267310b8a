"""Ignore-list CLI commands."""

import asyncio
import json
from typing import Optional

import typer
from rich.table import Table

from ..storage import format_relative_time
from . import app
from ._common import console, open_stores, resolve_config


@app.command()
def ignore(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Page the issue was found on"),
    selector: str = typer.Argument(..., help="Selector of the offending element"),
    rule_id: str = typer.Argument(..., help="Rule that reported the issue"),
    reason: str = typer.Option(
        "other",
        "--reason",
        "-r",
        help="Why the issue is ignored (e.g. false-positive, wont-fix)",
    ),
    note: Optional[str] = typer.Option(None, "--note", help="Free-form note"),
    message: str = typer.Option("", "--message", "-m", help="Issue message to remember"),
):
    """
    Stop reporting one issue on a domain.

    The issue is matched by selector and rule, so it stays ignored across
    future scans of any page on the same domain.
    """
    config = resolve_config(ctx)
    _, registry = open_stores(config)
    entry = asyncio.run(registry.ignore(url, selector, rule_id, message, reason, note))
    console.print(f"[green]Ignoring[/green] {entry.hash} on {entry.domain}")


@app.command()
def unignore(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Page the issue was found on"),
    selector: str = typer.Argument(..., help="Selector of the offending element"),
    rule_id: str = typer.Argument(..., help="Rule that reported the issue"),
):
    """Report a previously ignored issue again."""
    config = resolve_config(ctx)
    _, registry = open_stores(config)
    asyncio.run(registry.unignore(url, selector, rule_id))
    console.print(f"[green]No longer ignoring[/green] {selector}::{rule_id}")


@app.command()
def ignored(
    ctx: typer.Context,
    url: str = typer.Argument(..., help="Show ignored issues for this URL's domain"),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """List ignored issues for a domain."""
    config = resolve_config(ctx)
    _, registry = open_stores(config)
    entries = asyncio.run(registry.list_for_domain(url))

    if json_output:
        print(json.dumps([e.to_dict() for e in entries], indent=2))
        return

    if not entries:
        console.print("[yellow]No ignored issues.[/yellow]")
        raise typer.Exit(0)

    table = Table(title="Ignored Issues", show_lines=False, pad_edge=True)
    table.add_column("Rule", style="cyan")
    table.add_column("Selector", style="bold", overflow="fold")
    table.add_column("Reason", style="yellow")
    table.add_column("When", style="green")
    table.add_column("Note", style="dim")
    for e in entries:
        table.add_row(
            e.rule_id,
            e.selector,
            e.reason,
            format_relative_time(e.ignored_at),
            e.custom_note or "",
        )

    console.print()
    console.print(table)
    console.print()
