"""Audit command: run one audit kind against a saved HTML page."""

import asyncio
import json
from pathlib import Path
from typing import Optional

import click
import typer
from rich.table import Table

from ..collector import AuditKind, HtmlDocument, MetricsCollector
from ..config import AuditConfig
from ..exceptions import PageWatchError
from ..formatters import FORMATTERS, get_formatter
from ..models import Issue, ScanResult
from ..scoring import ScoreResult, get_score_breakdown, score_issues
from ..storage import ScanComparison, compare
from . import app
from ._common import console, fail, open_stores, resolve_config, style_for


async def _run_audit(
    document: HtmlDocument, kind: str, config: AuditConfig, save: bool
) -> tuple[ScanResult, list[Issue], Optional[ScanComparison]]:
    result = await MetricsCollector(document, config=config).collect(kind)

    history, ignores = open_stores(config)
    actionable = await ignores.filter_actionable(result.url, result.issues)

    comparison = None
    previous = await history.most_recent_before(result.url)
    if previous is not None:
        comparison = compare(result, previous)
    if save:
        await history.save(result, [kind])
    return result, actionable, comparison


@app.command()
def audit(
    ctx: typer.Context,
    path: Path = typer.Argument(
        ...,
        help="Saved HTML page to audit",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    kind: str = typer.Option(
        AuditKind.SEO.value,
        "--kind",
        "-k",
        help="Audit kind to run",
        click_type=click.Choice([k.value for k in AuditKind], case_sensitive=False),
    ),
    url: Optional[str] = typer.Option(
        None,
        "--url",
        help="URL the page was saved from (default: the file's file:// URI)",
    ),
    save: bool = typer.Option(
        True,
        "--save/--no-save",
        help="Record the scan in history",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
    output_format: str = typer.Option(
        "rich",
        "--format",
        "-f",
        help="Report format: rich, json, csv, markdown or github",
        click_type=click.Choice(["rich", "json", *FORMATTERS], case_sensitive=False),
    ),
):
    """
    Audit a saved HTML page and print its score and issues.

    When an earlier scan of the same domain exists, the output also shows
    which issues were fixed and which are new.

    [bold cyan]Examples:[/bold cyan]

      pagewatch audit page.html --url https://example.com/

      pagewatch audit page.html --kind security --json

      pagewatch audit page.html --kind best-practices --no-save

      pagewatch audit page.html --format markdown > report.md
    """
    if json_output:
        output_format = "json"
    output_format = output_format.lower()
    json_output = output_format == "json"

    config = resolve_config(ctx)
    document = HtmlDocument.from_path(path, url=url)

    try:
        result, actionable, comparison = asyncio.run(
            _run_audit(document, kind.lower(), config, save)
        )
    except PageWatchError as e:
        if json_output:
            print(json.dumps({"error": e.to_dict()}, indent=2))
            raise typer.Exit(1)
        raise fail(e)

    overall = score_issues(actionable, config.score_scale_factor)
    if json_output:
        _output_json(result, actionable, overall, comparison)
    elif output_format in FORMATTERS:
        formatter = get_formatter(output_format)
        print(formatter.format(result, actionable, AuditKind(kind.lower())), end="")
    else:
        _output_rich(result, actionable, overall, comparison, config)


def _output_json(result, actionable, overall, comparison):
    payload = {
        "result": result.to_dict(),
        "score": overall.to_dict(),
        "ignoredCount": len(result.issues) - len(actionable),
        "comparison": comparison.to_dict() if comparison else None,
    }
    print(json.dumps(payload, indent=2))


def _output_rich(
    result: ScanResult,
    actionable: list[Issue],
    overall: ScoreResult,
    comparison: Optional[ScanComparison],
    config: AuditConfig,
):
    console.print()
    console.print(
        f"[bold]{result.url}[/bold]  "
        f"[{overall.color}]{overall.score} ({overall.grade}) {overall.label}[/{overall.color}]"
    )
    console.print(
        f"[dim]{len(actionable)} issues, {len(result.issues) - len(actionable)} ignored, "
        f"{len(result.incomplete)} need review, {result.duration:.0f}ms[/dim]"
    )

    breakdown = get_score_breakdown(actionable, config.score_scale_factor)
    if breakdown:
        console.print(
            "  ".join(
                f"{category.value} [{s.color}]{s.score}[/{s.color}]"
                for category, s in sorted(breakdown.items(), key=lambda kv: kv[1].score)
            )
        )

    if actionable:
        table = Table(show_lines=False, pad_edge=True)
        table.add_column("Severity")
        table.add_column("Rule", style="cyan")
        table.add_column("Element", style="dim", overflow="fold")
        table.add_column("Message")
        for issue in sorted(actionable, key=lambda i: -i.severity.weight):
            table.add_row(
                f"[{style_for(issue.severity)}]{issue.severity.value}[/]",
                issue.rule_id,
                issue.selector,
                issue.message,
            )
        console.print()
        console.print(table)
    else:
        console.print("[green]No issues found.[/green]")

    if comparison is not None:
        _print_comparison(comparison)
    console.print()


def _print_comparison(comparison: ScanComparison):
    diff = comparison.diff.total_diff
    style = "green" if diff < 0 else "red" if diff > 0 else "dim"
    console.print()
    console.print(
        f"Since last scan: [{style}]{diff:+d}[/{style}] issues "
        f"({len(comparison.fixed_issues)} fixed, {len(comparison.new_issues)} new, "
        f"{comparison.unchanged_count} unchanged)"
    )
    for issue in comparison.fixed_issues:
        console.print(f"  [green]- fixed[/green] {issue.rule_id} {issue.selector}")
    for issue in comparison.new_issues:
        console.print(f"  [red]+ new[/red]   {issue.rule_id} {issue.selector}")
