"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ..config import AuditConfig, load_config
from ..exceptions import ConfigurationError, format_error
from ..models import Severity
from ..storage import HistoryStore, IgnoreRegistry, SqliteStore

console = Console()

SEVERITY_STYLES = {
    Severity.CRITICAL: "bold red",
    Severity.SERIOUS: "red",
    Severity.MODERATE: "yellow",
    Severity.MINOR: "dim",
}


def resolve_config(ctx: typer.Context, **overrides) -> AuditConfig:
    """Build config from the global options stored on the context."""
    obj = ctx.ensure_object(dict)
    try:
        return load_config(
            config_file=obj.get("config"),
            verbose=obj.get("verbose", False),
            quiet=obj.get("quiet", False),
            **overrides,
        )
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(2)


def open_stores(config: AuditConfig) -> tuple[HistoryStore, IgnoreRegistry]:
    store = SqliteStore(config.data_dir)
    history = HistoryStore(store, max_per_domain=config.max_history_per_domain)
    return history, IgnoreRegistry(store)


def fail(error: BaseException, code: int = 1) -> typer.Exit:
    """Print a user-facing error line and return the Exit to raise."""
    console.print(f"[red]{format_error(error)}[/red]")
    return typer.Exit(code)


def has_history(config: AuditConfig) -> bool:
    return Path(config.store_path).exists()


def style_for(severity: Optional[Severity]) -> str:
    return SEVERITY_STYLES.get(severity, "")
