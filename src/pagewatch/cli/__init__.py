"""CLI entry point: registers all subcommands."""

import typer

app = typer.Typer(
    name="pagewatch",
    help="PageWatch - audit saved pages and track their issues over time",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import subcommands to register them
from .main import main as _main_callback  # noqa: F401, E402
from .audit import audit as _audit  # noqa: F401, E402
from .history import history as _history, clear_history as _clear_history  # noqa: F401, E402
from .ignore import ignore as _ignore, unignore as _unignore, ignored as _ignored  # noqa: F401, E402
