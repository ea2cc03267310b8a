"""Logging setup: rich output on stderr, optional plain-text log file.

stdout is reserved for command output (``--json`` in particular), so every
handler installed here writes elsewhere.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "pagewatch"

VERBOSITY_LEVELS = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}

# Log one line per request at INFO; only useful when debugging probes.
HTTP_LOGGERS = ("httpx", "httpcore")


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_file: Optional[str] = None
) -> logging.Logger:
    """Install handlers for the pagewatch logger tree.

    ``quiet`` wins over ``verbose``.  Calling this again replaces the
    previous handlers rather than stacking new ones.

    Returns:
        The root ``pagewatch`` logger.
    """
    verbosity = "quiet" if quiet else "verbose" if verbose else "normal"
    level = VERBOSITY_LEVELS[verbosity]

    handlers: list[logging.Handler] = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
            markup=False,
            show_time=verbose,
            show_path=verbose,
        )
    ]
    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)-8s %(name)s: %(message)s")
        )
        handlers.append(file_handler)

    logging.basicConfig(level=level, format="%(message)s", handlers=handlers, force=True)

    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(logging.DEBUG if verbose else logging.WARNING)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(level)
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Logger under the ``pagewatch`` namespace (``collector`` → ``pagewatch.collector``)."""
    if name is None or name == ROOT_LOGGER:
        return logging.getLogger(ROOT_LOGGER)
    if not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
