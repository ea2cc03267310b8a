"""Report export formatters for PageWatch."""

from .base import BaseFormatter
from .csv_formatter import CsvFormatter
from .github_formatter import GithubFormatter
from .markdown_formatter import MarkdownFormatter

FORMATTERS = {
    "csv": CsvFormatter,
    "markdown": MarkdownFormatter,
    "github": GithubFormatter,
}


def get_formatter(name: str) -> BaseFormatter:
    """Get a formatter instance by name.

    Raises:
        ValueError: If name is not recognized
    """
    cls = FORMATTERS.get(name)
    if cls is None:
        raise ValueError(f"Unknown formatter: {name!r}. Choose from: {', '.join(sorted(FORMATTERS))}")
    return cls()


__all__ = [
    "BaseFormatter",
    "CsvFormatter",
    "MarkdownFormatter",
    "GithubFormatter",
    "FORMATTERS",
    "get_formatter",
]
