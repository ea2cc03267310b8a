"""Read-only access to the document under audit."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Protocol

from bs4 import BeautifulSoup, Doctype, Tag

from .timeline import PerformanceTimeline


class DocumentAccess(Protocol):
    """What the collector needs from a page.

    Nodes returned by ``select`` are opaque to the collector apart from the
    attribute/parent/children navigation ``selectors`` performs on them.
    """

    url: str
    timeline: PerformanceTimeline

    def select(self, selector: str) -> list[Any]: ...

    def select_one(self, selector: str) -> Optional[Any]: ...

    def count(self, selector: str) -> int: ...

    def outer_html(self, node: Any) -> str: ...

    @property
    def doctype(self) -> Optional[str]: ...


class HtmlDocument:
    """A parsed HTML snapshot backed by BeautifulSoup.

    Usage::

        doc = HtmlDocument("<html><body><h1>Hi</h1></body></html>", url="https://example.com/")
        doc.count("h1")  # 1
    """

    def __init__(
        self,
        html: str,
        url: str = "about:blank",
        timeline: Optional[PerformanceTimeline] = None,
        parser: str = "html.parser",
    ) -> None:
        self.url = url
        self.soup = BeautifulSoup(html, parser)
        self.timeline = timeline if timeline is not None else PerformanceTimeline()

    @classmethod
    def from_path(
        cls,
        path: Path,
        url: Optional[str] = None,
        timeline: Optional[PerformanceTimeline] = None,
    ) -> "HtmlDocument":
        """Load a saved page; ``url`` defaults to the file's ``file://`` URI."""
        html = path.read_text(encoding="utf-8", errors="replace")
        return cls(html, url=url or path.resolve().as_uri(), timeline=timeline)

    def select(self, selector: str) -> list[Tag]:
        return list(self.soup.select(selector))

    def select_one(self, selector: str) -> Optional[Tag]:
        return self.soup.select_one(selector)

    def count(self, selector: str) -> int:
        return len(self.soup.select(selector))

    def outer_html(self, node: Any) -> str:
        return str(node)

    @property
    def doctype(self) -> Optional[str]:
        """Doctype name, lowercased (``"html"`` for HTML5), or None if absent."""
        for item in self.soup.contents:
            if isinstance(item, Doctype):
                parts = str(item).split()
                return parts[0].lower() if parts else ""
        return None
