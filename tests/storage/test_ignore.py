"""Tests for the ignore registry."""

import asyncio

import pytest

from pagewatch.storage import IGNORE_KEY, IgnoreRegistry

from conftest import make_issue

URL = "https://example.com/checkout"


@pytest.fixture
def registry(store, clock):
    return IgnoreRegistry(store, clock)


class TestIgnore:
    def test_ignore_then_query(self, registry):
        async def run():
            entry = await registry.ignore(URL, "#logo", "image-alt", "Missing alt", "false-positive")
            return entry, await registry.is_ignored("https://example.com/other", "#logo", "image-alt")

        entry, ignored = asyncio.run(run())
        assert entry.hash == "#logo::image-alt"
        assert entry.domain == "example.com"
        assert entry.ignored_at == 1_700_000_000_000
        assert ignored

    def test_scoped_to_domain(self, registry):
        async def run():
            await registry.ignore(URL, "#logo", "image-alt", "", "wont-fix")
            return await registry.is_ignored("https://other.org/", "#logo", "image-alt")

        assert not asyncio.run(run())

    def test_idempotent_upsert(self, registry, clock):
        async def run():
            await registry.ignore(URL, "#logo", "image-alt", "", "wont-fix")
            clock.advance(60)
            await registry.ignore(URL, "#logo", "image-alt", "", "false-positive", note="decorative")
            return await registry.list_for_domain(URL)

        entries = asyncio.run(run())
        assert len(entries) == 1
        assert entries[0].reason == "false-positive"
        assert entries[0].custom_note == "decorative"
        assert entries[0].ignored_at == 1_700_000_060_000

    def test_unignore(self, registry):
        async def run():
            await registry.ignore(URL, "#logo", "image-alt", "", "wont-fix")
            await registry.unignore(URL, "#logo", "image-alt")
            await registry.unignore(URL, "#logo", "image-alt")
            return await registry.is_ignored(URL, "#logo", "image-alt")

        assert not asyncio.run(run())

    def test_filter_actionable_keeps_order(self, registry):
        issues = [
            make_issue(selector="#a", issue_id="1"),
            make_issue(selector="#b", issue_id="2"),
            make_issue(selector="#c", issue_id="3"),
        ]

        async def run():
            await registry.ignore(URL, "#b", "image-alt", "", "wont-fix")
            return await registry.filter_actionable(URL, issues)

        assert [i.selector for i in asyncio.run(run())] == ["#a", "#c"]

    def test_clear(self, registry, store):
        async def run():
            await registry.ignore(URL, "#a", "label", "", "wont-fix")
            await registry.ignore("https://other.org/", "#a", "label", "", "wont-fix")
            await registry.clear_domain(URL)
            remaining = await registry.ignored_hashes("https://other.org/")
            await registry.clear_all()
            return remaining

        assert asyncio.run(run()) == {"#a::label"}
        assert IGNORE_KEY not in store.keys()
