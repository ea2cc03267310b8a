"""Tests for the accessibility audit and fix templates."""

import asyncio
import itertools

from pagewatch.collector import BASELINE_RULES, DefaultFixTemplates, HtmlDocument
from pagewatch.collector.accessibility import audit_accessibility, node_selector, severity_for
from pagewatch.models import Category, ElementInfo, Severity

RESULTS = {
    "violations": [
        {
            "id": "image-alt",
            "impact": "critical",
            "help": "Images must have alternate text",
            "description": "Ensures <img> elements have alternate text",
            "helpUrl": "https://dequeuniversity.com/rules/axe/4.4/image-alt",
            "nodes": [
                {"target": ["#hero img"], "html": '<img src="a.png">', "failureSummary": "Fix any"},
                {"target": ["img.logo"], "html": '<img class="logo" src="b.png">'},
            ],
        },
        {
            "id": "made-up-rule",
            "impact": "apocalyptic",
            "help": "Something odd",
            "nodes": [{"target": [["my-widget", "button.inner"]], "html": "<button></button>"}],
        },
    ],
    "incomplete": [
        {
            "id": "color-contrast",
            "impact": "serious",
            "help": "Elements must have sufficient color contrast",
            "nodes": [{"target": ["p.muted"], "html": '<p class="muted">x</p>'}],
        }
    ],
}


class FakeEngine:
    def __init__(self, results=RESULTS):
        self.results = results
        self.calls = []

    def run(self, document, rules):
        self.calls.append(tuple(rules))
        return self.results


class AsyncFakeEngine(FakeEngine):
    async def run(self, document, rules):
        return super().run(document, rules)


def _audit(engine):
    counter = itertools.count(1)
    document = HtmlDocument("<html></html>", url="https://example.com/")
    return asyncio.run(
        audit_accessibility(document, engine, DefaultFixTemplates(), lambda: f"issue-{next(counter)}")
    )


class TestAuditAccessibility:
    def test_one_issue_per_node(self):
        engine = FakeEngine()
        issues, incomplete = _audit(engine)

        assert engine.calls == [BASELINE_RULES]
        assert [i.id for i in issues] == ["issue-1", "issue-2", "issue-3"]
        assert [i.selector for i in issues] == ["#hero img", "img.logo", "my-widget button.inner"]
        assert [i.rule_id for i in incomplete] == ["color-contrast"]

        first = issues[0]
        assert first.severity is Severity.CRITICAL
        assert first.category is Category.IMAGES
        assert first.wcag.id == "1.1.1"
        assert first.element.failure_summary == "Fix any"
        assert 'alt="[Describe what the image shows]"' in first.fix.code
        assert issues[1].element.failure_summary is None

    def test_unknown_rule(self):
        issues, _ = _audit(FakeEngine())
        odd = issues[2]
        assert odd.severity is Severity.MINOR
        assert odd.category is Category.TECHNICAL
        assert odd.wcag.id == "N/A"
        assert odd.fix.description == "See documentation for fix guidance"
        assert odd.fix.learn_more_url.endswith("/made-up-rule")
        assert odd.help_url == ""

    def test_async_engine(self):
        issues, incomplete = _audit(AsyncFakeEngine())
        assert len(issues) == 3
        assert len(incomplete) == 1

    def test_clean_page(self):
        assert _audit(FakeEngine({"violations": []})) == ([], [])


class TestHelpers:
    def test_node_selector(self):
        assert node_selector(["#a", "#b"]) == "#a"
        assert node_selector([["host", "#inner"]]) == "host #inner"
        assert node_selector([]) == "body"
        assert node_selector(None) == "body"

    def test_severity_for(self):
        assert severity_for("moderate") is Severity.MODERATE
        assert severity_for(None) is Severity.MINOR
        assert severity_for("unknown") is Severity.MINOR


class TestFixTemplates:
    def test_button_name(self):
        fix = DefaultFixTemplates().generate("button-name", ElementInfo("button", "<button></button>"))
        assert fix.code == '<button aria-label="[Button purpose]"></button>'

    def test_tabindex(self):
        fix = DefaultFixTemplates().generate("tabindex", ElementInfo("a", '<a tabindex="5">x</a>'))
        assert fix.code == '<a tabindex="0">x</a>'

    def test_region_wraps_markup(self):
        fix = DefaultFixTemplates().generate("region", ElementInfo("div", "<div>x</div>"))
        assert fix.code == "<main>\n  <div>x</div>\n</main>"

    def test_custom_templates(self):
        templates = DefaultFixTemplates({})
        fix = templates.generate("image-alt", ElementInfo("img", "<img>"))
        assert fix.code == ""
