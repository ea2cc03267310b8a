"""Tests for the rule-check framework and the built-in checks."""

import asyncio
import itertools

import httpx
import pytest

from pagewatch.collector import AuditKind, CheckContext, CheckOutcome, CheckRegistry, HtmlDocument
from pagewatch.collector.checks import PROFILES, outcomes_to_issues
from pagewatch.config import AuditConfig
from pagewatch.models import Category, ElementInfo, Severity

GOOD_TITLE = "Handmade Ceramic Mugs and Bowls | Potter"  # 40 chars
GOOD_DESCRIPTION = "x" * 140


def _not_found(request):
    return httpx.Response(404)


def run_checks(kind, html, url="https://shop.example/", handler=_not_found, registry=None):
    """Run the registered checks for ``kind`` and return failed outcome ids."""
    registry = registry or CheckRegistry.default()

    async def run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            context = CheckContext(HtmlDocument(html, url=url), client, AuditConfig())
            return await registry.run(kind, context)

    outcomes = asyncio.run(run())
    return {o.id: o for o in outcomes if not o.passed}


class TestRegistry:
    def test_sync_and_async_checks_in_order(self):
        registry = CheckRegistry()

        def first(context):
            return [CheckOutcome("first", Severity.MINOR, False, "one")]

        async def second(context):
            return [CheckOutcome("second", Severity.SERIOUS, False, "two")]

        registry.register(AuditKind.SEO, first)
        registry.register(AuditKind.SEO, second)
        failed = run_checks(AuditKind.SEO, "<html></html>", registry=registry)
        assert list(failed) == ["first", "second"]

    def test_empty_kind(self):
        assert run_checks(AuditKind.PWA, "<html></html>", registry=CheckRegistry()) == {}

    def test_check_errors_propagate(self):
        registry = CheckRegistry()

        def broken(context):
            raise RuntimeError("boom")

        registry.register(AuditKind.SEO, broken)
        with pytest.raises(RuntimeError, match="boom"):
            run_checks(AuditKind.SEO, "<html></html>", registry=registry)

    def test_default_registers_every_rule_kind(self):
        registry = CheckRegistry.default()
        for kind in (AuditKind.SEO, AuditKind.SECURITY, AuditKind.BEST_PRACTICES, AuditKind.PWA):
            assert registry.checks_for(kind)
        assert registry.checks_for(AuditKind.ACCESSIBILITY) == []


class TestOutcomesToIssues:
    def test_only_failures_with_fallback_element(self):
        outcomes = [
            CheckOutcome("ok", Severity.MINOR, True, "fine"),
            CheckOutcome("title-missing", Severity.CRITICAL, False, "no title"),
        ]
        counter = itertools.count(1)
        issues = outcomes_to_issues(outcomes, PROFILES[AuditKind.SEO], lambda: f"seo-{next(counter)}")

        (issue,) = issues
        assert issue.id == "seo-1"
        assert issue.category is Category.DOCUMENT
        assert issue.selector == "head"
        assert issue.element.html == "<head>...</head>"
        assert issue.element.failure_summary == "no title"
        assert issue.wcag.id == "SEO"
        assert issue.fix.learn_more_url == PROFILES[AuditKind.SEO].help_url

    def test_element_summary_defaults_to_message(self):
        outcome = CheckOutcome(
            "deprecated-elements",
            Severity.MODERATE,
            False,
            "Found deprecated elements",
            element=ElementInfo(selector="center", html="<center>x</center>"),
        )
        (issue,) = outcomes_to_issues([outcome], PROFILES[AuditKind.BEST_PRACTICES], lambda: "bp-1")
        assert issue.selector == "center"
        assert issue.element.failure_summary == "Found deprecated elements"
        assert issue.category is Category.TECHNICAL


class TestSeo:
    def test_bare_page(self):
        failed = run_checks(AuditKind.SEO, "<html><body></body></html>")
        assert set(failed) == {
            "title-missing",
            "meta-description-missing",
            "lang-missing",
            "h1-missing",
            "canonical-missing",
        }
        assert failed["title-missing"].severity is Severity.CRITICAL
        assert 'href="https://shop.example/"' in failed["canonical-missing"].fix.code

    def test_optimal_page(self):
        html = f"""<html lang="en"><head>
        <title>{GOOD_TITLE}</title>
        <meta name="description" content="{GOOD_DESCRIPTION}">
        <link rel="canonical" href="https://shop.example/">
        </head><body><h1>Mugs</h1></body></html>"""
        assert run_checks(AuditKind.SEO, html) == {}

    def test_lengths_and_headings(self):
        html = """<html lang="en"><head><title>Short</title>
        <meta name="description" content="Too short">
        </head><body><h1>A</h1><h1>B</h1></body></html>"""
        failed = run_checks(AuditKind.SEO, html)
        assert failed["title-length"].message == (
            "Title length is 5 characters (recommended: 30-60)"
        )
        assert failed["meta-description-length"].severity is Severity.MODERATE
        assert failed["h1-multiple"].message == "Page has 2 H1 headings (should have exactly 1)"
        assert failed["h1-multiple"].element.selector == "h1"


class TestBestPractices:
    def test_clean_page(self):
        html = '<!DOCTYPE html><html><head><meta charset="utf-8"></head><body></body></html>'
        assert run_checks(AuditKind.BEST_PRACTICES, html) == {}

    def test_problems(self):
        html = """<html><body>
        <center>old</center><font>x</font><font>y</font>
        <div id="dup"></div><span id="dup"></span>
        </body></html>"""
        failed = run_checks(AuditKind.BEST_PRACTICES, html)
        assert set(failed) == {
            "doctype-missing",
            "charset-missing",
            "deprecated-elements",
            "duplicate-ids",
        }
        assert failed["deprecated-elements"].message == (
            "Found deprecated elements: center (1), font (2)"
        )
        assert failed["duplicate-ids"].message == 'Found duplicate IDs: "dup" (2x)'
        assert failed["duplicate-ids"].element.selector == "#dup"

    def test_http_equiv_charset(self):
        html = (
            '<!DOCTYPE html><html><head>'
            '<meta http-equiv="content-type" content="text/html; charset=utf-8">'
            "</head></html>"
        )
        assert "charset-missing" not in run_checks(AuditKind.BEST_PRACTICES, html)


PWA_HEAD = """<html><head>
<link rel="manifest" href="/manifest.json">
<meta name="viewport" content="width=device-width">
<link rel="apple-touch-icon" href="/icon.png">
<meta name="theme-color" content="#123456">
</head></html>"""

FULL_MANIFEST = {
    "name": "Potter",
    "short_name": "Potter",
    "start_url": "/",
    "display": "standalone",
    "theme_color": "#123456",
    "background_color": "#ffffff",
    "icons": [{"src": "/a.png", "sizes": "192x192"}, {"src": "/b.png", "sizes": "512x512"}],
}


class TestPwa:
    def test_installable_page(self):
        seen = []

        def handler(request):
            seen.append(str(request.url))
            return httpx.Response(200, json=FULL_MANIFEST)

        assert run_checks(AuditKind.PWA, PWA_HEAD, handler=handler) == {}
        assert seen == ["https://shop.example/manifest.json"]

    def test_manifest_fetch_failure_is_minor(self):
        failed = run_checks(AuditKind.PWA, PWA_HEAD)
        assert list(failed) == ["manifest-check-failed"]
        assert failed["manifest-check-failed"].severity is Severity.MINOR

    def test_malformed_manifest_href(self):
        html = PWA_HEAD.replace("/manifest.json", "http://[bad/m.json")
        failed = run_checks(
            AuditKind.PWA, html, handler=lambda request: httpx.Response(200, json=FULL_MANIFEST)
        )
        assert list(failed) == ["manifest-check-failed"]

    def test_incomplete_manifest(self):
        manifest = {"name": "Potter", "icons": [{"src": "/a.png", "sizes": "192x192"}]}
        failed = run_checks(
            AuditKind.PWA, PWA_HEAD, handler=lambda request: httpx.Response(200, json=manifest)
        )
        assert set(failed) == {
            "manifest-short-name-missing",
            "manifest-start-url-missing",
            "manifest-display-missing",
            "manifest-theme-color-missing",
            "manifest-background-color-missing",
            "manifest-icons-sizes",
        }

    def test_no_icons_is_critical(self):
        manifest = dict(FULL_MANIFEST, icons=[])
        failed = run_checks(
            AuditKind.PWA, PWA_HEAD, handler=lambda request: httpx.Response(200, json=manifest)
        )
        assert failed["manifest-icons-missing"].severity is Severity.CRITICAL

    def test_bare_http_page(self):
        failed = run_checks(AuditKind.PWA, "<html></html>", url="http://shop.example/")
        assert set(failed) == {
            "manifest-missing",
            "pwa-https-required",
            "pwa-viewport-missing",
            "apple-touch-icon-missing",
            "theme-color-meta-missing",
        }

    def test_localhost_counts_as_secure(self):
        failed = run_checks(AuditKind.PWA, "<html></html>", url="http://localhost:8000/")
        assert "pwa-https-required" not in failed


SECURE_HEADERS = {
    "Content-Security-Policy": "default-src 'self'",
    "Strict-Transport-Security": "max-age=31536000",
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "no-referrer",
    "Permissions-Policy": "camera=()",
}


class TestSecurity:
    def test_hardened_page(self):
        def handler(request):
            assert request.method == "HEAD"
            return httpx.Response(200, headers=SECURE_HEADERS)

        assert run_checks(AuditKind.SECURITY, "<html></html>", handler=handler) == {}

    def test_missing_headers(self):
        headers = {k: v for k, v in SECURE_HEADERS.items() if k != "X-Frame-Options"}
        failed = run_checks(
            AuditKind.SECURITY,
            "<html></html>",
            handler=lambda request: httpx.Response(200, headers=headers),
        )
        assert list(failed) == ["header-x-frame-options"]
        assert failed["header-x-frame-options"].severity is Severity.SERIOUS

    def test_unreachable_page(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        failed = run_checks(AuditKind.SECURITY, "<html></html>", handler=handler)
        assert list(failed) == ["headers-check-failed"]
        assert failed["headers-check-failed"].severity is Severity.MINOR

    def test_invalid_page_url(self):
        failed = run_checks(
            AuditKind.SECURITY,
            "<html></html>",
            url="https://exa\x00mple.com/",
            handler=lambda request: httpx.Response(200, headers=SECURE_HEADERS),
        )
        assert list(failed) == ["headers-check-failed"]

    def test_insecure_page(self):
        html = """<html><body>
        <script src="http://cdn.example/app.js"></script>
        <img src="http://cdn.example/a.png"><img src="http://cdn.example/b.png">
        <form action="http://shop.example/login" method="post">
          <input type="password" name="pw">
        </form>
        <form method="post"><input type="hidden" name="csrf_token" value="t"></form>
        </body></html>"""
        failed = run_checks(
            AuditKind.SECURITY,
            html,
            url="http://shop.example/",
            handler=lambda request: httpx.Response(200, headers=SECURE_HEADERS),
        )
        assert set(failed) == {
            "https-not-enabled",
            "mixed-content",
            "forms-insecure",
            "forms-no-csrf",
            "password-over-http",
        }
        assert failed["mixed-content"].message == "Found 1 script(s), 2 image(s) loaded over HTTP"
        assert failed["forms-no-csrf"].message == "1 POST form(s) missing CSRF tokens"
