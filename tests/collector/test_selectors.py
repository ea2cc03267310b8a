"""Tests for selector resolution and element markup."""

import pytest

from pagewatch.collector import HtmlDocument
from pagewatch.collector.selectors import (
    element_html,
    is_element,
    node_element,
    resolve_selector,
    simple_selector,
    tag_from_selector,
)

HTML = """<html><body>
<div id="main"><span class="tag hot new">a</span><span>b</span><span>c</span></div>
<ul><li class="item">1</li><li class="item">2</li><li class="item">3</li><li class="item">4</li></ul>
</body></html>"""


@pytest.fixture
def document():
    return HtmlDocument(HTML, url="https://example.com/")


class TestResolveSelector:
    def test_prefers_id(self, document):
        assert resolve_selector(document.select_one("div"), document) == "#main"

    def test_class_selector_uses_two_classes(self, document):
        node = document.select_one("span.tag")
        assert resolve_selector(node, document) == "span.tag.hot"

    def test_common_class_falls_back_to_position(self, document):
        node = document.select("li")[2]
        selector = resolve_selector(node, document)
        assert selector == "html > body:nth-child(1) > ul:nth-child(2) > li:nth-child(3)"
        assert document.select_one(selector) is node

    def test_plain_element_under_id(self, document):
        node = document.select("#main > span")[1]
        assert resolve_selector(node, document) == "#main > span:nth-child(2)"

    def test_root_is_bare_tag(self, document):
        assert resolve_selector(document.select_one("html"), document) == "html"

    def test_numeric_id_is_escaped(self):
        document = HtmlDocument('<html><body><div id="1hero">x</div></body></html>')
        node = document.select_one("div")
        selector = resolve_selector(node, document)
        assert selector == "#\\31 hero"
        assert document.select_one(selector) is node

    def test_class_with_colon_is_escaped(self):
        document = HtmlDocument('<html><body><div class="md:flex">x</div></body></html>')
        node = document.select_one("div")
        selector = resolve_selector(node, document)
        assert selector == "div.md\\:flex"
        assert document.select_one(selector) is node
        assert simple_selector(node) == selector
        assert element_html(document, selector) == '<div class="md:flex">x</div>'

    def test_is_element(self, document):
        assert is_element(document.select_one("li"))
        assert not is_element(document.soup)
        assert not is_element(document.select_one("li").string)


class TestElementHtml:
    def test_outer_html(self, document):
        assert element_html(document, "#main > span:nth-child(2)") == "<span>b</span>"

    def test_truncates_long_markup(self):
        document = HtmlDocument(f'<div id="x">{"y" * 500}</div>')
        html = element_html(document, "#x")
        assert len(html) == 204
        assert html.endswith("...>")

    def test_placeholder_when_missing(self, document):
        assert element_html(document, "#nope") == '<element selector="#nope">...</element>'

    def test_placeholder_on_bad_selector(self, document):
        assert element_html(document, "div[") == '<element selector="div[">...</element>'


class TestSimpleSelectors:
    @pytest.mark.parametrize(
        "selector,tag",
        [("img.hero", "img"), ("h1", "h1"), ("#logo", "div"), ("", "div")],
    )
    def test_tag_from_selector(self, selector, tag):
        assert tag_from_selector(selector) == tag

    def test_simple_selector(self, document):
        assert simple_selector(document.select_one("div")) == "#main"
        assert simple_selector(document.select_one("li")) == "li.item"
        assert simple_selector(document.select_one("ul")) == "ul"

    def test_node_element(self, document):
        info = node_element(document, document.select_one("ul"))
        assert info.selector == "ul"
        assert info.html.startswith("<ul>")
