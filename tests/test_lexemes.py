"""Tests for lexeme extraction."""

from __future__ import annotations

import re

from builddocs.index.lexemes import HeadingContext, detect_context, extract_lexemes
from builddocs.models import Context
from builddocs.utils.text import parse_html, wrap_fragment


def _doc(body: str) -> str:
    return f"""
<body>
    <main>
        <article>
            {body}
        </article>
    </main>
</body>
"""


class TestHeadingContext:
    """Test the per-document heading register."""

    def test_enter_clears_deeper_levels(self) -> None:
        soup = parse_html("<h1>A</h1><h2>B</h2><h3>C</h3><h2>D</h2>")
        h1, h2, h3, h2b = soup.find_all(["h1", "h2", "h3"])
        state = HeadingContext()

        state.enter(1, h1)
        state.enter(2, h2)
        state.enter(3, h3)
        state.enter(2, h2b)

        assert state.text_at(1) == "A"
        assert state.text_at(2) == "D"
        assert state.text_at(3) is None

    def test_nearest_heading(self) -> None:
        soup = parse_html("<h1>A</h1><h3>C</h3>")
        state = HeadingContext()
        assert state.nearest() is None

        state.enter(1, soup.h1)
        state.enter(3, soup.h3)

        assert state.nearest() is soup.h3


class TestDomWalking:
    def test_skips_toc_nav(self) -> None:
        """Should skip nav.toc-nav and everything inside it."""
        html = _doc(
            """
            <h1 id="title">Title</h1>
            <nav class="toc-nav">
                <h2>Table of Contents</h2>
                <p>Should be skipped</p>
            </nav>
            <p>Regular paragraph</p>
            """
        )

        lexemes = extract_lexemes(html, "1.x", "test")

        assert [lexeme.html_element_type for lexeme in lexemes] == ["h1", "p"]
        assert lexemes[1].inner_text == "Regular paragraph"
        assert lexemes[1].h2_inner_text is None

    def test_other_nav_is_walked(self) -> None:
        html = _doc('<h1 id="title">Title</h1><nav class="breadcrumbs"><p>Crumb</p></nav>')

        lexemes = extract_lexemes(html, "1.x", "test")

        assert [lexeme.inner_text for lexeme in lexemes] == ["Title", "Crumb"]

    def test_no_article_returns_empty(self) -> None:
        html = "<body><main><h1>No article wrapper</h1></main></body>"

        assert extract_lexemes(html, "1.x", "test") == []

    def test_only_article_content(self) -> None:
        html = (
            "<body><main><article><h1 id=\"doc-title\">Inside</h1></article>"
            "<p>Outside</p></main></body>"
        )

        lexemes = extract_lexemes(html, "1.x", "test")

        assert [lexeme.inner_text for lexeme in lexemes] == ["Inside"]


class TestContextDetection:
    def test_framework_from_ancestor(self) -> None:
        html = _doc('<h1 id="title">Title</h1><div class="context-framework"><p>Framework content</p></div>')

        lexemes = extract_lexemes(html, "1.x", "test")
        paragraph = next(lexeme for lexeme in lexemes if lexeme.inner_text == "Framework content")

        assert paragraph.context is Context.FRAMEWORK

    def test_library_from_ancestor(self) -> None:
        html = _doc('<h1 id="title">Title</h1><div class="context-library"><p>Library content</p></div>')

        lexemes = extract_lexemes(html, "1.x", "test")
        paragraph = next(lexeme for lexeme in lexemes if lexeme.inner_text == "Library content")

        assert paragraph.context is Context.LIBRARY

    def test_defaults_to_global(self) -> None:
        html = _doc('<h1 id="title">Title</h1><p>Global content</p>')

        lexemes = extract_lexemes(html, "1.x", "test")

        assert all(lexeme.context is Context.GLOBAL for lexeme in lexemes)

    def test_nearest_ancestor_wins(self) -> None:
        soup = parse_html('<div class="context-framework"><div class="context-library"><p>x</p></div></div>')

        assert detect_context(soup.p) is Context.LIBRARY

    def test_element_own_class(self) -> None:
        soup = parse_html('<p class="context-framework">x</p>')

        assert detect_context(soup.p) is Context.FRAMEWORK


class TestLinkGeneration:
    def test_h1_links_to_document(self) -> None:
        html = _doc('<h1 id="installation">Installation</h1>')

        lexemes = extract_lexemes(html, "1.x", "installation")

        assert len(lexemes) == 1
        assert lexemes[0].link == "/docs/1.x/installation"

    def test_h2_to_h5_link_to_own_id(self) -> None:
        html = _doc(
            """
            <h1 id="routing">Routing</h1>
            <h2 id="route-constraints">Route Constraints</h2>
            <h3 id="regex-constraints">Regex Constraints</h3>
            <h4 id="h4-id">Four</h4>
            <h5 id="h5-id">Five</h5>
            """
        )

        links = {lexeme.html_element_type: lexeme.link for lexeme in extract_lexemes(html, "1.x", "routing")}

        assert links["h2"] == "/docs/1.x/routing#route-constraints"
        assert links["h3"] == "/docs/1.x/routing#regex-constraints"
        assert links["h4"] == "/docs/1.x/routing#h4-id"
        assert links["h5"] == "/docs/1.x/routing#h5-id"

    def test_heading_without_id_links_to_document(self) -> None:
        html = _doc('<h1 id="doc-title">Routing</h1><h2>No Id</h2><p>Under it</p>')

        lexemes = extract_lexemes(html, "1.x", "routing")

        assert lexemes[1].link == "/docs/1.x/routing"
        assert lexemes[2].link == "/docs/1.x/routing"

    def test_content_uses_nearest_heading(self) -> None:
        html = _doc(
            """
            <h1 id="routing">Routing</h1>
            <h2 id="basics">Basics</h2>
            <p>First paragraph under h2</p>
            <h3 id="advanced">Advanced</h3>
            <p>Second paragraph under h3</p>
            """
        )

        lexemes = extract_lexemes(html, "1.x", "routing")
        first = next(lexeme for lexeme in lexemes if lexeme.inner_text == "First paragraph under h2")
        second = next(lexeme for lexeme in lexemes if lexeme.inner_text == "Second paragraph under h3")

        assert first.link == "/docs/1.x/routing#basics"
        assert second.link == "/docs/1.x/routing#advanced"

    def test_content_under_h1_uses_h1_id(self) -> None:
        html = _doc('<h1 id="doc-title">Routing</h1><p>Intro</p>')

        lexemes = extract_lexemes(html, "1.x", "routing")

        assert lexemes[1].link == "/docs/1.x/routing#doc-title"

    def test_content_without_heading_links_to_document(self) -> None:
        html = _doc("<p>Orphan</p>")

        lexemes = extract_lexemes(html, "1.x", "routing")

        assert lexemes[0].link == "/docs/1.x/routing"
        assert lexemes[0].h1_inner_text is None

    def test_all_links_match_document_pattern(self) -> None:
        html = wrap_fragment(
            '<h1 id="doc-title">Guide</h1><h2 id="a">A</h2><p>x</p><ul><li>y</li></ul>'
            "<h3>B</h3><blockquote>z</blockquote>"
        )
        pattern = re.compile(r"^/docs/2\.x/guide(#.+)?$")

        lexemes = extract_lexemes(html, "2.x", "guide")

        assert lexemes
        assert all(pattern.match(lexeme.link) for lexeme in lexemes)


class TestHeadingHierarchy:
    def test_resets_lower_headings(self) -> None:
        html = _doc(
            """
            <h1 id="title">Title</h1>
            <h2 id="section">Section</h2>
            <h3 id="subsection">Subsection</h3>
            <p>Paragraph under h3</p>
            <h2 id="new-section">New Section</h2>
            <p>Paragraph under new h2</p>
            """
        )

        lexemes = extract_lexemes(html, "1.x", "test")
        first = next(lexeme for lexeme in lexemes if lexeme.inner_text == "Paragraph under h3")
        second = next(lexeme for lexeme in lexemes if lexeme.inner_text == "Paragraph under new h2")

        assert (first.h1_inner_text, first.h2_inner_text, first.h3_inner_text) == (
            "Title",
            "Section",
            "Subsection",
        )
        assert second.h1_inner_text == "Title"
        assert second.h2_inner_text == "New Section"
        assert second.h3_inner_text is None

    def test_second_h2_replaces_first(self) -> None:
        html = wrap_fragment("<h1>A</h1><h2>B</h2><p>x</p><h2>C</h2><p>y</p>")

        lexemes = extract_lexemes(html, "1.x", "test")
        x = next(lexeme for lexeme in lexemes if lexeme.inner_text == "x")
        y = next(lexeme for lexeme in lexemes if lexeme.inner_text == "y")

        assert x.h2_inner_text == "B"
        assert x.h3_inner_text is None
        assert y.h2_inner_text == "C"

    def test_h3_keeps_shallower_levels(self) -> None:
        html = wrap_fragment("<h1>A</h1><h2>B</h2><h3>C</h3><h4>D</h4><h3>E</h3><p>x</p>")

        x = extract_lexemes(html, "1.x", "test")[-1]

        assert (x.h1_inner_text, x.h2_inner_text, x.h3_inner_text, x.h4_inner_text) == ("A", "B", "E", None)

    def test_heading_records_include_themselves(self) -> None:
        html = wrap_fragment("<h1>A</h1><h2>B</h2>")

        h1, h2 = extract_lexemes(html, "1.x", "test")

        assert h1.h1_inner_text == "A"
        assert h2.h2_inner_text == "B"

    def test_deeper_context_implies_h1(self) -> None:
        html = wrap_fragment(
            '<h1 id="doc-title">T</h1><h2>S</h2><p>a</p><h3>U</h3><li>b</li><h2>V</h2><blockquote>c</blockquote>'
        )

        for lexeme in extract_lexemes(html, "1.x", "test"):
            if lexeme.h2_inner_text is not None:
                assert lexeme.h1_inner_text is not None

    def test_state_is_per_document(self) -> None:
        first = wrap_fragment("<h1>A</h1><h2>B</h2>")
        second = wrap_fragment("<p>orphan</p>")

        extract_lexemes(first, "1.x", "one")
        lexemes = extract_lexemes(second, "1.x", "two")

        assert lexemes[0].h1_inner_text is None
        assert lexemes[0].h2_inner_text is None


class TestTextExtraction:
    def test_recursive_text(self) -> None:
        html = _doc('<h1 id="title">Title</h1><p>Text with <strong>bold</strong> and <em>italic</em> content</p>')

        paragraph = next(lexeme for lexeme in extract_lexemes(html, "1.x", "test") if lexeme.html_element_type == "p")

        assert paragraph.inner_text == "Text with bold and italic content"


class TestIndexableElements:
    def test_only_indexable_elements(self) -> None:
        html = _doc(
            """
            <h1 id="title">Title</h1>
            <h2 id="section">Section</h2>
            <p>Paragraph</p>
            <ul>
                <li>List item</li>
            </ul>
            <blockquote>Quote</blockquote>
            <div>Div should not be indexed</div>
            <span>Span should not be indexed</span>
            <pre><code>code should not be indexed</code></pre>
            """
        )

        types = [lexeme.html_element_type for lexeme in extract_lexemes(html, "1.x", "test")]

        assert types == ["h1", "h2", "p", "li", "blockquote"]

    def test_version_is_passed_through(self) -> None:
        html = wrap_fragment("<h1>A</h1>")

        assert extract_lexemes(html, "2.x", "test")[0].version == "2.x"
