"""Markdown to HTML fragment compilation."""

from __future__ import annotations

import html
import logging
import re
from pathlib import Path
from typing import Dict, List, Optional
from xml.etree.ElementTree import Element

import markdown
from markdown.extensions import Extension
from markdown.extensions.tables import TableExtension
from markdown.extensions.toc import remove_fnrefs, render_inner_html, strip_tags
from markdown.preprocessors import Preprocessor
from markdown.treeprocessors import Treeprocessor

from builddocs.compiler.highlight import highlight_code
from builddocs.config import DEFAULT_CODE_LANGUAGE
from builddocs.utils.text import parse_html

LOGGER = logging.getLogger(__name__)

DOC_TITLE_ID = "doc-title"
DOC_TITLE_SELECTOR = f"h1#{DOC_TITLE_ID}"

_MD_LINK_SUFFIX = re.compile(r"\.md(?=#|$)")
_HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")
_SLUG_STRIP = re.compile(r"[^\w\- ]")
_BLOCK_DIV_OPEN = re.compile(r"^([ \t]*<div\b(?![^>]*\bmarkdown\s*=)[^>]*)>")


def gfm_slug(text: str) -> str:
    """Slug ``text`` the way GitHub does: lowercase, punctuation dropped, spaces to hyphens."""
    return _SLUG_STRIP.sub("", text.lower()).replace(" ", "-")


class MissingDocTitleError(ValueError):
    """Raised when a document lacks its ``h1#doc-title`` heading."""

    def __init__(self, message: str = f"Document missing {DOC_TITLE_SELECTOR} element") -> None:
        super().__init__(message)


class _MarkdownLinkRewriter(Treeprocessor):
    """Turn ``other.md#anchor`` links into extension-less ``other#anchor`` URLs."""

    def run(self, root: Element) -> None:
        for anchor in root.iter("a"):
            href = anchor.get("href")
            if href and _MD_LINK_SUFFIX.search(href):
                anchor.set("href", _MD_LINK_SUFFIX.sub("", href, count=1))


class _BlockDivMarkdown(Preprocessor):
    """Mark block ``<div>`` wrappers so their contents are parsed as Markdown."""

    def run(self, lines: List[str]) -> List[str]:
        return [_BLOCK_DIV_OPEN.sub(r'\1 markdown="1">', line) for line in lines]


class _GfmHeadingIds(Treeprocessor):
    """Give every heading without an id a GitHub-style slug.

    Repeated slugs get ``-1``, ``-2``... suffixes. Ids set explicitly (attribute
    lists, raw HTML) are left alone.
    """

    def run(self, root: Element) -> None:
        occurrences: Dict[str, int] = {}
        for element in root.iter():
            if element.tag not in _HEADING_TAGS or "id" in element.attrib:
                continue
            name = html.unescape(strip_tags(render_inner_html(remove_fnrefs(element), self.md)))
            element.set("id", _unique_slug(gfm_slug(name), occurrences))


def _unique_slug(slug: str, occurrences: Dict[str, int]) -> str:
    original = slug
    while slug in occurrences:
        occurrences[original] += 1
        slug = f"{original}-{occurrences[original]}"
    occurrences[slug] = 0
    return slug


class MarkdownLinkExtension(Extension):
    def extendMarkdown(self, md: markdown.Markdown) -> None:  # noqa: N802
        # Must run after the inline processor (priority 20) has built the anchors
        md.treeprocessors.register(_MarkdownLinkRewriter(md), "md_links", 4)


class DocsHtmlExtension(Extension):
    """Heading ids and Markdown-in-``<div>`` handling for documentation pages."""

    def extendMarkdown(self, md: markdown.Markdown) -> None:  # noqa: N802
        # Between fenced_code (25) and html_block (20) so fenced code is already stashed
        md.preprocessors.register(_BlockDivMarkdown(md), "block_div_markdown", 22)
        # After attr_list (8) so {#explicit} ids win
        md.treeprocessors.register(_GfmHeadingIds(md), "gfm_heading_ids", 6)


class MarkdownCompiler:
    """Compiles documentation Markdown into HTML fragments.

    Raw HTML passes through untouched, except that block ``<div>`` wrappers
    (such as ``context-framework`` sections) have their contents compiled as
    Markdown. Markdown headings get GitHub-style ids with no prefix.
    """

    def __init__(
        self,
        *,
        highlight: bool = True,
        default_language: str = DEFAULT_CODE_LANGUAGE,
    ) -> None:
        self.highlight = highlight
        self.default_language = default_language

    def _new_markdown(self) -> markdown.Markdown:
        # A fresh instance per document keeps compilation thread-safe
        return markdown.Markdown(
            extensions=[
                TableExtension(use_align_attribute=True),
                "fenced_code",
                "attr_list",
                "md_in_html",
                DocsHtmlExtension(),
                MarkdownLinkExtension(),
            ],
            output_format="html",
        )

    def render(self, markdown_text: str) -> str:
        """Render Markdown to an HTML fragment without checking for a title."""
        fragment = self._new_markdown().convert(markdown_text)
        if self.highlight:
            fragment = highlight_code(fragment, self.default_language)
        return fragment

    def compile(self, markdown_text: str) -> str:
        """Render Markdown and require an ``h1#doc-title`` in the result."""
        fragment = self.render(markdown_text)
        if parse_html(fragment).select_one(DOC_TITLE_SELECTOR) is None:
            raise MissingDocTitleError()
        return fragment


def compile_markdown_file(path: Path, compiler: Optional[MarkdownCompiler] = None) -> str:
    """Compile a single Markdown file to an HTML fragment."""
    compiler = compiler or MarkdownCompiler()
    LOGGER.debug("Compiling %s", path)
    return compiler.compile(path.read_text(encoding="utf-8"))
