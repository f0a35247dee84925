"""Lexeme extraction from compiled documentation HTML.

Walks the ``<article>`` of a wrapped document in document order and emits a
:class:`LexemeRecord` for every heading, paragraph, list item and blockquote.
Each record carries the text of the most recent heading seen at every level,
plus a deep link back to the nearest anchor.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from bs4 import Tag

from builddocs.models import INDEXABLE_ELEMENTS, Context, LexemeRecord
from builddocs.utils.text import class_names, element_text, parse_html

LOGGER = logging.getLogger(__name__)

ARTICLE_SELECTOR = "body > main > article"
HEADING_LEVELS = {"h1": 1, "h2": 2, "h3": 3, "h4": 4, "h5": 5}
SKIPPED_NAV_CLASS = "toc-nav"
CONTEXT_CLASSES = (
    ("context-framework", Context.FRAMEWORK),
    ("context-library", Context.LIBRARY),
)


@dataclass(slots=True)
class HeadingContext:
    """Most recent heading element seen at each level h1..h5."""

    headings: List[Optional[Tag]] = field(default_factory=lambda: [None] * 5)

    def enter(self, level: int, heading: Tag) -> None:
        """Record ``heading`` at ``level`` and forget every deeper heading."""
        self.headings[level - 1] = heading
        for deeper in range(level, 5):
            self.headings[deeper] = None

    def text_at(self, level: int) -> Optional[str]:
        heading = self.headings[level - 1]
        return element_text(heading) if heading is not None else None

    def nearest(self) -> Optional[Tag]:
        for heading in reversed(self.headings):
            if heading is not None:
                return heading
        return None


def _is_skipped(element: Tag) -> bool:
    return element.name == "nav" and any(SKIPPED_NAV_CLASS in cls for cls in class_names(element))


def detect_context(element: Tag) -> Context:
    """Resolve the context class on ``element`` or its closest ancestor."""
    current: Optional[Tag] = element
    while current is not None:
        classes = class_names(current)
        for class_name, context in CONTEXT_CLASSES:
            if class_name in classes:
                return context
        current = current.parent
    return Context.GLOBAL


def _anchor(base_link: str, heading: Optional[Tag]) -> str:
    if heading is None:
        return base_link
    heading_id = heading.get("id")
    return f"{base_link}#{heading_id}" if heading_id else base_link


def build_link(element: Tag, version: str, slug: str, state: HeadingContext) -> str:
    """Build the deep link for ``element``.

    ``h1`` links to the document itself, ``h2``-``h5`` to their own id, and
    every other element to the id of the nearest enclosing heading.
    """
    base_link = f"/docs/{version}/{slug}"
    if element.name == "h1":
        return base_link
    if element.name in HEADING_LEVELS:
        return _anchor(base_link, element)
    return _anchor(base_link, state.nearest())


def _create_record(element: Tag, version: str, slug: str, state: HeadingContext) -> LexemeRecord:
    return LexemeRecord(
        version=version,
        context=detect_context(element),
        link=build_link(element, version, slug, state),
        html_element_type=element.name,
        inner_text=element_text(element),
        h1_inner_text=state.text_at(1),
        h2_inner_text=state.text_at(2),
        h3_inner_text=state.text_at(3),
        h4_inner_text=state.text_at(4),
        h5_inner_text=state.text_at(5),
    )


def _walk(
    node: Tag,
    version: str,
    slug: str,
    state: HeadingContext,
    lexemes: List[LexemeRecord],
) -> None:
    for child in node.children:
        if not isinstance(child, Tag) or _is_skipped(child):
            continue

        level = HEADING_LEVELS.get(child.name)
        if level is not None:
            state.enter(level, child)
        if child.name in INDEXABLE_ELEMENTS:
            lexemes.append(_create_record(child, version, slug, state))

        _walk(child, version, slug, state, lexemes)


def extract_lexemes(html: str, version: str, slug: str) -> List[LexemeRecord]:
    """Extract lexeme records from a wrapped ``<body><main><article>`` document."""
    soup = parse_html(html)
    article = soup.select_one(ARTICLE_SELECTOR)
    if article is None:
        LOGGER.warning("No article element found for %s/%s", version, slug)
        return []

    lexemes: List[LexemeRecord] = []
    _walk(article, version, slug, HeadingContext(), lexemes)
    return lexemes
