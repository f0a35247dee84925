"""Text helpers for walking parsed HTML."""

from __future__ import annotations

from bs4 import BeautifulSoup, Tag

HTML_PARSER = "html.parser"


def parse_html(html: str) -> BeautifulSoup:
    """Parse an HTML document or fragment without adding an html/head shell."""
    return BeautifulSoup(html, HTML_PARSER)


def element_text(element: Tag) -> str:
    """Concatenate every descendant text node, dropping markup and comments."""
    return element.get_text()


def class_names(element: Tag) -> list[str]:
    classes = element.get("class") or []
    if isinstance(classes, str):
        return classes.split()
    return list(classes)


def wrap_fragment(fragment: str) -> str:
    """Wrap a rendered fragment in the body/main/article shell used for extraction."""
    return f"<body><main><article>{fragment}</article></main></body>"
