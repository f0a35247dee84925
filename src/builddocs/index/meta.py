"""Per-document metadata (meta.json) generation."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

from builddocs.compiler.markdown_compiler import DOC_TITLE_SELECTOR, MissingDocTitleError
from builddocs.models import DocMeta
from builddocs.utils.files import write_text
from builddocs.utils.text import element_text, parse_html


def extract_doc_title(html: str) -> str:
    """Return the stripped text of the document's ``h1#doc-title`` heading."""
    title_element = parse_html(html).select_one(DOC_TITLE_SELECTOR)
    if title_element is None:
        raise MissingDocTitleError()
    return element_text(title_element).strip()


def generate_doc_meta(html: str, version: str, slug: str) -> DocMeta:
    return DocMeta(version=version, slug=slug, title=extract_doc_title(html))


def generate_meta_json(documents: Iterable[Tuple[str, str, str]]) -> List[DocMeta]:
    """Generate metadata for ``(html, version, slug)`` triples, one per document."""
    return [generate_doc_meta(html, version, slug) for html, version, slug in documents]


def render_meta_json(meta: Sequence[DocMeta]) -> str:
    return json.dumps([entry.to_dict() for entry in meta], indent=2, ensure_ascii=False)


def write_meta_json(meta: Sequence[DocMeta], path: Path) -> Path:
    """Write ``meta`` as a pretty-printed JSON array, in the given order."""
    return write_text(path, render_meta_json(meta))
