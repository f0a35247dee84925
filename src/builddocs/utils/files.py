"""Utility helpers for working with files."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

from builddocs.config import MARKDOWN_SUFFIX


def iter_markdown_paths(source_dir: Path, suffix: str = MARKDOWN_SUFFIX) -> Iterator[Path]:
    """Yield Markdown files directly inside ``source_dir`` in name order."""
    for item in sorted(source_dir.iterdir(), key=lambda child: child.name):
        if item.is_file() and item.name.endswith(suffix):
            yield item


def slug_for(path: Path, suffix: str = MARKDOWN_SUFFIX) -> str:
    """Return the document slug: the file name without its Markdown suffix."""
    name = path.name
    return name[: -len(suffix)] if name.endswith(suffix) else path.stem


def write_text(path: Path, content: str) -> Path:
    """Overwrite ``path`` with UTF-8 ``content``, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="\n") as handle:
        handle.write(content)
    return path
