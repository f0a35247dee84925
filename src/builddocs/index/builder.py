"""Documentation build pipeline."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

from builddocs.compiler.markdown_compiler import MarkdownCompiler
from builddocs.config import (
    LEXEMES_FILENAME,
    META_FILENAME,
    RENDERED_DIRNAME,
    SEARCH_DIRNAME,
    BuildConfig,
)
from builddocs.index.lexemes import extract_lexemes
from builddocs.index.meta import generate_doc_meta, write_meta_json
from builddocs.index.ndjson import write_lexemes_to_ndjson
from builddocs.index.validation import validate_lexemes
from builddocs.models import BuildResult, DocMeta, LexemeRecord
from builddocs.utils.files import iter_markdown_paths, slug_for, write_text
from builddocs.utils.text import wrap_fragment

LOGGER = logging.getLogger(__name__)


def find_markdown(source_dir: Path) -> list[Path]:
    """Find all Markdown sources directly inside ``source_dir``."""
    return list(iter_markdown_paths(source_dir))


@dataclass(slots=True)
class DocumentOutput:
    slug: str
    rendered_path: Path
    lexemes: List[LexemeRecord]
    meta: DocMeta


class DocsBuilder:
    """Coordinates compilation, extraction and persistence of a docs version."""

    def __init__(
        self,
        compiler: Optional[MarkdownCompiler] = None,
        *,
        workers: int = 1,
    ) -> None:
        self.compiler = compiler or MarkdownCompiler()
        if workers < 1:
            raise ValueError(f"workers must be >= 1 (got: {workers})")
        self.workers = workers

    def build(self, source_dir: Path, output_dir: Path, version: str) -> BuildResult:
        """Build every Markdown document in ``source_dir`` into ``output_dir``."""
        source_dir = Path(source_dir)
        output_dir = Path(output_dir)
        rendered_dir = output_dir / RENDERED_DIRNAME
        search_dir = output_dir / SEARCH_DIRNAME
        rendered_dir.mkdir(parents=True, exist_ok=True)
        search_dir.mkdir(parents=True, exist_ok=True)

        markdown_files = find_markdown(source_dir)
        LOGGER.info("Found %d markdown files in %s", len(markdown_files), source_dir)

        outputs = self._process_all(markdown_files, rendered_dir, version)

        all_lexemes: List[LexemeRecord] = []
        all_meta: List[DocMeta] = []
        for output in outputs:
            all_lexemes.extend(output.lexemes)
            all_meta.append(output.meta)

        # Runs only once every document has been processed
        validate_lexemes(all_lexemes)

        lexemes_path = write_lexemes_to_ndjson(all_lexemes, search_dir / LEXEMES_FILENAME)
        meta_path = write_meta_json(all_meta, output_dir / META_FILENAME)
        LOGGER.info("Wrote %d lexemes to %s", len(all_lexemes), lexemes_path)
        LOGGER.info("Wrote metadata for %d documents to %s", len(all_meta), meta_path)

        return BuildResult(
            documents_processed=len(markdown_files),
            lexemes_generated=len(all_lexemes),
            lexemes_path=lexemes_path,
            meta_path=meta_path,
            rendered_files=[output.rendered_path for output in outputs],
        )

    def _process_all(
        self, markdown_files: Sequence[Path], rendered_dir: Path, version: str
    ) -> List[DocumentOutput]:
        if self.workers == 1 or len(markdown_files) < 2:
            return [self._process_single(path, rendered_dir, version) for path in markdown_files]

        # map() yields in submission order, so output matches a sequential build
        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            return list(
                executor.map(
                    lambda path: self._process_single(path, rendered_dir, version),
                    markdown_files,
                )
            )

    def _process_single(self, path: Path, rendered_dir: Path, version: str) -> DocumentOutput:
        """Compile one document, extract its lexemes and persist its fragment."""
        slug = slug_for(path)
        LOGGER.info("Processing: %s", path.name)

        fragment = self.compiler.compile(path.read_text(encoding="utf-8"))
        wrapped = wrap_fragment(fragment)

        lexemes = extract_lexemes(wrapped, version, slug)
        meta = generate_doc_meta(wrapped, version, slug)
        rendered_path = write_text(rendered_dir / f"{slug}.html", fragment)
        LOGGER.debug("Extracted %d lexemes from %s", len(lexemes), slug)

        return DocumentOutput(slug=slug, rendered_path=rendered_path, lexemes=lexemes, meta=meta)


def build_docs(config: BuildConfig) -> BuildResult:
    """Run a full build described by ``config``."""
    compiler = MarkdownCompiler(highlight=config.highlight, default_language=config.default_language)
    builder = DocsBuilder(compiler, workers=config.workers)
    return builder.build(config.source_dir, config.output_dir, config.version)
