"""Build configuration defaults."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

MARKDOWN_SUFFIX = ".md"
RENDERED_DIRNAME = "rendered"
SEARCH_DIRNAME = "search"
LEXEMES_FILENAME = "lexemes.ndjson"
META_FILENAME = "meta.json"
DEFAULT_CODE_LANGUAGE = "php"


@dataclass(slots=True)
class BuildConfig:
    source_dir: Path
    output_dir: Path
    version: str
    workers: int = 1
    highlight: bool = True
    default_language: str = DEFAULT_CODE_LANGUAGE

    def __post_init__(self) -> None:
        self.source_dir = Path(self.source_dir)
        self.output_dir = Path(self.output_dir)
        if self.workers < 1:
            raise ValueError(f"workers must be >= 1 (got: {self.workers})")

    @property
    def rendered_dir(self) -> Path:
        return self.output_dir / RENDERED_DIRNAME

    @property
    def search_dir(self) -> Path:
        return self.output_dir / SEARCH_DIRNAME

    @property
    def lexemes_path(self) -> Path:
        return self.search_dir / LEXEMES_FILENAME

    @property
    def meta_path(self) -> Path:
        return self.output_dir / META_FILENAME

    def resolve(self, base_dir: Path | None = None) -> "BuildConfig":
        """Return a copy whose relative directories are anchored at ``base_dir``."""
        if base_dir is None:
            return self

        def _anchor(path: Path) -> Path:
            return path if path.is_absolute() else base_dir / path

        return BuildConfig(
            source_dir=_anchor(self.source_dir),
            output_dir=_anchor(self.output_dir),
            version=self.version,
            workers=self.workers,
            highlight=self.highlight,
            default_language=self.default_language,
        )
