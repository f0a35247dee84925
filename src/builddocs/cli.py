"""Command line interface for build-docs."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from builddocs.config import DEFAULT_CODE_LANGUAGE, BuildConfig
from builddocs.index.builder import build_docs


console = Console(soft_wrap=True)
err_console = Console(stderr=True, soft_wrap=True)
app = typer.Typer(help="build-docs - compile Markdown docs into HTML fragments and a search index")

USAGE = "Usage: build-docs <source-dir> <output-dir> <version>"
EXAMPLE = "Example: build-docs ./docs/1.x ./dist/docs 1.x"


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


@app.command()
def build(
    source_dir: Optional[Path] = typer.Argument(None, help="Directory containing Markdown sources."),
    output_dir: Optional[Path] = typer.Argument(None, help="Directory for build artifacts."),
    version: Optional[str] = typer.Argument(None, help="Documentation version, e.g. 1.x"),
    workers: int = typer.Option(1, "--workers", min=1, help="Documents compiled in parallel"),
    highlight: bool = typer.Option(True, "--highlight/--no-highlight", help="Syntax highlight code blocks"),
    default_language: str = typer.Option(
        DEFAULT_CODE_LANGUAGE, "--default-language", help="Language assumed for untagged code blocks"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Build documentation from Markdown sources."""
    if source_dir is None or output_dir is None or version is None:
        err_console.print(USAGE, markup=False)
        err_console.print(EXAMPLE, markup=False)
        raise typer.Exit(code=1)

    _setup_logging(verbose)

    if not source_dir.exists():
        err_console.print(f"Error: Source directory does not exist: {source_dir}", markup=False)
        raise typer.Exit(code=1)

    config = BuildConfig(
        source_dir=source_dir,
        output_dir=output_dir,
        version=version,
        workers=workers,
        highlight=highlight,
        default_language=default_language,
    ).resolve(Path.cwd())

    console.print("Building documentation...")
    console.print(f"  Source: {config.source_dir}", markup=False)
    console.print(f"  Output: {config.output_dir}", markup=False)
    console.print(f"  Version: {config.version}", markup=False)
    console.print("")

    try:
        result = build_docs(config)
    except Exception as exc:
        err_console.print(f"Build failed: {exc}", markup=False)
        raise typer.Exit(code=1) from exc

    console.print("[bold green]Build complete![/bold green]")
    console.print(f"  Documents processed: {result.documents_processed}")
    console.print(f"  Lexemes generated: {result.lexemes_generated}")
    console.print("  Output files:")
    console.print(
        f"    - Rendered HTML: {len(result.rendered_files)} files in {config.rendered_dir}",
        markup=False,
    )
    console.print(f"    - Search index: {result.lexemes_path}", markup=False)
    console.print(f"    - Metadata: {result.meta_path}", markup=False)


def main() -> None:
    app()
