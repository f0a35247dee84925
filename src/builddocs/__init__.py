"""build-docs: Markdown documentation compiler and search index builder."""

__version__ = "0.1.0"
