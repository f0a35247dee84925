"""Core build-docs data models."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union


class Context(str, Enum):
    """Semantic scope a piece of documentation applies to."""

    FRAMEWORK = "framework"
    LIBRARY = "library"
    GLOBAL = "global"


VALID_CONTEXTS = tuple(context.value for context in Context)

INDEXABLE_ELEMENTS = ("h1", "h2", "h3", "h4", "h5", "p", "li", "blockquote")


@dataclass(slots=True, frozen=True)
class LexemeRecord:
    """One searchable unit of text extracted from a rendered document."""

    version: str
    context: Union[Context, str]
    link: str
    html_element_type: str
    inner_text: str
    h1_inner_text: Optional[str] = None
    h2_inner_text: Optional[str] = None
    h3_inner_text: Optional[str] = None
    h4_inner_text: Optional[str] = None
    h5_inner_text: Optional[str] = None

    @property
    def context_value(self) -> str:
        return self.context.value if isinstance(self.context, Context) else str(self.context)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["context"] = self.context_value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LexemeRecord":
        raw_context = data.get("context", "")
        context: Union[Context, str] = (
            Context(raw_context) if raw_context in VALID_CONTEXTS else raw_context
        )
        return cls(
            version=data["version"],
            context=context,
            link=data["link"],
            html_element_type=data["html_element_type"],
            inner_text=data["inner_text"],
            h1_inner_text=data.get("h1_inner_text"),
            h2_inner_text=data.get("h2_inner_text"),
            h3_inner_text=data.get("h3_inner_text"),
            h4_inner_text=data.get("h4_inner_text"),
            h5_inner_text=data.get("h5_inner_text"),
        )


@dataclass(slots=True, frozen=True)
class DocMeta:
    """Summary of a single compiled document."""

    version: str
    slug: str
    title: str

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass(slots=True)
class BuildResult:
    documents_processed: int
    lexemes_generated: int
    lexemes_path: Path
    meta_path: Path
    rendered_files: List[Path] = field(default_factory=list)
