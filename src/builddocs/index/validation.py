"""Whole-build validation of extracted lexeme records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional

from builddocs.models import VALID_CONTEXTS, LexemeRecord

DOCS_LINK_PREFIX = "/docs/"


@dataclass(slots=True, frozen=True)
class Violation:
    """A single schema violation on the lexeme at ``index``."""

    index: int
    field: str
    actual: Optional[str]
    link: str = ""

    @property
    def message(self) -> str:
        if self.field == "h1_inner_text":
            return f"Lexeme {self.index}: Missing h1_inner_text (link: {self.link})"
        if self.field == "link":
            return f"Lexeme {self.index}: Link must start with {DOCS_LINK_PREFIX} (got: {self.actual})"
        return (
            f"Lexeme {self.index}: Invalid context value "
            f"(got: {self.actual}, expected one of: {', '.join(VALID_CONTEXTS)})"
        )


class LexemeValidationError(ValueError):
    """Raised with every violation found across a batch of lexemes."""

    def __init__(self, violations: List[Violation]) -> None:
        self.violations = violations
        lines = "\n".join(violation.message for violation in violations)
        super().__init__(f"Lexeme validation failed:\n{lines}")


def collect_violations(lexemes: Iterable[LexemeRecord]) -> List[Violation]:
    """Check every record and return all violations in record order."""
    violations: List[Violation] = []
    for index, record in enumerate(lexemes):
        if not record.h1_inner_text:
            violations.append(
                Violation(index, "h1_inner_text", record.h1_inner_text, link=record.link)
            )
        if not record.link.startswith(DOCS_LINK_PREFIX):
            violations.append(Violation(index, "link", record.link, link=record.link))
        if record.context_value not in VALID_CONTEXTS:
            violations.append(Violation(index, "context", record.context_value, link=record.link))
    return violations


def validate_lexemes(lexemes: Iterable[LexemeRecord]) -> None:
    """Raise :class:`LexemeValidationError` if any record violates the schema."""
    violations = collect_violations(lexemes)
    if violations:
        raise LexemeValidationError(violations)
