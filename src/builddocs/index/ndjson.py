"""Newline-delimited JSON persistence for the lexeme search index."""

from __future__ import annotations

import json
from pathlib import Path
from typing import IO, Iterable, List, Optional

from builddocs.models import LexemeRecord


def dumps_record(record: LexemeRecord) -> str:
    return json.dumps(record.to_dict(), ensure_ascii=False, separators=(",", ":"))


class NdjsonWriter:
    """Streams lexeme records to an NDJSON file, one object per line."""

    def __init__(self) -> None:
        self._handle: Optional[IO[str]] = None

    def open(self, path: Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self._handle = path.open("w", encoding="utf-8", newline="\n")

    def write(self, record: LexemeRecord) -> None:
        if self._handle is None:
            raise RuntimeError("NDJSON writer not opened. Call open() first.")
        self._handle.write(dumps_record(record) + "\n")

    def write_all(self, records: Iterable[LexemeRecord]) -> None:
        for record in records:
            self.write(record)

    def close(self) -> None:
        if self._handle is None:
            return
        self._handle.close()
        self._handle = None

    def __enter__(self) -> "NdjsonWriter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def write_lexemes_to_ndjson(records: Iterable[LexemeRecord], path: Path) -> Path:
    """Overwrite ``path`` with ``records`` serialized as NDJSON."""
    with NdjsonWriter() as writer:
        writer.open(path)
        writer.write_all(records)
    return Path(path)


def read_lexemes_from_ndjson(path: Path) -> List[LexemeRecord]:
    records: List[LexemeRecord] = []
    with Path(path).open("r", encoding="utf-8") as handle:
        for line in handle:
            line = line.strip()
            if line:
                records.append(LexemeRecord.from_dict(json.loads(line)))
    return records
