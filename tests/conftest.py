from __future__ import annotations

from collections.abc import Mapping

import pytest

from citelink.core.exceptions import FormattingError
from citelink.core.records import BibliographyRecord


class KeyTitleFormatter:
    """Formatter that exposes which record was rendered."""

    def __init__(self, failing: set[str] | None = None) -> None:
        self.failing = failing or set()
        self.calls: list[str] = []

    def format_record(self, record: BibliographyRecord) -> str:
        self.calls.append(record.key)
        if record.key in self.failing:
            raise FormattingError(record.key, "boom")
        return f"{record.key}: {record.get('title', '')}"


def make_record(key: str, **fields: object) -> BibliographyRecord:
    entry_type = str(fields.pop("entry_type", "misc"))
    return BibliographyRecord.from_mapping(key, fields, entry_type=entry_type)


def make_records(payload: Mapping[str, Mapping[str, object]]) -> list[BibliographyRecord]:
    return [make_record(key, **dict(fields)) for key, fields in payload.items()]


@pytest.fixture
def formatter() -> KeyTitleFormatter:
    return KeyTitleFormatter()
