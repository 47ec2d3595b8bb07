"""Parsing helpers for BibTeX payloads."""

from __future__ import annotations

from pybtex.database import BibliographyData
from pybtex.database.input import bibtex
from pybtex.exceptions import PybtexError

from ..exceptions import BibliographyParseError
from ..records import BibliographyRecord, records_from_entries


def parse_bibliography_string(payload: str, *, source: str = "<string>") -> BibliographyData:
    """Parse a BibTeX payload, raising :class:`BibliographyParseError` on failure."""
    parser = bibtex.Parser()
    try:
        return parser.parse_string(payload)
    except PybtexError as exc:
        raise BibliographyParseError(f"Failed to parse BibTeX from {source}: {exc}") from exc


def bibliography_records_from_string(payload: str) -> list[BibliographyRecord]:
    """Parse a BibTeX payload into records in source order."""
    if not payload.strip():
        return []
    data = parse_bibliography_string(payload)
    return records_from_entries(data.entries.items())
