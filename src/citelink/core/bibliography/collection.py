"""Aggregation utilities for BibTeX references."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
import html
from pathlib import Path
import re
from typing import Any

from pybtex.database import BibliographyData, Entry, Person
from pybtex.database.input import bibtex
from pybtex.exceptions import PybtexError

from ..exceptions import BibliographyParseError
from ..records import BibliographyRecord
from .issues import BibliographyIssue
from .parsing import parse_bibliography_string


class BibliographyCollection:
    """Aggregate references from one or more BibTeX sources.

    Keys keep the position of their first definition so that downstream
    ordering stays reproducible across runs.
    """

    def __init__(self) -> None:
        self._entries: dict[str, Entry] = {}
        self._sources: dict[str, set[Path]] = {}
        self._issues: list[BibliographyIssue] = []
        self._file_entry_counts: dict[Path, int] = {}
        self._file_order: list[Path] = []

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def issues(self) -> Sequence[BibliographyIssue]:
        """Return the list of issues discovered while loading references."""
        return tuple(self._issues)

    @property
    def file_stats(self) -> Sequence[tuple[Path, int]]:
        """Return (file, entry_count) pairs in the order files were processed."""
        return tuple((path, self._file_entry_counts.get(path, 0)) for path in self._file_order)

    def load_files(self, files: Iterable[Path | str]) -> None:
        """Load BibTeX entries from one or more files."""
        for file_path in files:
            self._load_file(Path(file_path))

    def _load_file(self, file_path: Path) -> None:
        file_path = file_path.resolve()
        self._file_order.append(file_path)
        parser = bibtex.Parser()

        try:
            data = parser.parse_file(str(file_path))
        except (OSError, PybtexError) as exc:
            self._file_entry_counts[file_path] = 0
            raise BibliographyParseError(f"Failed to parse '{file_path}': {exc}") from exc

        entry_count = len(data.entries)
        self._file_entry_counts[file_path] = entry_count
        if entry_count == 0:
            self._issues.append(
                BibliographyIssue(
                    message="No references found in file.",
                    key=None,
                    source=file_path,
                )
            )

        self._merge_entries(data, file_path)

    def load_string(self, payload: str, *, source: Path | str | None = None) -> None:
        """Parse an inline BibTeX payload and merge it into the collection."""
        source_path = self._resolve_source_path(source)
        if not payload.strip():
            self.load_data(BibliographyData(), source=source_path)
            return
        data = parse_bibliography_string(payload, source=str(source_path))
        self.load_data(data, source=source_path)

    def load_data(
        self,
        data: BibliographyData,
        *,
        source: Path | str | None = None,
    ) -> None:
        """Merge pre-parsed bibliography data into the collection."""
        source_path = self._resolve_source_path(source)
        entry_count = len(data.entries)
        self._file_entry_counts[source_path] = (
            self._file_entry_counts.get(source_path, 0) + entry_count
        )
        if source_path not in self._file_order:
            self._file_order.append(source_path)

        if entry_count == 0:
            self._issues.append(
                BibliographyIssue(
                    message="No references found in inline bibliography data.",
                    key=None,
                    source=source_path,
                )
            )
            return

        self._merge_entries(data, source_path)

    def _resolve_source_path(self, source: Path | str | None) -> Path:
        if source is None:
            return Path("inline-bibliography.bib")
        if isinstance(source, Path):
            return source
        return Path(source)

    def _merge_entries(self, data: BibliographyData, source: Path) -> None:
        for key, entry in data.entries.items():
            self._sanitize_entry(entry)
            existing = self._entries.get(key)

            if existing is None:
                self._entries[key] = entry
                self._sources[key] = {source}
                continue

            if not self._entries_equivalent(existing, entry):
                self._issues.append(
                    BibliographyIssue(
                        message=(
                            "Duplicate entry conflicts with an existing "
                            "reference; ignoring the newer definition."
                        ),
                        key=key,
                        source=source,
                    )
                )

            self._sources[key].add(source)

    def _sanitize_entry(self, entry: Entry) -> None:
        for field_name, value in list(entry.fields.items()):
            if not isinstance(value, str):
                continue
            sanitized = _sanitize_field_text(value)
            if sanitized != value:
                entry.fields[field_name] = sanitized

    def records(self) -> list[BibliographyRecord]:
        """Return every reference as a record, in first-definition order."""
        return [BibliographyRecord.from_entry(key, entry) for key, entry in self._entries.items()]

    def find(self, reference_key: str) -> BibliographyRecord | None:
        """Return the record for a specific reference key."""
        entry = self._entries.get(reference_key)
        if entry is None:
            return None
        return BibliographyRecord.from_entry(reference_key, entry)

    def sources(self, reference_key: str) -> list[str]:
        """Return the sorted source paths that define a reference."""
        return sorted(str(path) for path in self._sources.get(reference_key, ()))

    def _entries_equivalent(self, first: Entry, second: Entry) -> bool:
        return self._entry_signature(first) == self._entry_signature(second)

    def _entry_signature(self, entry: Entry) -> dict[str, Any]:
        return {
            "type": entry.type,
            "fields": {str(name).lower(): value for name, value in entry.fields.items()},
            "persons": {
                role: [self._person_signature(person) for person in persons]
                for role, persons in sorted(entry.persons.items())
            },
        }

    def _person_signature(self, person: Person) -> tuple[tuple[str, ...], ...]:
        signature: list[tuple[str, ...]] = []
        for attribute in (
            "first_names",
            "middle_names",
            "prelast_names",
            "last_names",
            "lineage_names",
        ):
            value = getattr(person, attribute, ())
            signature.append(tuple(str(part) for part in value))
        return tuple(signature)


_HTML_TAG_RE = re.compile(r"<[^>]+?>")


def _sanitize_field_text(value: str) -> str:
    """Strip lightweight HTML markup and unescape entities from bibliography fields."""
    if "<" in value and ">" in value:
        value = _HTML_TAG_RE.sub("", value)
    return html.unescape(value)
