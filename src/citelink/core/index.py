"""Group bibliography records by normalized (surname, year) key."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
import re
import unicodedata

from .diagnostics import Diagnostic
from .normalize import NormalizedKey, normalize_record, record_surname
from .records import BibliographyRecord


CandidateGroup = tuple[BibliographyRecord, ...]

_STRIP_CHARS = str.maketrans("", "", "{}\"'`")
_SPACE_RE = re.compile(r"\s+")


def sort_title(record: BibliographyRecord) -> str:
    """Return the case-folded title used to order a candidate group."""
    title = record.get("title")
    if not title:
        return ""
    cleaned = "".join(
        " " if unicodedata.category(char) == "Cc" else char for char in title.translate(_STRIP_CHARS)
    )
    return _SPACE_RE.sub(" ", cleaned).strip().lower()


def _skip_reason(record: BibliographyRecord) -> Diagnostic:
    if record_surname(record) is None:
        return Diagnostic(
            kind="record-missing-author",
            message=f"Entry '{record.key}' has no usable author and cannot be cited.",
            key=record.key,
        )
    return Diagnostic(
        kind="record-missing-year",
        message=f"Entry '{record.key}' has no usable year and cannot be cited.",
        key=record.key,
    )


class CandidateIndex(Mapping[NormalizedKey, CandidateGroup]):
    """Immutable mapping of normalized keys to their ordered candidate groups."""

    def __init__(
        self,
        groups: Mapping[NormalizedKey, CandidateGroup],
        *,
        skipped: Iterable[Diagnostic] = (),
    ) -> None:
        self._groups = dict(groups)
        self._skipped = tuple(skipped)
        self._by_citation_key: dict[str, BibliographyRecord] = {}
        for key in sorted(self._groups):
            for record in self._groups[key]:
                self._by_citation_key.setdefault(record.key.lower(), record)

    @classmethod
    def build(cls, records: Iterable[BibliographyRecord]) -> CandidateIndex:
        """Group records by key and order each group by title then input order."""
        buckets: dict[NormalizedKey, list[tuple[str, int, BibliographyRecord]]] = {}
        skipped: list[Diagnostic] = []
        for position, record in enumerate(records):
            key = normalize_record(record)
            if key is None:
                skipped.append(_skip_reason(record))
                continue
            buckets.setdefault(key, []).append((sort_title(record), position, record))

        groups = {
            key: tuple(record for _, _, record in sorted(bucket, key=lambda item: item[:2]))
            for key, bucket in buckets.items()
        }
        return cls(groups, skipped=skipped)

    def __getitem__(self, key: NormalizedKey) -> CandidateGroup:
        return self._groups[key]

    def __iter__(self) -> Iterator[NormalizedKey]:
        return iter(sorted(self._groups))

    def __len__(self) -> int:
        return len(self._groups)

    @property
    def skipped(self) -> tuple[Diagnostic, ...]:
        """Diagnostics for records left out because they lack an author or year."""
        return self._skipped

    @property
    def record_count(self) -> int:
        return sum(len(group) for group in self._groups.values())

    def group(self, surname: str, year: str) -> CandidateGroup | None:
        return self._groups.get(NormalizedKey(surname, year))

    def keys_for_year(self, year: str) -> list[NormalizedKey]:
        """Return every key sharing ``year``, in sorted order."""
        return sorted(key for key in self._groups if key.year_suffix == year)

    def record_for_citation_key(self, citation_key: str) -> BibliographyRecord | None:
        """Return the indexed record whose BibTeX key equals ``citation_key``, ignoring case."""
        return self._by_citation_key.get(citation_key.lower())


__all__ = ["CandidateGroup", "CandidateIndex", "sort_title"]
