"""Map citation markers onto bibliography records.

A marker is looked up by its lowercased surname and year. When no record
carries that exact pair, a record whose BibTeX key equals the marker text
(``@Test21`` and ``@misc{Test21, ...}``) is taken next. Otherwise
surnames filed under the same year are compared by Levenshtein distance. The
closest one is accepted when it is within ``max_distance`` edits and at most
one edit per three typed characters; a tie at the closest distance is
rejected rather than guessed. The suffix letter then picks a position in the
matched candidate group.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
import logging

from rapidfuzz.distance import Levenshtein
from slugify import slugify

from .diagnostics import Diagnostic
from .index import CandidateIndex
from .normalize import NormalizedKey
from .records import BibliographyRecord
from .scanner import CitationMarker


logger = logging.getLogger(__name__)

DEFAULT_FUZZY_MAX_DISTANCE = 2


class UnresolvedReason(Enum):
    NO_CANDIDATES = "unresolved-marker"
    SUFFIX_OUT_OF_RANGE = "suffix-out-of-range"
    AMBIGUOUS_FUZZY_MATCH = "ambiguous-fuzzy-match"


@dataclass(frozen=True, slots=True)
class Resolved:
    marker: CitationMarker
    record: BibliographyRecord
    key: NormalizedKey
    index: int
    anchor: str
    fuzzy: bool = False


@dataclass(frozen=True, slots=True)
class Unresolved:
    marker: CitationMarker
    reason: UnresolvedReason
    message: str

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(kind=self.reason.value, message=self.message, marker=self.marker.text)


Resolution = Resolved | Unresolved


def suffix_index(suffix: str) -> int:
    """Convert a disambiguation letter to a zero-based group position."""
    if not suffix:
        return 0
    return max(0, ord(suffix[0]) - ord("a"))


def make_anchor(surname: str, year: str, index: int) -> str:
    """Return the URL fragment for the ``index``-th record of a group."""
    base = slugify(surname, separator="") or "ref"
    anchor = f"{base}{year}".lower()
    if index > 0:
        anchor += chr(ord("a") + index)
    return anchor


@dataclass(frozen=True, slots=True)
class FuzzyMatch:
    key: NormalizedKey
    distance: int


class Resolver:
    """Resolve markers against a :class:`CandidateIndex`."""

    def __init__(
        self,
        index: CandidateIndex,
        *,
        fuzzy_matching: bool = True,
        max_distance: int = DEFAULT_FUZZY_MAX_DISTANCE,
    ) -> None:
        self.index = index
        self.fuzzy_matching = fuzzy_matching
        self.max_distance = max_distance

    def resolve_all(self, markers: Iterable[CitationMarker]) -> dict[str, Resolution]:
        """Resolve each unique marker, keyed by its literal text."""
        return {marker.text: self.resolve(marker) for marker in markers}

    def resolve(self, marker: CitationMarker) -> Resolution:
        surname = marker.surname.lower()
        key = NormalizedKey(surname, marker.year)
        group = self.index.get(key)
        fuzzy = False

        if group is None:
            record = self.index.record_for_citation_key(marker.text[1:])
            if record is not None:
                return self._resolve_citation_key(marker, record)
            if not self.fuzzy_matching:
                return self._no_candidates(marker)
            candidates = self.fuzzy_candidates(surname, marker.year)
            if not candidates:
                return self._no_candidates(marker)
            best = candidates[0].distance
            closest = [candidate for candidate in candidates if candidate.distance == best]
            if len(closest) > 1:
                names = ", ".join(f"'{candidate.key.surname}'" for candidate in closest)
                return Unresolved(
                    marker=marker,
                    reason=UnresolvedReason.AMBIGUOUS_FUZZY_MATCH,
                    message=(
                        f"Citation '{marker.text}' is equally close to several authors "
                        f"({names}); not resolving it."
                    ),
                )
            key = closest[0].key
            group = self.index[key]
            fuzzy = True
            logger.debug(
                "Fuzzy matched '%s' to surname '%s' (distance %d).",
                marker.text,
                key.surname,
                best,
            )

        position = suffix_index(marker.suffix)
        if position >= len(group):
            return Unresolved(
                marker=marker,
                reason=UnresolvedReason.SUFFIX_OUT_OF_RANGE,
                message=(
                    f"Suffix '{marker.suffix}' for citation '{marker.text}' is out of range "
                    f"({len(group)} candidate(s) for '{key.surname}' in '{key.year_suffix}')."
                ),
            )

        return Resolved(
            marker=marker,
            record=group[position],
            key=key,
            index=position,
            anchor=make_anchor(key.surname, key.year_suffix, position),
            fuzzy=fuzzy,
        )

    def fuzzy_candidates(self, surname: str, year: str) -> list[FuzzyMatch]:
        """Return acceptable same-year surnames ordered by distance then key."""
        matches: list[FuzzyMatch] = []
        for key in self.index.keys_for_year(year):
            distance = Levenshtein.distance(surname, key.surname)
            if distance > self.max_distance or 3 * distance > len(surname):
                continue
            matches.append(FuzzyMatch(key=key, distance=distance))
        matches.sort(key=lambda match: (match.distance, match.key))
        return matches

    def _resolve_citation_key(
        self, marker: CitationMarker, record: BibliographyRecord
    ) -> Resolved:
        # Anchored under the typed surname, not the record's own key.
        key = NormalizedKey(marker.surname.lower(), marker.year)
        position = suffix_index(marker.suffix)
        logger.debug("Matched '%s' to entry '%s' by citation key.", marker.text, record.key)
        return Resolved(
            marker=marker,
            record=record,
            key=key,
            index=position,
            anchor=make_anchor(key.surname, key.year_suffix, position),
        )

    def _no_candidates(self, marker: CitationMarker) -> Unresolved:
        return Unresolved(
            marker=marker,
            reason=UnresolvedReason.NO_CANDIDATES,
            message=(
                f"Could not map citation '{marker.text}' to any entry "
                f"(author '{marker.surname}', year '{marker.year}')."
            ),
        )


__all__ = [
    "DEFAULT_FUZZY_MAX_DISTANCE",
    "FuzzyMatch",
    "Resolution",
    "Resolved",
    "Resolver",
    "Unresolved",
    "UnresolvedReason",
    "make_anchor",
    "suffix_index",
]
