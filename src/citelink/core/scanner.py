"""Tokenize citation markers such as ``@Smith20b`` out of document text."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
import re


@dataclass(frozen=True, slots=True)
class CitationMarker:
    """One literal marker form and every place it occurs in the document."""

    text: str
    surname: str
    year: str
    suffix: str = ""
    spans: tuple[tuple[int, int], ...] = ()

    @property
    def label(self) -> str:
        """Link text: the marker without ``@``, dropping a redundant ``a`` suffix."""
        suffix = "" if self.suffix == "a" else self.suffix
        return f"{self.surname}{self.year}{suffix}"


@dataclass(frozen=True, slots=True)
class MarkerToken:
    text: str
    surname: str
    year: str
    suffix: str
    start: int
    end: int


class MarkerSyntax:
    """Regular-expression based recognizer for one marker notation.

    Subclasses may override :meth:`tokens` to support a different notation;
    the resolver only ever sees :class:`CitationMarker` values.
    """

    pattern: re.Pattern[str] = re.compile(
        r"@(?P<surname>[A-Za-z]+)(?P<year>[0-9]{2})(?P<suffix>[a-z]?)\b"
    )

    def tokens(self, text: str) -> Iterator[MarkerToken]:
        for match in self.pattern.finditer(text):
            yield MarkerToken(
                text=match.group(0),
                surname=match.group("surname"),
                year=match.group("year"),
                suffix=match.group("suffix") or "",
                start=match.start(),
                end=match.end(),
            )


class MarkerScanner:
    """Collect unique markers in order of first appearance."""

    def __init__(self, syntax: MarkerSyntax | None = None) -> None:
        self.syntax = syntax or MarkerSyntax()

    def scan(self, text: str) -> list[CitationMarker]:
        found: dict[str, tuple[MarkerToken, list[tuple[int, int]]]] = {}
        for token in self.syntax.tokens(text):
            first, spans = found.setdefault(token.text, (token, []))
            spans.append((token.start, token.end))

        return [
            CitationMarker(
                text=first.text,
                surname=first.surname,
                year=first.year,
                suffix=first.suffix,
                spans=tuple(spans),
            )
            for first, spans in found.values()
        ]


def scan_markers(text: str) -> list[CitationMarker]:
    """Shortcut for :meth:`MarkerScanner.scan` with the default syntax."""
    return MarkerScanner().scan(text)


__all__ = ["CitationMarker", "MarkerScanner", "MarkerSyntax", "MarkerToken", "scan_markers"]
