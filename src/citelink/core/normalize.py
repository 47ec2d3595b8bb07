"""Derive the (surname, year) key a citation marker is matched against."""

from __future__ import annotations

import re
from typing import NamedTuple

from pybtex.database import Person
from pybtex.exceptions import PybtexError

from .records import BibliographyRecord, split_names


# Accent commands such as \" or \v drop out; \o or \ss keep their letters.
_ACCENT_RE = re.compile(r"\\(?:[^A-Za-z\s]|[cvuHkrdbt](?![A-Za-z]))\s*")
_COMMAND_RE = re.compile(r"\\([A-Za-z]+)\s*")


class NormalizedKey(NamedTuple):
    """Lowercase first-author surname paired with a two-digit year."""

    surname: str
    year_suffix: str


def plain_surname(parts: list[str]) -> str | None:
    """Collapse BibTeX last-name tokens into a lowercase ASCII-friendly key.

    ``['M{\\"u}ller']`` yields ``"muller"`` and ``['{Barnes and Noble}']``
    yields ``"barnesandnoble"``.
    """
    text = _COMMAND_RE.sub(r"\1", _ACCENT_RE.sub("", " ".join(parts)))
    text = text.replace("{", "").replace("}", "")
    surname = "".join(text.split()).lower()
    return surname or None


def person_surname(person: Person) -> str | None:
    return plain_surname(person.last_names)


def first_author_surname(author: str | None) -> str | None:
    """Return the lowercase family name of the first listed author.

    ``"Smith, John and Doe, Jane"`` yields ``"smith"``; without a comma the
    BibTeX ``First von Last`` rules apply, so ``"John Smith"`` does too.
    """
    if not author or not author.strip():
        return None
    names = split_names(author)
    if not names:
        return None
    try:
        return person_surname(Person(names[0]))
    except PybtexError:
        # Too many commas: the text before the first one is still the family name.
        return plain_surname([names[0].split(",", 1)[0]])


def record_surname(record: BibliographyRecord) -> str | None:
    """Return the first-author surname, preferring already parsed people."""
    authors = record.people("author")
    if authors:
        return person_surname(authors[0])
    return first_author_surname(record.get("author"))


def year_suffix(year: str | None) -> str | None:
    """Return the last two characters of a trimmed year value."""
    if year is None:
        return None
    candidate = year.strip()
    if len(candidate) < 2:
        return None
    return candidate[-2:]


def normalize_record(record: BibliographyRecord) -> NormalizedKey | None:
    surname = record_surname(record)
    year = year_suffix(record.get("year"))
    if surname is None or year is None:
        return None
    return NormalizedKey(surname, year)


__all__ = [
    "NormalizedKey",
    "first_author_surname",
    "normalize_record",
    "person_surname",
    "plain_surname",
    "record_surname",
    "year_suffix",
]
