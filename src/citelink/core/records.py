"""Read-only bibliography records consumed by the resolver."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

from pybtex.bibtex.utils import split_name_list
from pybtex.database import Entry, Person


PERSON_ROLES = ("author", "editor")


def split_names(value: str) -> list[str]:
    """Split a BibTeX name list on its ``and`` conjunctions.

    Braced groups are kept whole, so ``{Barnes and Noble}`` stays one name.
    """
    return [name for name in split_name_list(value.strip()) if name]


@dataclass(frozen=True, slots=True, eq=False)
class BibliographyRecord:
    """A parsed reference with its fields in source order.

    Person lists are also flattened into ``" and "``-joined field values so
    the record reads the same whether it came from pybtex or from a plain
    mapping. Records built from pybtex keep the parsed people in ``persons``
    and hand them back unchanged to the formatting styles.
    """

    key: str
    entry_type: str = "misc"
    fields: Mapping[str, str] = field(default_factory=dict)
    persons: Mapping[str, tuple[Person, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        normalised = {str(name).lower(): str(value) for name, value in self.fields.items()}
        object.__setattr__(self, "fields", MappingProxyType(normalised))
        people = {
            str(role).lower(): tuple(members) for role, members in self.persons.items() if members
        }
        object.__setattr__(self, "persons", MappingProxyType(people))

    def get(self, name: str, default: str | None = None) -> str | None:
        return self.fields.get(name.lower(), default)

    def people(self, role: str) -> tuple[Person, ...]:
        """Return the parsed people for ``role``, or an empty tuple."""
        return self.persons.get(role.lower(), ())

    @classmethod
    def from_entry(cls, key: str, entry: Entry) -> BibliographyRecord:
        """Build a record from a pybtex entry."""
        fields: dict[str, str] = {name: str(value) for name, value in entry.fields.items()}
        persons: dict[str, Sequence[Person]] = {}
        for role, members in entry.persons.items():
            if members:
                persons[role] = tuple(members)
                fields[role.lower()] = " and ".join(str(person) for person in members)
        return cls(key=key, entry_type=entry.type, fields=fields, persons=persons)

    @classmethod
    def from_mapping(
        cls,
        key: str,
        fields: Mapping[str, object],
        *,
        entry_type: str = "misc",
    ) -> BibliographyRecord:
        """Build a record from a plain field mapping."""
        return cls(
            key=key,
            entry_type=entry_type,
            fields={name: str(value) for name, value in fields.items() if value is not None},
        )

    def to_entry(self) -> Entry:
        """Return a pybtex entry suitable for the formatting styles.

        Name lists only available as text are parsed here, so a malformed
        name raises :class:`pybtex.database.InvalidNameString`.
        """
        plain_fields: dict[str, str] = {}
        persons: dict[str, list[Person]] = {}
        for name, value in self.fields.items():
            if name not in PERSON_ROLES:
                plain_fields[name] = value
                continue
            people = list(self.people(name)) or [Person(person) for person in split_names(value)]
            if people:
                persons[name] = people
        entry = Entry(self.entry_type, fields=plain_fields, persons=persons)
        entry.key = self.key
        return entry


def records_from_entries(entries: Iterable[tuple[str, Entry]]) -> list[BibliographyRecord]:
    """Convert ``(key, entry)`` pairs into records, preserving order."""
    return [BibliographyRecord.from_entry(key, entry) for key, entry in entries]


__all__ = ["PERSON_ROLES", "BibliographyRecord", "records_from_entries", "split_names"]
