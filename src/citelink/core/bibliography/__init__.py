"""Bibliography loading built on pybtex.

`BibliographyCollection` merges one or more BibTeX sources, keeps the first
definition of duplicated keys and records conflicting duplicates as
`BibliographyIssue` entries. `bibliography_records_from_string` is the
single-payload shortcut used by the string-in pipeline entry point.

```pycon
>>> from citelink.core.bibliography import BibliographyCollection
>>> collection = BibliographyCollection()
>>> collection.load_string(\"\"\"@book{doe21,
...   author = {Doe, Jane},
...   title = {A Book on Everything},
...   year = {2021},
... }\"\"\")
>>> collection.find("doe21").get("author")
'Doe, Jane'
```
"""

from __future__ import annotations

from .collection import BibliographyCollection
from .issues import BibliographyIssue
from .parsing import bibliography_records_from_string, parse_bibliography_string


__all__ = [
    "BibliographyCollection",
    "BibliographyIssue",
    "bibliography_records_from_string",
    "parse_bibliography_string",
]
