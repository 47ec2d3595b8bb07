"""Citation resolution core.

Architecture
: `normalize` and `index` turn bibliography records into candidate groups
  keyed by first-author surname and two-digit year.
: `scanner` tokenizes `@Smith20b` style markers; `resolver` maps them onto
  candidate groups, falling back to approximate surname matching.
: `assembler` renders the bibliography through an `EntryFormatter`
  capability and `rewriter` links every marker occurrence to its entry.
: `pipeline` wires the stages together and is the entry point most callers
  need.

Usage Example

```pycon
>>> from citelink.core import process_markdown_and_bibtex
>>> result = process_markdown_and_bibtex(
...     "This is a test with @Test21.",
...     "@misc{Test21, author = {Test Author}, title = {Test Title}, year = {2021}}",
... )
>>> result.document
'This is a test with [Test21](#test21).'
```
"""

from __future__ import annotations

from .assembler import NO_MARKERS_NOTE, NO_MATCHES_NOTE, BibliographyAssembler
from .bibliography import (
    BibliographyCollection,
    BibliographyIssue,
    bibliography_records_from_string,
)
from .config import CitationConfig, load_config
from .diagnostics import Diagnostic, DiagnosticEmitter, LoggingEmitter, NullEmitter
from .exceptions import (
    BibliographyParseError,
    CitationError,
    ConfigurationError,
    FormattingError,
    StyleLoadError,
)
from .formatting import EntryFormatter, PybtexFormatter
from .index import CandidateIndex
from .normalize import NormalizedKey, normalize_record
from .pipeline import ProcessingResult, process_document, process_markdown_and_bibtex
from .records import BibliographyRecord
from .resolver import Resolved, Resolver, Unresolved, UnresolvedReason
from .rewriter import rewrite_document
from .scanner import CitationMarker, MarkerScanner, MarkerSyntax


__all__ = [
    "NO_MARKERS_NOTE",
    "NO_MATCHES_NOTE",
    "BibliographyAssembler",
    "BibliographyCollection",
    "BibliographyIssue",
    "BibliographyParseError",
    "BibliographyRecord",
    "CandidateIndex",
    "CitationConfig",
    "CitationError",
    "CitationMarker",
    "ConfigurationError",
    "Diagnostic",
    "DiagnosticEmitter",
    "EntryFormatter",
    "FormattingError",
    "LoggingEmitter",
    "MarkerScanner",
    "MarkerSyntax",
    "NormalizedKey",
    "NullEmitter",
    "ProcessingResult",
    "PybtexFormatter",
    "Resolved",
    "Resolver",
    "StyleLoadError",
    "Unresolved",
    "UnresolvedReason",
    "bibliography_records_from_string",
    "load_config",
    "normalize_record",
    "process_document",
    "process_markdown_and_bibtex",
    "rewrite_document",
]
