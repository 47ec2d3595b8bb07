"""Resolve `@Smith20b` citation markers against a BibTeX bibliography."""

from __future__ import annotations

from citelink.core import (
    BibliographyCollection,
    BibliographyParseError,
    BibliographyRecord,
    CitationConfig,
    CitationError,
    Diagnostic,
    PybtexFormatter,
    ProcessingResult,
    StyleLoadError,
    load_config,
    process_document,
    process_markdown_and_bibtex,
)
from citelink.version import get_version


__version__ = get_version()

__all__ = [
    "BibliographyCollection",
    "BibliographyParseError",
    "BibliographyRecord",
    "CitationConfig",
    "CitationError",
    "Diagnostic",
    "ProcessingResult",
    "PybtexFormatter",
    "StyleLoadError",
    "__version__",
    "load_config",
    "process_document",
    "process_markdown_and_bibtex",
]
