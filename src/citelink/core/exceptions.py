"""Custom exception hierarchy for the citation pipeline.

Only failures that must abort a run are modelled as exceptions. Citations that
cannot be matched are ordinary values (see :mod:`citelink.core.resolver`).
"""

from __future__ import annotations


class CitationError(RuntimeError):
    """Base exception for citation processing failures."""


class BibliographyParseError(CitationError):
    """Raised when a BibTeX source cannot be parsed."""


class StyleLoadError(CitationError):
    """Raised when a formatting style or output backend cannot be loaded."""


class FormattingError(CitationError):
    """Raised when the style engine fails on a specific record."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Failed to format entry '{key}': {reason}")
        self.key = key
        self.reason = reason


class ConfigurationError(CitationError):
    """Raised when a configuration file is missing or invalid."""


__all__ = [
    "BibliographyParseError",
    "CitationError",
    "ConfigurationError",
    "FormattingError",
    "StyleLoadError",
]
