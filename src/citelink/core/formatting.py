"""Style-formatting capability used to render bibliography entries."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pybtex.exceptions import PybtexError
from pybtex.plugin import find_plugin

from .exceptions import FormattingError, StyleLoadError
from .records import BibliographyRecord


@runtime_checkable
class EntryFormatter(Protocol):
    """Turn one record into display text."""

    def format_record(self, record: BibliographyRecord) -> str: ...


class PybtexFormatter:
    """Render records through a pybtex formatting style and output backend.

    The style and backend are loaded once per instance so a missing plugin is
    reported before any document is processed.
    """

    def __init__(self, style: str = "plain", backend: str = "markdown") -> None:
        self.style_name = style
        self.backend_name = backend
        try:
            style_cls = find_plugin("pybtex.style.formatting", style)
        except PybtexError as exc:
            raise StyleLoadError(f"Citation style '{style}' is not available: {exc}") from exc
        try:
            backend_cls = find_plugin("pybtex.backends", backend)
        except PybtexError as exc:
            raise StyleLoadError(f"Output backend '{backend}' is not available: {exc}") from exc
        self._style = style_cls()
        self._backend = backend_cls()

    def format_record(self, record: BibliographyRecord) -> str:
        try:
            entry = record.to_entry()
            formatted = self._style.format_entry(record.key, entry)
            text = formatted.text.render(self._backend)
        except (PybtexError, AttributeError, KeyError, ValueError) as exc:
            raise FormattingError(record.key, str(exc) or type(exc).__name__) from exc
        return text.strip()


__all__ = ["EntryFormatter", "PybtexFormatter"]
