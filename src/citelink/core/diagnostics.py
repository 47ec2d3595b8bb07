"""Diagnostic abstractions shared across the citation pipeline."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import logging
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A non-fatal problem found while processing a document.

    `kind` is one of `unresolved-marker`, `suffix-out-of-range`,
    `ambiguous-fuzzy-match`, `record-missing-author`, `record-missing-year`,
    `formatting-error` or `bibliography-issue`.
    """

    kind: str
    message: str
    marker: str | None = None
    key: str | None = None


@runtime_checkable
class DiagnosticEmitter(Protocol):
    """Interface used to surface warnings, errors, and structured events."""

    debug_enabled: bool

    def warning(self, message: str, exc: BaseException | None = None) -> None: ...

    def error(self, message: str, exc: BaseException | None = None) -> None: ...

    def event(self, name: str, payload: Mapping[str, Any]) -> None: ...


@runtime_checkable
class DiagnosticSink(Protocol):
    """Emitter that wants the structured :class:`Diagnostic` rather than its message."""

    def diagnostic(self, diagnostic: Diagnostic, exc: BaseException | None = None) -> None: ...


class NullEmitter:
    """Emitter that ignores every diagnostic."""

    debug_enabled: bool = False

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        return

    def error(self, message: str, exc: BaseException | None = None) -> None:
        return

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        return


class LoggingEmitter:
    """Emitter that forwards diagnostics to the standard logging module."""

    def __init__(
        self, *, logger_obj: logging.Logger | None = None, debug_enabled: bool = False
    ) -> None:
        self._logger = logger_obj or logger
        self.debug_enabled = debug_enabled

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None:
            self._logger.warning(message, exc_info=exc)
        else:
            self._logger.warning(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        if exc is not None:
            self._logger.error(message, exc_info=exc)
        else:
            self._logger.error(message)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        message = format_event_message(name, payload)
        if message:
            self._logger.info(message)
            return
        self._logger.debug("diagnostic event %s: %s", name, dict(payload))


class DiagnosticRecorder:
    """Collect the diagnostics of one run and forward them to an emitter."""

    def __init__(self, emitter: DiagnosticEmitter | None = None) -> None:
        self._emitter: DiagnosticEmitter = emitter or LoggingEmitter()
        self._diagnostics: list[Diagnostic] = []

    @property
    def emitter(self) -> DiagnosticEmitter:
        return self._emitter

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return tuple(self._diagnostics)

    def report(self, diagnostic: Diagnostic, exc: BaseException | None = None) -> None:
        self._diagnostics.append(diagnostic)
        if isinstance(self._emitter, DiagnosticSink):
            self._emitter.diagnostic(diagnostic, exc)
        else:
            self._emitter.warning(diagnostic.message, exc)

    def extend(self, diagnostics: tuple[Diagnostic, ...] | list[Diagnostic]) -> None:
        for diagnostic in diagnostics:
            self.report(diagnostic)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        self._emitter.event(name, payload)


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """Return a human-friendly summary for selected diagnostic events."""
    data = dict(payload)

    if name == "markers_scanned":
        count = data.get("count", 0)
        return f"Found {count} unique citation marker(s) in document."

    if name == "index_built":
        groups = data.get("groups", 0)
        records = data.get("records", 0)
        return f"Indexed {records} record(s) into {groups} candidate group(s)."

    if name == "citation_resolved":
        marker = data.get("marker") or "<unknown>"
        key = data.get("key") or "<unknown>"
        details: list[str] = [f"index {data.get('index', 0)}"]
        if data.get("fuzzy"):
            details.append(f"fuzzy match on '{data.get('surname')}'")
        return f"Mapped '{marker}' to entry '{key}' ({', '.join(details)})"

    if name == "bibliography_assembled":
        count = data.get("entries", 0)
        return f"Rendered {count} bibliography entr{'y' if count == 1 else 'ies'}."

    return None


__all__ = [
    "Diagnostic",
    "DiagnosticEmitter",
    "DiagnosticRecorder",
    "DiagnosticSink",
    "LoggingEmitter",
    "NullEmitter",
    "format_event_message",
]
