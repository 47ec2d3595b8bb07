"""Render the resolved records as a Markdown bibliography."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from .diagnostics import Diagnostic, DiagnosticRecorder
from .exceptions import FormattingError
from .formatting import EntryFormatter
from .records import BibliographyRecord
from .resolver import Resolution, Resolved


NO_MARKERS_NOTE = "*(No citation keys found in Markdown input)*"
NO_MATCHES_NOTE = "*(No BibTeX entries found matching any citation keys)*"


@dataclass(frozen=True, slots=True)
class BibliographyEntry:
    key: str
    anchor: str
    text: str
    sort_key: tuple[str, str, int]
    failed: bool = False


def collect_entries(resolutions: Iterable[Resolution]) -> list[Resolved]:
    """Return one resolution per distinct record, in bibliography order."""
    distinct: dict[str, Resolved] = {}
    for resolution in resolutions:
        if not isinstance(resolution, Resolved):
            continue
        distinct.setdefault(resolution.record.key, resolution)
    return sorted(
        distinct.values(),
        key=lambda item: (item.key.surname, item.key.year_suffix, item.index, item.record.key),
    )


class BibliographyAssembler:
    """Build the bibliography document from resolved citations."""

    def __init__(
        self,
        formatter: EntryFormatter,
        *,
        title: str = "Bibliography",
        recorder: DiagnosticRecorder | None = None,
    ) -> None:
        self.formatter = formatter
        self.title = title
        self.recorder = recorder or DiagnosticRecorder()

    def _format(self, record: BibliographyRecord) -> str:
        try:
            return self.formatter.format_record(record)
        except FormattingError:
            raise
        except Exception as exc:
            raise FormattingError(record.key, str(exc) or type(exc).__name__) from exc

    def entries(self, resolutions: Iterable[Resolution]) -> list[BibliographyEntry]:
        rendered: list[BibliographyEntry] = []
        for resolution in collect_entries(resolutions):
            key = resolution.key
            anchor = resolution.anchor
            sort_key = (key.surname, key.year_suffix, resolution.index)
            try:
                text = self._format(resolution.record)
            except FormattingError as exc:
                self.recorder.report(
                    Diagnostic(
                        kind="formatting-error",
                        message=str(exc),
                        marker=resolution.marker.text,
                        key=resolution.record.key,
                    ),
                    exc,
                )
                rendered.append(
                    BibliographyEntry(
                        key=resolution.record.key,
                        anchor=anchor,
                        text=f"*(Formatting error for entry '{exc.key}': {exc.reason})*",
                        sort_key=sort_key,
                        failed=True,
                    )
                )
                continue
            rendered.append(
                BibliographyEntry(
                    key=resolution.record.key,
                    anchor=anchor,
                    text=text,
                    sort_key=sort_key,
                )
            )
        return rendered

    def assemble(self, resolutions: Iterable[Resolution], *, markers_found: bool) -> str:
        lines = [f"# {self.title}", ""]
        entries = self.entries(resolutions)
        if not entries:
            lines.append(NO_MATCHES_NOTE if markers_found else NO_MARKERS_NOTE)
            return "\n".join(lines) + "\n"

        for entry in entries:
            lines.append(f'## <a name="{entry.anchor}"></a>{entry.text}')
            lines.append("")
        self.recorder.event("bibliography_assembled", {"entries": len(entries)})
        return "\n".join(lines).rstrip("\n") + "\n"


__all__ = [
    "NO_MARKERS_NOTE",
    "NO_MATCHES_NOTE",
    "BibliographyAssembler",
    "BibliographyEntry",
    "collect_entries",
]
