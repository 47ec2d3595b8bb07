"""End-to-end citation processing.

`process_document` is a pure function of its inputs: it builds a fresh
candidate index, resolves every marker, renders the bibliography and rewrites
the document. Resolution gaps and per-record formatting failures are returned
as diagnostics; malformed BibTeX and unknown styles raise.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
import logging

from .assembler import BibliographyAssembler
from .bibliography import BibliographyCollection
from .config import CitationConfig
from .diagnostics import Diagnostic, DiagnosticEmitter, DiagnosticRecorder
from .formatting import EntryFormatter, PybtexFormatter
from .index import CandidateIndex
from .records import BibliographyRecord
from .resolver import Resolution, Resolved, Resolver, Unresolved
from .rewriter import rewrite_document
from .scanner import MarkerScanner


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ProcessingResult:
    """Outputs of one run."""

    document: str
    bibliography: str
    diagnostics: tuple[Diagnostic, ...] = ()
    resolutions: dict[str, Resolution] = field(default_factory=dict)

    @property
    def unresolved(self) -> list[str]:
        return [text for text, item in self.resolutions.items() if isinstance(item, Unresolved)]

    @property
    def combined(self) -> str:
        """Document followed by the bibliography, as a single Markdown text."""
        return f"{self.document.rstrip()}\n\n{self.bibliography}"


def _collect_records(
    records: Iterable[BibliographyRecord] | BibliographyCollection,
    recorder: DiagnosticRecorder,
) -> list[BibliographyRecord]:
    if isinstance(records, BibliographyCollection):
        for issue in records.issues:
            location = f" ({issue.source})" if issue.source else ""
            recorder.report(
                Diagnostic(
                    kind="bibliography-issue",
                    message=f"{issue.message}{location}",
                    key=issue.key,
                )
            )
        return records.records()
    return list(records)


def process_document(
    text: str,
    records: Iterable[BibliographyRecord] | BibliographyCollection,
    formatter: EntryFormatter | None = None,
    *,
    link_prefix: str | None = None,
    config: CitationConfig | None = None,
    emitter: DiagnosticEmitter | None = None,
) -> ProcessingResult:
    """Resolve the citation markers of ``text`` against ``records``."""
    config = config or CitationConfig()
    prefix = config.link_prefix if link_prefix is None else link_prefix
    recorder = DiagnosticRecorder(emitter)
    if formatter is None:
        formatter = PybtexFormatter(config.style, config.backend)

    index = CandidateIndex.build(_collect_records(records, recorder))
    recorder.extend(index.skipped)
    recorder.event("index_built", {"records": index.record_count, "groups": len(index)})

    scanner = MarkerScanner()
    markers = scanner.scan(text)
    recorder.event("markers_scanned", {"count": len(markers)})

    assembler = BibliographyAssembler(
        formatter,
        title=config.bibliography_title,
        recorder=recorder,
    )
    if not markers:
        return ProcessingResult(
            document=text,
            bibliography=assembler.assemble((), markers_found=False),
            diagnostics=recorder.diagnostics,
        )

    resolver = Resolver(
        index,
        fuzzy_matching=config.fuzzy_matching,
        max_distance=config.fuzzy_max_distance,
    )
    resolutions = resolver.resolve_all(markers)
    for resolution in resolutions.values():
        if isinstance(resolution, Resolved):
            recorder.event(
                "citation_resolved",
                {
                    "marker": resolution.marker.text,
                    "key": resolution.record.key,
                    "index": resolution.index,
                    "fuzzy": resolution.fuzzy,
                    "surname": resolution.key.surname,
                },
            )
        else:
            recorder.report(resolution.to_diagnostic())

    bibliography = assembler.assemble(resolutions.values(), markers_found=True)
    document = rewrite_document(
        text,
        markers,
        resolutions,
        link_prefix=prefix,
        unresolved_template=config.unresolved_template,
    )
    unresolved = sum(1 for item in resolutions.values() if isinstance(item, Unresolved))
    logger.debug("Processed %d marker(s), %d unresolved.", len(markers), unresolved)
    return ProcessingResult(
        document=document,
        bibliography=bibliography,
        diagnostics=recorder.diagnostics,
        resolutions=resolutions,
    )


def process_markdown_and_bibtex(
    markdown: str,
    bibtex: str,
    *,
    link_prefix: str = "",
    style: str | None = None,
    config: CitationConfig | None = None,
    emitter: DiagnosticEmitter | None = None,
) -> ProcessingResult:
    """Parse ``bibtex`` with pybtex and process ``markdown`` against it.

    The payload goes through :class:`BibliographyCollection`, so field markup
    is sanitised and duplicate keys are reported the same way as for files.
    """
    config = (config or CitationConfig()).merged(style=style)
    collection = BibliographyCollection()
    if bibtex.strip():
        collection.load_string(bibtex)
    return process_document(
        markdown,
        collection,
        link_prefix=link_prefix,
        config=config,
        emitter=emitter,
    )


__all__ = ["ProcessingResult", "process_document", "process_markdown_and_bibtex"]
