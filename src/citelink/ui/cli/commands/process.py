"""Implementation of the `citelink process` command."""

from __future__ import annotations

import typer

from citelink.core.bibliography import BibliographyCollection
from citelink.core.exceptions import CitationError
from citelink.core.formatting import PybtexFormatter
from citelink.core.pipeline import process_document

from .._options import (
    BackendOption,
    BibliographyOutputOption,
    BibtexOption,
    ConfigOption,
    DocumentArgument,
    FuzzyOption,
    LinkPrefixOption,
    MaxDistanceOption,
    OutputOption,
    StrictOption,
    StyleOption,
    TitleOption,
)
from ..diagnostics import CliEmitter
from ..state import debug_enabled, emit_error, get_cli_state, render_summary
from ..utils import resolve_config, write_output_file


def process(
    document: DocumentArgument,
    bibtex: BibtexOption,
    config_path: ConfigOption = None,
    style: StyleOption = None,
    backend: BackendOption = None,
    title: TitleOption = None,
    link_prefix: LinkPrefixOption = None,
    fuzzy: FuzzyOption = None,
    max_distance: MaxDistanceOption = None,
    output: OutputOption = None,
    bibliography_output: BibliographyOutputOption = None,
    strict: StrictOption = False,
) -> None:
    """Link citation markers in DOCUMENT to a bibliography rendered from BibTeX."""
    state = get_cli_state()
    emitter = CliEmitter(state)

    try:
        config = resolve_config(
            config_path,
            style=style,
            backend=backend,
            bibliography_title=title,
            link_prefix=link_prefix,
            fuzzy_matching=fuzzy,
            fuzzy_max_distance=max_distance,
        )
        formatter = PybtexFormatter(config.style, config.backend)
        collection = BibliographyCollection()
        collection.load_files(bibtex)
        text = document.read_text(encoding="utf-8")
        result = process_document(text, collection, formatter, config=config, emitter=emitter)
    except CitationError as exc:
        if debug_enabled():
            raise
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc
    except OSError as exc:
        if debug_enabled():
            raise
        emit_error(f"Unable to read '{document}': {exc}", exception=exc)
        raise typer.Exit(code=1) from exc

    if bibliography_output is not None:
        write_output_file(bibliography_output, result.bibliography)
        body = result.document
    else:
        body = result.combined

    if output is not None:
        write_output_file(output, body)
    else:
        typer.echo(body, nl=not body.endswith("\n"))

    if state.verbosity >= 1 or result.diagnostics:
        unresolved = len(result.unresolved)
        render_summary(len(result.resolutions) - unresolved, unresolved, emitter.kinds)

    if strict and result.unresolved:
        raise typer.Exit(code=2)


__all__ = ["process"]
