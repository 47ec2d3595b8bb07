"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


INPUTS_PANEL = "Input Handling"
RESOLUTION_PANEL = "Resolution"
RENDERING_PANEL = "Rendering"
OUTPUT_PANEL = "Output"

DocumentArgument = Annotated[
    Path,
    typer.Argument(
        metavar="DOCUMENT",
        help="Markdown document containing @Author21 style citation markers.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

BibFilesArgument = Annotated[
    list[Path],
    typer.Argument(
        metavar="BIBFILE...",
        help="One or more BibTeX files to inspect.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

BibtexOption = Annotated[
    list[Path],
    typer.Option(
        "--bibtex",
        "-b",
        help="BibTeX file providing the references (repeatable).",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

ConfigOption = Annotated[
    Path | None,
    typer.Option(
        "--config",
        "-c",
        help="YAML file with citelink settings.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
        rich_help_panel=INPUTS_PANEL,
    ),
]

StyleOption = Annotated[
    str | None,
    typer.Option(
        "--style",
        "-s",
        help="pybtex formatting style used for bibliography entries (e.g. plain, unsrt, alpha).",
        rich_help_panel=RENDERING_PANEL,
    ),
]

BackendOption = Annotated[
    str | None,
    typer.Option(
        "--backend",
        help="pybtex output backend (markdown, text, html, latex).",
        rich_help_panel=RENDERING_PANEL,
    ),
]

TitleOption = Annotated[
    str | None,
    typer.Option(
        "--title",
        help="Heading of the generated bibliography.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

LinkPrefixOption = Annotated[
    str | None,
    typer.Option(
        "--link-prefix",
        "-p",
        help="Path or URL prepended to the '#anchor' of every citation link.",
        rich_help_panel=RENDERING_PANEL,
    ),
]

FuzzyOption = Annotated[
    bool | None,
    typer.Option(
        "--fuzzy/--no-fuzzy",
        help="Match misspelled author names against same-year entries.",
        show_default=False,
        rich_help_panel=RESOLUTION_PANEL,
    ),
]

MaxDistanceOption = Annotated[
    int | None,
    typer.Option(
        "--max-distance",
        min=0,
        help="Maximum edit distance accepted by the fuzzy author matcher.",
        rich_help_panel=RESOLUTION_PANEL,
    ),
]

OutputOption = Annotated[
    Path | None,
    typer.Option(
        "--output",
        "-o",
        help="File receiving the rewritten document (stdout when omitted).",
        dir_okay=False,
        resolve_path=True,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

BibliographyOutputOption = Annotated[
    Path | None,
    typer.Option(
        "--bibliography-output",
        help=(
            "File receiving the rendered bibliography. When omitted the bibliography "
            "is appended to the document output."
        ),
        dir_okay=False,
        resolve_path=True,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

StrictOption = Annotated[
    bool,
    typer.Option(
        "--strict",
        help="Exit with status 2 when any citation stays unresolved.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]


__all__ = [
    "BackendOption",
    "BibFilesArgument",
    "BibliographyOutputOption",
    "BibtexOption",
    "ConfigOption",
    "DocumentArgument",
    "FuzzyOption",
    "LinkPrefixOption",
    "MaxDistanceOption",
    "OutputOption",
    "StrictOption",
    "StyleOption",
    "TitleOption",
]
