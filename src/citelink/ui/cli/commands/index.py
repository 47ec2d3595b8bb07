"""Implementation of the `citelink index` command."""

from __future__ import annotations

from typing import Annotated

import typer

from citelink.core.bibliography import BibliographyCollection
from citelink.core.exceptions import BibliographyParseError

from .._options import BibFilesArgument
from ..bibliography import print_bibliography_overview
from ..state import debug_enabled, emit_error, get_cli_state


def index(
    bib_files: BibFilesArgument,
    details: Annotated[
        bool,
        typer.Option("--details", help="Also print every field of every reference."),
    ] = False,
) -> None:
    """Load BibTeX files and show which citation marker selects each entry."""
    collection = BibliographyCollection()
    try:
        collection.load_files(bib_files)
    except BibliographyParseError as exc:
        if debug_enabled():
            raise
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc
    print_bibliography_overview(collection, details=details, console=get_cli_state().console)


__all__ = ["index"]
