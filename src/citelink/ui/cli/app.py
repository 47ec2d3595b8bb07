"""Typer application wiring for the citelink CLI."""

from __future__ import annotations

import logging

from rich.logging import RichHandler
import typer

from citelink.version import get_version

from .commands.index import index
from .commands.process import process
from .state import debug_enabled, emit_error, get_cli_state, set_cli_state


app = typer.Typer(
    help="Link @Author21 citation markers in Markdown to a BibTeX bibliography.",
    context_settings={"help_option_names": ["--help"]},
    no_args_is_help=True,
)


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    logger = logging.getLogger("citelink")
    logger.setLevel(level)
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        handler = RichHandler(console=get_cli_state().err_console, show_path=False)
        logger.addHandler(handler)
    # Pipeline warnings already reach the user through CliEmitter.
    logger.propagate = False


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(get_version())
        raise typer.Exit(code=0)


@app.callback()
def _app_root(
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase CLI verbosity. Combine multiple times for additional diagnostics.",
    ),
    debug: bool = typer.Option(
        False,
        "--debug/--no-debug",
        help="Show full tracebacks when an unexpected error occurs.",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Print the installed version and exit.",
    ),
) -> None:
    set_cli_state(verbosity=verbose, debug=debug)
    if verbose >= 2:
        _configure_logging(verbose)


app.command(name="process")(process)
app.command(name="index")(index)


def main() -> None:
    """Entry point compatible with console scripts."""
    try:
        app()
    except typer.Exit:
        raise
    except KeyboardInterrupt as exc:
        if debug_enabled():
            raise
        emit_error("Operation cancelled by user.", exception=exc)
        raise typer.Exit(code=1) from exc
    except SystemExit:
        raise
    except Exception as exc:  # pragma: no cover - defensive catch-all
        state = get_cli_state()
        if state.show_tracebacks:
            from rich.traceback import Traceback

            tb = Traceback.from_exception(
                type(exc),
                exc,
                exc.__traceback__,
                show_locals=state.verbosity >= 2,
            )
            state.err_console.print(tb)
        else:
            emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc


__all__ = ["app", "main"]
