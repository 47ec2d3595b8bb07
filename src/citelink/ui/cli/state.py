"""Console state and message rendering for the citelink CLI."""

from __future__ import annotations

from collections.abc import Mapping
from contextvars import ContextVar
from dataclasses import dataclass, field
import sys

from rich.console import Console
from rich.text import Text

from citelink.core.diagnostics import Diagnostic


__all__ = [
    "CLIState",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "render_diagnostic",
    "render_message",
    "render_summary",
    "set_cli_state",
]

_LEVEL_STYLES = {"error": "red", "warning": "yellow"}


@dataclass(slots=True)
class CLIState:
    """Verbosity flags and the consoles of one CLI invocation."""

    verbosity: int = 0
    show_tracebacks: bool = False
    _console: Console | None = field(default=None, init=False, repr=False)
    _err_console: Console | None = field(default=None, init=False, repr=False)

    @property
    def console(self) -> Console:
        # Rebound when stdout is swapped, e.g. by CliRunner.
        if self._console is None or self._console.file is not sys.stdout:
            self._console = Console(file=sys.stdout)
        return self._console

    @property
    def err_console(self) -> Console:
        if self._err_console is None or self._err_console.file is not sys.stderr:
            self._err_console = Console(file=sys.stderr, highlight=False)
        return self._err_console


_STATE_VAR: ContextVar[CLIState | None] = ContextVar("citelink_cli_state", default=None)


def get_cli_state(*, create: bool = True) -> CLIState:
    """Return the CLI state bound to the current context."""
    state = _STATE_VAR.get()
    if state is None:
        if not create:
            raise RuntimeError("CLI state is not initialised for this context.")
        state = CLIState()
        _STATE_VAR.set(state)
    return state


def set_cli_state(*, verbosity: int | None = None, debug: bool | None = None) -> CLIState:
    state = get_cli_state()
    if verbosity is not None:
        state.verbosity = max(0, verbosity)
    if debug is not None:
        state.show_tracebacks = debug
    return state


def render_message(
    level: str,
    message: str,
    *,
    context: str | None = None,
    exception: BaseException | None = None,
) -> None:
    """Print ``level: message`` to stderr.

    ``context`` is shown next to the level, as in ``warning[unresolved-marker]``.
    From verbosity 1 the type and text of ``exception`` follow on a second line.
    """
    state = get_cli_state()
    if level == "info":
        state.err_console.log(message)
        return

    style = _LEVEL_STYLES.get(level, "yellow")
    label = f"{level}[{context}]: " if context else f"{level}: "
    text = Text.assemble((label, f"bold {style}"), (message, style))
    if exception is not None and state.verbosity >= 1:
        cause = exception.__cause__ or exception
        text.append(f"\n  {type(cause).__name__}: {cause}", style="dim")
    state.err_console.print(text, soft_wrap=True)


def render_diagnostic(diagnostic: Diagnostic, *, exception: BaseException | None = None) -> None:
    """Print a pipeline diagnostic with its kind and the marker or key involved."""
    subject = diagnostic.marker or diagnostic.key
    context = f"{diagnostic.kind} {subject}" if subject else diagnostic.kind
    render_message("warning", diagnostic.message, context=context, exception=exception)


def render_summary(resolved: int, unresolved: int, kinds: Mapping[str, int]) -> None:
    """Print the one-line outcome of a ``process`` run."""
    line = Text.assemble(
        (str(resolved), "bold"),
        " citation(s) resolved, ",
        (str(unresolved), "bold"),
        " unresolved",
    )
    total = sum(kinds.values())
    if total:
        breakdown = ", ".join(f"{kinds[kind]} {kind}" for kind in sorted(kinds))
        line.append(f", {total} warning(s): {breakdown}")
    line.append(".")
    get_cli_state().err_console.print(line, soft_wrap=True)


def emit_warning(message: str, *, exception: BaseException | None = None) -> None:
    render_message("warning", message, exception=exception)


def emit_error(message: str, *, exception: BaseException | None = None) -> None:
    render_message("error", message, exception=exception)


def debug_enabled() -> bool:
    """Return whether full tracebacks should be displayed."""
    try:
        return get_cli_state(create=False).show_tracebacks
    except RuntimeError:
        return False
