"""Diagnostic emitter bridging the core pipeline with CLI rendering utilities."""

from __future__ import annotations

from collections import Counter
from collections.abc import Mapping
from typing import Any

from citelink.core.diagnostics import Diagnostic, format_event_message

from .state import (
    CLIState,
    emit_error,
    emit_warning,
    get_cli_state,
    render_diagnostic,
    render_message,
)


class CliEmitter:
    """Emit diagnostics using the rich-enabled CLI helpers.

    Pipeline diagnostics are printed as they arrive and tallied per kind in
    ``kinds`` for the closing summary. Events are only printed from verbosity
    level 1 upwards.
    """

    def __init__(self, state: CLIState | None = None, *, debug_enabled: bool | None = None) -> None:
        self._state = state or get_cli_state()
        if debug_enabled is None:
            debug_enabled = self._state.show_tracebacks
        self.debug_enabled = bool(debug_enabled)
        self.kinds: Counter[str] = Counter()

    def diagnostic(self, diagnostic: Diagnostic, exc: BaseException | None = None) -> None:
        self.kinds[diagnostic.kind] += 1
        render_diagnostic(diagnostic, exception=exc)

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        emit_warning(message, exception=exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        emit_error(message, exception=exc)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        if self._state.verbosity < 1:
            return
        message = format_event_message(name, payload)
        if message:
            render_message("info", message)


__all__ = ["CliEmitter"]
