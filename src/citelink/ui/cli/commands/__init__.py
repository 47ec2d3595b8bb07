"""CLI command implementations exposed via `citelink.ui.cli`."""

from __future__ import annotations

from .index import index
from .process import process


__all__ = ["index", "process"]
