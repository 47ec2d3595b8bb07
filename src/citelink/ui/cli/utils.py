"""Auxiliary helpers used by CLI commands."""

from __future__ import annotations

from pathlib import Path

from citelink.core.config import CitationConfig, load_config


def write_output_file(target: Path, content: str) -> None:
    """Persist text output to disk, creating parent directories as needed."""
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    except OSError as exc:  # pragma: no cover - filesystem errors
        raise OSError(f"Failed to write output to '{target}': {exc}") from exc


def resolve_config(config_path: Path | None, **overrides: object) -> CitationConfig:
    """Load the optional configuration file and apply command-line overrides."""
    base = load_config(config_path) if config_path is not None else CitationConfig()
    return base.merged(**overrides)


__all__ = ["resolve_config", "write_output_file"]
